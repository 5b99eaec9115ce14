"""
Uniform result and error envelopes returned by the forwarding operation.

An envelope is built fresh for every call and rendered as a fenced JSON
text block, the single text content item handed back to every adapter.
"""

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from pbs_mcp.errors import ErrorKind

NO_RESPONSE_MESSAGE = "No response received from server"
NO_RESPONSE_REQUEST_NOTE = "Request was sent but no response was received"

HELP_MESSAGES: dict[int, str] = {
    400: "Bad Request. Check if all required parameters are provided correctly.",
    401: (
        "Authentication failed. The PBS API requires proper authentication. "
        "Check if you need to register for API access at https://dev.pbs.gov.au/contacts.html"
    ),
    415: "Unsupported Media Type. Make sure to set the Accept header to 'application/json'.",
    429: (
        "Rate limit exceeded. The PBS API has a limit of 5 requests per time window. "
        "Wait for the rate limit to reset before making more requests."
    ),
}

# MCP-style text content item: {"type": "text", "text": ...}
TextContent = dict[str, str]
ToolResult = dict[str, list[TextContent]]


@dataclass(frozen=True)
class RateLimit:
    limit: str | None = None
    remaining: str | None = None
    reset: str | None = None

    def to_dict(self) -> dict[str, str]:
        values = {"limit": self.limit, "remaining": self.remaining, "reset": self.reset}
        return {key: value for key, value in values.items() if value is not None}


@dataclass(frozen=True)
class ResultEnvelope:
    status: int
    status_text: str
    headers: dict[str, str]
    body: Any
    rate_limit: RateLimit | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status,
            "statusText": self.status_text,
            "headers": self.headers,
            "body": self.body,
        }
        if self.rate_limit is not None:
            result["rateLimit"] = self.rate_limit.to_dict()
        return result


@dataclass(frozen=True)
class UpstreamErrorEnvelope:
    """The upstream answered with a non-2xx status."""

    kind: ClassVar[ErrorKind] = ErrorKind.UPSTREAM_REJECTED

    status: int
    status_text: str
    headers: dict[str, str]
    body: Any
    rate_limit: RateLimit | None = None

    @property
    def help_message(self) -> str | None:
        return HELP_MESSAGES.get(self.status)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "error": True,
            "status": self.status,
            "statusText": self.status_text,
            "headers": self.headers,
            "body": self.body,
        }
        if self.rate_limit is not None:
            result["rateLimit"] = self.rate_limit.to_dict()
        if self.help_message:
            result["helpMessage"] = self.help_message
        return result


@dataclass(frozen=True)
class NoResponseErrorEnvelope:
    """The request was sent but nothing came back (network failure or timeout)."""

    kind: ClassVar[ErrorKind] = ErrorKind.NO_RESPONSE

    message: str = NO_RESPONSE_MESSAGE
    request: str = NO_RESPONSE_REQUEST_NOTE

    def to_dict(self) -> dict[str, Any]:
        return {"error": True, "message": self.message, "request": self.request}


@dataclass(frozen=True)
class SetupErrorEnvelope:
    """The request could not be built or sent."""

    kind: ClassVar[ErrorKind] = ErrorKind.SETUP_FAILED

    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": True, "message": self.message}


ErrorEnvelope = Union[UpstreamErrorEnvelope, NoResponseErrorEnvelope, SetupErrorEnvelope]
Envelope = Union[ResultEnvelope, ErrorEnvelope]


def render_text(envelope: Envelope) -> str:
    """Render an envelope as a fenced JSON block."""
    return "```json\n" + json.dumps(envelope.to_dict(), indent=2, ensure_ascii=False) + "\n```"


def to_tool_result(envelope: Envelope) -> ToolResult:
    """Wrap a rendered envelope as a single text content item."""
    return {"content": [{"type": "text", "text": render_text(envelope)}]}
