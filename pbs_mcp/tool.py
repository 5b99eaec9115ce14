"""
The PBS API tool: one generic passthrough to the PBS data API.

Every adapter (CLI, HTTP/SSE, stdio) funnels into `run_pbs_api_tool`, which
validates the raw arguments, forwards a single request upstream and renders
the resulting envelope as a text content item.
"""

from collections.abc import Mapping
from typing import Any, Literal

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pbs_mcp.builder import build_request
from pbs_mcp.constants import PBS_API_TOOL_DESCRIPTION, PBS_API_TOOL_NAME
from pbs_mcp.envelopes import Envelope, ToolResult, to_tool_result
from pbs_mcp.errors import ToolInputError, UnknownToolError
from pbs_mcp.normalize import normalize_error, normalize_response
from pbs_mcp.settings import PbsApiSettings

PBS_API_TOOL: dict[str, Any] = {
    "name": PBS_API_TOOL_NAME,
    "description": PBS_API_TOOL_DESCRIPTION,
    "inputSchema": {
        "type": "object",
        "properties": {
            "endpoint": {
                "type": "string",
                "description": 'The specific PBS API endpoint to access (e.g., "prescribers", "item-overview")',
            },
            "method": {
                "type": "string",
                "enum": ["GET", "POST"],
                "default": "GET",
                "description": "HTTP method to use (GET is recommended for most PBS API operations)",
            },
            "params": {
                "type": "object",
                "additionalProperties": {"type": "string"},
                "description": 'Query parameters to include in the request (e.g., {"get_latest_schedule_only": "true"})',
            },
            "subscriptionKey": {
                "type": "string",
                "description": "Custom subscription key (if not provided, the default public key will be used)",
            },
            "timeout": {
                "type": "number",
                "default": 30000,
                "description": "Request timeout in milliseconds",
            },
        },
        "required": ["endpoint"],
    },
}


def _to_param_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class ForwardRequest(BaseModel):
    """Arguments of a single forwarded call."""

    endpoint: str = Field(
        ...,
        description="Logical endpoint path; empty means the API root",
    )
    method: Literal["GET", "POST"] = Field(
        "GET",
        description="HTTP method",
    )
    params: dict[str, str] | None = Field(
        None,
        description="Query parameters",
    )
    subscription_key: str | None = Field(
        None,
        alias="subscriptionKey",
        description="Subscription key; the configured default is used when omitted",
    )
    timeout: float | None = Field(
        None,
        gt=0,
        description="Request timeout in milliseconds; the configured default is used when omitted",
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("endpoint", mode="before")
    @classmethod
    def default_endpoint(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("params", mode="before")
    @classmethod
    def stringify_params(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return {str(key): _to_param_value(value) for key, value in v.items()}
        return v


def parse_arguments(arguments: Mapping[str, Any] | ForwardRequest | None) -> ForwardRequest:
    if isinstance(arguments, ForwardRequest):
        return arguments
    try:
        return ForwardRequest.model_validate(arguments if arguments is not None else {})
    except ValidationError as e:
        raise ToolInputError(f"Invalid arguments for {PBS_API_TOOL_NAME}: {e}") from e


async def forward(
    request: ForwardRequest,
    *,
    settings: PbsApiSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Envelope:
    """
    Forward one request to the PBS API and normalize the outcome.

    Never raises: a non-2xx status, a network failure, a timeout or a
    request that cannot be built all come back as an error envelope.

    Args:
        request: The validated call arguments
        settings: Upstream settings (base URL, default key, default timeout)
        transport: Optional httpx transport, used to substitute the upstream

    Returns:
        A ResultEnvelope on success, otherwise one of the error envelopes
    """
    settings = settings or PbsApiSettings()
    logger.info(f"Accessing PBS API endpoint: {request.method} {request.endpoint}")

    try:
        prepared = build_request(request, settings)
        async with httpx.AsyncClient(
            transport=transport,
            timeout=prepared.timeout,
            follow_redirects=True,
        ) as client:
            response = await client.request(
                prepared.method,
                prepared.url,
                headers=prepared.headers,
                params=prepared.params,
            )
            response.raise_for_status()
    except Exception as e:
        logger.error(f"PBS API error: {e!r}")
        return normalize_error(e)

    return normalize_response(response)


async def run_pbs_api_tool(
    arguments: Mapping[str, Any] | ForwardRequest | None,
    *,
    settings: PbsApiSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ToolResult:
    """Validate raw tool arguments, forward them and render the envelope."""
    request = parse_arguments(arguments)
    envelope = await forward(request, settings=settings, transport=transport)
    return to_tool_result(envelope)


def ensure_known_tool(name: str) -> None:
    if name != PBS_API_TOOL_NAME:
        raise UnknownToolError(name)


async def call_tool(
    name: str,
    arguments: Mapping[str, Any] | None,
    *,
    settings: PbsApiSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ToolResult:
    """Dispatch a tool call by name; only the PBS API tool exists."""
    ensure_known_tool(name)
    return await run_pbs_api_tool(arguments, settings=settings, transport=transport)
