from enum import Enum


class ErrorKind(str, Enum):
    """Failure classes of a forwarded call."""

    UPSTREAM_REJECTED = "UPSTREAM_REJECTED"
    NO_RESPONSE = "NO_RESPONSE"
    SETUP_FAILED = "SETUP_FAILED"


class PbsMcpError(Exception):
    """
    Base class for adapter-level errors.

    Failures of the upstream call itself never raise; they are returned as
    error envelopes. These errors cover malformed invocations that are
    rejected before anything is forwarded.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UnknownToolError(PbsMcpError):
    """Raised when a caller names a tool other than the PBS API tool."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class ToolInputError(PbsMcpError):
    """Raised when tool arguments cannot be shaped into a forward request."""
