"""
PBS MCP: the Australian Pharmaceutical Benefits Scheme (PBS) API as a tool.

This package provides:
- a single passthrough tool forwarding requests to the PBS data API
- a stdio Model Context Protocol server (`python -m pbs_mcp`)
- an HTTP server with REST and SSE routes (`pbs-mcp serve`)
- a command-line interface (`pbs-mcp`)
"""

from pbs_mcp.envelopes import (
    NoResponseErrorEnvelope,
    RateLimit,
    ResultEnvelope,
    SetupErrorEnvelope,
    UpstreamErrorEnvelope,
)
from pbs_mcp.errors import PbsMcpError, ToolInputError, UnknownToolError
from pbs_mcp.settings import PbsMcpSettings
from pbs_mcp.tool import PBS_API_TOOL, ForwardRequest, call_tool, forward, run_pbs_api_tool

__all__ = [
    "PBS_API_TOOL",
    "ForwardRequest",
    "NoResponseErrorEnvelope",
    "PbsMcpError",
    "PbsMcpSettings",
    "RateLimit",
    "ResultEnvelope",
    "SetupErrorEnvelope",
    "ToolInputError",
    "UnknownToolError",
    "UpstreamErrorEnvelope",
    "call_tool",
    "forward",
    "run_pbs_api_tool",
]

# Package metadata
__version__ = "1.0.0"
