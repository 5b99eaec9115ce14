"""Server-Sent Events framing for the HTTP adapter."""

import json
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from loguru import logger

from pbs_mcp.envelopes import ToolResult
from pbs_mcp.errors import UnknownToolError
from pbs_mcp.tool import PBS_API_TOOL, ensure_known_tool

# Sent first on every stream so clients see the connection open
SSE_COMMENT = ":\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def format_sse_event(event: str, data: Any) -> str:
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"


async def tools_announcement() -> AsyncIterator[str]:
    """Events sent when a client opens the tool announcement stream."""
    yield SSE_COMMENT
    yield format_sse_event("tools", {"tools": [PBS_API_TOOL]})


async def tool_invocation_events(
    tool_name: str,
    arguments: Any,
    invoke: Callable[[Any], Awaitable[ToolResult]],
) -> AsyncIterator[str]:
    """
    Stage a single tool invocation as SSE events.

    Emits `start`, `result` and `end` in that order, or a single `error`
    event when the tool is unknown or the invocation fails.

    Args:
        tool_name: The tool named in the request path
        arguments: The decoded request body
        invoke: Coroutine function running the tool with the arguments
    """
    yield SSE_COMMENT

    try:
        ensure_known_tool(tool_name)
    except UnknownToolError as e:
        yield format_sse_event("error", {"error": str(e)})
        return

    yield format_sse_event("start", {"toolName": tool_name, "args": arguments})

    logger.info(f"Invoking tool over SSE: {tool_name}")
    logger.debug(f"Arguments: {json.dumps(arguments)}")

    try:
        result = await invoke(arguments)
    except Exception as e:
        logger.error(f"Error invoking tool {tool_name}: {e}")
        yield format_sse_event("error", {"error": str(e)})
        return

    yield format_sse_event("result", result)
    yield format_sse_event("end", {"toolName": tool_name, "status": "success"})
