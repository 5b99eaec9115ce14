"""
HTTP server exposing the PBS API tool over REST and Server-Sent Events.

Routes:
- GET  /                  web client for testing
- GET  /health            health check
- GET  /tools             list available tools
- GET  /sse               SSE stream announcing the available tools
- POST /sse/{tool_name}   SSE-staged tool invocation
- POST /api/{tool_name}   single-shot REST tool invocation
"""

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse
from loguru import logger

from pbs_mcp.envelopes import ToolResult
from pbs_mcp.errors import ToolInputError, UnknownToolError
from pbs_mcp.logging_utils import setup_logging
from pbs_mcp.settings import PbsMcpSettings
from pbs_mcp.sse import SSE_HEADERS, tool_invocation_events, tools_announcement
from pbs_mcp.tool import PBS_API_TOOL, ensure_known_tool, run_pbs_api_tool

STATIC_DIR = Path(__file__).parent / "static"

ROUTES = (
    ("GET", "/", "Web client for testing"),
    ("GET", "/health", "Health check endpoint"),
    ("GET", "/tools", "List available tools"),
    ("GET", "/sse", "SSE endpoint for tool events"),
    ("POST", "/sse/{tool_name}", "SSE endpoint for specific tool invocation"),
    ("POST", "/api/{tool_name}", "REST API endpoint for tool invocation"),
)

DISCONNECT_POLL_SECONDS = 1.0


async def _read_json_body(request: Request) -> Any:
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except ValueError as e:  # malformed JSON or non-UTF-8 bytes
        raise ToolInputError(f"Invalid JSON body: {e}") from e


def create_app(
    settings: PbsMcpSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use, read from the environment when omitted
        transport: Optional httpx transport for upstream calls

    Returns:
        The configured FastAPI application
    """
    settings = settings or PbsMcpSettings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):  # type: ignore[no-untyped-def]
        logger.info(f"Server running on http://{settings.http.host}:{settings.http.port}")
        logger.info("Available endpoints:")
        for method, path, description in ROUTES:
            logger.info(f"  - {method} {path}: {description}")
        yield

    app = FastAPI(
        title="PBS MCP",
        version=settings.server.version,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def invoke(arguments: Any) -> ToolResult:
        return await run_pbs_api_tool(arguments, settings=settings.pbs_api, transport=transport)

    @app.get("/", include_in_schema=False)
    async def client_page() -> FileResponse:
        return FileResponse(STATIC_DIR / "client.html")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "message": "PBS MCP server is running"}

    @app.get("/tools")
    async def list_tools() -> dict[str, list[dict[str, Any]]]:
        return {"tools": [PBS_API_TOOL]}

    @app.get("/sse")
    async def announce_tools(request: Request) -> StreamingResponse:
        async def stream() -> AsyncIterator[str]:
            async for chunk in tools_announcement():
                yield chunk
            try:
                while not await request.is_disconnected():
                    await asyncio.sleep(DISCONNECT_POLL_SECONDS)
            finally:
                logger.info("SSE client disconnected")

        return StreamingResponse(stream(), media_type="text/event-stream", headers=SSE_HEADERS)

    @app.post("/sse/{tool_name}", response_model=None)
    async def invoke_tool_sse(tool_name: str, request: Request) -> StreamingResponse | JSONResponse:
        try:
            arguments = await _read_json_body(request)
        except ToolInputError as e:
            return JSONResponse({"error": str(e)}, status_code=400)

        return StreamingResponse(
            tool_invocation_events(tool_name, arguments, invoke),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    @app.post("/api/{tool_name}")
    async def invoke_tool(tool_name: str, request: Request) -> JSONResponse:
        try:
            arguments = await _read_json_body(request)
        except ToolInputError as e:
            return JSONResponse({"error": str(e)}, status_code=400)

        try:
            ensure_known_tool(tool_name)
        except UnknownToolError as e:
            return JSONResponse({"error": str(e)}, status_code=404)

        logger.info(f"Invoking tool: {tool_name}")
        logger.debug(f"Arguments: {json.dumps(arguments)}")

        try:
            result = await invoke(arguments)
        except Exception as e:
            logger.error(f"Error invoking tool {tool_name}: {e}")
            return JSONResponse({"error": str(e)}, status_code=500)

        return JSONResponse(result)

    return app


def run_http_server(settings: PbsMcpSettings | None = None) -> None:
    """Serve the HTTP application with uvicorn until interrupted."""
    settings = settings or PbsMcpSettings.from_env()
    setup_logging(level=settings.effective_log_level)

    uvicorn.run(
        create_app(settings),
        host=settings.http.host,
        port=settings.http.port,
        log_config=None,
        log_level=settings.effective_log_level.lower(),
    )
