"""
Stdio transport runner for the PBS MCP server.

Advertises the single PBS API tool over the Model Context Protocol and
dispatches tool calls to the forwarding operation.
"""

import asyncio
import json
from typing import Any

import mcp.types as types
from dotenv import load_dotenv
from loguru import logger
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from pbs_mcp.logging_utils import setup_logging
from pbs_mcp.settings import PbsMcpSettings
from pbs_mcp.tool import PBS_API_TOOL, call_tool


def create_server(settings: PbsMcpSettings) -> Server:
    """Create an MCP server with the PBS API tool registered."""
    server: Server = Server(settings.server.name, version=settings.server.version)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        logger.debug(f"Returning tools: {json.dumps([PBS_API_TOOL])}")
        return [types.Tool(**PBS_API_TOOL)]

    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        logger.info(f"Calling tool: {name}")
        logger.debug(f"Arguments: {json.dumps(arguments or {})}")
        try:
            result = await call_tool(name, arguments or {}, settings=settings.pbs_api)
        except Exception as e:
            logger.error(f"Error calling tool: {e}")
            raise
        return [types.TextContent(type="text", text=item["text"]) for item in result["content"]]

    return server


async def run_stdio_server(
    settings: PbsMcpSettings | None = None,
    env_file: str | None = None,
) -> None:
    """Run MCP server with stdio transport."""
    if env_file:
        load_dotenv(env_file)
        logger.debug(f"Loaded environment variables from --env-file={env_file}")

    if settings is None:
        settings = PbsMcpSettings.from_env()

    server = create_server(settings)

    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("PBS MCP server running on stdio")
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
    except Exception as e:
        logger.exception(f"Server error: {e}")
        raise


def main() -> None:
    """Entry point for `python -m pbs_mcp` and the `pbs-mcp-stdio` script."""
    load_dotenv()
    settings = PbsMcpSettings.from_env()
    # stdout carries JSON-RPC
    setup_logging(level=settings.effective_log_level, stdio_mode=True)
    logger.info("Starting PBS MCP server...")
    asyncio.run(run_stdio_server(settings))
