"""Loguru setup shared by the CLI, HTTP and stdio adapters."""

import logging
import sys

from loguru import logger

_BASE_FORMAT = "<level>{level: <8}</level> | <green>{time:HH:mm:ss}</green>"
_DEBUG_LOCATION = " | <cyan>{name}:{line}</cyan>"


class LoguruInterceptHandler(logging.Handler):
    """Send standard logging records (uvicorn, httpx, the MCP SDK) to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", stdio_mode: bool = False) -> None:
    """
    Route all logging to a single Loguru sink on stderr.

    stdout belongs to the CLI's envelopes and to the stdio server's JSON-RPC
    stream, so nothing is ever logged there. Colour is off in stdio mode.

    Args:
        level: Minimum level to emit; DEBUG also adds the source location
        stdio_mode: True when running as the stdio tool server
    """
    debug = level == "DEBUG"
    format_str = _BASE_FORMAT + (_DEBUG_LOCATION if debug else "") + " | <level>{message}</level>"

    logger.remove()
    logger.add(
        sys.stderr,
        format=format_str,
        level=level,
        colorize=not stdio_mode,
        diagnose=debug,
    )
    logging.basicConfig(handlers=[LoguruInterceptHandler()], level=0, force=True)
