"""
PBS MCP command-line interface.

Invokes the PBS API tool directly from the terminal, and launches the HTTP
server. Envelopes go to stdout; errors and logs go to stderr.
"""

import asyncio
import json
from typing import Any, NoReturn, Optional

import typer
from dotenv import load_dotenv
from loguru import logger

from pbs_mcp.console import (
    console,
    err_console,
    print_connection_failure,
    print_connection_report,
)
from pbs_mcp.constants import PBS_API_ENDPOINTS
from pbs_mcp.envelopes import ResultEnvelope
from pbs_mcp.http_app import run_http_server
from pbs_mcp.logging_utils import setup_logging
from pbs_mcp.settings import PbsMcpSettings
from pbs_mcp.tool import ForwardRequest, forward, run_pbs_api_tool

cli = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=False,
    rich_markup_mode="markdown",
    context_settings={"help_option_names": ["-h", "--help"]},
    help="PBS MCP Command-Line Interface - query the Australian Pharmaceutical Benefits Scheme (PBS) API and serve it over HTTP.",
)

state: dict[str, Any] = {"settings": None, "debug": False}


def handle_cli_error(message: str, error: Exception | None = None, debug: bool = False) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    if error is not None:
        message = f"{message}: {error}"
    err_console.print(message, style="bold red", markup=False, highlight=False, soft_wrap=True)
    if debug and error is not None:
        logger.opt(exception=error).debug("Traceback")
    raise typer.Exit(code=1)


def _settings() -> PbsMcpSettings:
    if state["settings"] is None:
        state["settings"] = PbsMcpSettings.from_env()
    return state["settings"]


def _run_and_print(arguments: dict[str, Any]) -> None:
    settings = _settings()
    try:
        result = asyncio.run(run_pbs_api_tool(arguments, settings=settings.pbs_api))
    except Exception as e:
        handle_cli_error("Error", e, debug=state["debug"])
    else:
        print(result["content"][0]["text"])


@cli.callback()
def main(
    debug: bool = typer.Option(False, "--debug", "-d", help="Show debug information"),
    env_file: Optional[str] = typer.Option(
        None,
        "--env-file",
        help="Load environment variables from this file instead of ./.env",
    ),
) -> None:
    """
    Configure settings and logging before any command runs.
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()
    settings = PbsMcpSettings.from_env()
    if debug:
        settings.debug = True
    setup_logging(level=settings.effective_log_level)
    state["settings"] = settings
    state["debug"] = debug


@cli.command("list-endpoints", help="List all available PBS API endpoints")
def list_endpoints() -> None:
    print("Available PBS API Endpoints:")
    print("")
    for endpoint in PBS_API_ENDPOINTS:
        print(endpoint)


@cli.command(help="Get PBS API information")
def info() -> None:
    _run_and_print({"endpoint": "", "method": "GET"})


@cli.command(help="Query PBS prescribers")
def prescribers(
    limit: str = typer.Option("10", "--limit", "-l", help="Number of results per page"),
    page: str = typer.Option("1", "--page", "-p", help="Page number"),
    pbs_code: Optional[str] = typer.Option(None, "--pbs-code", "-c", help="Filter by PBS code"),
    schedule_code: Optional[str] = typer.Option(
        None, "--schedule-code", "-s", help="Filter by schedule code"
    ),
    prescriber_type: Optional[str] = typer.Option(
        None, "--prescriber-type", "-t", help="Filter by prescriber type"
    ),
    fields: Optional[str] = typer.Option(None, "--fields", "-f", help="Specific fields to return"),
    latest: bool = typer.Option(False, "--latest", help="Get only the latest schedule"),
) -> None:
    params = _collect_params(
        limit=limit,
        page=page,
        pbs_code=pbs_code,
        schedule_code=schedule_code,
        prescriber_type=prescriber_type,
        fields=fields,
        latest=latest,
    )
    _run_and_print({"endpoint": "prescribers", "method": "GET", "params": params})


@cli.command("item-overview", help="Query PBS item overview")
def item_overview(
    limit: str = typer.Option("10", "--limit", "-l", help="Number of results per page"),
    page: str = typer.Option("1", "--page", "-p", help="Page number"),
    schedule_code: Optional[str] = typer.Option(
        None, "--schedule-code", "-s", help="Filter by schedule code"
    ),
    fields: Optional[str] = typer.Option(None, "--fields", "-f", help="Specific fields to return"),
    latest: bool = typer.Option(False, "--latest", help="Get only the latest schedule"),
) -> None:
    params = _collect_params(
        limit=limit,
        page=page,
        schedule_code=schedule_code,
        fields=fields,
        latest=latest,
    )
    _run_and_print({"endpoint": "item-overview", "method": "GET", "params": params})


def _collect_params(latest: bool = False, **filters: Optional[str]) -> dict[str, str]:
    """Keep the filters that were given; option names double as query parameter names."""
    params = {name: value for name, value in filters.items() if value}
    if latest:
        params["get_latest_schedule_only"] = "true"
    return params


@cli.command(help="Query any PBS API endpoint")
def query(
    endpoint: str = typer.Argument(..., help="The PBS API endpoint, e.g. 'items' or '/schedules'"),
    method: str = typer.Option("GET", "--method", "-m", help="HTTP method"),
    params: Optional[str] = typer.Option(
        None, "--params", "-p", help="Query parameters as JSON string"
    ),
    subscription_key: Optional[str] = typer.Option(
        None, "--subscription-key", "-k", help="Custom subscription key"
    ),
    timeout: int = typer.Option(
        30000, "--timeout", "-t", help="Request timeout in milliseconds"
    ),
) -> None:
    arguments: dict[str, Any] = {"endpoint": endpoint, "method": method, "timeout": timeout}

    if params:
        try:
            arguments["params"] = json.loads(params)
        except json.JSONDecodeError as e:
            handle_cli_error("Error parsing params JSON", e, debug=state["debug"])
    if subscription_key:
        arguments["subscriptionKey"] = subscription_key

    _run_and_print(arguments)


@cli.command(help="Check connectivity to the PBS API")
def check() -> None:
    settings = _settings()
    console.print("Testing PBS API connection...")

    envelope = asyncio.run(forward(ForwardRequest(endpoint=""), settings=settings.pbs_api))

    if not isinstance(envelope, ResultEnvelope):
        print_connection_failure(envelope)
        raise typer.Exit(code=1)

    print_connection_report(envelope)
    console.print("\nTest completed successfully!", style="bold green")


@cli.command(help="Start the PBS MCP HTTP server")
def serve(
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Port to listen on (defaults to $PORT or 3000)"
    ),
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind to"),
) -> None:
    settings = _settings()
    if port is not None:
        settings.http.port = port
    if host is not None:
        settings.http.host = host

    try:
        run_http_server(settings)
    except Exception as e:
        handle_cli_error("Error", e, debug=state["debug"])


if __name__ == "__main__":
    cli()
