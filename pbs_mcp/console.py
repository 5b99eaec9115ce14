"""Rich consoles and human-facing summaries for the CLI."""

from rich.console import Console

from pbs_mcp.envelopes import ErrorEnvelope, ResultEnvelope, render_text

# Human-facing summaries
console = Console()
# Errors and diagnostics; stdout stays reserved for envelopes
err_console = Console(stderr=True)


def print_connection_report(envelope: ResultEnvelope) -> None:
    """Summarize a successful call to the API root."""
    console.print("PBS API connection successful!", style="bold green")
    console.print(f"Status: {envelope.status} {envelope.status_text}", markup=False)

    if envelope.rate_limit is not None:
        console.print("Rate Limit Information:")
        for name, value in envelope.rate_limit.to_dict().items():
            console.print(f"  {name.capitalize()}: {value}", markup=False)

    meta = envelope.body.get("_meta") if isinstance(envelope.body, dict) else None
    if isinstance(meta, dict):
        publisher = (meta.get("info") or {}).get("publisher") or {}
        console.print("\nResponse Data Sample:")
        console.print(f"API Publisher: {publisher.get('name')}", markup=False)
        console.print(f"Processing Time: {meta.get('processing_time')}", markup=False)


def print_connection_failure(envelope: ErrorEnvelope) -> None:
    err_console.print("PBS API connection failed!", style="bold red")
    err_console.print(render_text(envelope), markup=False, highlight=False, soft_wrap=True)
