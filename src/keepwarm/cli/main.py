"""keepwarm CLI - keep a workspace awake while its user is active.

Reads activity ticks from stdin and forwards them, coalesced, to the
workspace activity endpoint.
"""

import asyncio
import os
import sys
from typing import Annotated, TextIO

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

import keepwarm
from keepwarm.activity import ActivityCoordinator, ConsoleNotifier, HTTPActivityReporter
from keepwarm.config import KeepwarmSettings, get_settings
from keepwarm.exceptions import ConfigurationError
from keepwarm.logging import configure_logging, get_logger

# Configure logging early using env vars directly. The -v/-vv and
# --log-format flags in main_callback() may reconfigure later.
configure_logging(
    level=os.environ.get("KEEPWARM_LOG_LEVEL", "WARNING"),
    json_output=os.environ.get("KEEPWARM_LOG_FORMAT", "console") == "json",
)

LOG = get_logger(__name__)

app = typer.Typer(
    name="keepwarm",
    help="""
    ☕ keepwarm - keep an idle-evicted workspace awake

    \b
    Quick start:
      some-activity-source | keepwarm run   Forward activity ticks
      keepwarm config                       Show current configuration
    """,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)


def _load_settings() -> KeepwarmSettings:
    try:
        return get_settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid keepwarm settings: {exc}") from exc


@app.callback(invoke_without_command=True)
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v for info, -vv for debug)",
        ),
    ] = 0,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            help="Log output format: console (human-readable) or json (structured)",
        ),
    ] = None,
) -> None:
    """keepwarm - keep an idle-evicted workspace awake."""
    try:
        settings = _load_settings()
    except ConfigurationError as exc:
        err_console.print(f"[red]✗ {escape(str(exc))}[/red]")
        raise typer.Exit(1) from None

    json_output = (log_format or settings.log_format) == "json"

    # Reconfigure logging if -v flags or --log-format override the settings default
    if verbose >= 2:
        configure_logging(level="DEBUG", json_output=json_output)
    elif verbose >= 1:
        configure_logging(level="INFO", json_output=json_output)
    elif log_format is not None:
        configure_logging(level=settings.log_level, json_output=json_output)


async def serve_ticks(coordinator: ActivityCoordinator, stream: TextIO) -> int:
    """Signal the coordinator once per non-blank line until the stream ends.

    At end of stream, activity still pending in the open window is reported,
    in-flight reports are awaited, then the coordinator is stopped.

    Args:
        coordinator: Coordinator to signal.
        stream: Text stream delivering one activity tick per line.

    Returns:
        Number of ticks read.
    """
    ticks = 0
    try:
        while True:
            line = await asyncio.to_thread(stream.readline)
            if not line:
                break
            if not line.strip():
                continue
            ticks += 1
            coordinator.signal_activity()
        coordinator.flush()
        await coordinator.drain()
    finally:
        coordinator.stop()
    return ticks


@app.command("run")
def run(
    url: Annotated[
        str | None,
        typer.Option("--url", help="Activity endpoint (defaults to KEEPWARM_ACTIVITY_URL)"),
    ] = None,
    coalesce_period: Annotated[
        float | None,
        typer.Option("--coalesce-period", min=0, help="Seconds between reports"),
    ] = None,
    retry_delay: Annotated[
        float | None,
        typer.Option("--retry-delay", min=0, help="Seconds between failed attempts"),
    ] = None,
    max_retries: Annotated[
        int | None,
        typer.Option("--max-retries", min=0, help="Retries before warning"),
    ] = None,
) -> None:
    """Forward activity ticks read from stdin, one per line."""
    settings = get_settings()
    reporter_config = settings.get_reporter_config()
    if url:
        reporter_config["url"] = url

    reporter = HTTPActivityReporter(**reporter_config)
    coordinator = ActivityCoordinator(
        reporter,
        ConsoleNotifier(console=err_console),
        coalesce_period=coalesce_period,
        retry_delay=retry_delay,
        max_retries=max_retries,
    )
    err_console.print(f"[dim]Reporting activity to {reporter_config['url']}[/dim]")
    LOG.info("activity_forwarding_started", url=reporter_config["url"])

    try:
        ticks = asyncio.run(serve_ticks(coordinator, sys.stdin))
    except KeyboardInterrupt:
        err_console.print("[yellow]Interrupted[/yellow]")
        raise typer.Exit(130) from None
    finally:
        reporter.close()

    err_console.print(f"[green]✓ Forwarded {ticks} activity ticks[/green]")


@app.command("config")
def config() -> None:
    """Show current configuration."""
    settings = get_settings()

    table = Table(show_header=False, border_style="dim", box=None)
    table.add_column("Setting", style="dim")
    table.add_column("Value")
    table.add_row("Activity URL", f"{settings.activity_method} {settings.activity_url}")
    table.add_row("Coalesce period", f"{settings.coalesce_period:g}s")
    table.add_row("Retry delay", f"{settings.retry_delay:g}s")
    table.add_row("Max retries", str(settings.max_retries))
    table.add_row("Request timeout", f"{settings.request_timeout:g}s")

    idle_seconds = settings.idle_timeout_seconds
    if settings.idle_timeout is None:
        idle_display = "[dim](not set)[/dim]"
    elif idle_seconds is None:
        idle_display = f"[red]invalid: {settings.idle_timeout!r}[/red]"
    else:
        idle_display = f"{idle_seconds}s"
    table.add_row("Idle timeout", idle_display)
    table.add_row("Log level", settings.log_level)

    console.print(
        Panel(table, title=f"⚙ keepwarm v{keepwarm.__version__}", border_style="cyan")
    )
