"""
CLI command for resolving a channel handle from the terminal.

Runs the same feed, HTML and browser pipeline as ``GET /resolve`` and prints
either a rich table or the JSON payload the API would return.
"""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from tubelink.config.logging import configure_logging
from tubelink.config.settings import get_settings
from tubelink.exceptions import (
    EXIT_CODE_INVALID_ARGS,
    EXIT_CODE_RESOLUTION_FAILED,
    ChannelResolutionError,
    InvalidHandleError,
)
from tubelink.services.resolution.models import (
    ResolutionOutcome,
    ResolvedChannel,
    StrategyFailure,
)
from tubelink.services.resolution.orchestrator import resolve_channel

console = Console()


def resolve_command(
    handle: str = typer.Argument(..., help="Channel handle, e.g. @GoogleDevelopers"),
    as_json: bool = typer.Option(
        False, "--json", help="Print the API payload as JSON instead of a table"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-V", help="Log each strategy attempt"
    ),
) -> None:
    """
    Resolve a channel handle to its channel ID and metadata.

    Examples:
        tubelink resolve @GoogleDevelopers
        tubelink resolve GoogleDevelopers --json
    """
    app_settings = get_settings()
    if verbose:
        configure_logging(app_settings.log_level, verbose=True)

    try:
        outcome = asyncio.run(resolve_channel(handle, app_settings))
    except InvalidHandleError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(code=EXIT_CODE_INVALID_ARGS)
    except KeyboardInterrupt:
        console.print("\n[yellow]Resolution interrupted by user[/yellow]")
        raise typer.Exit(code=130)

    try:
        channel = outcome.unwrap()
    except ChannelResolutionError as e:
        if as_json:
            typer.echo(json.dumps({"success": False, "error": e.message}))
        else:
            _display_attempts(outcome)
            console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(code=EXIT_CODE_RESOLUTION_FAILED)

    if as_json:
        typer.echo(json.dumps(channel.to_payload()))
    else:
        _display_channel(channel)


def _display_channel(channel: ResolvedChannel) -> None:
    table = Table(title=f"Channel: {channel.title}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Channel ID", channel.channel_id)
    table.add_row("Title", channel.title)
    table.add_row("URL", channel.uri)
    table.add_row("Thumbnail", channel.thumbnail or "-")
    table.add_row("Views", f"{channel.view_count:,}" if channel.view_count else "unknown")
    if channel.subscriber_count is not None:
        table.add_row("Subscribers", f"{channel.subscriber_count:,}")
    if channel.last_video_id:
        table.add_row("Latest video", channel.last_video_id)
        table.add_row("Published", channel.last_video_date or "-")
    table.add_row("Resolved via", channel.source.value)

    console.print(table)


def _display_attempts(outcome: ResolutionOutcome) -> None:
    table = Table(title=f"Resolution attempts: {outcome.handle}")
    table.add_column("Strategy", style="cyan")
    table.add_column("Reason", style="red")
    table.add_column("Message")
    table.add_column("Time", style="dim", justify="right")

    for attempt in outcome.attempts:
        result = attempt.outcome
        reason = result.reason.value if isinstance(result, StrategyFailure) else "ok"
        message = result.message if isinstance(result, StrategyFailure) else ""
        table.add_row(attempt.strategy, reason, message, f"{attempt.duration_seconds:.2f}s")

    console.print(table)
