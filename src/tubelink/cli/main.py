"""
Main CLI entry point for tubelink.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel

from tubelink import __version__
from tubelink.cli.commands.api import api_app
from tubelink.cli.commands.resolve import resolve_command

console = Console()

app = typer.Typer(
    name="tubelink",
    help="Resolve YouTube channel handles to channel IDs",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(api_app, name="api", help="API server commands")
app.command(name="resolve")(resolve_command)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]tubelink[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
) -> None:
    """
    tubelink - YouTube channel handle resolver.

    Turns a channel handle into its stable channel ID using the public
    video feed, the channel page, and a headless browser as a last resort.
    """
    if version:
        console.print(f"tubelink v{__version__}")
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        console.print("[yellow]Use 'tubelink --help' for available commands[/yellow]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
