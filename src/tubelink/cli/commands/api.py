"""CLI commands for API server management."""

from __future__ import annotations

import typer

API_APP_PATH = "tubelink.api.main:app"

api_app = typer.Typer(
    name="api",
    help="API server management commands",
    no_args_is_help=True,
)


@api_app.command()
def start(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run the server on"),
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    production: bool = typer.Option(
        False, "--production", help="Run in production mode"
    ),
) -> None:
    """
    Start the tubelink API server.

    Development mode reloads on code changes. Production mode runs two
    workers with warning-level server logs.

    Examples:
        tubelink api start
        tubelink api start --port 3000 --production
    """
    import uvicorn

    if production:
        uvicorn.run(API_APP_PATH, host=host, port=port, workers=2, log_level="warning")
    else:
        uvicorn.run(API_APP_PATH, host=host, port=port, reload=True, log_level="info")
