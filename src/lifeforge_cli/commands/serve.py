"""Run the Notion task proxy."""

import typer
import uvicorn

from lifeforge_cli.proxy.app import create_app
from lifeforge_cli.proxy.settings import get_settings

from .utils import console


def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind (default from HOST)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on (default from PORT)"),
    log_level: str = typer.Option("info", "--log-level", help="uvicorn log level"),
) -> None:
    """Serve GET /tasks/next for the focus timer (stops on Ctrl+C or SIGTERM)."""
    settings = get_settings()
    host = host or settings.HOST
    port = port or settings.PORT

    console.print(f"[bold]lifeforge proxy[/bold] listening at http://{host}:{port}")
    uvicorn.run(create_app(settings), host=host, port=port, log_level=log_level)
