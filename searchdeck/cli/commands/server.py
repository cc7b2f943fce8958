"""Server command for the searchdeck CLI."""

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from searchdeck.core.config import Config
from searchdeck.core.logging import configure_root_logging, normalize_log_level


def serve(
    host: str = typer.Option(None, "--host", help="Override host"),
    port: int = typer.Option(None, "--port", help="Override port"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
) -> None:
    """Start the HTTP API server."""
    console = Console()
    config = Config()
    configure_root_logging(config.log_level)

    server_host = host or config.host
    server_port = port or config.port

    table = Table(title="searchdeck Server")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Server URL", f"http://{server_host}:{server_port}")
    table.add_row("Answer Backend", config.answer.backend)
    table.add_row("Answer Keys", str(len(config.answer.keys)))
    table.add_row("Image Provider", config.image.default_provider)
    table.add_row("Media Keys", str(len(config.media.keys)))
    console.print(table)

    log_level = normalize_log_level(config.log_level).lower()
    uvicorn.run(
        "searchdeck.main:app",
        host=server_host,
        port=server_port,
        reload=reload,
        log_level=log_level,
        access_log=log_level == "debug",
    )
