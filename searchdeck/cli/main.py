"""Main CLI entry point for searchdeck."""

import typer
from rich.console import Console

from searchdeck.cli.commands import config, keys, query, server
from searchdeck.core.logging import configure_root_logging

app = typer.Typer(
    name="searchdeck",
    help="searchdeck CLI - answers, images and media from pooled provider keys",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(config.app, name="config", help="Configuration management")

app.command()(server.serve)
app.command()(query.search)
app.command()(query.image)
app.command()(query.media)
app.command()(query.discover)
app.command()(keys.validate)
app.command()(keys.keys)


@app.command()
def version() -> None:
    """Show version information."""
    from searchdeck import __version__

    Console().print(f"[bold cyan]searchdeck[/bold cyan] version [green]{__version__}[/green]")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """searchdeck CLI."""
    configure_root_logging("DEBUG" if verbose else "WARNING")


if __name__ == "__main__":
    app()
