"""Configuration commands for the searchdeck CLI."""

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from searchdeck.core.config import ConfigSchema
from searchdeck.core.config.validation import load_all_specs, validate_all

app = typer.Typer(help="Configuration management")


def _display(value: object, secret: bool) -> str:
    if value is None or value == ():
        return "[dim]not set[/dim]"
    if secret:
        count = len(value) if isinstance(value, tuple) else 1
        return f"[yellow]{count} configured[/yellow]"
    return str(value)


@app.command()
def show() -> None:
    """Show the effective configuration; secrets are summarized, never printed."""
    console = Console()
    specs = ConfigSchema.all_specs()

    table = Table(title="searchdeck Configuration")
    table.add_column("Variable", style="cyan")
    table.add_column("Value", style="green")

    for name, value in load_all_specs().items():
        if isinstance(value, Exception):
            table.add_row(name, f"[red]{value}[/red]")
        else:
            table.add_row(name, _display(value, specs[name].secret))
    console.print(table)


@app.command()
def check() -> None:
    """Validate every environment variable."""
    console = Console()
    errors = validate_all()
    if not errors:
        console.print("[green]✅ Configuration is valid[/green]")
        return
    for error in errors:
        console.print(f"[red]❌ {error}[/red]")
    raise typer.Exit(code=1)


@app.command()
def docs() -> None:
    """Print the environment variable reference."""
    Console().print(Markdown(ConfigSchema.generate_markdown_docs()))
