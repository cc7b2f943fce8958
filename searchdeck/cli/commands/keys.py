"""Credential commands."""

import typer

from searchdeck.cli.commands.common import console, run_with_clients
from searchdeck.cli.presenters.results import ResultPresenter
from searchdeck.core.logging import fingerprint
from searchdeck.models.results import ImageProvider

FAMILIES = ("answer", "image", "media")


def validate(
    family: str = typer.Argument(..., help="Credential family: answer, image or media"),
    credential: str = typer.Argument(..., help="Credential to check"),
    provider: ImageProvider = typer.Option(None, "--provider", "-p", help="Image provider"),
) -> None:
    """Check a credential with one lightweight authenticated call."""
    if family not in FAMILIES:
        console.print(f"[red]Unknown family '{family}'. Choose from: {', '.join(FAMILIES)}[/red]")
        raise typer.Exit(code=2)
    if family == "image" and provider is None:
        console.print("[red]--provider is required for image credentials[/red]")
        raise typer.Exit(code=2)

    async def _validate(clients):
        if family == "answer":
            return await clients.answer.validate_credential(credential)
        if family == "media":
            return await clients.media.validate_credential(credential)
        return await clients.image.validate_credential(provider, credential)

    valid = run_with_clients(_validate)
    label = f"{family}{f'.{provider.value}' if provider else ''} key {fingerprint(credential.strip())}"
    if valid:
        console.print(f"[green]✅ {label} is valid[/green]")
    else:
        console.print(f"[red]❌ {label} was rejected[/red]")
        raise typer.Exit(code=1)


def keys() -> None:
    """Show configured credential pools by fingerprint."""

    async def _report(clients):
        return clients.credential_report()

    ResultPresenter(console).present_credentials(run_with_clients(_report))
