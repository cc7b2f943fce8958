"""Helpers shared by the client-backed CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from rich.console import Console

from searchdeck.clients.registry import ProviderClients, build_provider_clients
from searchdeck.core.config import Config, ConfigError
from searchdeck.core.exceptions import ProviderClientError

T = TypeVar("T")

console = Console()


def run_with_clients(operation: Callable[[ProviderClients], Awaitable[T]]) -> T:
    """Build clients from the environment, run ``operation``, always close them.

    Provider and configuration failures are printed and turned into exit code 1.
    """

    async def _run() -> T:
        clients = build_provider_clients(Config())
        try:
            return await operation(clients)
        finally:
            await clients.aclose()

    try:
        return asyncio.run(_run())
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(code=1) from e
    except ProviderClientError as e:
        console.print(f"[red]{e.provider}: {e.message}[/red]")
        raise typer.Exit(code=1) from e
