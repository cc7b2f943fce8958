"""Rich presenters for provider results."""

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from searchdeck.core.key_pool import CredentialHealth, CredentialStatus
from searchdeck.models.results import MediaItem, MediaType, ProviderResult, Trend

MEDIA_COLORS = {
    MediaType.VIDEO: "cyan",
    MediaType.MUSIC: "magenta",
    MediaType.SHORT: "yellow",
}


class ResultPresenter:
    """Converts result objects into rich output. No business logic."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def present_answer(self, result: ProviderResult) -> None:
        self.console.print(Markdown(result.content))

        if result.sources:
            self.console.print()
            self.console.print("[bold]Sources[/bold]")
            for index, source in enumerate(result.sources, start=1):
                self.console.print(f"  [dim]\\[{index}][/dim] {source.title} [blue]{source.uri}[/blue]")

        if result.media:
            self.console.print()
            self.present_media(result.media, title="Related media")

        if result.related:
            self.console.print()
            self.console.print(
                Panel("\n".join(f"• {item}" for item in result.related), title="Follow-ups", expand=False)
            )

    def present_media(self, items: list[MediaItem], title: str = "Media") -> None:
        if not items:
            self.console.print(f"[yellow]No {title.lower()} found[/yellow]")
            return

        table = Table(title=title)
        table.add_column("Type")
        table.add_column("Title", style="bold")
        table.add_column("Channel", style="green")
        table.add_column("Id", style="dim")
        for item in items:
            color = MEDIA_COLORS.get(item.media_type, "white")
            table.add_row(f"[{color}]{item.media_type.value}[/{color}]", item.title, item.channel_title, item.id)
        self.console.print(table)

    def present_trends(self, trends: list[Trend]) -> None:
        if not trends:
            self.console.print("[yellow]No trends available[/yellow]")
            return
        for trend in trends:
            self.console.print(f"[bold cyan]{trend.title}[/bold cyan]\n  {trend.description}")

    def present_credentials(self, report: dict[str, list[CredentialStatus]]) -> None:
        table = Table(title="Credential Pools")
        table.add_column("Pool", style="cyan")
        table.add_column("Fingerprint")
        table.add_column("Status")
        for pool_name, statuses in report.items():
            if not statuses:
                table.add_row(pool_name, "[dim]-[/dim]", "[dim]not configured[/dim]")
                continue
            for status in statuses:
                healthy = status.status == CredentialHealth.HEALTHY
                label = "[green]healthy[/green]" if healthy else "[red]unhealthy[/red]"
                table.add_row(pool_name, status.fingerprint, label)
        self.console.print(table)
