"""Query commands: answers, images and media."""

import typer

from searchdeck.api.services.search_service import SearchService
from searchdeck.cli.commands.common import console, run_with_clients
from searchdeck.cli.presenters.results import ResultPresenter
from searchdeck.models.results import ImageProvider, MediaType, SearchFocus


def search(
    query: str = typer.Argument(..., help="Question to answer"),
    focus: SearchFocus = typer.Option(SearchFocus.ALL, "--focus", "-f", help="Focus mode"),
    model: str = typer.Option(None, "--model", "-m", help="Override the answer model"),
) -> None:
    """Answer a query with cited web sources."""
    result = run_with_clients(
        lambda clients: SearchService(clients).search(query, focus=focus, model_id=model)
    )
    ResultPresenter(console).present_answer(result)


def image(
    prompt: str = typer.Argument(..., help="Image prompt"),
    provider: ImageProvider = typer.Option(None, "--provider", "-p", help="Image provider"),
    model: str = typer.Option(None, "--model", "-m", help="Provider model hint"),
) -> None:
    """Generate an image and print its URL or data URI."""
    uri = run_with_clients(lambda clients: clients.image.generate_image(prompt, provider, model))
    console.print(uri, soft_wrap=True)


def media(
    query: str = typer.Argument("trending", help="Search query"),
    media_type: MediaType = typer.Option(MediaType.VIDEO, "--type", "-t", help="Media category"),
    limit: int = typer.Option(None, "--limit", "-n", min=1, max=50, help="Maximum results"),
) -> None:
    """Search videos, music or shorts."""
    items = run_with_clients(lambda clients: clients.media.fetch_media(query, media_type, limit))
    ResultPresenter(console).present_media(items, title=f"{media_type.value.title()} results")


def discover(
    query: str = typer.Argument("trending", help="Search query"),
    limit: int = typer.Option(None, "--limit", "-n", min=1, max=50, help="Maximum results per category"),
    trends: bool = typer.Option(False, "--trends", help="Also show trending topics"),
) -> None:
    """Fetch every media category concurrently."""

    async def _discover(clients):
        categories = await clients.media.discover(query, limit)
        topics = await clients.answer.discover_trends() if trends else []
        return categories, topics

    categories, topics = run_with_clients(_discover)
    presenter = ResultPresenter(console)
    for category, items in categories.items():
        presenter.present_media(items, title=category.value.title())
    if trends:
        presenter.present_trends(topics)
