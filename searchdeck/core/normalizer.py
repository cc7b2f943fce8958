"""Turn typed provider payloads into Source / MediaItem results."""

import random
from collections.abc import Iterable
from urllib.parse import urlparse

from searchdeck.models.payloads import Citation, YoutubeVideo
from searchdeck.models.results import MediaItem, MediaType, Source

MAX_SOURCES = 5

FOLLOW_UP_POOL = (
    "Explain the technical details further",
    "What are the long-term implications?",
    "Show me recent developments related to this",
    "Give me a detailed breakdown",
    "What are some practical examples?",
    "What is the historical context?",
    "What are the main counterarguments?",
    "Summarize this in three bullet points",
)

IMAGE_FOLLOW_UPS = ["Download image", "Vary this image", "Describe details"]

THUMBNAIL_PREFERENCE = ("high", "medium", "default")


def hostname_title(uri: str) -> str:
    """Readable fallback title for a citation: its hostname without ``www.``."""
    host = urlparse(uri).hostname
    if not host:
        return uri
    return host[4:] if host.startswith("www.") else host


def normalize_sources(citations: Iterable[Citation], limit: int = MAX_SOURCES) -> list[Source]:
    """Deduplicate citations by uri, keep citation order, cap at ``limit``."""
    sources: list[Source] = []
    seen: set[str] = set()
    for citation in citations:
        uri = citation.uri.strip()
        if not uri or uri in seen:
            continue
        seen.add(uri)
        sources.append(Source(title=citation.title or hostname_title(uri), uri=uri))
        if len(sources) >= limit:
            break
    return sources


def pick_thumbnail(thumbnails: dict[str, str]) -> str:
    for size in THUMBNAIL_PREFERENCE:
        if size in thumbnails:
            return thumbnails[size]
    return next(iter(thumbnails.values()), "")


def normalize_media_items(videos: Iterable[YoutubeVideo], media_type: MediaType) -> list[MediaItem]:
    return [
        MediaItem(
            id=video.id,
            title=video.title,
            channel_title=video.channel_title,
            thumbnail_uri=pick_thumbnail(video.thumbnails),
            media_type=media_type,
        )
        for video in videos
    ]


def image_markdown(uri: str) -> str:
    return f"![Generated Image]({uri})\n\nGenerated a visual for your request."


def follow_up_suggestions(rng: random.Random, k: int = 3) -> list[str]:
    return rng.sample(FOLLOW_UP_POOL, k)
