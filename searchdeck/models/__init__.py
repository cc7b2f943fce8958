"""Domain types and typed provider payloads."""

from searchdeck.models.results import (
    Attachment,
    ChatTurn,
    ImageProvider,
    MediaItem,
    MediaType,
    ProviderRequest,
    ProviderResult,
    SearchFocus,
    Source,
    Trend,
)

__all__ = [
    "Attachment",
    "ChatTurn",
    "ImageProvider",
    "MediaItem",
    "MediaType",
    "ProviderRequest",
    "ProviderResult",
    "SearchFocus",
    "Source",
    "Trend",
]
