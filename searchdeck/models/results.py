"""Domain types shared by every provider client.

Requests are immutable and built per call; results are plain containers
owned by the caller.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Literal


class SearchFocus(str, Enum):
    ALL = "All"
    ACADEMIC = "Academic"
    WRITING = "Writing"
    WOLFRAM = "WolframAlpha"
    YOUTUBE = "YouTube"
    REDDIT = "Reddit"
    CANVAS = "Canvas"
    MUSIC = "Music"


class MediaType(str, Enum):
    VIDEO = "video"
    MUSIC = "music"
    SHORT = "short"


class ImageProvider(str, Enum):
    OPENAI = "openai"
    STABILITY = "stability"
    GEMINI = "gemini"
    REPLICATE = "replicate"


@dataclass(frozen=True)
class ChatTurn:
    role: Literal["user", "assistant"]
    content: str


@dataclass(frozen=True)
class Attachment:
    """Text extracted from a file the user attached to a query."""

    name: str
    content: str
    mime_type: str = "text/plain"


@dataclass(frozen=True)
class ProviderRequest:
    """One answer-engine call.

    Attributes:
        query: The new user query
        focus: Behavioral mode selected by the caller
        model_id: Backend model, or None for the configured default
        history: Prior turns, oldest first
        attachment: Optional attached-file context
    """

    query: str
    focus: SearchFocus = SearchFocus.ALL
    model_id: str | None = None
    history: tuple[ChatTurn, ...] = ()
    attachment: Attachment | None = None


@dataclass(frozen=True)
class Source:
    title: str
    uri: str


@dataclass(frozen=True)
class MediaItem:
    id: str  # noqa: A003
    title: str
    channel_title: str
    thumbnail_uri: str
    media_type: MediaType


@dataclass(frozen=True)
class Trend:
    title: str
    description: str


@dataclass
class ProviderResult:
    """Normalized output of an answer-engine call."""

    content: str
    sources: list[Source] = field(default_factory=list)
    media: list[MediaItem] = field(default_factory=list)
    related: list[str] = field(default_factory=list)
    image_uri: str | None = None
    intent: Literal["text", "image"] = "text"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["media"] = [{**item, "media_type": item["media_type"].value} for item in data["media"]]
        return data
