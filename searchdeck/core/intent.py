"""Query intent classification.

Routing decisions are made here and nowhere else, so the regex heuristics
can be replaced by a model-based classifier without touching call sites.
"""

import re
from dataclasses import dataclass

from searchdeck.models.results import SearchFocus

IMAGE_INTENT_PATTERN = re.compile(
    r"\bdraw\b"
    r"|\b(?:generate|create|make)\s+(?:an?\s+)?(?:image|picture)\b"
    r"|\bshow me a picture\b",
    re.IGNORECASE,
)

VIDEO_INTENT_PATTERN = re.compile(
    r"\b(?:videos?|shorts?|watch|tutorials?|youtube|how to|clips?|show me)\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class TextIntent:
    query: str


@dataclass(frozen=True)
class ImageIntent:
    prompt: str


Intent = TextIntent | ImageIntent


def classify_intent(query: str, focus: SearchFocus = SearchFocus.ALL) -> Intent:
    """Route a query to the text answer path or the image path."""
    if focus == SearchFocus.CANVAS or IMAGE_INTENT_PATTERN.search(query):
        return ImageIntent(prompt=query.strip())
    return TextIntent(query=query.strip())


def wants_video(query: str) -> bool:
    return bool(VIDEO_INTENT_PATTERN.search(query))


def strip_video_terms(query: str) -> str:
    """Remove video vocabulary so the remainder works as a media search query."""
    cleaned = VIDEO_INTENT_PATTERN.sub(" ", query)
    return " ".join(cleaned.split())
