"""Typed provider payloads decoded at the HTTP boundary.

Each provider response shape gets its own frozen dataclass with a
``from_json`` constructor. Decoders raise MalformedResponse when a field the
client depends on is missing or has the wrong type, so nothing downstream
ever indexes into raw JSON.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal

from searchdeck.core.exceptions import MalformedResponse
from searchdeck.models.results import Trend


def _as_dict(value: Any, provider: str, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise MalformedResponse(provider, f"Expected an object at {where}")
    return value


def _as_list(value: Any, provider: str, where: str) -> list[Any]:
    if not isinstance(value, list):
        raise MalformedResponse(provider, f"Expected a list at {where}")
    return value


def _first(value: Any, provider: str, where: str) -> Any:
    items = _as_list(value, provider, where)
    if not items:
        raise MalformedResponse(provider, f"Empty list at {where}")
    return items[0]


# =============================================================================
# Answer engine
# =============================================================================


@dataclass(frozen=True)
class Citation:
    uri: str
    title: str | None = None


@dataclass(frozen=True)
class AnswerPayload:
    """Text plus grounding citations from an answer backend.

    ``text`` is None when the provider answered without a usable text field;
    the answer engine degrades that to an explanatory message.
    """

    text: str | None
    citations: tuple[Citation, ...] = ()

    @classmethod
    def from_gemini(cls, data: Any) -> AnswerPayload:
        data = _as_dict(data, "gemini", "response")
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return cls(text=None)

        candidate = candidates[0] if isinstance(candidates[0], dict) else {}
        content = candidate.get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        texts = [
            part["text"]
            for part in (parts if isinstance(parts, list) else [])
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]

        citations: list[Citation] = []
        grounding = candidate.get("groundingMetadata")
        chunks = grounding.get("groundingChunks") if isinstance(grounding, dict) else None
        for chunk in chunks if isinstance(chunks, list) else []:
            web = chunk.get("web") if isinstance(chunk, dict) else None
            if isinstance(web, dict) and isinstance(web.get("uri"), str):
                citations.append(Citation(uri=web["uri"], title=web.get("title") or None))

        return cls(text="".join(texts) if texts else None, citations=tuple(citations))

    @classmethod
    def from_perplexity(cls, data: Any) -> AnswerPayload:
        data = _as_dict(data, "perplexity", "response")

        text: str | None = None
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message") or {}
            if isinstance(message, dict) and isinstance(message.get("content"), str):
                text = message["content"]

        citations: list[Citation] = []
        # Newer responses carry titled search_results; older ones only URL citations
        search_results = data.get("search_results")
        for result in search_results if isinstance(search_results, list) else []:
            if isinstance(result, dict) and isinstance(result.get("url"), str):
                citations.append(Citation(uri=result["url"], title=result.get("title") or None))
        urls = data.get("citations")
        if not citations and isinstance(urls, list):
            for url in urls:
                if isinstance(url, str):
                    citations.append(Citation(uri=url))

        return cls(text=text, citations=tuple(citations))


def trends_from_json_text(text: str, provider: str) -> list[Trend]:
    """Decode a JSON-mode answer holding ``[{title, description}, ...]``."""
    try:
        items = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponse(provider, f"Trend payload is not JSON: {e}") from e

    trends = []
    for item in _as_list(items, provider, "trends"):
        if isinstance(item, dict) and item.get("title"):
            trends.append(
                Trend(title=str(item["title"]), description=str(item.get("description", "")))
            )
    return trends


# =============================================================================
# Image synthesis
# =============================================================================


@dataclass(frozen=True)
class OpenAIImagePayload:
    kind: Literal["url"]
    url: str

    @classmethod
    def from_json(cls, data: Any) -> OpenAIImagePayload:
        item = _as_dict(
            _first(_as_dict(data, "openai", "response").get("data"), "openai", "data"),
            "openai",
            "data[0]",
        )
        if isinstance(item.get("url"), str):
            return cls(kind="url", url=item["url"])
        if isinstance(item.get("b64_json"), str):
            return cls(kind="url", url=f"data:image/png;base64,{item['b64_json']}")
        raise MalformedResponse("openai", "Image response has neither url nor b64_json")

    def image_reference(self) -> str:
        return self.url


@dataclass(frozen=True)
class StabilityImagePayload:
    kind: Literal["inline"]
    base64: str
    mime_type: str = "image/png"

    @classmethod
    def from_json(cls, data: Any) -> StabilityImagePayload:
        artifact = _as_dict(
            _first(_as_dict(data, "stability", "response").get("artifacts"), "stability", "artifacts"),
            "stability",
            "artifacts[0]",
        )
        if not isinstance(artifact.get("base64"), str):
            raise MalformedResponse("stability", "Artifact has no base64 data")
        return cls(kind="inline", base64=artifact["base64"])

    def image_reference(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"


@dataclass(frozen=True)
class GeminiImagePayload:
    kind: Literal["inline"]
    base64: str
    mime_type: str

    @classmethod
    def from_json(cls, data: Any) -> GeminiImagePayload:
        candidate = _as_dict(
            _first(_as_dict(data, "gemini", "response").get("candidates"), "gemini", "candidates"),
            "gemini",
            "candidates[0]",
        )
        content = _as_dict(candidate.get("content"), "gemini", "candidates[0].content")
        for part in _as_list(content.get("parts"), "gemini", "content.parts"):
            inline = part.get("inlineData") if isinstance(part, dict) else None
            if isinstance(inline, dict) and isinstance(inline.get("data"), str):
                return cls(
                    kind="inline",
                    base64=inline["data"],
                    mime_type=inline.get("mimeType") or "image/png",
                )
        raise MalformedResponse("gemini", "Image generation returned no inline image data")

    def image_reference(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"


ReplicateStatus = Literal["starting", "processing", "succeeded", "failed", "canceled"]
TERMINAL_STATUSES = frozenset({"succeeded", "failed", "canceled"})


@dataclass(frozen=True)
class ReplicatePrediction:
    kind: Literal["job"]
    id: str  # noqa: A003
    status: str
    output: tuple[str, ...] = ()
    error: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> ReplicatePrediction:
        data = _as_dict(data, "replicate", "prediction")
        if not isinstance(data.get("id"), str) or not isinstance(data.get("status"), str):
            raise MalformedResponse("replicate", "Prediction is missing id or status")

        raw_output = data.get("output")
        if isinstance(raw_output, str):
            output: tuple[str, ...] = (raw_output,)
        elif isinstance(raw_output, list):
            output = tuple(item for item in raw_output if isinstance(item, str))
        else:
            output = ()

        error = data.get("error")
        return cls(
            kind="job",
            id=data["id"],
            status=data["status"],
            output=output,
            error=str(error) if error else None,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def image_reference(self) -> str:
        if not self.output:
            raise MalformedResponse("replicate", f"Prediction {self.id} succeeded without output")
        return self.output[0]


ImagePayload = OpenAIImagePayload | StabilityImagePayload | GeminiImagePayload | ReplicatePrediction


# =============================================================================
# Media discovery
# =============================================================================


@dataclass(frozen=True)
class YoutubeSearchPayload:
    video_ids: tuple[str, ...]

    @classmethod
    def from_json(cls, data: Any) -> YoutubeSearchPayload:
        items = _as_dict(data, "youtube", "search response").get("items") or []
        ids = []
        for item in _as_list(items, "youtube", "items"):
            ref = item.get("id") if isinstance(item, dict) else None
            video_id = ref.get("videoId") if isinstance(ref, dict) else None
            if isinstance(video_id, str) and video_id not in ids:
                ids.append(video_id)
        return cls(video_ids=tuple(ids))


@dataclass(frozen=True)
class YoutubeVideo:
    id: str  # noqa: A003
    title: str
    channel_title: str
    thumbnails: dict[str, str]

    @classmethod
    def from_json(cls, item: Any) -> YoutubeVideo:
        item = _as_dict(item, "youtube", "video")
        snippet = _as_dict(item.get("snippet"), "youtube", "video.snippet")
        if not isinstance(item.get("id"), str):
            raise MalformedResponse("youtube", "Video is missing its id")

        thumbnails = {
            size: thumb["url"]
            for size, thumb in _as_dict(
                snippet.get("thumbnails") or {}, "youtube", "video.snippet.thumbnails"
            ).items()
            if isinstance(thumb, dict) and isinstance(thumb.get("url"), str)
        }
        return cls(
            id=item["id"],
            title=str(snippet.get("title", "")),
            channel_title=str(snippet.get("channelTitle", "")),
            thumbnails=thumbnails,
        )

    @classmethod
    def list_from_json(cls, data: Any) -> list[YoutubeVideo]:
        items = _as_dict(data, "youtube", "videos response").get("items") or []
        return [cls.from_json(item) for item in _as_list(items, "youtube", "items")]
