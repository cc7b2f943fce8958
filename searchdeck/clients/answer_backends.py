"""Wire formats of the answer-engine backends.

A backend only knows how to shape requests and decode responses; retries,
rotation and normalization live in AnswerEngineClient.
"""

from dataclasses import dataclass, field
from typing import Any

from searchdeck.models.payloads import AnswerPayload
from searchdeck.models.results import ProviderRequest

TREND_PROMPT = (
    "Fetch 4 trending global research or tech news items. "
    "Return a JSON array of objects with string fields title and description."
)

TREND_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "description": {"type": "string"},
        },
        "required": ["title", "description"],
    },
}


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    url: str
    headers: dict[str, str]
    json: dict[str, Any] | None = None
    params: dict[str, str] = field(default_factory=dict)


class AnswerBackend:
    """Base class for answer backends."""

    name: str = ""
    default_model: str = ""
    trends_model: str = ""

    def answer_request(
        self, credential: str, request: ProviderRequest, instruction: str
    ) -> PreparedRequest:
        """Build the grounded answer call; ``request.model_id`` is already resolved."""
        raise NotImplementedError

    def decode_answer(self, data: Any) -> AnswerPayload:
        raise NotImplementedError

    def trends_request(self, credential: str) -> PreparedRequest:
        raise NotImplementedError

    def trends_text(self, data: Any) -> str | None:
        return self.decode_answer(data).text

    def validation_request(self, credential: str) -> PreparedRequest:
        raise NotImplementedError


class GeminiBackend(AnswerBackend):
    """generateContent with Google Search grounding."""

    name = "gemini"
    default_model = "gemini-3-pro-preview"
    trends_model = "gemini-3-flash-preview"
    base_url = "https://generativelanguage.googleapis.com/v1beta"

    def _headers(self, credential: str) -> dict[str, str]:
        return {"x-goog-api-key": credential}

    def answer_request(self, credential, request, instruction):
        contents = [
            {
                "role": "model" if turn.role == "assistant" else "user",
                "parts": [{"text": turn.content}],
            }
            for turn in request.history
        ]
        contents.append({"role": "user", "parts": [{"text": request.query}]})
        return PreparedRequest(
            method="POST",
            url=f"{self.base_url}/models/{request.model_id}:generateContent",
            headers=self._headers(credential),
            json={
                "systemInstruction": {"parts": [{"text": instruction}]},
                "contents": contents,
                "tools": [{"google_search": {}}],
            },
        )

    def decode_answer(self, data):
        return AnswerPayload.from_gemini(data)

    def trends_request(self, credential):
        return PreparedRequest(
            method="POST",
            url=f"{self.base_url}/models/{self.trends_model}:generateContent",
            headers=self._headers(credential),
            json={
                "contents": [{"role": "user", "parts": [{"text": TREND_PROMPT}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": TREND_SCHEMA,
                },
            },
        )

    def validation_request(self, credential):
        return PreparedRequest(method="GET", url=f"{self.base_url}/models", headers=self._headers(credential))


class PerplexityBackend(AnswerBackend):
    """OpenAI-style chat completions with citations."""

    name = "perplexity"
    default_model = "sonar-pro"
    trends_model = "sonar"
    url = "https://api.perplexity.ai/chat/completions"

    def _headers(self, credential: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {credential}"}

    def answer_request(self, credential, request, instruction):
        messages = [{"role": "system", "content": instruction}]
        messages.extend({"role": turn.role, "content": turn.content} for turn in request.history)
        messages.append({"role": "user", "content": request.query})
        return PreparedRequest(
            method="POST",
            url=self.url,
            headers=self._headers(credential),
            json={"model": request.model_id, "messages": messages, "stream": False},
        )

    def decode_answer(self, data):
        return AnswerPayload.from_perplexity(data)

    def trends_request(self, credential):
        return PreparedRequest(
            method="POST",
            url=self.url,
            headers=self._headers(credential),
            json={
                "model": self.trends_model,
                "messages": [{"role": "user", "content": TREND_PROMPT}],
                "response_format": {"type": "json_schema", "json_schema": {"schema": TREND_SCHEMA}},
            },
        )

    def validation_request(self, credential):
        return PreparedRequest(
            method="POST",
            url=self.url,
            headers=self._headers(credential),
            json={
                "model": self.trends_model,
                "messages": [{"role": "user", "content": "test"}],
                "max_tokens": 1,
            },
        )


BACKENDS: dict[str, type[AnswerBackend]] = {
    GeminiBackend.name: GeminiBackend,
    PerplexityBackend.name: PerplexityBackend,
}


def get_backend(name: str) -> AnswerBackend:
    try:
        return BACKENDS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown answer engine backend '{name}'. Choose from: {', '.join(sorted(BACKENDS))}"
        ) from None
