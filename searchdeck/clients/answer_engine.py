"""Grounded answer engine client."""

import logging
import random
from collections.abc import Iterable, Sequence

import httpx

from searchdeck.clients.answer_backends import AnswerBackend, PreparedRequest, get_backend
from searchdeck.clients.base import HttpClientOwner
from searchdeck.clients.image_synthesis import ImageSynthesisClient
from searchdeck.core import http
from searchdeck.core.exceptions import MalformedResponse, ProviderClientError, ProviderError
from searchdeck.core.intent import ImageIntent, classify_intent
from searchdeck.core.key_pool import KeyPool
from searchdeck.core.normalizer import (
    IMAGE_FOLLOW_UPS,
    follow_up_suggestions,
    image_markdown,
    normalize_sources,
)
from searchdeck.core.retry import RetryRotationPolicy
from searchdeck.models.payloads import AnswerPayload, trends_from_json_text
from searchdeck.models.results import (
    Attachment,
    ChatTurn,
    ProviderRequest,
    ProviderResult,
    SearchFocus,
    Trend,
)

logger = logging.getLogger(__name__)

ANSWER_MIN_ATTEMPTS = 3

EMPTY_ANSWER_MESSAGE = (
    "The answer engine responded, but the response contained no readable answer. "
    "Try rephrasing the question or switching models."
)


def build_system_instruction(
    focus: SearchFocus,
    model: str,
    attachment: Attachment | None = None,
    attachment_limit: int = 8000,
) -> str:
    """System instruction for a grounded answer in the given focus mode."""
    lines = [
        f"You are a high-performance research engine (model: {model}).",
        f"Focus mode: {focus.value}.",
        "Synthesize a direct, objective answer from current web sources.",
        "Cite sources inline as bracketed indices such as [1], [2].",
        "Structure the answer with markdown headings, lists and tables where they help.",
    ]
    if attachment is not None:
        content = attachment.content[:attachment_limit]
        lines.append(f"Context from the attached file ({attachment.name}):\n{content}")
    return "\n".join(lines)


class AnswerEngineClient(HttpClientOwner):
    """Answers queries with web grounding, rotating pooled credentials.

    Image-oriented queries are routed to the injected ImageSynthesisClient.
    Failures of any kind consume an attempt (budget ``max(len(pool), 3)``);
    AuthFailure and RateLimited additionally mark the key unhealthy.
    """

    def __init__(
        self,
        backend: AnswerBackend | str = "gemini",
        keys: Iterable[str] = (),
        default_credential: str | None = None,
        model: str | None = None,
        image_client: ImageSynthesisClient | None = None,
        attachment_limit: int = 8000,
        rng: random.Random | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 90.0,
    ) -> None:
        self.backend = get_backend(backend) if isinstance(backend, str) else backend
        super().__init__(http_client, timeout)
        self.default_credential = default_credential or None
        self.model = model or self.backend.default_model
        self.image_client = image_client
        self.attachment_limit = attachment_limit
        self.rng = rng or random.Random()
        self.pool = KeyPool(self.backend.name, keys, fallback_when_exhausted=True)
        self.policy = RetryRotationPolicy(
            self.backend.name, min_attempts=ANSWER_MIN_ATTEMPTS, retry_unknown_errors=True
        )

    @property
    def provider(self) -> str:
        return self.backend.name

    def set_credentials(self, credentials: Iterable[str]) -> None:
        self.pool.set_credentials(credentials)
        logger.info("Answer engine (%s) now has %s key(s)", self.provider, len(self.pool))

    async def search_and_respond(
        self,
        query: str,
        focus: SearchFocus | str = SearchFocus.ALL,
        model_id: str | None = None,
        history: Sequence[ChatTurn] = (),
        attachment: Attachment | None = None,
    ) -> ProviderResult:
        """Answer ``query`` with grounded sources, or generate an image for image intents.

        Raises:
            NoCredentialsConfigured: Empty pool and no default credential
            ProviderExhausted: Every attempt failed
        """
        focus = SearchFocus(focus)
        intent = classify_intent(query, focus)
        if isinstance(intent, ImageIntent):
            return await self._respond_with_image(intent.prompt)

        request = ProviderRequest(
            query=query,
            focus=focus,
            model_id=model_id or self.model,
            history=tuple(history),
            attachment=attachment,
        )
        instruction = build_system_instruction(
            request.focus, request.model_id, request.attachment, self.attachment_limit
        )
        logger.info("Answering with %s/%s (focus=%s)", self.provider, request.model_id, focus.value)

        async def attempt(credential: str) -> AnswerPayload:
            response = await self._send(self.backend.answer_request(credential, request, instruction))
            try:
                return self.backend.decode_answer(response.json())
            except (ValueError, MalformedResponse) as e:
                logger.warning("Malformed answer from %s: %s", self.provider, e)
                return AnswerPayload(text=None)

        payload = await self.policy.run(self.pool, attempt, self.default_credential)
        return ProviderResult(
            content=payload.text if payload.text else EMPTY_ANSWER_MESSAGE,
            sources=normalize_sources(payload.citations),
            related=follow_up_suggestions(self.rng),
        )

    async def discover_trends(self) -> list[Trend]:
        """Best-effort trending topics; any failure yields an empty list."""

        async def attempt(credential: str) -> list[Trend]:
            response = await self._send(self.backend.trends_request(credential))
            text = self.backend.trends_text(http.decode_json(response, self.provider))
            if not text:
                raise MalformedResponse(self.provider, "Trend response had no text")
            return trends_from_json_text(text, self.provider)

        try:
            return await self.policy.run(self.pool, attempt, self.default_credential)
        except ProviderClientError as e:
            logger.warning("Trend discovery failed: %s", e)
            return []

    async def validate_credential(self, credential: str) -> bool:
        request = self.backend.validation_request(credential.strip())
        try:
            response = await self.http.request(
                request.method, request.url, headers=request.headers, json=request.json
            )
        except httpx.HTTPError as e:
            logger.debug("Credential validation for %s failed: %s", self.provider, e)
            return False
        return response.status_code == 200

    async def _respond_with_image(self, prompt: str) -> ProviderResult:
        if self.image_client is None:
            raise ProviderError(self.provider, "Image generation is not configured")
        uri = await self.image_client.generate_image(prompt)
        return ProviderResult(
            content=image_markdown(uri),
            related=list(IMAGE_FOLLOW_UPS),
            image_uri=uri,
            intent="image",
        )

    async def _send(self, request: PreparedRequest) -> httpx.Response:
        return await http.send(
            self.http,
            self.provider,
            request.method,
            request.url,
            headers=request.headers,
            json=request.json,
            params=request.params or None,
        )
