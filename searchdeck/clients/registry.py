"""Composition root for the provider clients."""

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass

import httpx

from searchdeck.clients.answer_engine import AnswerEngineClient
from searchdeck.clients.image_synthesis import ImageSynthesisClient
from searchdeck.clients.media_discovery import MediaDiscoveryClient
from searchdeck.core.config import Config
from searchdeck.core.key_pool import CredentialStatus, KeyPool
from searchdeck.models.results import ImageProvider

logger = logging.getLogger(__name__)

CREDENTIAL_FAMILIES = ("answer", "image", "media")


@dataclass
class ProviderClients:
    """The three clients plus the HTTP client they share.

    Built once per process by the FastAPI lifespan or a CLI command and
    passed explicitly to whatever needs it.
    """

    answer: AnswerEngineClient
    image: ImageSynthesisClient
    media: MediaDiscoveryClient
    http: httpx.AsyncClient

    def set_credentials(
        self, family: str, credentials: Iterable[str], provider: ImageProvider | str | None = None
    ) -> None:
        """Replace one credential list.

        Args:
            family: "answer", "image" or "media"
            credentials: New list; blanks and duplicates are dropped
            provider: Image provider, required when family is "image"
        """
        if family == "answer":
            self.answer.set_credentials(credentials)
        elif family == "media":
            self.media.set_credentials(credentials)
        elif family == "image":
            if provider is None:
                raise ValueError("An image provider is required to set image credentials")
            self.image.set_credentials(provider, credentials)
        else:
            raise ValueError(
                f"Unknown credential family '{family}'. Choose from: {', '.join(CREDENTIAL_FAMILIES)}"
            )

    def pools(self) -> dict[str, KeyPool]:
        pools = {"answer": self.answer.pool, "media": self.media.pool}
        for provider, pool in self.image.pools.items():
            pools[f"image.{provider.value}"] = pool
        return pools

    def credential_report(self) -> dict[str, list[CredentialStatus]]:
        return {name: pool.snapshot() for name, pool in self.pools().items()}

    async def aclose(self) -> None:
        await self.http.aclose()


def build_provider_clients(
    config: Config,
    http_client: httpx.AsyncClient | None = None,
    rng: random.Random | None = None,
) -> ProviderClients:
    """Build every client from configuration around one shared httpx.AsyncClient."""
    http = http_client or httpx.AsyncClient(timeout=config.request_timeout)
    rng = rng or random.Random()

    # A Gemini answer-engine key also authorizes Gemini image generation
    image_defaults: dict[str, str | None] = {}
    if config.answer.backend == "gemini":
        image_defaults[ImageProvider.GEMINI.value] = config.answer.default_key

    image = ImageSynthesisClient(
        keys=config.image.keys,
        default_provider=config.image.default_provider,
        replicate_default_model=config.image.replicate_default_model,
        poll_interval=config.image.poll_interval,
        max_polls=config.image.poll_max_attempts,
        default_credentials=image_defaults,
        http_client=http,
    )
    answer = AnswerEngineClient(
        backend=config.answer.backend,
        keys=config.answer.keys,
        default_credential=config.answer.default_key,
        model=config.answer.model,
        image_client=image,
        attachment_limit=config.answer.attachment_context_limit,
        rng=rng,
        http_client=http,
    )
    media = MediaDiscoveryClient(
        keys=config.media.keys,
        region_code=config.media.region_code,
        relevance_language=config.media.relevance_language,
        max_results=config.media.max_results,
        rng=rng,
        http_client=http,
    )
    logger.debug(
        "Provider clients ready: answer=%s (%s keys), media=%s keys",
        answer.provider,
        len(answer.pool),
        len(media.pool),
    )
    return ProviderClients(answer=answer, image=image, media=media, http=http)
