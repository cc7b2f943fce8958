"""Image synthesis across four provider shapes.

- openai: one synchronous call returning a hosted URL
- stability: one synchronous call returning inline base64
- gemini: one synchronous call returning an inlineData part
- replicate: submit a prediction, then poll it until a terminal status

Every provider has its own KeyPool; the rotation policy only rotates on
AuthFailure/RateLimited, so a provider-side error for one prompt is raised
immediately instead of burning the remaining keys.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping

import httpx

from searchdeck.clients.base import HttpClientOwner
from searchdeck.core import http
from searchdeck.core.exceptions import ImageJobTimeout, ProviderError
from searchdeck.core.key_pool import KeyPool
from searchdeck.core.retry import RetryRotationPolicy
from searchdeck.models.payloads import (
    GeminiImagePayload,
    OpenAIImagePayload,
    ReplicatePrediction,
    StabilityImagePayload,
)
from searchdeck.models.results import ImageProvider

logger = logging.getLogger(__name__)

OPENAI_BASE_URL = "https://api.openai.com"
STABILITY_BASE_URL = "https://api.stability.ai"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"
REPLICATE_BASE_URL = "https://api.replicate.com"

OPENAI_IMAGE_MODEL = "dall-e-3"
STABILITY_ENGINE = "stable-diffusion-xl-1024-v1-0"
GEMINI_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_REPLICATE_MODEL = "black-forest-labs/flux-schnell"

VALIDATION_ENDPOINTS = {
    ImageProvider.OPENAI: f"{OPENAI_BASE_URL}/v1/models",
    ImageProvider.STABILITY: f"{STABILITY_BASE_URL}/v1/user/account",
    ImageProvider.GEMINI: f"{GEMINI_BASE_URL}/v1beta/models",
    ImageProvider.REPLICATE: f"{REPLICATE_BASE_URL}/v1/collections",
}


def auth_headers(provider: ImageProvider, credential: str) -> dict[str, str]:
    if provider == ImageProvider.REPLICATE:
        return {"Authorization": f"Token {credential}"}
    if provider == ImageProvider.GEMINI:
        return {"x-goog-api-key": credential}
    return {"Authorization": f"Bearer {credential}"}


class ImageSynthesisClient(HttpClientOwner):
    """Generate images through pooled credentials.

    Args:
        keys: Initial credential lists keyed by provider name
        default_provider: Provider used when generate_image() gets none
        replicate_default_model: Replicate model or version when no hint is given
        poll_interval: Seconds between Replicate status checks
        max_polls: Status checks allowed before ImageJobTimeout
        default_credentials: Per-provider credential used when that pool is empty
        http_client: Shared client owned by the composition root
    """

    def __init__(
        self,
        keys: Mapping[str, Iterable[str]] | None = None,
        default_provider: ImageProvider | str = ImageProvider.OPENAI,
        replicate_default_model: str = DEFAULT_REPLICATE_MODEL,
        poll_interval: float = 1.5,
        max_polls: int = 80,
        default_credentials: Mapping[str, str | None] | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 90.0,
    ) -> None:
        super().__init__(http_client, timeout)
        keys = keys or {}
        self.default_provider = ImageProvider(default_provider)
        self.replicate_default_model = replicate_default_model
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.default_credentials = dict(default_credentials or {})
        self.pools: dict[ImageProvider, KeyPool] = {
            provider: KeyPool(provider.value, keys.get(provider.value, ()), fallback_when_exhausted=True)
            for provider in ImageProvider
        }
        self.policies: dict[ImageProvider, RetryRotationPolicy] = {
            provider: RetryRotationPolicy(provider.value, min_attempts=1, retry_unknown_errors=False)
            for provider in ImageProvider
        }

    def set_credentials(self, provider: ImageProvider | str, credentials: Iterable[str]) -> None:
        provider = ImageProvider(provider)
        self.pools[provider].set_credentials(credentials)
        logger.info("Image provider %s now has %s key(s)", provider.value, len(self.pools[provider]))

    def pool(self, provider: ImageProvider | str) -> KeyPool:
        return self.pools[ImageProvider(provider)]

    async def generate_image(
        self,
        prompt: str,
        provider: ImageProvider | str | None = None,
        model_hint: str | None = None,
    ) -> str:
        """Generate one image and return its URL or data URI.

        Raises:
            NoCredentialsConfigured: The provider has no keys and no default credential
            ProviderExhausted: Every key was rejected or throttled
            ProviderError: Non-auth failure, failed/canceled job or malformed payload
            ImageJobTimeout: Replicate job still running after max_polls checks
        """
        selected = ImageProvider(provider) if provider else self.default_provider
        logger.info("Generating image via %s", selected.value)

        async def attempt(credential: str) -> str:
            if selected == ImageProvider.OPENAI:
                return await self._call_openai(prompt, credential)
            if selected == ImageProvider.STABILITY:
                return await self._call_stability(prompt, credential)
            if selected == ImageProvider.GEMINI:
                return await self._call_gemini(prompt, credential, model_hint)
            return await self._call_replicate(prompt, credential, model_hint or self.replicate_default_model)

        return await self.policies[selected].run(
            self.pools[selected],
            attempt,
            default_credential=self.default_credentials.get(selected.value),
        )

    async def validate_credential(self, provider: ImageProvider | str, credential: str) -> bool:
        """Status-only check with one lightweight authenticated call; no retry."""
        provider = ImageProvider(provider)
        try:
            response = await self.http.get(
                VALIDATION_ENDPOINTS[provider],
                headers=auth_headers(provider, credential.strip()),
            )
        except httpx.HTTPError as e:
            logger.debug("Credential validation for %s failed: %s", provider.value, e)
            return False
        return response.status_code == 200

    async def _call_openai(self, prompt: str, credential: str) -> str:
        response = await http.send(
            self.http,
            ImageProvider.OPENAI.value,
            "POST",
            f"{OPENAI_BASE_URL}/v1/images/generations",
            headers=auth_headers(ImageProvider.OPENAI, credential),
            json={
                "model": OPENAI_IMAGE_MODEL,
                "prompt": prompt,
                "n": 1,
                "size": "1024x1024",
                "response_format": "url",
            },
        )
        payload = OpenAIImagePayload.from_json(http.decode_json(response, "openai"))
        return payload.image_reference()

    async def _call_stability(self, prompt: str, credential: str) -> str:
        response = await http.send(
            self.http,
            ImageProvider.STABILITY.value,
            "POST",
            f"{STABILITY_BASE_URL}/v1/generation/{STABILITY_ENGINE}/text-to-image",
            headers={**auth_headers(ImageProvider.STABILITY, credential), "Accept": "application/json"},
            json={
                "text_prompts": [{"text": prompt}],
                "cfg_scale": 7,
                "height": 1024,
                "width": 1024,
                "steps": 30,
                "samples": 1,
            },
        )
        payload = StabilityImagePayload.from_json(http.decode_json(response, "stability"))
        return payload.image_reference()

    async def _call_gemini(self, prompt: str, credential: str, model_hint: str | None) -> str:
        model = model_hint or GEMINI_IMAGE_MODEL
        response = await http.send(
            self.http,
            ImageProvider.GEMINI.value,
            "POST",
            f"{GEMINI_BASE_URL}/v1beta/models/{model}:generateContent",
            headers=auth_headers(ImageProvider.GEMINI, credential),
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {
                    "responseModalities": ["IMAGE"],
                    "imageConfig": {"aspectRatio": "16:9"},
                },
            },
        )
        payload = GeminiImagePayload.from_json(http.decode_json(response, "gemini"))
        return payload.image_reference()

    async def _call_replicate(self, prompt: str, credential: str, model: str) -> str:
        provider = ImageProvider.REPLICATE.value
        headers = auth_headers(ImageProvider.REPLICATE, credential)

        # "owner/name" targets the model's latest version; anything else is a version id
        if "/" in model:
            url = f"{REPLICATE_BASE_URL}/v1/models/{model}/predictions"
            body: dict = {"input": {"prompt": prompt}}
        else:
            url = f"{REPLICATE_BASE_URL}/v1/predictions"
            body = {"version": model, "input": {"prompt": prompt}}

        response = await http.send(self.http, provider, "POST", url, headers=headers, json=body)
        prediction = ReplicatePrediction.from_json(http.decode_json(response, provider))
        logger.debug("Replicate prediction %s submitted (%s)", prediction.id, prediction.status)

        polls = 0
        while not prediction.is_terminal:
            if polls >= self.max_polls:
                raise ImageJobTimeout(provider, prediction.id, polls)
            await asyncio.sleep(self.poll_interval)
            response = await http.send(
                self.http,
                provider,
                "GET",
                f"{REPLICATE_BASE_URL}/v1/predictions/{prediction.id}",
                headers=headers,
            )
            prediction = ReplicatePrediction.from_json(http.decode_json(response, provider))
            polls += 1

        if prediction.status != "succeeded":
            reason = prediction.error or "no error detail"
            raise ProviderError(provider, f"Replicate prediction {prediction.status}: {reason}")
        return prediction.image_reference()
