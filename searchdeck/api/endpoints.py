import logging
from dataclasses import asdict
from typing import Any, Literal

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from searchdeck import __version__
from searchdeck.api.errors import ErrorResponseBuilder
from searchdeck.api.models import (
    CredentialUpdate,
    CredentialValidationRequest,
    CredentialValidationResponse,
    ImageRequest,
    ImageResponse,
    SearchRequest,
)
from searchdeck.api.services.search_service import SearchService
from searchdeck.clients.registry import ProviderClients
from searchdeck.core.key_pool import KeyPool
from searchdeck.core.logging import fingerprint
from searchdeck.models.results import MediaItem, MediaType

logger = logging.getLogger(__name__)

router = APIRouter()


def get_clients(request: Request) -> ProviderClients:
    return request.app.state.clients


def media_item_dict(item: MediaItem) -> dict[str, Any]:
    return {**asdict(item), "media_type": item.media_type.value}


def pool_summary(pool: KeyPool) -> list[dict[str, str]]:
    return [
        {"fingerprint": status.fingerprint, "status": status.status.value}
        for status in pool.snapshot()
    ]


@router.get("/health")
async def health_check(clients: ProviderClients = Depends(get_clients)) -> dict[str, Any]:
    return {
        "status": "healthy",
        "version": __version__,
        "answer_backend": clients.answer.provider,
        "image_provider": clients.image.default_provider.value,
        "pools": {
            name: {"size": len(pool), "healthy": pool.healthy_count}
            for name, pool in clients.pools().items()
        },
    }


@router.post("/v1/search")
async def search(
    body: SearchRequest, clients: ProviderClients = Depends(get_clients)
) -> dict[str, Any]:
    result = await SearchService(clients).search(
        body.query,
        focus=body.focus,
        model_id=body.model_id,
        history=tuple(turn.to_domain() for turn in body.history),
        attachment=body.attachment.to_domain() if body.attachment else None,
    )
    return result.to_dict()


@router.post("/v1/images", response_model=ImageResponse)
async def generate_image(
    body: ImageRequest, clients: ProviderClients = Depends(get_clients)
) -> ImageResponse:
    provider = body.provider or clients.image.default_provider
    uri = await clients.image.generate_image(body.prompt, provider, body.model_hint)
    return ImageResponse(provider=provider, image_uri=uri)


@router.get("/v1/media")
async def fetch_media(
    q: str = Query("trending", description="Search query; generic queries get a freshness term"),
    media_type: MediaType = Query(MediaType.VIDEO, alias="type"),
    max_results: int | None = Query(None, ge=1, le=50),
    clients: ProviderClients = Depends(get_clients),
) -> dict[str, Any]:
    items = await clients.media.fetch_media(q, media_type, max_results)
    return {"type": media_type.value, "items": [media_item_dict(item) for item in items]}


@router.get("/v1/discover")
async def discover(
    q: str = Query("trending"),
    max_results: int | None = Query(None, ge=1, le=50),
    clients: ProviderClients = Depends(get_clients),
) -> dict[str, Any]:
    categories = await clients.media.discover(q, max_results)
    return {
        category.value: [media_item_dict(item) for item in items]
        for category, items in categories.items()
    }


@router.get("/v1/trends")
async def trends(clients: ProviderClients = Depends(get_clients)) -> dict[str, Any]:
    return {"trends": [asdict(trend) for trend in await clients.answer.discover_trends()]}


@router.get("/v1/credentials")
async def list_credentials(clients: ProviderClients = Depends(get_clients)) -> dict[str, Any]:
    return {name: pool_summary(pool) for name, pool in clients.pools().items()}


@router.put("/v1/credentials/{family}", response_model=None)
async def replace_credentials(
    family: Literal["answer", "image", "media"],
    body: CredentialUpdate,
    clients: ProviderClients = Depends(get_clients),
) -> dict[str, Any] | JSONResponse:
    if family == "image" and body.provider is None:
        return ErrorResponseBuilder.invalid_parameter("provider", "required for image credentials")

    clients.set_credentials(family, body.keys, body.provider)
    if family == "image":
        pool = clients.image.pool(body.provider)
        name = f"image.{body.provider.value}"
    else:
        pool = clients.pools()[family]
        name = family
    logger.info("Credentials replaced for %s (%s key(s))", name, len(pool))
    return {"pool": name, "credentials": pool_summary(pool)}


@router.post("/v1/credentials/validate", response_model=None)
async def validate_credential(
    body: CredentialValidationRequest, clients: ProviderClients = Depends(get_clients)
) -> CredentialValidationResponse | JSONResponse:
    if body.family == "answer":
        valid = await clients.answer.validate_credential(body.credential)
    elif body.family == "media":
        valid = await clients.media.validate_credential(body.credential)
    else:
        if body.provider is None:
            return ErrorResponseBuilder.invalid_parameter(
                "provider", "required for image credentials"
            )
        valid = await clients.image.validate_credential(body.provider, body.credential)

    return CredentialValidationResponse(
        family=body.family,
        provider=body.provider.value if body.provider else None,
        fingerprint=fingerprint(body.credential.strip()),
        valid=valid,
    )
