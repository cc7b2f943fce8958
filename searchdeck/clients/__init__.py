"""Provider clients and the composition root that wires them together."""

from searchdeck.clients.answer_engine import AnswerEngineClient
from searchdeck.clients.image_synthesis import ImageSynthesisClient
from searchdeck.clients.media_discovery import MediaDiscoveryClient
from searchdeck.clients.registry import ProviderClients, build_provider_clients

__all__ = [
    "AnswerEngineClient",
    "ImageSynthesisClient",
    "MediaDiscoveryClient",
    "ProviderClients",
    "build_provider_clients",
]
