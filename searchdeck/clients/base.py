"""Shared plumbing for the provider clients."""

import logging

import httpx

logger = logging.getLogger(__name__)


class HttpClientOwner:
    """Holds an ``httpx.AsyncClient`` that is either injected or owned.

    An injected client belongs to the composition root and is left open by
    ``aclose()``; a client created here is closed with it.
    """

    def __init__(self, http_client: httpx.AsyncClient | None = None, timeout: float = 90.0) -> None:
        self._owns_client = http_client is None
        self.http = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()
