"""Search service: answer-engine results enriched with related media.

Design principles:
- Dependency Injection: clients are passed via constructor
- Testability: no FastAPI types, usable from the CLI as well
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from searchdeck.clients.registry import ProviderClients
from searchdeck.core.intent import strip_video_terms, wants_video
from searchdeck.models.results import (
    Attachment,
    ChatTurn,
    MediaType,
    ProviderResult,
    SearchFocus,
)

logger = logging.getLogger(__name__)

FALLBACK_MEDIA_QUERY = "latest trends"


@dataclass(frozen=True, slots=True)
class SearchService:
    """Runs the answer engine and attaches short-form media for video-oriented queries."""

    clients: ProviderClients
    max_media_items: int = 6

    async def search(
        self,
        query: str,
        focus: SearchFocus = SearchFocus.ALL,
        model_id: str | None = None,
        history: Sequence[ChatTurn] = (),
        attachment: Attachment | None = None,
    ) -> ProviderResult:
        result = await self.clients.answer.search_and_respond(
            query, focus, model_id, history, attachment
        )
        if result.intent != "text" or not self._wants_media(query, focus):
            return result

        media_query = strip_video_terms(query) or FALLBACK_MEDIA_QUERY
        result.media = await self.clients.media.fetch_media(
            media_query, MediaType.SHORT, self.max_media_items
        )
        logger.debug("Attached %s media item(s) for %r", len(result.media), media_query)
        return result

    def _wants_media(self, query: str, focus: SearchFocus) -> bool:
        if len(self.clients.media.pool) == 0:
            return False
        return focus == SearchFocus.YOUTUBE or wants_video(query)
