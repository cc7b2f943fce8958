"""Video, music and short-form discovery over the YouTube Data API.

Media results decorate answers; they are never essential. Every failure
(empty pool, exhausted keys, provider errors, malformed payloads) is logged
and turned into an empty list.
"""

import asyncio
import logging
import random
from collections.abc import Iterable

import httpx

from searchdeck.clients.base import HttpClientOwner
from searchdeck.core import http
from searchdeck.core.exceptions import ProviderClientError
from searchdeck.core.key_pool import KeyPool
from searchdeck.core.normalizer import normalize_media_items
from searchdeck.core.retry import RetryRotationPolicy
from searchdeck.models.payloads import YoutubeSearchPayload, YoutubeVideo
from searchdeck.models.results import MediaItem, MediaType

logger = logging.getLogger(__name__)

PROVIDER = "youtube"
YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3"
MUSIC_CATEGORY_ID = "10"
MAX_SEARCH_RESULTS = 50

FRESHNESS_TERMS = ("new", "latest", "today", "this week", "viral", "popular now", "2025")
GENERIC_QUERIES = frozenset({"", "trending", "latest", "popular", "latest trends", "trends"})


class MediaDiscoveryClient(HttpClientOwner):
    """Two-stage media search with key rotation and cross-call deduplication.

    Ids returned by earlier calls on this instance are filtered from later
    results, so repeated "load more" calls surface new items. The remembered
    set is cleared by set_credentials().
    """

    def __init__(
        self,
        keys: Iterable[str] = (),
        region_code: str = "US",
        relevance_language: str = "en",
        max_results: int = 15,
        rng: random.Random | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 90.0,
    ) -> None:
        super().__init__(http_client, timeout)
        self.region_code = region_code
        self.relevance_language = relevance_language
        self.max_results = max_results
        self.rng = rng or random.Random()
        self.pool = KeyPool(PROVIDER, keys, fallback_when_exhausted=False)
        self.policy = RetryRotationPolicy(PROVIDER, min_attempts=0, retry_unknown_errors=False)
        self._seen_ids: set[str] = set()

    def set_credentials(self, credentials: Iterable[str]) -> None:
        self.pool.set_credentials(credentials)
        self._seen_ids.clear()
        logger.info("Media discovery now has %s key(s)", len(self.pool))

    @property
    def seen_ids(self) -> frozenset[str]:
        return frozenset(self._seen_ids)

    def augment_query(self, query: str, media_type: MediaType) -> tuple[str, dict[str, str]]:
        """Build the search query text and the extra search parameters for a category."""
        base = query.strip()
        if base.lower() in GENERIC_QUERIES:
            base = f"{base or 'trending'} {self.rng.choice(FRESHNESS_TERMS)}"

        if media_type == MediaType.MUSIC:
            return f"{base} official audio -vlog -reaction", {"videoCategoryId": MUSIC_CATEGORY_ID}
        if media_type == MediaType.SHORT:
            return f"{base} #shorts", {"videoDuration": "short"}
        return f"{base} -shorts", {}

    async def fetch_media(
        self,
        query: str,
        media_type: MediaType | str = MediaType.VIDEO,
        max_results: int | None = None,
    ) -> list[MediaItem]:
        """Search for media and return up to ``max_results`` unseen items.

        Never raises provider errors; any failure yields an empty list.
        """
        media_type = MediaType(media_type)
        limit = self.max_results if max_results is None else max_results
        if limit <= 0:
            return []
        search_query, extra_params = self.augment_query(query, media_type)

        async def attempt(credential: str) -> list[YoutubeVideo]:
            return await self._search_and_describe(credential, search_query, extra_params, limit)

        try:
            videos = await self.policy.run(self.pool, attempt)
        except ProviderClientError as e:
            logger.warning("Media discovery for %r returned nothing: %s", query, e)
            return []

        self._seen_ids.update(video.id for video in videos)
        return normalize_media_items(videos, media_type)

    async def get_shorts(self, query: str = "trending", max_results: int | None = None) -> list[MediaItem]:
        return await self.fetch_media(query, MediaType.SHORT, max_results)

    async def get_music(self, query: str = "trending", max_results: int | None = None) -> list[MediaItem]:
        return await self.fetch_media(query, MediaType.MUSIC, max_results)

    async def get_videos(self, query: str = "trending", max_results: int | None = None) -> list[MediaItem]:
        return await self.fetch_media(query, MediaType.VIDEO, max_results)

    async def discover(
        self, query: str = "trending", max_results: int | None = None
    ) -> dict[MediaType, list[MediaItem]]:
        """Fetch every category concurrently; a failed category becomes an empty list."""
        categories = list(MediaType)
        results = await asyncio.gather(
            *(self.fetch_media(query, category, max_results) for category in categories),
            return_exceptions=True,
        )

        discovered: dict[MediaType, list[MediaItem]] = {}
        for category, result in zip(categories, results):
            if isinstance(result, BaseException):
                logger.error("Media discovery for %s failed: %s", category.value, result)
                discovered[category] = []
            else:
                discovered[category] = result
        return discovered

    async def validate_credential(self, credential: str) -> bool:
        try:
            response = await self.http.get(
                f"{YOUTUBE_API_URL}/videos",
                params={
                    "part": "id",
                    "chart": "mostPopular",
                    "maxResults": "1",
                    "key": credential.strip(),
                },
            )
        except httpx.HTTPError as e:
            logger.debug("YouTube credential validation failed: %s", e)
            return False
        return response.status_code == 200

    async def _search_and_describe(
        self,
        credential: str,
        search_query: str,
        extra_params: dict[str, str],
        limit: int,
    ) -> list[YoutubeVideo]:
        response = await http.send(
            self.http,
            PROVIDER,
            "GET",
            f"{YOUTUBE_API_URL}/search",
            params={
                "part": "id",
                "type": "video",
                "q": search_query,
                "maxResults": str(min(limit * 2, MAX_SEARCH_RESULTS)),
                "regionCode": self.region_code,
                "relevanceLanguage": self.relevance_language,
                "key": credential,
                **extra_params,
            },
        )
        search = YoutubeSearchPayload.from_json(http.decode_json(response, PROVIDER))
        fresh_ids = [video_id for video_id in search.video_ids if video_id not in self._seen_ids][:limit]
        if not fresh_ids:
            return []

        response = await http.send(
            self.http,
            PROVIDER,
            "GET",
            f"{YOUTUBE_API_URL}/videos",
            params={"part": "snippet", "id": ",".join(fresh_ids), "key": credential},
        )
        videos = YoutubeVideo.list_from_json(http.decode_json(response, PROVIDER))

        # The details endpoint does not promise search order
        order = {video_id: index for index, video_id in enumerate(fresh_ids)}
        return sorted(
            (video for video in videos if video.id in order),
            key=lambda video: order[video.id],
        )
