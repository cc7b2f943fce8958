import random

import pytest

from searchdeck.core.normalizer import (
    FOLLOW_UP_POOL,
    follow_up_suggestions,
    hostname_title,
    image_markdown,
    normalize_media_items,
    normalize_sources,
)
from searchdeck.models.payloads import Citation, YoutubeVideo
from searchdeck.models.results import MediaType, Source


@pytest.mark.unit
class TestNormalizeSources:
    def test_keeps_citation_order_and_drops_duplicate_uris(self):
        citations = [
            Citation("https://b.example.com/x", "B"),
            Citation("https://a.example.com/y", "A"),
            Citation("https://b.example.com/x", "B again"),
        ]
        assert normalize_sources(citations) == [
            Source("B", "https://b.example.com/x"),
            Source("A", "https://a.example.com/y"),
        ]

    def test_caps_at_limit(self):
        citations = [Citation(f"https://s{i}.example.com") for i in range(9)]
        assert len(normalize_sources(citations)) == 5
        assert len(normalize_sources(citations, limit=2)) == 2

    def test_title_falls_back_to_hostname(self):
        [source] = normalize_sources([Citation("https://www.nature.com/articles/1")])
        assert source.title == "nature.com"

    def test_blank_uris_are_skipped(self):
        assert normalize_sources([Citation("  ")]) == []

    def test_hostname_title_of_unparseable_uri_is_the_uri(self):
        assert hostname_title("not a url") == "not a url"


@pytest.mark.unit
class TestNormalizeMedia:
    def test_thumbnail_preference(self):
        videos = [
            YoutubeVideo("a", "A", "Chan", {"default": "d", "medium": "m", "high": "h"}),
            YoutubeVideo("b", "B", "Chan", {"default": "d", "medium": "m"}),
            YoutubeVideo("c", "C", "Chan", {"default": "d"}),
            YoutubeVideo("d", "D", "Chan", {}),
        ]
        items = normalize_media_items(videos, MediaType.MUSIC)
        assert [item.thumbnail_uri for item in items] == ["h", "m", "d", ""]
        assert all(item.media_type == MediaType.MUSIC for item in items)


@pytest.mark.unit
class TestFollowUps:
    def test_three_distinct_suggestions_from_static_pool(self):
        suggestions = follow_up_suggestions(random.Random(7))
        assert len(suggestions) == 3
        assert len(set(suggestions)) == 3
        assert set(suggestions) <= set(FOLLOW_UP_POOL)

    def test_seeded_rng_is_deterministic(self):
        assert follow_up_suggestions(random.Random(3)) == follow_up_suggestions(random.Random(3))

    def test_image_markdown(self):
        assert image_markdown("https://x/y.png").startswith("![Generated Image](https://x/y.png)")
