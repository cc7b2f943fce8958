"""Typed payload decoding at the HTTP boundary."""

import pytest

from searchdeck.core.exceptions import MalformedResponse
from searchdeck.models.payloads import (
    AnswerPayload,
    OpenAIImagePayload,
    ReplicatePrediction,
    StabilityImagePayload,
    YoutubeSearchPayload,
    YoutubeVideo,
    trends_from_json_text,
)


@pytest.mark.unit
class TestAnswerPayload:
    def test_gemini_text_and_citations(self, gemini_answer_response):
        payload = AnswerPayload.from_gemini(gemini_answer_response)
        assert payload.text.startswith("Rust 1.80")
        assert len(payload.citations) == 3
        assert payload.citations[1].title is None

    def test_gemini_without_parts_has_no_text(self):
        assert AnswerPayload.from_gemini({"candidates": [{"content": {}}]}).text is None

    def test_perplexity_prefers_search_results(self, perplexity_answer_response):
        payload = AnswerPayload.from_perplexity(perplexity_answer_response)
        assert payload.citations[0].title == "National Ignition Facility achieves fusion ignition"

    def test_non_object_is_malformed(self):
        with pytest.raises(MalformedResponse):
            AnswerPayload.from_perplexity(["not", "an", "object"])

    @pytest.mark.parametrize("grounding", [["x"], "chunks", 7, {"groundingChunks": "x"}])
    def test_gemini_odd_grounding_keeps_text(self, grounding):
        data = {"candidates": [{"content": {"parts": [{"text": "hi"}]}, "groundingMetadata": grounding}]}
        payload = AnswerPayload.from_gemini(data)
        assert payload.text == "hi"
        assert payload.citations == ()

    def test_gemini_non_list_parts_has_no_text(self):
        assert AnswerPayload.from_gemini({"candidates": [{"content": {"parts": 5}}]}).text is None

    @pytest.mark.parametrize("field", ["search_results", "citations"])
    @pytest.mark.parametrize("value", [7, True, {"url": "https://example.com"}])
    def test_perplexity_odd_citation_fields_keep_text(self, field, value):
        data = {"choices": [{"message": {"content": "hi"}}], field: value}
        payload = AnswerPayload.from_perplexity(data)
        assert payload.text == "hi"
        assert payload.citations == ()


@pytest.mark.unit
class TestImagePayloads:
    def test_openai_b64_becomes_data_uri(self):
        payload = OpenAIImagePayload.from_json({"data": [{"b64_json": "QUJD"}]})
        assert payload.image_reference() == "data:image/png;base64,QUJD"

    def test_openai_empty_data_is_malformed(self):
        with pytest.raises(MalformedResponse):
            OpenAIImagePayload.from_json({"data": []})

    def test_stability_missing_base64_is_malformed(self):
        with pytest.raises(MalformedResponse):
            StabilityImagePayload.from_json({"artifacts": [{"seed": 1}]})

    def test_replicate_terminal_states(self, replicate_prediction_factory):
        assert not ReplicatePrediction.from_json(replicate_prediction_factory("processing")).is_terminal
        for status in ("succeeded", "failed", "canceled"):
            assert ReplicatePrediction.from_json(replicate_prediction_factory(status)).is_terminal

    def test_replicate_success_without_output_is_malformed(self, replicate_prediction_factory):
        prediction = ReplicatePrediction.from_json(replicate_prediction_factory("succeeded"))
        with pytest.raises(MalformedResponse):
            prediction.image_reference()


@pytest.mark.unit
class TestMediaPayloads:
    def test_search_keeps_only_video_ids(self, youtube_search_response):
        assert YoutubeSearchPayload.from_json(youtube_search_response).video_ids == ("vid1", "vid2")

    def test_search_without_items_is_empty(self):
        assert YoutubeSearchPayload.from_json({}).video_ids == ()

    def test_video_without_snippet_is_malformed(self):
        with pytest.raises(MalformedResponse):
            YoutubeVideo.from_json({"id": "x"})

    def test_non_object_thumbnails_are_malformed(self):
        with pytest.raises(MalformedResponse):
            YoutubeVideo.from_json({"id": "v1", "snippet": {"title": "t", "thumbnails": ["x"]}})

    def test_missing_thumbnails_are_empty(self):
        assert YoutubeVideo.from_json({"id": "v1", "snippet": {"title": "t"}}).thumbnails == {}


@pytest.mark.unit
class TestTrends:
    def test_decodes_titles_and_skips_untitled(self):
        trends = trends_from_json_text('[{"title": "A", "description": "a"}, {"description": "no title"}]', "gemini")
        assert [(t.title, t.description) for t in trends] == [("A", "a")]

    def test_invalid_json_is_malformed(self):
        with pytest.raises(MalformedResponse):
            trends_from_json_text("not json", "gemini")
