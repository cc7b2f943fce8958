"""Answer engine client tests with RESPX-mocked Gemini and Perplexity backends."""

import json

import httpx
import pytest

from searchdeck.clients.answer_backends import GeminiBackend
from searchdeck.clients.answer_engine import (
    EMPTY_ANSWER_MESSAGE,
    AnswerEngineClient,
    build_system_instruction,
)
from searchdeck.clients.image_synthesis import ImageSynthesisClient
from searchdeck.core.exceptions import NoCredentialsConfigured, ProviderExhausted
from searchdeck.core.normalizer import FOLLOW_UP_POOL, IMAGE_FOLLOW_UPS
from searchdeck.models.results import Attachment, ChatTurn, ProviderRequest, SearchFocus

GEMINI_HOST = "generativelanguage.googleapis.com"
PERPLEXITY_HOST = "api.perplexity.ai"


class RecordingGeminiBackend(GeminiBackend):
    def __init__(self):
        self.requests = []

    def answer_request(self, credential, request, instruction):
        self.requests.append(request)
        return super().answer_request(credential, request, instruction)


@pytest.mark.unit
class TestSystemInstruction:
    def test_embeds_focus_and_citation_directive(self):
        instruction = build_system_instruction(SearchFocus.ACADEMIC, "sonar-pro")
        assert "Academic" in instruction
        assert "[1]" in instruction

    def test_attachment_is_truncated_to_limit(self):
        attachment = Attachment(name="notes.txt", content="x" * 50)
        instruction = build_system_instruction(SearchFocus.ALL, "m", attachment, attachment_limit=10)
        assert "notes.txt" in instruction
        assert "x" * 10 in instruction
        assert "x" * 11 not in instruction


@pytest.mark.unit
@pytest.mark.asyncio
class TestGeminiBackend:
    async def test_answer_with_deduplicated_sources(self, mock_router, http_client, rng, gemini_answer_response):
        route = mock_router.post(host=GEMINI_HOST, path__regex=r".*:generateContent$").mock(
            return_value=httpx.Response(200, json=gemini_answer_response)
        )
        client = AnswerEngineClient("gemini", keys=["g1"], rng=rng, http_client=http_client)

        result = await client.search_and_respond("what is new in rust 1.80", SearchFocus.ALL)

        assert result.content.startswith("Rust 1.80 stabilized LazyCell")
        assert [source.uri for source in result.sources] == [
            "https://blog.rust-lang.org/2024/07/25/Rust-1.80.0.html",
            "https://www.infoq.com/news/rust-180/",
        ]
        assert result.sources[0].title == "Announcing Rust 1.80.0"
        assert result.sources[1].title == "infoq.com"
        assert len(result.related) == 3
        assert set(result.related) <= set(FOLLOW_UP_POOL)
        assert result.intent == "text"

        request = route.calls.last.request
        assert request.headers["x-goog-api-key"] == "g1"
        assert request.url.path.endswith("/models/gemini-3-pro-preview:generateContent")
        body = json.loads(request.content)
        assert body["tools"] == [{"google_search": {}}]

    async def test_history_maps_assistant_to_model_role(self, mock_router, http_client, gemini_answer_response):
        route = mock_router.post(host=GEMINI_HOST).mock(
            return_value=httpx.Response(200, json=gemini_answer_response)
        )
        client = AnswerEngineClient("gemini", keys=["g1"], http_client=http_client)
        history = (ChatTurn("user", "hi"), ChatTurn("assistant", "hello"))

        await client.search_and_respond("and then?", history=history, model_id="gemini-2.5-pro")

        request = route.calls.last.request
        body = json.loads(request.content)
        assert [turn["role"] for turn in body["contents"]] == ["user", "model", "user"]
        assert body["contents"][-1]["parts"][0]["text"] == "and then?"
        assert "gemini-2.5-pro:generateContent" in request.url.path

    async def test_missing_text_degrades_to_message(self, mock_router, http_client):
        mock_router.post(host=GEMINI_HOST).mock(return_value=httpx.Response(200, json={"candidates": []}))
        client = AnswerEngineClient("gemini", keys=["g1"], http_client=http_client)

        result = await client.search_and_respond("anything")

        assert result.content == EMPTY_ANSWER_MESSAGE
        assert result.sources == []

    async def test_non_json_body_degrades_to_message(self, mock_router, http_client):
        mock_router.post(host=GEMINI_HOST).mock(return_value=httpx.Response(200, text="<html>oops</html>"))
        client = AnswerEngineClient("gemini", keys=["g1"], http_client=http_client)

        result = await client.search_and_respond("anything")

        assert result.content == EMPTY_ANSWER_MESSAGE

    async def test_odd_grounding_metadata_keeps_answer_in_one_call(self, mock_router, http_client):
        route = mock_router.post(host=GEMINI_HOST).mock(
            return_value=httpx.Response(
                200,
                json={"candidates": [{"content": {"parts": [{"text": "hi"}]}, "groundingMetadata": ["x"]}]},
            )
        )
        client = AnswerEngineClient("gemini", keys=["k1"], http_client=http_client)

        result = await client.search_and_respond("anything")

        assert result.content == "hi"
        assert result.sources == []
        assert route.call_count == 1

    async def test_backend_receives_resolved_request(self, mock_router, http_client, gemini_answer_response):
        mock_router.post(host=GEMINI_HOST).mock(return_value=httpx.Response(200, json=gemini_answer_response))
        backend = RecordingGeminiBackend()
        client = AnswerEngineClient(backend, keys=["g1"], http_client=http_client)
        attachment = Attachment(name="notes.txt", content="context")

        await client.search_and_respond("rust news", SearchFocus.ACADEMIC, attachment=attachment)

        (request,) = backend.requests
        assert request == ProviderRequest(
            query="rust news",
            focus=SearchFocus.ACADEMIC,
            model_id="gemini-3-pro-preview",
            history=(),
            attachment=attachment,
        )


@pytest.mark.unit
@pytest.mark.asyncio
class TestPerplexityBackend:
    async def test_rotates_past_rate_limited_key(self, mock_router, http_client, perplexity_answer_response):
        route = mock_router.post(host=PERPLEXITY_HOST, path="/chat/completions").mock(
            side_effect=[
                httpx.Response(429, json={"error": {"message": "Too many requests"}}),
                httpx.Response(200, json=perplexity_answer_response),
            ]
        )
        client = AnswerEngineClient("perplexity", keys=["k1", "k2"], http_client=http_client)

        result = await client.search_and_respond("who achieved fusion ignition")

        assert route.call_count == 2
        assert [call.request.headers["authorization"] for call in route.calls] == [
            "Bearer k1",
            "Bearer k2",
        ]
        assert not client.pool.is_healthy("k1")
        assert client.pool.is_healthy("k2")
        assert result.sources[0].title == "National Ignition Facility achieves fusion ignition"

    async def test_falls_back_to_url_citations(self, mock_router, http_client):
        payload = {
            "choices": [{"message": {"content": "Answer [1]"}}],
            "citations": ["https://www.example.org/a", "https://www.example.org/a"],
        }
        mock_router.post(host=PERPLEXITY_HOST).mock(return_value=httpx.Response(200, json=payload))
        client = AnswerEngineClient("perplexity", keys=["k1"], http_client=http_client)

        result = await client.search_and_respond("q")

        assert [(s.title, s.uri) for s in result.sources] == [("example.org", "https://www.example.org/a")]

    async def test_messages_include_system_history_and_query(self, mock_router, http_client, perplexity_answer_response):
        route = mock_router.post(host=PERPLEXITY_HOST).mock(
            return_value=httpx.Response(200, json=perplexity_answer_response)
        )
        client = AnswerEngineClient("perplexity", keys=["k1"], http_client=http_client)

        await client.search_and_respond("new", SearchFocus.REDDIT, history=(ChatTurn("user", "old"),))

        body = json.loads(route.calls.last.request.content)
        assert body["model"] == "sonar-pro"
        assert [m["role"] for m in body["messages"]] == ["system", "user", "user"]
        assert "Reddit" in body["messages"][0]["content"]

    async def test_sources_capped_at_five(self, mock_router, http_client):
        payload = {
            "choices": [{"message": {"content": "Many sources"}}],
            "citations": [f"https://site{i}.example.com/" for i in range(8)],
        }
        mock_router.post(host=PERPLEXITY_HOST).mock(return_value=httpx.Response(200, json=payload))
        client = AnswerEngineClient("perplexity", keys=["k1"], http_client=http_client)

        result = await client.search_and_respond("q")

        assert len(result.sources) == 5


@pytest.mark.unit
@pytest.mark.asyncio
class TestAnswerEngineFailures:
    async def test_no_keys_and_no_default_raises_before_network(self, mock_router, http_client):
        route = mock_router.post(host=GEMINI_HOST)
        client = AnswerEngineClient("gemini", http_client=http_client)

        with pytest.raises(NoCredentialsConfigured):
            await client.search_and_respond("q")

        assert route.call_count == 0

    async def test_default_credential_used_when_pool_empty(self, mock_router, http_client, gemini_answer_response):
        route = mock_router.post(host=GEMINI_HOST).mock(
            return_value=httpx.Response(200, json=gemini_answer_response)
        )
        client = AnswerEngineClient("gemini", default_credential="env-key", http_client=http_client)

        await client.search_and_respond("q")

        assert route.calls.last.request.headers["x-goog-api-key"] == "env-key"

    async def test_server_errors_retry_until_exhausted(self, mock_router, http_client):
        route = mock_router.post(host=PERPLEXITY_HOST).mock(
            return_value=httpx.Response(500, json={"error": {"message": "internal"}})
        )
        client = AnswerEngineClient("perplexity", keys=["k1"], http_client=http_client)

        with pytest.raises(ProviderExhausted) as exc_info:
            await client.search_and_respond("q")

        assert exc_info.value.attempts == 3
        assert route.call_count == 3

    async def test_transport_errors_are_retried(self, mock_router, http_client, perplexity_answer_response):
        mock_router.post(host=PERPLEXITY_HOST).mock(
            side_effect=[httpx.ConnectError("boom"), httpx.Response(200, json=perplexity_answer_response)]
        )
        client = AnswerEngineClient("perplexity", keys=["k1"], http_client=http_client)

        result = await client.search_and_respond("q")

        assert "Fusion ignition" in result.content


@pytest.mark.unit
@pytest.mark.asyncio
class TestImageRouting:
    async def test_draw_query_delegates_to_image_client(self, mock_router, http_client, openai_image_response):
        answer_route = mock_router.post(host=GEMINI_HOST)
        mock_router.post(host="api.openai.com", path="/v1/images/generations").mock(
            return_value=httpx.Response(200, json=openai_image_response)
        )
        image = ImageSynthesisClient(keys={"openai": ["o1"]}, http_client=http_client)
        client = AnswerEngineClient("gemini", keys=["g1"], image_client=image, http_client=http_client)

        result = await client.search_and_respond("draw a lighthouse at dusk")

        assert result.intent == "image"
        assert result.image_uri == "https://images.example.com/lighthouse.png"
        assert result.content.startswith("![Generated Image](https://images.example.com/lighthouse.png)")
        assert result.sources == []
        assert result.related == IMAGE_FOLLOW_UPS
        assert answer_route.call_count == 0

    async def test_canvas_focus_routes_to_image(self, mock_router, http_client, openai_image_response):
        mock_router.post(host="api.openai.com").mock(return_value=httpx.Response(200, json=openai_image_response))
        image = ImageSynthesisClient(keys={"openai": ["o1"]}, http_client=http_client)
        client = AnswerEngineClient("gemini", image_client=image, http_client=http_client)

        result = await client.search_and_respond("a quiet harbor", SearchFocus.CANVAS)

        assert result.intent == "image"


@pytest.mark.unit
@pytest.mark.asyncio
class TestTrendsAndValidation:
    async def test_discover_trends(self, mock_router, http_client, gemini_trends_response):
        route = mock_router.post(host=GEMINI_HOST).mock(
            return_value=httpx.Response(200, json=gemini_trends_response)
        )
        client = AnswerEngineClient("gemini", keys=["g1"], http_client=http_client)

        trends = await client.discover_trends()

        assert [trend.title for trend in trends] == ["Quantum error correction", "Small language models"]
        body = json.loads(route.calls.last.request.content)
        assert body["generationConfig"]["responseMimeType"] == "application/json"

    async def test_discover_trends_failure_yields_empty_list(self, mock_router, http_client):
        mock_router.post(host=GEMINI_HOST).mock(return_value=httpx.Response(401, json={}))
        client = AnswerEngineClient("gemini", keys=["g1"], http_client=http_client)

        assert await client.discover_trends() == []

    async def test_discover_trends_without_keys_yields_empty_list(self, http_client):
        assert await AnswerEngineClient("gemini", http_client=http_client).discover_trends() == []

    async def test_validate_credential_is_status_only(self, mock_router, http_client):
        route = mock_router.post(host=PERPLEXITY_HOST).mock(
            side_effect=[httpx.Response(200, json={}), httpx.Response(401, json={})]
        )
        client = AnswerEngineClient("perplexity", http_client=http_client)

        assert await client.validate_credential("good") is True
        assert await client.validate_credential("bad") is False
        assert route.call_count == 2

    async def test_validate_credential_network_error_is_false(self, mock_router, http_client):
        mock_router.get(host=GEMINI_HOST).mock(side_effect=httpx.ConnectTimeout("slow"))
        client = AnswerEngineClient("gemini", http_client=http_client)

        assert await client.validate_credential("k") is False

    async def test_set_credentials_replaces_pool(self, http_client):
        client = AnswerEngineClient("gemini", keys=["a"], http_client=http_client)
        client.pool.mark_unhealthy("a")
        client.set_credentials(["a", "b"])
        assert client.pool.credentials == ("a", "b")
        assert client.pool.healthy_count == 2


@pytest.mark.unit
def test_unknown_backend_is_rejected():
    with pytest.raises(ValueError, match="Unknown answer engine backend"):
        AnswerEngineClient("bing")
