import pytest

from searchdeck.core.intent import (
    ImageIntent,
    TextIntent,
    classify_intent,
    strip_video_terms,
    wants_video,
)
from searchdeck.models.results import SearchFocus


@pytest.mark.unit
class TestClassifyIntent:
    @pytest.mark.parametrize(
        "query",
        [
            "draw a cat wearing a hat",
            "generate an image of a cat",
            "Generate image of mountains",
            "create an image of a red bicycle",
            "make a picture of the moon",
            "show me a picture of a lighthouse",
        ],
    )
    def test_image_phrases(self, query):
        assert classify_intent(query) == ImageIntent(prompt=query)

    @pytest.mark.parametrize(
        "query",
        [
            "what is the capital of France",
            "drawbacks of microservices",
            "how do image codecs work",
        ],
    )
    def test_text_queries(self, query):
        assert isinstance(classify_intent(query), TextIntent)

    def test_canvas_focus_is_always_image(self):
        assert isinstance(classify_intent("a calm lake", SearchFocus.CANVAS), ImageIntent)

    def test_prompt_is_trimmed(self):
        assert classify_intent("  draw a fox  ") == ImageIntent(prompt="draw a fox")


@pytest.mark.unit
class TestVideoIntent:
    @pytest.mark.parametrize("query", ["best pasta video", "how to tie a tie", "watch spacex launch"])
    def test_video_oriented(self, query):
        assert wants_video(query)

    def test_plain_question_is_not_video_oriented(self):
        assert not wants_video("explain monads")

    def test_strip_video_terms(self):
        assert strip_video_terms("show me videos of pasta recipes") == "of pasta recipes"
        assert strip_video_terms("youtube shorts") == ""
