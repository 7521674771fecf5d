"""Tests for deduplicate_headlines.label_topics module."""

from unittest.mock import patch

from common.errors import GenerationFailed, GenerationTimeout
from common.models import RawHeadline
from deduplicate_headlines.instructions import LABEL_TOPIC_INSTRUCTIONS
from deduplicate_headlines.label_topics import fallback_topic, label_topic


def _headline(title: str, description: str | None = None) -> RawHeadline:
    return RawHeadline("h1", title, description, "https://example.com/h1", None, "feed")


class TestFallbackTopic:
    def test_first_five_words(self) -> None:
        assert fallback_topic("Company X raises $5B in record funding round") == "Company X raises $5B in"

    def test_short_title(self) -> None:
        assert fallback_topic("  Markets   rally ") == "Markets rally"

    def test_empty_title_is_never_empty(self) -> None:
        assert fallback_topic("   ")


class TestLabelTopic:
    @patch("deduplicate_headlines.label_topics.generate_text")
    def test_returns_generated_topic(self, mock_generate) -> None:
        mock_generate.return_value = '"Company X funding"'

        topic = label_topic(_headline("Company X raises $5B", "Big round"), model="m", timeout=3)

        assert topic == "Company X funding"
        args, kwargs = mock_generate.call_args
        assert args == (LABEL_TOPIC_INSTRUCTIONS, "Company X raises $5B\n\nBig round")
        assert kwargs["model"] == "m"
        assert kwargs["timeout"] == 3

    @patch("deduplicate_headlines.label_topics.generate_text")
    def test_failure_falls_back_to_title(self, mock_generate) -> None:
        mock_generate.side_effect = GenerationFailed("service down")
        topic = label_topic(_headline("Company X raises $5B in record funding round"))
        assert topic == "Company X raises $5B in"

    @patch("deduplicate_headlines.label_topics.generate_text")
    def test_timeout_falls_back_to_title(self, mock_generate) -> None:
        mock_generate.side_effect = GenerationTimeout("slow")
        assert label_topic(_headline("Storm hits the coast")) == "Storm hits the coast"

    @patch("deduplicate_headlines.label_topics.generate_text")
    def test_blank_answer_falls_back_to_title(self, mock_generate) -> None:
        mock_generate.return_value = '""'
        assert label_topic(_headline("Storm hits the coast")) == "Storm hits the coast"
