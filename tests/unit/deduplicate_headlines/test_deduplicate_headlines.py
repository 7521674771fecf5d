"""Tests for deduplicate_headlines.deduplicate_headlines module."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from common.errors import InvalidThreshold
from common.models import RawHeadline
from compute_embeddings.embedders import HashEmbedder
from deduplicate_headlines.deduplicate_headlines import (
    apply_deduplication_groups,
    group_headlines,
    summarize_groups,
)

NOW = datetime(2024, 5, 10, 12, 0, 0, tzinfo=timezone.utc)


class KeywordEmbedder:
    """Maps each text to the axis of the first keyword it contains."""

    def __init__(self, keywords: list[str]) -> None:
        self.keywords = keywords

    def embed(self, text: str) -> list[float]:
        vector = [0.0] * (len(self.keywords) + 1)
        for i, keyword in enumerate(self.keywords):
            if keyword in text:
                vector[i] = 1.0
                return vector
        vector[-1] = 1.0
        return vector

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(text) for text in texts]


def _headline(headline_id: str, title: str, description: str | None = None) -> RawHeadline:
    return RawHeadline(
        id=headline_id,
        title=title,
        description=description,
        url=f"https://example.com/{headline_id}",
        published_at=None,
        source_id="feed",
    )


@pytest.fixture
def headlines() -> list[RawHeadline]:
    return [
        _headline("h1", "Storm hits coast", "Heavy rain expected"),
        _headline("h2", "Company X raises $5B", "Short."),
        _headline("h3", "Election results announced"),
        _headline("h4", "Company X raises $5 billion", "Company X closed a $5 billion round led by major investors."),
        _headline("h5", "Storm forces evacuations"),
        _headline("h6", "Company X funding round closes"),
    ]


@pytest.fixture
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder(["Company X", "Storm", "Election"])


class TestGroupHeadlines:
    @patch("deduplicate_headlines.deduplicate_headlines.label_topic")
    def test_partition_and_heat(self, mock_label, headlines, embedder) -> None:
        mock_label.side_effect = lambda headline, **kwargs: headline.title

        groups = group_headlines(headlines, threshold=0.75, embedder=embedder, now=NOW)

        member_ids = [[m.id for m in group.members] for group in groups]
        assert member_ids == [["h2", "h4", "h6"], ["h1", "h5"], ["h3"]]
        assert sorted(hid for ids in member_ids for hid in ids) == sorted(h.id for h in headlines)
        assert sum(group.heat_score for group in groups) == len(headlines)
        for group in groups:
            assert group.heat_score == len(group.members)
            assert any(member is group.representative for member in group.members)
            assert group.topic

    @patch("deduplicate_headlines.deduplicate_headlines.label_topic")
    def test_topic_comes_from_representative(self, mock_label, headlines, embedder) -> None:
        mock_label.side_effect = lambda headline, **kwargs: f"topic-{headline.id}"

        groups = group_headlines(headlines, embedder=embedder, now=NOW)

        assert groups[0].representative.id == "h4"
        assert groups[0].topic == "topic-h4"

    @patch("deduplicate_headlines.deduplicate_headlines.label_topic")
    def test_ties_keep_seed_order(self, mock_label, embedder) -> None:
        mock_label.return_value = "topic"
        batch = [
            _headline("h1", "Election day"),
            _headline("h2", "Storm warning"),
            _headline("h3", "Company X news"),
        ]

        groups = group_headlines(batch, embedder=embedder, now=NOW)

        assert [group.members[0].id for group in groups] == ["h1", "h2", "h3"]

    @patch("deduplicate_headlines.deduplicate_headlines.label_topic")
    def test_deterministic_with_stub_embedder(self, mock_label, headlines, embedder) -> None:
        mock_label.side_effect = lambda headline, **kwargs: headline.title

        first = group_headlines(headlines, embedder=embedder, now=NOW)
        second = group_headlines(headlines, embedder=embedder, now=NOW)

        def _shape(groups):
            return [([m.id for m in g.members], g.representative.id, g.heat_score, g.topic) for g in groups]

        assert _shape(first) == _shape(second)
        assert {g.group_id for g in first}.isdisjoint(g.group_id for g in second)

    @patch("deduplicate_headlines.deduplicate_headlines.label_topic")
    def test_exact_duplicates_merge_at_threshold_one(self, mock_label) -> None:
        mock_label.return_value = "Central bank holds rates"
        batch = [
            _headline(f"h{i}", "Central bank holds rates", "Policy makers kept the benchmark rate unchanged.")
            for i in range(1, 7)
        ]

        groups = group_headlines(batch, threshold=1.0, embedder=HashEmbedder(), now=NOW)

        assert [group.heat_score for group in groups] == [6]
        assert [m.id for m in groups[0].members] == ["h1", "h2", "h3", "h4", "h5", "h6"]

    def test_empty_batch(self, embedder) -> None:
        assert group_headlines([], embedder=embedder) == []

    def test_invalid_threshold_rejected(self, headlines, embedder) -> None:
        with pytest.raises(InvalidThreshold):
            group_headlines(headlines, threshold=1.5, embedder=embedder)
        with pytest.raises(InvalidThreshold):
            group_headlines([], threshold=0, embedder=embedder)

    @patch("deduplicate_headlines.label_topics.generate_text")
    def test_labelling_failure_uses_title_words(self, mock_generate, embedder) -> None:
        from common.errors import GenerationFailed

        mock_generate.side_effect = GenerationFailed("down")
        batch = [_headline("h1", "Storm hits the northern coast overnight again")]

        groups = group_headlines(batch, embedder=embedder, now=NOW)

        assert groups[0].topic == "Storm hits the northern coast"


class TestApplyDeduplicationGroups:
    @patch("deduplicate_headlines.deduplicate_headlines.label_topic")
    def test_one_annotation_per_member(self, mock_label, headlines, embedder) -> None:
        mock_label.return_value = "topic"
        groups = group_headlines(headlines, embedder=embedder, now=NOW)

        annotated = apply_deduplication_groups(groups)

        assert len(annotated) == len(headlines)
        by_id = {record.id: record for record in annotated}
        assert by_id["h4"].is_best_version is True
        assert by_id["h2"].is_best_version is False
        assert by_id["h2"].heat_score == 3
        assert by_id["h2"].deduplication_group_id == by_id["h4"].deduplication_group_id
        assert by_id["h3"].heat_score == 1
        assert sum(record.is_best_version for record in annotated) == len(groups)


class TestSummarizeGroups:
    @patch("deduplicate_headlines.deduplicate_headlines.label_topic")
    def test_stats(self, mock_label, headlines, embedder) -> None:
        mock_label.return_value = "topic"
        groups = group_headlines(headlines, embedder=embedder, now=NOW)

        stats = summarize_groups(groups, total_headlines=len(headlines))

        assert stats.total_headlines == 6
        assert stats.unique_stories == 3
        assert stats.deduplication_groups == 3
