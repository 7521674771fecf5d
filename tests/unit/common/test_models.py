"""Tests for common.models module."""

import pytest

from common.models import CompiledItem, RawHeadline, format_headline_lines


class TestCompiledItem:
    def test_defaults(self) -> None:
        item = CompiledItem(id="i1", topic="T", hook="H", summary="S", source_headline_ids=["h1"])
        assert item.heat_score == 1
        assert item.is_selected is False

    def test_empty_provenance_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one source headline"):
            CompiledItem(id="i1", topic="T", hook="H", summary="S", source_headline_ids=[])

    def test_non_positive_heat_rejected(self) -> None:
        with pytest.raises(ValueError, match="heat_score"):
            CompiledItem(id="i1", topic="T", hook="H", summary="S", source_headline_ids=["h1"], heat_score=0)


class TestFormatHeadlineLines:
    def test_with_and_without_description(self) -> None:
        headlines = [
            RawHeadline("h1", "First", "Details", "https://a", None, "s"),
            RawHeadline("h2", "Second", None, "https://b", None, "s"),
        ]
        assert format_headline_lines(headlines) == "- First: Details\n- Second"
