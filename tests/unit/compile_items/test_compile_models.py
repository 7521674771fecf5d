"""Tests for compile_items.models module."""

from common.models import RawHeadline
from compile_items.models import FAILED_FIELD, GroupCompilation, HeadlineGroup


class TestHeadlineGroup:
    def test_heat_defaults_to_one(self) -> None:
        group = HeadlineGroup(topic="T", headlines=[RawHeadline("h1", "T", None, "https://a", None, "s")])
        assert group.heat_score == 1


class TestGroupCompilation:
    def test_fields_default_to_failed_marker(self) -> None:
        compilation = GroupCompilation(group=HeadlineGroup(topic="T", headlines=[]))
        assert compilation.hook == FAILED_FIELD
        assert compilation.summary == FAILED_FIELD

    def test_recorded_error_makes_incomplete(self) -> None:
        compilation = GroupCompilation(group=HeadlineGroup(topic="T", headlines=[]), summary_error="boom")
        assert not compilation.is_complete
