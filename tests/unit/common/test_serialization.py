"""Tests for common.serialization module."""

from dataclasses import dataclass
from datetime import datetime, timezone

from common.models import CompiledItem, RawHeadline
from common.serialization import serialize_dataclass


@dataclass
class SampleWithNestedDict:
    name: str
    metadata: dict


class TestSerializeDataclass:
    def test_headline_datetime_to_iso_string(self) -> None:
        headline = RawHeadline(
            id="h1",
            title="Title",
            description=None,
            url="https://example.com/1",
            published_at=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
            source_id="feed-1",
        )
        result = serialize_dataclass(headline)
        assert result["published_at"] == "2024-01-01T12:00:00+00:00"
        assert result["description"] is None

    def test_nested_dict_datetime_handling(self) -> None:
        dt = datetime(2024, 6, 15, 8, 30, 0, tzinfo=timezone.utc)
        obj = SampleWithNestedDict(name="test", metadata={"updated_at": dt, "history": [dt]})
        result = serialize_dataclass(obj)
        assert result["metadata"]["updated_at"] == "2024-06-15T08:30:00+00:00"
        assert result["metadata"]["history"] == ["2024-06-15T08:30:00+00:00"]

    def test_compiled_item_keeps_source_ids(self) -> None:
        item = CompiledItem(id="i1", topic="T", hook="H", summary="S", source_headline_ids=["h1", "h2"])
        result = serialize_dataclass(item)
        assert result["source_headline_ids"] == ["h1", "h2"]
        assert result["heat_score"] == 1
        assert result["is_selected"] is False
