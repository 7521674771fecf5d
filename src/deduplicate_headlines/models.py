"""Data models for deduplicate_headlines pipeline stage."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from common.models import RawHeadline


@dataclass
class DeduplicationGroup:
    """Headlines judged to describe the same story within one pass."""

    group_id: str
    members: list[RawHeadline]
    representative: RawHeadline
    heat_score: int
    topic: str

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError(f"Deduplication group {self.group_id} has no members")
        if not any(member is self.representative for member in self.members):
            raise ValueError(f"Representative of group {self.group_id} is not one of its members")
        if self.heat_score < 1:
            raise ValueError(f"Invalid heat_score: {self.heat_score}. Must be >= 1")


@dataclass
class DeduplicatedHeadline:
    """Raw headline annotated with the result of a deduplication pass."""

    id: str
    title: str
    description: Optional[str]
    url: str
    published_at: Optional[datetime]
    source_id: str
    deduplication_group_id: str
    heat_score: int
    is_best_version: bool
