"""Data models for compile_items pipeline stage."""

from dataclasses import dataclass, field
from typing import Optional

from common.models import CompiledItem, RawHeadline

# Value of a generated field whose call failed
FAILED_FIELD = ""


@dataclass
class HeadlineGroup:
    """Headlines covering one topic, ready to be compiled."""

    topic: str
    headlines: list[RawHeadline]
    heat_score: int = 1


@dataclass
class GroupCompilation:
    """Hook and summary generated for one group; a failed field is FAILED_FIELD."""

    group: HeadlineGroup
    hook: str = FAILED_FIELD
    summary: str = FAILED_FIELD
    hook_error: Optional[str] = None
    summary_error: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.hook_error is None and self.summary_error is None


@dataclass
class GroupFailure:
    topic: str
    headline_ids: list[str]
    errors: list[str]
    partial: GroupCompilation


@dataclass
class CompilationResult:
    items: list[CompiledItem] = field(default_factory=list)
    skipped: int = 0
    failures: list[GroupFailure] = field(default_factory=list)
