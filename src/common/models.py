"""Shared data models for headlines flowing through the pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class RawHeadline:
    """Headline collected from one configured source during a run."""
    id: str
    title: str
    description: Optional[str]
    url: str
    published_at: Optional[datetime]
    source_id: str


@dataclass
class CompiledItem:
    """One deduplicated story with generated topic, hook and summary."""
    id: str
    topic: str
    hook: str
    summary: str
    source_headline_ids: list[str] = field(default_factory=list)
    heat_score: int = 1
    is_selected: bool = False

    def __post_init__(self) -> None:
        if not self.source_headline_ids:
            raise ValueError(f"Compiled item {self.id} must reference at least one source headline")
        if self.heat_score < 1:
            raise ValueError(f"Invalid heat_score: {self.heat_score}. Must be >= 1")


def format_headline_lines(headlines: list[RawHeadline]) -> str:
    """Format headlines as bullet lines for a generation prompt."""
    lines = []
    for headline in headlines:
        if headline.description:
            lines.append(f"- {headline.title}: {headline.description}")
        else:
            lines.append(f"- {headline.title}")
    return "\n".join(lines)
