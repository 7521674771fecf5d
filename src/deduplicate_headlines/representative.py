"""Pick the best version of a story from its duplicate headlines."""

from __future__ import annotations

from datetime import datetime, timezone

from common.datetime import ensure_utc
from common.models import RawHeadline

DESCRIPTION_WEIGHT = 0.5
TITLE_WEIGHT = 0.3
RECENCY_WEIGHT = 0.2
RECENCY_WINDOW_DAYS = 100


def score_headline(headline: RawHeadline, now: datetime) -> float:
    """Favour longer descriptions, then longer titles, then recent publication."""
    score = DESCRIPTION_WEIGHT * len(headline.description or "")
    score += TITLE_WEIGHT * len(headline.title)

    if headline.published_at is not None:
        age = ensure_utc(now) - ensure_utc(headline.published_at)
        days_since = age.total_seconds() / 86400
        score += RECENCY_WEIGHT * max(0.0, RECENCY_WINDOW_DAYS - days_since)

    return score


def select_representative(members: list[RawHeadline], now: datetime | None = None) -> RawHeadline:
    if not members:
        raise ValueError("Cannot select a representative from an empty group")
    if len(members) == 1:
        return members[0]

    now = now or datetime.now(timezone.utc)
    # max() keeps the earliest member on ties
    return max(members, key=lambda member: score_headline(member, now))
