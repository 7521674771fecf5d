"""Group near-duplicate headlines into stories and annotate them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import uuid4

from common.llm import DEFAULT_MODEL, DEFAULT_TIMEOUT
from common.models import RawHeadline
from compute_embeddings.compute_embeddings import compute_embeddings
from compute_embeddings.embedders import TextEmbedder, get_embedder
from deduplicate_headlines.cluster import DEFAULT_THRESHOLD, cluster_headlines, validate_threshold
from deduplicate_headlines.label_topics import label_topic
from deduplicate_headlines.models import DeduplicatedHeadline, DeduplicationGroup
from deduplicate_headlines.representative import select_representative

logger = logging.getLogger(__name__)


@dataclass
class DeduplicationStats:
    deduplication_groups: int
    total_headlines: int
    unique_stories: int


def group_headlines(
    headlines: list[RawHeadline],
    threshold: float = DEFAULT_THRESHOLD,
    embedder: TextEmbedder | None = None,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
    now: datetime | None = None,
) -> list[DeduplicationGroup]:
    """
    Group headlines that describe the same story.

    Args:
        headlines: Headlines to deduplicate, in input order
        threshold: Minimum cosine similarity to a group's seed, in (0, 1]
        embedder: Embedding backend (default: sentence-transformers if available)
        model: Chat model used for topic labels
        timeout: Per-call timeout for topic labels, in seconds
        max_retries: Retries per topic label call
        now: Reference time for recency scoring (default: current UTC time)

    Returns:
        Groups sorted by heat score descending; ties keep seed order.
    """
    threshold = validate_threshold(threshold)
    if not headlines:
        logger.warning("No headlines to deduplicate")
        return []

    if embedder is None:
        embedder = get_embedder()
    now = now or datetime.now(timezone.utc)

    embeddings = compute_embeddings(headlines, embedder)
    clusters = cluster_headlines(headlines, embeddings, threshold)

    groups = []
    for indices in clusters:
        members = [headlines[i] for i in indices]
        representative = select_representative(members, now=now)
        topic = label_topic(representative, model=model, timeout=timeout, max_retries=max_retries)
        groups.append(
            DeduplicationGroup(
                group_id=uuid4().hex,
                members=members,
                representative=representative,
                heat_score=len(members),
                topic=topic,
            )
        )

    groups.sort(key=lambda group: group.heat_score, reverse=True)

    logger.info("Grouped %d headlines into %d stories", len(headlines), len(groups))
    return groups


def apply_deduplication_groups(groups: list[DeduplicationGroup]) -> list[DeduplicatedHeadline]:
    """One annotation record per group member."""
    annotated = []
    for group in groups:
        for member in group.members:
            annotated.append(
                DeduplicatedHeadline(
                    id=member.id,
                    title=member.title,
                    description=member.description,
                    url=member.url,
                    published_at=member.published_at,
                    source_id=member.source_id,
                    deduplication_group_id=group.group_id,
                    heat_score=group.heat_score,
                    is_best_version=member is group.representative,
                )
            )
    return annotated


def summarize_groups(groups: list[DeduplicationGroup], total_headlines: int) -> DeduplicationStats:
    stats = DeduplicationStats(
        deduplication_groups=len(groups),
        total_headlines=total_headlines,
        unique_stories=len(groups),
    )
    logger.info(
        "Deduplication: %d headlines, %d unique stories in %d groups",
        stats.total_headlines,
        stats.unique_stories,
        stats.deduplication_groups,
    )
    return stats
