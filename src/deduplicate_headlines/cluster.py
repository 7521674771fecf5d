"""Greedy similarity clustering of headline embeddings."""

from __future__ import annotations

import logging
import math
from typing import Any, Sequence

import numpy as np

from common.errors import InvalidThreshold

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.75

# Absorbs rounding in normalized dot products so identical vectors meet a threshold of 1.0
SIMILARITY_TOLERANCE = 1e-9


def validate_threshold(threshold: float) -> float:
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise InvalidThreshold(f"Similarity threshold must be a number, got {threshold!r}")
    if math.isnan(threshold) or not 0 < threshold <= 1:
        raise InvalidThreshold(f"Similarity threshold must be in (0, 1], got {threshold}")
    return float(threshold)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0.0 when either has zero magnitude."""
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: {len(a)} != {len(b)}")

    dot = sum(x * y for x, y in zip(a, b))
    magnitude_a = math.sqrt(sum(x * x for x in a))
    magnitude_b = math.sqrt(sum(y * y for y in b))
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0
    return dot / (magnitude_a * magnitude_b)


def similarity_matrix(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """Pairwise cosine similarities; rows for zero vectors are all 0."""
    matrix = np.asarray(vectors, dtype="float64")
    if matrix.size == 0:
        return np.empty((0, 0), dtype="float64")

    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    safe_norms = np.where(norms == 0, 1.0, norms)
    unit = matrix / safe_norms
    return np.clip(unit @ unit.T, -1.0, 1.0)


def cluster_headlines(
    headlines: Sequence[Any],
    embeddings: Sequence[Sequence[float]],
    threshold: float = DEFAULT_THRESHOLD,
) -> list[list[int]]:
    """
    Partition headlines into groups of near-duplicates.

    Single pass in input order: each unassigned headline seeds a new group and
    pulls in every later unassigned headline whose similarity to the seed is at
    least the threshold. Members are only compared with the seed, so two members
    of one group may be less similar to each other than the threshold.

    Args:
        headlines: Headlines, in input order
        embeddings: One vector per headline
        threshold: Minimum cosine similarity to the seed

    Returns:
        Member index lists, one per group, in seed order
    """
    threshold = validate_threshold(threshold)
    if len(headlines) != len(embeddings):
        raise ValueError(f"Got {len(embeddings)} embeddings for {len(headlines)} headlines")
    if not headlines:
        return []

    similarities = similarity_matrix(embeddings)

    assigned = [False] * len(headlines)
    groups: list[list[int]] = []
    for seed in range(len(headlines)):
        if assigned[seed]:
            continue
        assigned[seed] = True
        members = [seed]
        for candidate in range(seed + 1, len(headlines)):
            if not assigned[candidate] and similarities[seed, candidate] >= threshold - SIMILARITY_TOLERANCE:
                assigned[candidate] = True
                members.append(candidate)
        groups.append(members)

    logger.info("Clustered %d headlines into %d groups (threshold=%.2f)", len(headlines), len(groups), threshold)
    return groups
