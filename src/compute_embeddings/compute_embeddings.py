"""Batch embedding of headlines ahead of clustering."""

import logging

from common.models import RawHeadline
from compute_embeddings.embedders import HashEmbedder, TextEmbedder

logger = logging.getLogger(__name__)


def build_embedding_text(headline: RawHeadline) -> str:
    """Text used to represent a headline in embedding space."""
    return f"{headline.title} {headline.description or ''}"


def compute_embeddings(headlines: list[RawHeadline], embedder: TextEmbedder) -> list[list[float]]:
    """
    Embed every headline in one batch.

    If the embedder fails part way, the whole batch is re-embedded with the
    hash embedder so all vectors in a pass come from the same space.

    Args:
        headlines: Headlines to embed
        embedder: Backend to embed with

    Returns:
        One vector per headline, in input order
    """
    if not headlines:
        return []

    texts = [build_embedding_text(headline) for headline in headlines]

    logger.info("Computing embeddings for %d headlines", len(texts))
    try:
        embeddings = embedder.embed_batch(texts)
    except Exception as e:
        logger.warning("Embedding backend failed (%s); re-embedding batch with hash embeddings", e)
        embeddings = HashEmbedder().embed_batch(texts)

    if len(embeddings) != len(texts):
        logger.warning(
            "Embedding backend returned %d vectors for %d headlines; re-embedding batch with hash embeddings",
            len(embeddings),
            len(texts),
        )
        embeddings = HashEmbedder().embed_batch(texts)

    return embeddings
