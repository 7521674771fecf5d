"""Text embedding backends used for headline similarity."""

from __future__ import annotations

import logging
import math
import re
from typing import Protocol

from sentence_transformers import SentenceTransformer

from common.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "all-MiniLM-L6-v2"
EMBEDDING_DIM = 384


class TextEmbedder(Protocol):
    def embed(self, text: str) -> list[float]:
        ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        ...


class SentenceTransformerEmbedder:
    """Sentence-transformers model producing normalized vectors."""

    def __init__(self, model: str = DEFAULT_MODEL, batch_size: int = 32) -> None:
        self.model = model
        self.batch_size = batch_size
        try:
            logger.info("Loading model: %s", model)
            self._encoder = SentenceTransformer(model)
        except Exception as e:
            raise EmbeddingUnavailable(f"Could not load embedding model {model}: {e}") from e

    def embed(self, text: str) -> list[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            vectors = self._encoder.encode(
                texts,
                batch_size=self.batch_size,
                show_progress_bar=False,
                convert_to_numpy=True,
                normalize_embeddings=True,
            )
        except Exception as e:
            raise EmbeddingUnavailable(f"Embedding model {self.model} failed: {e}") from e
        return [vector.tolist() for vector in vectors]


class HashEmbedder:
    """
    Deterministic bag-of-characters embedding.

    Each word longer than three characters spreads its characters over a fixed
    number of buckets, offset by the word's position. The result is L2-normalized;
    text with no qualifying words maps to the zero vector.
    """

    def __init__(self, dim: int = EMBEDDING_DIM) -> None:
        self.dim = dim

    def embed(self, text: str) -> list[float]:
        cleaned = re.sub(r"[^\w\s]", "", (text or "").lower())
        words = [word for word in cleaned.split() if len(word) > 3]

        vector = [0.0] * self.dim
        weight = 1 / (len(words) + 1)
        for idx, word in enumerate(words):
            for char in word:
                vector[(ord(char) + idx * 7) % self.dim] += weight

        magnitude = math.sqrt(sum(v * v for v in vector))
        return [v / (magnitude or 1) for v in vector]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(text) for text in texts]


def get_embedder(model: str = DEFAULT_MODEL) -> TextEmbedder:
    """Return the sentence-transformers embedder if the model loads, else the hash embedder."""
    try:
        return SentenceTransformerEmbedder(model)
    except EmbeddingUnavailable as e:
        logger.warning("%s; falling back to hash embeddings", e)
        return HashEmbedder()
