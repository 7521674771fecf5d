"""Tests for compute_embeddings.embedders module."""

import math
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from common.errors import EmbeddingUnavailable
from compute_embeddings.embedders import (
    EMBEDDING_DIM,
    HashEmbedder,
    SentenceTransformerEmbedder,
    get_embedder,
)


class TestHashEmbedder:
    def test_deterministic(self) -> None:
        embedder = HashEmbedder()
        text = "Company X raises $5 billion in new funding"
        assert embedder.embed(text) == embedder.embed(text)

    def test_dimension_and_unit_norm(self) -> None:
        vector = HashEmbedder().embed("Markets rally after central bank decision")
        assert len(vector) == EMBEDDING_DIM
        assert math.isclose(math.sqrt(sum(v * v for v in vector)), 1.0)

    def test_short_words_and_punctuation_ignored(self) -> None:
        embedder = HashEmbedder()
        assert embedder.embed("Stocks, rally!") == embedder.embed("stocks rally a an the")

    def test_no_qualifying_words_gives_zero_vector(self) -> None:
        vector = HashEmbedder().embed("a an the $5")
        assert vector == [0.0] * EMBEDDING_DIM

    def test_bucket_positions(self) -> None:
        # One word: every char contributes 1/2 at (ord(char) + 0) % 384
        vector = HashEmbedder().embed("abcd")
        nonzero = [i for i, v in enumerate(vector) if v]
        assert nonzero == [ord("a"), ord("b"), ord("c"), ord("d")]
        assert math.isclose(vector[ord("a")], 0.5)

    def test_word_position_shifts_buckets(self) -> None:
        embedder = HashEmbedder()
        assert embedder.embed("alpha omega") != embedder.embed("omega alpha")

    def test_batch_matches_single(self) -> None:
        embedder = HashEmbedder()
        texts = ["first headline here", "second headline there"]
        assert embedder.embed_batch(texts) == [embedder.embed(t) for t in texts]


class TestSentenceTransformerEmbedder:
    @patch("compute_embeddings.embedders.SentenceTransformer")
    def test_encodes_normalized_batch(self, mock_st_cls) -> None:
        mock_model = MagicMock()
        mock_model.encode.return_value = np.array([[0.6, 0.8], [1.0, 0.0]])
        mock_st_cls.return_value = mock_model

        embedder = SentenceTransformerEmbedder("test-model")
        result = embedder.embed_batch(["one", "two"])

        assert result == [[0.6, 0.8], [1.0, 0.0]]
        mock_st_cls.assert_called_once_with("test-model")
        assert mock_model.encode.call_args.kwargs["normalize_embeddings"] is True

    @patch("compute_embeddings.embedders.SentenceTransformer")
    def test_encode_failure_raises_unavailable(self, mock_st_cls) -> None:
        mock_model = MagicMock()
        mock_model.encode.side_effect = RuntimeError("CUDA error")
        mock_st_cls.return_value = mock_model

        with pytest.raises(EmbeddingUnavailable):
            SentenceTransformerEmbedder("test-model").embed("text")


class TestGetEmbedder:
    @patch("compute_embeddings.embedders.SentenceTransformer")
    def test_returns_model_embedder_when_available(self, mock_st_cls) -> None:
        assert isinstance(get_embedder("test-model"), SentenceTransformerEmbedder)

    @patch("compute_embeddings.embedders.SentenceTransformer")
    def test_falls_back_to_hash_embedder(self, mock_st_cls) -> None:
        mock_st_cls.side_effect = OSError("model not found")
        assert isinstance(get_embedder("missing-model"), HashEmbedder)
