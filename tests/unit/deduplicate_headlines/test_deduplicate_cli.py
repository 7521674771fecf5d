"""Tests for deduplicate_headlines.cli module."""

import json
from unittest.mock import patch

import pytest

from deduplicate_headlines.cli import main


class KeywordEmbedder:
    def embed(self, text: str) -> list[float]:
        return [1.0, 0.0] if "Company X" in text else [0.0, 1.0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(text) for text in texts]


@pytest.fixture
def input_path(tmp_path):
    path = tmp_path / "headlines.jsonl"
    records = [
        {"id": "h1", "title": "Company X raises $5B", "description": "Short.", "url": "https://a/1"},
        {"id": "h2", "title": "Company X raises $5 billion", "description": "A longer description.", "url": "https://a/2"},
        {"id": "h3", "title": "Storm hits the coast", "url": "https://a/3"},
    ]
    path.write_text("\n".join(json.dumps(record) for record in records) + "\n")
    return path


class TestDeduplicateHeadlinesCli:
    @patch("deduplicate_headlines.deduplicate_headlines.label_topic")
    @patch("deduplicate_headlines.cli.get_embedder")
    def test_writes_annotations_and_stats(self, mock_get_embedder, mock_label, input_path, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        mock_get_embedder.return_value = KeywordEmbedder()
        mock_label.return_value = "topic"

        exit_code = main(["--input-path", str(input_path), "--config", "test", "--load-local"])

        assert exit_code == 0
        annotations_file = next((tmp_path / "output").glob("deduplicated_headlines_*.jsonl"))
        rows = [json.loads(line) for line in annotations_file.read_text().splitlines()]
        assert [row["id"] for row in rows] == ["h1", "h2", "h3"]
        assert [row["heat_score"] for row in rows] == [2, 2, 1]
        assert [row["is_best_version"] for row in rows] == [False, True, True]

        stats_file = next((tmp_path / "output").glob("deduplication_stats_*.jsonl"))
        stats = json.loads(stats_file.read_text())
        assert stats == {"deduplication_groups": 2, "total_headlines": 3, "unique_stories": 2}

    def test_missing_config_exits_non_zero(self, input_path) -> None:
        assert main(["--input-path", str(input_path), "--config", "does-not-exist"]) == 1

    def test_invalid_threshold_rejected_by_parser(self, input_path) -> None:
        with pytest.raises(SystemExit):
            main(["--input-path", str(input_path), "--threshold", "1.5"])
