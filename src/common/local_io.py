"""Local file I/O utilities."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from common.datetime import parse_optional_datetime
from common.models import RawHeadline
from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def _headline_from_record(record: dict[str, Any]) -> RawHeadline:
    return RawHeadline(
        id=str(record["id"]),
        title=record["title"],
        description=record.get("description"),
        url=record["url"],
        published_at=parse_optional_datetime(record.get("published_at")),
        source_id=str(record.get("source_id", "")),
    )


def read_headlines_jsonl(path: str | Path) -> list[RawHeadline]:
    """
    Read raw headlines from a local JSONL file.

    Each line must carry id, title and url; description, published_at and
    source_id are optional. Lines missing required fields are skipped.
    """
    path = Path(path)
    logger.info("Loading headlines from %s", path)

    headlines = []
    with path.open() as f:
        for line_number, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            record = json.loads(line)
            if not record.get("id") or not record.get("title") or not record.get("url"):
                logger.warning("Skipping line %d with missing id, title or url", line_number)
                continue
            headlines.append(_headline_from_record(record))

    logger.info("Loaded %d headlines", len(headlines))
    return headlines


def save_jsonl_records_local(
    records: list[Any],
    prefix: str,
    output_dir: str = "output",
) -> Path:
    """
    Save a list of dataclass records to a local JSONL file.

    Args:
        records: List of dataclass objects to save
        prefix: Filename prefix (e.g., "deduplicated_headlines", "compiled_items")
        output_dir: Directory to save to (default: "output")

    Returns:
        Path to the created file.
    """
    now = datetime.now(timezone.utc)
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    filename = f"{prefix}_{now.strftime('%Y_%m_%d_%H_%M')}.jsonl"
    filepath = output_path / filename

    with filepath.open("w") as f:
        for record in records:
            serialized = serialize_dataclass(record)
            f.write(json.dumps(serialized, default=str, ensure_ascii=False) + "\n")

    logger.info("Saved %d records to %s", len(records), filepath)
    return filepath
