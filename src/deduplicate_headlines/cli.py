"""CLI for deduplicating headlines."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.aws import upload_jsonl_records_to_s3
from common.cli_helpers import setup_logging
from common.config import load_config
from common.local_io import read_headlines_jsonl, save_jsonl_records_local
from common.models import RawHeadline
from compute_embeddings.embedders import get_embedder
from deduplicate_headlines.deduplicate_headlines import (
    apply_deduplication_groups,
    group_headlines,
    summarize_groups,
)
from deduplicate_headlines.helpers import parse_deduplicate_headlines_args

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def _load_headlines(run_id: str | None, input_path: str | None) -> list[RawHeadline]:
    if input_path:
        return read_headlines_jsonl(input_path)

    from common.db import get_session
    from common.rds import load_headlines_for_run

    with get_session() as session:
        return load_headlines_for_run(run_id, session)


def main(argv: list[str] | None = None) -> int:
    args = parse_deduplicate_headlines_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    threshold = args.threshold if args.threshold is not None else config.deduplication.threshold

    try:
        headlines = _load_headlines(args.run_id, args.input_path)
    except (OSError, RuntimeError) as e:
        logger.error("Failed to load headlines: %s", e)
        return 1

    if not headlines:
        logger.warning("No headlines to process")
        return 0

    groups = group_headlines(
        headlines,
        threshold=threshold,
        embedder=get_embedder(config.deduplication.embedding_model),
        model=config.generation.model,
        timeout=config.generation.timeout_seconds,
        max_retries=config.generation.max_retries,
    )
    annotated = apply_deduplication_groups(groups)
    stats = summarize_groups(groups, total_headlines=len(headlines))

    for group in groups:
        logger.info(
            "Story '%s' (heat=%d): best version %s",
            group.topic,
            group.heat_score,
            group.representative.id,
        )

    run_label = args.run_id or "local"

    if args.load_s3:
        upload_jsonl_records_to_s3(annotated, "deduplicated_headlines", run_label)

    if args.load_rds:
        if not args.run_id:
            logger.warning("--load-rds requires --run-id; skipping RDS write")
        else:
            from common.db import get_session
            from common.rds import save_headline_annotations

            with get_session() as session:
                save_headline_annotations(annotated, session)

    if args.load_local:
        save_jsonl_records_local(annotated, "deduplicated_headlines")
        save_jsonl_records_local([stats], "deduplication_stats")

    return 0


if __name__ == "__main__":
    sys.exit(main())
