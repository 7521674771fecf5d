"""CLI for compiling headlines into items."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.aws import upload_jsonl_records_to_s3
from common.cli_helpers import setup_logging
from common.config import load_config
from common.errors import GenerationFailed
from common.local_io import read_headlines_jsonl, save_jsonl_records_local
from common.models import RawHeadline
from compile_items.compile_items import compile_headlines
from compile_items.helpers import parse_compile_items_args
from compute_embeddings.embedders import get_embedder

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def _load_headlines(
    run_id: str | None,
    input_path: str | None,
    headline_ids: list[str] | None,
) -> list[RawHeadline]:
    if input_path:
        headlines = read_headlines_jsonl(input_path)
        if headline_ids:
            wanted = set(headline_ids)
            headlines = [headline for headline in headlines if headline.id in wanted]
        return headlines

    from common.db import get_session
    from common.rds import load_headlines_for_run

    with get_session() as session:
        return load_headlines_for_run(
            run_id,
            session,
            headline_ids=headline_ids,
            selected_only=not headline_ids,
        )


def main(argv: list[str] | None = None) -> int:
    args = parse_compile_items_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    grouping = args.grouping or config.compilation.grouping
    threshold = args.threshold if args.threshold is not None else config.deduplication.threshold
    max_workers = args.max_workers or config.compilation.max_workers

    try:
        headlines = _load_headlines(args.run_id, args.input_path, args.headline_ids)
    except (OSError, RuntimeError) as e:
        logger.error("Failed to load headlines: %s", e)
        return 1

    if not headlines:
        logger.warning("No headlines to compile")
        return 0

    embedder = get_embedder(config.deduplication.embedding_model) if grouping == "embedding" else None
    generation = config.generation

    try:
        result = compile_headlines(
            headlines,
            grouping=grouping,
            threshold=threshold,
            embedder=embedder,
            tone=generation.tone,
            format=generation.format,
            model=generation.model,
            timeout=generation.timeout_seconds,
            max_retries=generation.max_retries,
            max_workers=max_workers,
        )
    except GenerationFailed as e:
        logger.error("Topic grouping failed: %s", e)
        return 1

    for failure in result.failures:
        logger.warning("Group '%s' not compiled (headlines %s)", failure.topic, ", ".join(failure.headline_ids))

    if not result.items:
        logger.warning("No items compiled")
        return 0

    run_label = args.run_id or "local"

    if args.load_s3:
        upload_jsonl_records_to_s3(result.items, "compiled_items", run_label)

    if args.load_rds:
        if not args.run_id:
            logger.warning("--load-rds requires --run-id; skipping RDS write")
        else:
            from common.db import get_session
            from common.rds import insert_compiled_items

            with get_session() as session:
                insert_compiled_items(result.items, args.run_id, session)

    if args.load_local:
        save_jsonl_records_local(result.items, "compiled_items")

    return 0


if __name__ == "__main__":
    sys.exit(main())
