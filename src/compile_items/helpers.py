"""Helper functions for compile_items CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import add_input_arguments, add_output_arguments, parse_id_list, parse_threshold
from common.config import GROUPING_STRATEGIES


def _parse_positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return parsed


def parse_compile_items_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for compile_items."""

    parser = argparse.ArgumentParser(description="Compile headlines into items with hook and summary")

    # Input options
    add_input_arguments(parser)
    parser.add_argument(
        "--headline-ids",
        type=parse_id_list,
        default=None,
        help="Comma-separated headline ids to compile (default: selected headlines of the run)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config name or YAML path (default: $PIPELINE_CONFIG or 'default')",
    )

    # Grouping options
    parser.add_argument(
        "--grouping",
        choices=GROUPING_STRATEGIES,
        default=None,
        help="Group by LLM topic or embedding similarity (default: from config)",
    )
    parser.add_argument(
        "--threshold",
        type=parse_threshold,
        default=None,
        help="Cosine similarity threshold for embedding grouping (default: from config)",
    )
    parser.add_argument(
        "--max-workers",
        type=_parse_positive_int,
        default=None,
        help="Groups compiled concurrently (default: from config)",
    )

    # Output options
    add_output_arguments(parser)

    return parser.parse_args(argv)
