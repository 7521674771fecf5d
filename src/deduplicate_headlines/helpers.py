"""Helper functions for deduplicate_headlines CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import add_input_arguments, add_output_arguments, parse_threshold


def parse_deduplicate_headlines_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for deduplicate_headlines."""

    parser = argparse.ArgumentParser(description="Group near-duplicate headlines into stories")

    # Input options
    add_input_arguments(parser)
    parser.add_argument(
        "--config",
        default=None,
        help="Config name or YAML path (default: $PIPELINE_CONFIG or 'default')",
    )

    # Clustering options
    parser.add_argument(
        "--threshold",
        type=parse_threshold,
        default=None,
        help="Cosine similarity threshold in (0, 1] (default: from config)",
    )

    # Output options
    add_output_arguments(parser)

    return parser.parse_args(argv)
