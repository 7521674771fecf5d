"""Helper functions for regenerate_item CLI."""

from __future__ import annotations

import argparse


def parse_regenerate_item_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for regenerate_item."""

    parser = argparse.ArgumentParser(description="Regenerate hook and summary of a compiled item")
    parser.add_argument("--item-id", required=True, help="Compiled item to regenerate")
    parser.add_argument(
        "--instructions",
        default=None,
        help='Free-text changes to apply (e.g. "make it shorter")',
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config name or YAML path (default: $PIPELINE_CONFIG or 'default')",
    )
    return parser.parse_args(argv)
