"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging


def setup_logging() -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def parse_threshold(value: str) -> float:
    """Parse a similarity threshold for argparse arguments.

    Raises:
        argparse.ArgumentTypeError: If the value is not a number in (0, 1].
    """
    try:
        threshold = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("threshold must be a number") from exc
    if not 0 < threshold <= 1:
        raise argparse.ArgumentTypeError("threshold must be in (0, 1]")
    return threshold


def parse_id_list(value: str) -> list[str]:
    """Parse a comma-separated list of ids, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def add_input_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the run/local-file input options shared by batch stages."""
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--run-id", help="Load headlines for this run from RDS")
    source.add_argument("--input-path", help="Load headlines from a local JSONL file")


def add_output_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the --load-* output options shared by batch stages."""
    parser.add_argument("--load-s3", action="store_true", help="Upload results to S3")
    parser.add_argument("--load-rds", action="store_true", help="Save results to RDS")
    parser.add_argument("--load-local", action="store_true", help="Save results to local file")
