"""CLI for regenerating a compiled item."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.db import get_session
from common.errors import GenerationFailed
from regenerate_item.helpers import parse_regenerate_item_args
from regenerate_item.regenerate_item import regenerate_stored_item

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = parse_regenerate_item_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    generation = config.generation
    try:
        with get_session() as session:
            item = regenerate_stored_item(
                args.item_id,
                session,
                instructions=args.instructions,
                tone=generation.tone,
                format=generation.format,
                model=generation.model,
                timeout=generation.timeout_seconds,
                max_retries=generation.max_retries,
            )
    except (LookupError, ValueError) as e:
        logger.error("Cannot regenerate item %s: %s", args.item_id, e)
        return 1
    except GenerationFailed as e:
        logger.error("%s; stored item left unchanged", e)
        return 1
    except RuntimeError as e:
        logger.error("Storage unavailable: %s", e)
        return 1

    logger.info("Item %s hook: %s", item.id, item.hook)
    return 0


if __name__ == "__main__":
    sys.exit(main())
