"""Short topic labels for deduplicated stories."""

import logging

from common.llm import DEFAULT_MODEL, DEFAULT_TIMEOUT, generate_text
from common.models import RawHeadline
from deduplicate_headlines.instructions import LABEL_TOPIC_INSTRUCTIONS

logger = logging.getLogger(__name__)

FALLBACK_TOPIC_WORDS = 5


def fallback_topic(title: str) -> str:
    """First few words of the title, used whenever no generated topic is available."""
    return " ".join(title.split()[:FALLBACK_TOPIC_WORDS]) or "Untitled story"


def label_topic(
    headline: RawHeadline,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
) -> str:
    """Generate a 2-5 word topic for a headline, falling back to its title words on any failure."""
    prompt = f"{headline.title}\n\n{headline.description or ''}"
    try:
        topic = generate_text(
            LABEL_TOPIC_INSTRUCTIONS,
            prompt,
            model=model,
            timeout=timeout,
            max_retries=max_retries,
        )
    except Exception as e:
        logger.warning("Topic labelling failed for headline %s: %s", headline.id, e)
        return fallback_topic(headline.title)

    topic = topic.strip().strip('"').strip()
    if not topic:
        return fallback_topic(headline.title)
    return topic
