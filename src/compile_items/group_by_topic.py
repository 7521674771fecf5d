"""Group headlines by topic with a structured LLM call."""

from __future__ import annotations

import json
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from common.errors import GenerationFailed
from common.llm import DEFAULT_MODEL, DEFAULT_TIMEOUT, generate_json
from common.models import RawHeadline
from compile_items.instructions import GROUP_BY_TOPIC_INSTRUCTIONS
from compile_items.models import HeadlineGroup
from deduplicate_headlines.label_topics import fallback_topic

logger = logging.getLogger(__name__)

SCHEMA_NAME = "headline_groups"

HEADLINE_GROUPS_SCHEMA = {
    "type": "object",
    "properties": {
        "groups": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "topic": {"type": "string"},
                    "headlineIndices": {"type": "array", "items": {"type": "integer"}},
                },
                "required": ["topic", "headlineIndices"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["groups"],
    "additionalProperties": False,
}


class TopicGroup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic: str
    headline_indices: list[int] = Field(alias="headlineIndices")


class TopicGroupingResponse(BaseModel):
    groups: list[TopicGroup]


def _format_numbered_headlines(headlines: list[RawHeadline]) -> str:
    return "\n".join(
        f"{idx}. {headline.title}: {headline.description or ''}"
        for idx, headline in enumerate(headlines, 1)
    )


def to_partition(response: TopicGroupingResponse, headlines: list[RawHeadline]) -> list[HeadlineGroup]:
    """
    Convert the model's 1-based index groups into a partition of the headlines.

    Out-of-range and repeated indices are dropped; headlines the model left out
    become single-headline groups with a title-derived topic.
    """
    seen: set[int] = set()
    groups = []
    for topic_group in response.groups:
        members = []
        for index in topic_group.headline_indices:
            if not 1 <= index <= len(headlines):
                logger.warning("Dropping out-of-range headline index %d for topic '%s'", index, topic_group.topic)
                continue
            if index in seen:
                logger.warning("Dropping repeated headline index %d for topic '%s'", index, topic_group.topic)
                continue
            seen.add(index)
            members.append(headlines[index - 1])

        if not members:
            continue
        topic = topic_group.topic.strip() or fallback_topic(members[0].title)
        groups.append(HeadlineGroup(topic=topic, headlines=members, heat_score=len(members)))

    missing = [idx for idx in range(1, len(headlines) + 1) if idx not in seen]
    if missing:
        logger.warning("Model left %d headlines ungrouped; adding them as single-headline groups", len(missing))
    for index in missing:
        headline = headlines[index - 1]
        groups.append(HeadlineGroup(topic=fallback_topic(headline.title), headlines=[headline], heat_score=1))

    return groups


def group_headlines_by_topic(
    headlines: list[RawHeadline],
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
) -> list[HeadlineGroup]:
    """Ask the model to group headlines by story; raises GenerationFailed if it can't."""
    if not headlines:
        return []

    content = generate_json(
        GROUP_BY_TOPIC_INSTRUCTIONS,
        f"Group these headlines by topic:\n\n{_format_numbered_headlines(headlines)}",
        schema_name=SCHEMA_NAME,
        schema=HEADLINE_GROUPS_SCHEMA,
        model=model,
        timeout=timeout,
        max_retries=max_retries,
    )

    try:
        response = TopicGroupingResponse.model_validate(json.loads(content))
    except (ValidationError, json.JSONDecodeError) as e:
        raise GenerationFailed(f"Topic grouping response invalid: {e}") from e

    groups = to_partition(response, headlines)
    logger.info("Grouped %d headlines into %d topics", len(headlines), len(groups))
    return groups
