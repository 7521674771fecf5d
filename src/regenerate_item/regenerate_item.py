"""Regenerate hook and summary of an existing compiled item."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any

from common.errors import GenerationFailed
from common.llm import DEFAULT_FORMAT, DEFAULT_MODEL, DEFAULT_TIMEOUT, DEFAULT_TONE, generate_text
from common.models import CompiledItem, RawHeadline, format_headline_lines
from regenerate_item.instructions import (
    REGENERATE_INSTRUCTIONS,
    REGENERATE_WITH_CHANGES_INSTRUCTIONS,
    build_regenerate_hook_prompt,
    build_regenerate_summary_prompt,
)

logger = logging.getLogger(__name__)


def build_regenerate_instructions(
    instructions: str | None,
    tone: str = DEFAULT_TONE,
    format: str = DEFAULT_FORMAT,
) -> str:
    if instructions and instructions.strip():
        return REGENERATE_WITH_CHANGES_INSTRUCTIONS.format(instructions=instructions, tone=tone, format=format)
    return REGENERATE_INSTRUCTIONS.format(tone=tone, format=format)


def order_source_headlines(item: CompiledItem, headlines: list[RawHeadline]) -> list[RawHeadline]:
    """Headlines the item was compiled from, in source_headline_ids order."""
    by_id = {headline.id: headline for headline in headlines}
    ordered = [by_id[hid] for hid in item.source_headline_ids if hid in by_id]

    if not ordered:
        raise ValueError(f"None of the source headlines of item {item.id} are available")
    if len(ordered) < len(item.source_headline_ids):
        logger.warning(
            "Item %s: %d of %d source headlines available",
            item.id,
            len(ordered),
            len(item.source_headline_ids),
        )
    return ordered


def regenerate_item(
    item: CompiledItem,
    headlines: list[RawHeadline],
    instructions: str | None = None,
    tone: str = DEFAULT_TONE,
    format: str = DEFAULT_FORMAT,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
) -> CompiledItem:
    """
    Re-run hook and summary generation for one item.

    Args:
        item: Item to regenerate
        headlines: Source headlines of the item (extra headlines are ignored)
        instructions: Optional free-text changes requested by the user
        tone: Tone preference
        format: Format preference
        model: Chat model
        timeout: Per-call timeout in seconds
        max_retries: Retries per generation call

    Returns:
        Copy of the item with new hook and summary; all other fields unchanged.

    Raises:
        GenerationFailed: If either call fails. The input item is not modified.
    """
    sources = order_source_headlines(item, headlines)
    system_prompt = build_regenerate_instructions(instructions, tone=tone, format=format)
    headline_lines = format_headline_lines(sources)
    kwargs = {"model": model, "timeout": timeout, "max_retries": max_retries}

    with ThreadPoolExecutor(max_workers=2) as executor:
        hook_future = executor.submit(
            generate_text,
            system_prompt,
            build_regenerate_hook_prompt(item.topic, headline_lines),
            **kwargs,
        )
        summary_future = executor.submit(
            generate_text,
            system_prompt,
            build_regenerate_summary_prompt(item.topic, headline_lines),
            **kwargs,
        )

        errors = []
        try:
            hook = hook_future.result()
        except GenerationFailed as e:
            errors.append(f"hook: {e}")
        try:
            summary = summary_future.result()
        except GenerationFailed as e:
            errors.append(f"summary: {e}")

    if errors:
        raise GenerationFailed(f"Regeneration failed for item {item.id}: {'; '.join(errors)}")

    logger.info("Regenerated hook and summary for item %s", item.id)
    return replace(item, hook=hook, summary=summary)


def regenerate_stored_item(
    item_id: str,
    session: Any,
    instructions: str | None = None,
    tone: str = DEFAULT_TONE,
    format: str = DEFAULT_FORMAT,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
) -> CompiledItem:
    """Load a stored item and its sources, regenerate it, and write back hook and summary only."""
    from common.rds import load_compiled_item, load_headlines_by_ids, update_compiled_item_content

    item = load_compiled_item(item_id, session)
    if item is None:
        raise LookupError(f"Compiled item not found: {item_id}")

    headlines = load_headlines_by_ids(item.source_headline_ids, session)
    regenerated = regenerate_item(
        item,
        headlines,
        instructions=instructions,
        tone=tone,
        format=format,
        model=model,
        timeout=timeout,
        max_retries=max_retries,
    )
    update_compiled_item_content(item_id, regenerated.hook, regenerated.summary, session)
    return regenerated
