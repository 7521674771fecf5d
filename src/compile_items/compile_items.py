"""Compile headline groups into items with a generated hook and summary."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from uuid import uuid4

from common.config import GROUPING_STRATEGIES
from common.llm import DEFAULT_FORMAT, DEFAULT_MODEL, DEFAULT_TIMEOUT, DEFAULT_TONE, generate_text
from common.models import CompiledItem, RawHeadline, format_headline_lines
from compile_items.group_by_topic import group_headlines_by_topic
from compile_items.instructions import (
    GENERATE_HOOK_INSTRUCTIONS,
    GENERATE_SUMMARY_INSTRUCTIONS,
    build_hook_prompt,
    build_summary_prompt,
)
from compile_items.models import (
    FAILED_FIELD,
    CompilationResult,
    GroupCompilation,
    GroupFailure,
    HeadlineGroup,
)
from compute_embeddings.embedders import TextEmbedder
from deduplicate_headlines.cluster import DEFAULT_THRESHOLD, validate_threshold
from deduplicate_headlines.deduplicate_headlines import group_headlines
from deduplicate_headlines.models import DeduplicationGroup

logger = logging.getLogger(__name__)


def generate_hook(
    topic: str,
    headlines: list[RawHeadline],
    tone: str = DEFAULT_TONE,
    format: str = DEFAULT_FORMAT,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
) -> str:
    """Generate a 1-2 sentence hook from every headline in the group."""
    return generate_text(
        GENERATE_HOOK_INSTRUCTIONS.format(tone=tone, format=format),
        build_hook_prompt(topic, format_headline_lines(headlines)),
        model=model,
        timeout=timeout,
        max_retries=max_retries,
    )


def generate_summary(
    topic: str,
    headlines: list[RawHeadline],
    tone: str = DEFAULT_TONE,
    format: str = DEFAULT_FORMAT,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
) -> str:
    """Generate a standalone narrative summary from every headline in the group."""
    return generate_text(
        GENERATE_SUMMARY_INSTRUCTIONS.format(tone=tone, format=format),
        build_summary_prompt(topic, format_headline_lines(headlines)),
        model=model,
        timeout=timeout,
        max_retries=max_retries,
    )


def compile_group(
    group: HeadlineGroup,
    tone: str = DEFAULT_TONE,
    format: str = DEFAULT_FORMAT,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
) -> GroupCompilation:
    """
    Generate hook and summary for one group as two concurrent calls.

    Never raises: a failed call leaves its field as FAILED_FIELD and records
    the error on the returned GroupCompilation.
    """
    kwargs = {
        "tone": tone,
        "format": format,
        "model": model,
        "timeout": timeout,
        "max_retries": max_retries,
    }
    compilation = GroupCompilation(group=group)

    with ThreadPoolExecutor(max_workers=2) as executor:
        hook_future = executor.submit(generate_hook, group.topic, group.headlines, **kwargs)
        summary_future = executor.submit(generate_summary, group.topic, group.headlines, **kwargs)

        try:
            compilation.hook = hook_future.result()
        except Exception as e:
            compilation.hook = FAILED_FIELD
            compilation.hook_error = str(e) or type(e).__name__

        try:
            compilation.summary = summary_future.result()
        except Exception as e:
            compilation.summary = FAILED_FIELD
            compilation.summary_error = str(e) or type(e).__name__

    return compilation


def _to_compiled_item(compilation: GroupCompilation) -> CompiledItem:
    group = compilation.group
    return CompiledItem(
        id=uuid4().hex,
        topic=group.topic,
        hook=compilation.hook,
        summary=compilation.summary,
        source_headline_ids=[headline.id for headline in group.headlines],
        heat_score=group.heat_score,
    )


def compile_groups(
    groups: list[HeadlineGroup],
    tone: str = DEFAULT_TONE,
    format: str = DEFAULT_FORMAT,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
    max_workers: int = 1,
) -> CompilationResult:
    """
    Compile a batch of groups into items.

    Groups with no headlines, or whose hook or summary failed, are skipped and
    reported in CompilationResult.failures; the rest of the batch continues.

    Args:
        groups: Groups to compile
        tone: Tone preference for generated text
        format: Format preference for generated text
        model: Chat model
        timeout: Per-call timeout in seconds
        max_retries: Retries per generation call
        max_workers: Groups compiled concurrently (1 = sequential)

    Returns:
        CompilationResult with items sorted by heat score descending, ties in group order
    """
    result = CompilationResult()
    for group in groups:
        if not group.headlines:
            logger.warning("Skipping group '%s': no headlines", group.topic)
            result.skipped += 1
            result.failures.append(
                GroupFailure(
                    topic=group.topic,
                    headline_ids=[],
                    errors=["no headlines"],
                    partial=GroupCompilation(group=group),
                )
            )
    groups = [group for group in groups if group.headlines]
    if not groups:
        logger.warning("No groups to compile")
        return result

    def _compile(group: HeadlineGroup) -> GroupCompilation:
        return compile_group(
            group,
            tone=tone,
            format=format,
            model=model,
            timeout=timeout,
            max_retries=max_retries,
        )

    logger.info("Compiling %d groups (max_workers=%d)", len(groups), max_workers)
    if max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            compilations = list(executor.map(_compile, groups))
    else:
        compilations = [_compile(group) for group in groups]

    for compilation in compilations:
        group = compilation.group
        if not compilation.is_complete:
            errors = [error for error in (compilation.hook_error, compilation.summary_error) if error]
            logger.error("Skipping group '%s': %s", group.topic, "; ".join(errors))
            result.skipped += 1
            result.failures.append(
                GroupFailure(
                    topic=group.topic,
                    headline_ids=[headline.id for headline in group.headlines],
                    errors=errors,
                    partial=compilation,
                )
            )
            continue
        result.items.append(_to_compiled_item(compilation))

    result.items.sort(key=lambda item: item.heat_score, reverse=True)

    logger.info("Compiled %d items (%d groups skipped)", len(result.items), result.skipped)
    return result


def to_headline_group(group: DeduplicationGroup) -> HeadlineGroup:
    return HeadlineGroup(topic=group.topic, headlines=list(group.members), heat_score=group.heat_score)


def compile_headlines(
    headlines: list[RawHeadline],
    grouping: str = "llm",
    threshold: float = DEFAULT_THRESHOLD,
    embedder: TextEmbedder | None = None,
    tone: str = DEFAULT_TONE,
    format: str = DEFAULT_FORMAT,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
    max_workers: int = 1,
    now: datetime | None = None,
) -> CompilationResult:
    """
    Group headlines into stories and compile each story into an item.

    Args:
        headlines: Headlines to compile
        grouping: "llm" for model-driven topic grouping, "embedding" for similarity clustering
        threshold: Similarity threshold for embedding grouping
        embedder: Embedding backend for embedding grouping
        tone: Tone preference for generated text
        format: Format preference for generated text
        model: Chat model
        timeout: Per-call timeout in seconds
        max_retries: Retries per generation call
        max_workers: Groups compiled concurrently
        now: Reference time for representative selection

    Returns:
        CompilationResult
    """
    if grouping not in GROUPING_STRATEGIES:
        raise ValueError(f"Unknown grouping strategy: {grouping}. Must be one of {list(GROUPING_STRATEGIES)}")
    if grouping == "embedding":
        threshold = validate_threshold(threshold)
    if not headlines:
        logger.warning("No headlines to compile")
        return CompilationResult()

    if grouping == "embedding":
        dedup_groups = group_headlines(
            headlines,
            threshold=threshold,
            embedder=embedder,
            model=model,
            timeout=timeout,
            max_retries=max_retries,
            now=now,
        )
        groups = [to_headline_group(group) for group in dedup_groups]
    else:
        groups = group_headlines_by_topic(headlines, model=model, timeout=timeout, max_retries=max_retries)

    return compile_groups(
        groups,
        tone=tone,
        format=format,
        model=model,
        timeout=timeout,
        max_retries=max_retries,
        max_workers=max_workers,
    )
