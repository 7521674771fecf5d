"""Guided-generation calls against the OpenAI chat completions API."""

from __future__ import annotations

import logging
import os
import time
from typing import Any

import openai
from openai import OpenAI

from common.errors import GenerationFailed, GenerationTimeout

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TIMEOUT = 60.0
DEFAULT_TONE = "professional and informative"
DEFAULT_FORMAT = "structured with key points"
RETRY_BACKOFF_SECONDS = 0.5

# Connection drops, rate limits and 5xx responses; timeouts are never retried
_RETRYABLE_ERRORS = (openai.APIConnectionError, openai.RateLimitError, openai.InternalServerError)


def _get_client(timeout: float) -> OpenAI:
    # Retries happen in _complete so they share one deadline
    return OpenAI(
        api_key=os.environ.get("OPENAI_API_KEY"),
        timeout=timeout,
        max_retries=0,
    )


def _complete(
    instructions: str,
    prompt: str,
    model: str,
    timeout: float,
    max_retries: int,
    response_format: dict[str, Any] | None = None,
) -> str:
    """Run one chat completion and return the stripped message content.

    `timeout` bounds the whole call, retries included. A request that times out
    is not retried. Transient errors are retried up to `max_retries` times while
    time remains. OpenAI SDK errors are re-raised as GenerationTimeout or
    GenerationFailed so callers only deal with pipeline error types.
    """
    client = _get_client(timeout)

    kwargs: dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": instructions},
            {"role": "user", "content": prompt},
        ],
    }
    if response_format is not None:
        kwargs["response_format"] = response_format

    started = time.monotonic()
    attempt = 0
    while True:
        elapsed = time.monotonic() - started
        if elapsed >= timeout:
            raise GenerationTimeout(f"Generation timed out after {elapsed:.1f}s (limit {timeout}s)")
        try:
            response = client.chat.completions.create(**kwargs, timeout=timeout - elapsed)
            break
        except openai.APITimeoutError as exc:
            elapsed = time.monotonic() - started
            raise GenerationTimeout(f"Generation timed out after {elapsed:.1f}s (limit {timeout}s)") from exc
        except _RETRYABLE_ERRORS as exc:
            if attempt >= max_retries:
                raise GenerationFailed(f"Generation request failed after {attempt + 1} attempts: {exc}") from exc
            attempt += 1
            logger.warning("Generation attempt %d failed, retrying: %s", attempt, exc)
            backoff = min(RETRY_BACKOFF_SECONDS * attempt, timeout - (time.monotonic() - started))
            if backoff > 0:
                time.sleep(backoff)
        except openai.OpenAIError as exc:
            raise GenerationFailed(f"Generation request failed: {exc}") from exc

    if not response.choices:
        raise GenerationFailed("Generation returned no choices")

    content = response.choices[0].message.content
    if not isinstance(content, str) or not content.strip():
        raise GenerationFailed("Generation returned empty content")

    return content.strip()


def generate_text(
    instructions: str,
    prompt: str,
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
) -> str:
    """Free-form generation: system instructions plus a user prompt, plain text back."""
    return _complete(instructions, prompt, model, timeout, max_retries)


def generate_json(
    instructions: str,
    prompt: str,
    schema_name: str,
    schema: dict[str, Any],
    model: str = DEFAULT_MODEL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 2,
) -> str:
    """Structured generation constrained by a strict JSON schema.

    Returns the raw JSON text; validation into typed objects is the caller's job.
    """
    response_format = {
        "type": "json_schema",
        "json_schema": {
            "name": schema_name,
            "strict": True,
            "schema": schema,
        },
    }
    logger.debug("Requesting structured output '%s' from %s", schema_name, model)
    return _complete(instructions, prompt, model, timeout, max_retries, response_format)
