"""LLM client utilities shared by the collaborator chains."""

import asyncio
import json
import re
import time
from typing import Any, TypeVar

from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)
from pydantic import BaseModel

from brief_engine.core.config import get_settings
from brief_engine.core.errors import NetworkError, ParseError
from brief_engine.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


def get_async_client() -> AsyncOpenAI:
    """
    Get an AsyncOpenAI client configured from settings.

    Returns:
        AsyncOpenAI instance with API key and request timeout applied
    """
    settings = get_settings()
    return AsyncOpenAI(
        api_key=settings.OPENAI_API_KEY,
        timeout=settings.COLLABORATOR_TIMEOUT_SECONDS,
        max_retries=0,
    )


def _strip_llm_fences(raw_output: str) -> str:
    """Strip markdown code fences from LLM output.

    Handles: ```json ... ```, ``` ... ```, leading/trailing whitespace.
    """
    cleaned = raw_output.strip()

    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)```", cleaned, re.DOTALL)
    if fence_match:
        return fence_match.group(1).strip()

    # Fallback: strip leading/trailing fences without regex
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def _slice_outer_object(text: str) -> str:
    """Drop chatter before the first '{' and after the last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start : end + 1]
    return text


def parse_llm_json(raw_output: str, model: type[T]) -> T:
    """
    Parse LLM output as JSON and validate against a Pydantic model.

    Args:
        raw_output: Raw string from LLM response
        model: Pydantic model class to validate against

    Returns:
        Validated Pydantic model instance

    Raises:
        json.JSONDecodeError: If JSON parsing fails after cleanup
        pydantic.ValidationError: If parsed JSON doesn't match schema
    """
    return model.model_validate(parse_llm_json_dict(raw_output))


def parse_llm_json_dict(raw_output: str) -> dict[str, Any]:
    """
    Parse LLM output as a JSON object, returning a raw dict.

    Args:
        raw_output: Raw string from LLM response

    Returns:
        Parsed dict from JSON

    Raises:
        json.JSONDecodeError: If JSON parsing fails after cleanup, or the
            payload is valid JSON but not an object
    """
    cleaned = _slice_outer_object(_strip_llm_fences(raw_output))
    parsed = json.loads(cleaned)
    if not isinstance(parsed, dict):
        raise json.JSONDecodeError("Expected a JSON object", cleaned, 0)
    return parsed


_RETRYABLE = (APIConnectionError, APITimeoutError, InternalServerError, RateLimitError)


async def request_json_completion(
    system_prompt: str,
    user_prompt: str,
    *,
    model: str,
    temperature: float,
    max_tokens: int,
    collaborator: str,
    client: AsyncOpenAI | None = None,
) -> str:
    """
    Run a JSON-mode chat completion with retry on transient failures.

    Retries connection errors, timeouts, 5xx and rate limits with exponential
    backoff. Other API errors fail immediately.

    Args:
        system_prompt: System message
        user_prompt: User message
        model: Model name
        temperature: Sampling temperature
        max_tokens: Output token cap
        collaborator: Name used in logs and errors
        client: Client override (tests)

    Returns:
        Raw message content

    Raises:
        NetworkError: If the request fails after all retries
        ParseError: If the response carries no content
    """
    settings = get_settings()
    client = client or get_async_client()
    max_retries = settings.COLLABORATOR_MAX_RETRIES
    initial_delay = settings.COLLABORATOR_RETRY_DELAY_SECONDS

    for attempt in range(max_retries + 1):
        try:
            t0 = time.monotonic()
            response = await client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"},
            )
            elapsed_ms = int((time.monotonic() - t0) * 1000)
            logger.debug(
                f"{collaborator} completed in {elapsed_ms}ms",
                extra={"model": model, "attempt": attempt + 1},
            )
            break
        except _RETRYABLE as e:
            if attempt < max_retries:
                delay = initial_delay * (2**attempt)
                logger.warning(f"{collaborator} attempt {attempt + 1} failed: {e}. Retry in {delay}s")
                await asyncio.sleep(delay)
            else:
                logger.error(f"{collaborator}: all attempts failed: {e}")
                raise NetworkError(f"{collaborator} unavailable: {e}", collaborator) from e
        except APIError as e:
            raise NetworkError(f"{collaborator} request rejected: {e}", collaborator) from e

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise ParseError(f"{collaborator} returned an empty response", collaborator)
    return content
