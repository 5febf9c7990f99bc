"""Unified LLM client with retry + exponential backoff, timeout handling,
and structured error messages.

All chat-completion calls in the generation endpoints go through `llm_call()`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from ebook_builder.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# ---------------------------------------------------------------------------
# Shared HTTP client (lazy init)
# ---------------------------------------------------------------------------

_http_client: httpx.AsyncClient | None = None


def _get_client() -> httpx.AsyncClient:
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(timeout=float(settings.LLM_TIMEOUT))
    return _http_client


async def close_client() -> None:
    """Close the shared HTTP client (application shutdown)."""
    global _http_client
    if _http_client is not None and not _http_client.is_closed:
        await _http_client.aclose()
    _http_client = None


def _completions_url() -> str:
    return f"{settings.OPENAI_BASE_URL.rstrip('/')}/chat/completions"


def _mask_key(key: str) -> str:
    """Mask an API key for safe logging: show first 8 and last 4 chars."""
    if len(key) <= 16:
        return "***"
    return f"{key[:8]}...{key[-4:]}"


def is_configured() -> bool:
    """True when an API key is available for outbound LLM calls."""
    return bool(settings.OPENAI_API_KEY)


# ---------------------------------------------------------------------------
# Retriable status codes
# ---------------------------------------------------------------------------

_RETRIABLE_STATUS = {408, 429, 500, 502, 503, 504}


# ---------------------------------------------------------------------------
# Core LLM call
# ---------------------------------------------------------------------------

async def llm_call(
    system_prompt: str,
    user_prompt: str,
    *,
    json_mode: bool = False,
    model: str | None = None,
    max_tokens: int = 4096,
    temperature: float = 0.8,
    caller: str = "unknown",
) -> str:
    """Chat completion with retry + exponential backoff.

    Args:
        system_prompt: System message.
        user_prompt: User message.
        json_mode: If True, request JSON-format output.
        model: Override the default STORY_MODEL.
        max_tokens: Max tokens in response.
        temperature: Sampling temperature.
        caller: Identifier for logging (e.g. endpoint name).

    Returns:
        The content string from the LLM response.

    Raises:
        LLMError: On a non-retriable failure or once retries are exhausted.
    """
    if not settings.OPENAI_API_KEY:
        raise LLMError("OpenAI API key not configured", status_code=500)

    model = model or settings.STORY_MODEL
    max_retries = max(1, settings.LLM_MAX_RETRIES)
    masked = _mask_key(settings.OPENAI_API_KEY)
    last_error: Exception | None = None

    headers = {
        "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
        "Content-Type": "application/json",
    }
    body: dict[str, Any] = {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        body["response_format"] = {"type": "json_object"}

    for attempt in range(1, max_retries + 1):
        logger.info(
            "[%s] LLM call attempt %d/%d model=%s key=%s json=%s",
            caller, attempt, max_retries, model, masked, json_mode,
        )

        try:
            client = _get_client()
            response = await client.post(_completions_url(), headers=headers, json=body)

            if response.status_code in _RETRIABLE_STATUS:
                backoff = min(2 ** attempt, 30)
                logger.warning(
                    "[%s] HTTP %d (retriable), backing off %ds...",
                    caller, response.status_code, backoff,
                )
                last_error = LLMError(
                    f"HTTP {response.status_code}",
                    status_code=response.status_code,
                    retriable=True,
                )
                if attempt < max_retries:
                    await asyncio.sleep(backoff)
                continue

            response.raise_for_status()

            data = response.json()
            content = _extract_content(data)
            logger.info("[%s] LLM response OK, length=%d", caller, len(content))
            return content

        except httpx.TimeoutException:
            backoff = min(2 ** attempt, 30)
            logger.warning(
                "[%s] Timeout after %ds on attempt %d, backing off %ds...",
                caller, settings.LLM_TIMEOUT, attempt, backoff,
            )
            last_error = LLMError(
                f"LLM call timed out after {settings.LLM_TIMEOUT}s",
                status_code=408,
                retriable=True,
            )
            if attempt < max_retries:
                await asyncio.sleep(backoff)
            continue

        except httpx.TransportError as e:
            backoff = min(2 ** attempt, 30)
            logger.warning(
                "[%s] Connection error on attempt %d: %s, backing off %ds...",
                caller, attempt, e, backoff,
            )
            last_error = LLMError(f"LLM connection error: {e}", status_code=503, retriable=True)
            if attempt < max_retries:
                await asyncio.sleep(backoff)
            continue

        except httpx.HTTPStatusError as e:
            # Non-retriable HTTP error
            logger.error("[%s] HTTP error %d: %s", caller, e.response.status_code, e)
            raise LLMError(
                f"LLM HTTP error: {e.response.status_code}",
                status_code=e.response.status_code,
                retriable=False,
            ) from e

        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            logger.error("[%s] Malformed completion payload: %s", caller, e)
            raise LLMError("Malformed response from model", status_code=502) from e

    # All retries exhausted
    raise last_error or LLMError("All LLM retry attempts exhausted", retriable=False)


def _extract_content(data: dict[str, Any]) -> str:
    """Pull the message text out of a chat completion payload."""
    content = data["choices"][0]["message"]["content"]
    if not content:
        raise LLMError("No response from model", status_code=502)
    return content


# ---------------------------------------------------------------------------
# Health check: for /api/system/check-llm
# ---------------------------------------------------------------------------

async def check_llm_health() -> dict[str, Any]:
    """Quick health check: send a tiny prompt to verify the key is valid."""
    if not settings.OPENAI_API_KEY:
        return {"status": "not_configured"}

    headers = {
        "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
        "Content-Type": "application/json",
    }
    body = {
        "model": settings.STORY_MODEL,
        "messages": [{"role": "user", "content": "Hi"}],
        "max_tokens": 1,
    }
    masked = _mask_key(settings.OPENAI_API_KEY)
    try:
        client = _get_client()
        resp = await client.post(_completions_url(), headers=headers, json=body)
    except httpx.HTTPError as e:
        return {"status": "error", "key": masked, "error": str(e)}
    if resp.status_code == 200:
        return {"status": "ok", "key": masked}
    return {"status": "error", "key": masked, "http_status": resp.status_code}


# ---------------------------------------------------------------------------
# Custom exception
# ---------------------------------------------------------------------------

class LLMError(Exception):
    """Structured LLM error with status code and retriable flag."""

    def __init__(self, message: str, status_code: int = 0, retriable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.retriable = retriable
