"""Outline generation: turns a topic description into ordered section titles."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from ebook_builder.config import get_settings
from ebook_builder.prompts.manager import PromptManager
from ebook_builder.services.llm_client import llm_call

logger = logging.getLogger(__name__)
settings = get_settings()

# Keys a model may use for the title list, in lookup order
_OUTLINE_KEYS = ("outline", "chapters", "sections")

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


class OutlineFormatError(ValueError):
    """Raised when model output cannot be read as a list of section titles."""


def parse_outline(raw: str) -> list[str]:
    """Extract the ordered section titles from a model's JSON reply.

    Accepts a bare JSON array or an object holding the array under
    ``outline``, ``chapters`` or ``sections`` (else its first value).
    """
    text = _FENCE_RE.sub("", raw.strip())
    try:
        parsed: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise OutlineFormatError(f"Outline is not valid JSON: {e}") from e

    if isinstance(parsed, dict):
        candidate = None
        for key in _OUTLINE_KEYS:
            if key in parsed:
                candidate = parsed[key]
                break
        if candidate is None and parsed:
            candidate = next(iter(parsed.values()))
        parsed = candidate

    if not isinstance(parsed, list):
        raise OutlineFormatError("Invalid outline format received")

    titles = [item.strip() for item in parsed if isinstance(item, str) and item.strip()]
    if len(titles) != len(parsed):
        raise OutlineFormatError("Outline entries must be non-empty strings")
    if not titles:
        raise OutlineFormatError("Outline is empty")
    return titles


async def generate_outline(description: str) -> list[str]:
    """Ask the model for 6-12 section titles covering ``description``."""
    if settings.USE_MOCK_API:
        return _mock_outline(description)

    raw = await llm_call(
        PromptManager.get_prompt("outline"),
        f"Create an ebook outline for: {description}",
        json_mode=True,
        temperature=settings.OUTLINE_TEMPERATURE,
        caller="outline",
    )
    outline = parse_outline(raw)
    logger.info("Outline generated with %d sections", len(outline))
    return outline


def _mock_outline(description: str) -> list[str]:
    """Deterministic outline used when USE_MOCK_API is on."""
    topic = " ".join(description.split())[:60] or "Your Topic"
    headings = [
        "Introduction to",
        "Core Concepts of",
        "Getting Started with",
        "Practical Techniques for",
        "Common Mistakes in",
        "Next Steps with",
    ]
    return [f"Chapter {i}: {h} {topic}" for i, h in enumerate(headings, start=1)]
