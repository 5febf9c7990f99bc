from __future__ import annotations
"""Prompt template manager: loads system prompts from files."""

import logging
from pathlib import Path
from typing import ClassVar

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).parent / "templates"


class PromptManager:
    """Load and cache prompt templates from the filesystem.

    Templates live at ``prompts/templates/{template_name}.txt``.
    """

    _cache: ClassVar[dict[str, str]] = {}

    @classmethod
    def get_prompt(cls, template_name: str) -> str:
        """Get a prompt template by name, or "" when it does not exist."""
        if template_name in cls._cache:
            return cls._cache[template_name]

        path = _TEMPLATES_DIR / f"{template_name}.txt"
        if not path.exists():
            logger.warning("Prompt template not found: %s.txt", template_name)
            return ""

        text = path.read_text(encoding="utf-8").strip()
        cls._cache[template_name] = text
        return text

    @classmethod
    def reload(cls):
        """Clear cache to force reload on next access."""
        cls._cache.clear()
        logger.info("Prompt template cache cleared.")

    @classmethod
    def list_templates(cls) -> list[str]:
        """List available template names."""
        if not _TEMPLATES_DIR.exists():
            return []
        return sorted(f.stem for f in _TEMPLATES_DIR.glob("*.txt"))
