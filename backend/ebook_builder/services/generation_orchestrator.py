"""GenerationOrchestrator: turns one topic description into persisted pages.

Two phases against the generation endpoints, strictly serial:

    idle -> outline -> expanding (one content call per section) -> complete

Cancellation and errors drop back to idle. Pages created before the stop
are left in place.

Usage:
    async with GenerationClient() as client:
        orchestrator = GenerationOrchestrator(client, on_progress=print)
        await orchestrator.run("A guide to sourdough baking", ebook_id)
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Callable

from ebook_builder.config import get_settings
from ebook_builder.services.generation_client import (
    CancellationToken,
    GenerationCancelled,
    GenerationClient,
    UserInputError,
)

logger = logging.getLogger(__name__)
settings = get_settings()

# Progress policy
OUTLINE_PERCENT = 10.0
EXPANDING_PERCENT = 30.0
EXPANSION_BAND = 65.0
COMPLETE_PERCENT = 100.0

# User-facing labels
LABEL_OUTLINE = "Creating outline..."
LABEL_OUTLINE_DONE = "Outline created! Generating content..."
LABEL_COMPLETE = "Ebook generated successfully!"
LABEL_CANCELLED = "Generation cancelled"
LABEL_ERROR = "Error generating ebook. Please try again."


class GenerationStage(str, enum.Enum):
    IDLE = "idle"
    OUTLINE = "outline"
    EXPANDING = "expanding"
    COMPLETE = "complete"


@dataclass
class GenerationProgress:
    """Observable state of a run."""

    stage: GenerationStage = GenerationStage.IDLE
    percent: float = 0.0
    current_step: str = ""
    outline: list[str] = field(default_factory=list)

    def snapshot(self) -> GenerationProgress:
        return replace(self, outline=list(self.outline))


ProgressListener = Callable[[GenerationProgress], None]


def section_percent(index: int, total: int) -> float:
    """Progress once section ``index`` of ``total`` has been written."""
    return EXPANDING_PERCENT + (index + 1) / total * EXPANSION_BAND


class GenerationOrchestrator:
    """Runs one generation at a time and reports progress to a listener."""

    def __init__(
        self,
        client: GenerationClient,
        *,
        on_progress: ProgressListener | None = None,
        on_complete: Callable[[], None] | None = None,
        close_delay: float | None = None,
    ) -> None:
        self._client = client
        self._on_progress = on_progress
        self._on_complete = on_complete
        self._close_delay = settings.GENERATION_CLOSE_DELAY if close_delay is None else close_delay
        self._progress = GenerationProgress()
        self._token: CancellationToken | None = None
        self._close_handle: asyncio.TimerHandle | None = None

    @property
    def progress(self) -> GenerationProgress:
        return self._progress.snapshot()

    @property
    def is_running(self) -> bool:
        return self._token is not None

    def cancel(self) -> None:
        """Abort the active run; the in-flight request is dropped immediately."""
        if self._token is not None:
            logger.info("Cancellation requested at stage=%s", self._progress.stage.value)
            self._token.cancel()

    def reset(self) -> None:
        """Close the run: cancel if active and clear progress and outline."""
        self.cancel()
        self._reset_progress()

    async def run(self, description: str, ebook_id: str) -> GenerationProgress:
        """Generate an outline, then every section in order.

        Raises:
            UserInputError: blank description; nothing is sent.
            RuntimeError: a run is already active on this instance.
            GenerationCancelled: the run was cancelled.
            UpstreamError: an endpoint failed or answered malformed data.
        """
        if not description.strip():
            raise UserInputError("Description must not be empty")
        if self.is_running:
            raise RuntimeError("A generation run is already in progress")

        token = CancellationToken()
        self._token = token
        self._reset_progress()

        try:
            self._update(
                stage=GenerationStage.OUTLINE,
                percent=OUTLINE_PERCENT,
                current_step=LABEL_OUTLINE,
            )
            outline = await self._client.generate_outline(description, ebook_id, token=token)
            logger.info("Outline received for ebook %s: %d sections", ebook_id, len(outline))

            self._update(
                stage=GenerationStage.EXPANDING,
                percent=EXPANDING_PERCENT,
                current_step=LABEL_OUTLINE_DONE,
                outline=list(outline),
            )

            total = len(outline)
            for i, title in enumerate(outline):
                token.raise_if_cancelled()
                self._update(current_step=f"Writing section {i + 1} of {total}: {title}")
                await self._client.generate_section(
                    ebook_id=ebook_id,
                    section_title=title,
                    section_index=i,
                    total_sections=total,
                    description=description,
                    token=token,
                )
                self._update(percent=section_percent(i, total))

            token.raise_if_cancelled()
            self._update(
                stage=GenerationStage.COMPLETE,
                percent=COMPLETE_PERCENT,
                current_step=LABEL_COMPLETE,
            )
            logger.info("Generation complete for ebook %s", ebook_id)
            self._schedule_close()
            return self.progress

        except GenerationCancelled:
            logger.info("Generation cancelled for ebook %s", ebook_id)
            self._update(stage=GenerationStage.IDLE, current_step=LABEL_CANCELLED)
            raise
        except Exception:
            logger.exception("Generation error for ebook %s", ebook_id)
            self._update(stage=GenerationStage.IDLE, current_step=LABEL_ERROR)
            raise
        finally:
            self._token = None

    def _reset_progress(self) -> None:
        """Start from zero with an empty outline and tell the listener."""
        if self._close_handle is not None:
            self._close_handle.cancel()
            self._close_handle = None
        self._progress = GenerationProgress()
        self._notify()

    def _update(self, **changes) -> None:
        for key, value in changes.items():
            setattr(self._progress, key, value)
        self._notify()

    def _notify(self) -> None:
        if self._on_progress is not None:
            self._on_progress(self._progress.snapshot())

    def _schedule_close(self) -> None:
        if self._on_complete is None:
            return
        loop = asyncio.get_running_loop()
        self._close_handle = loop.call_later(self._close_delay, self._close_after_complete)

    def _close_after_complete(self) -> None:
        self._close_handle = None
        self._progress = GenerationProgress()
        if self._on_complete is not None:
            self._on_complete()
