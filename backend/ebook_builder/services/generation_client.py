"""HTTP client for the two generation endpoints, with cooperative cancellation.

Every call takes a `CancellationToken`. Triggering the token aborts the
in-flight request and makes the call fail with `GenerationCancelled`,
never with a transport error.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, TypeVar

import httpx

from ebook_builder.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

T = TypeVar("T")

OUTLINE_PATH = "/api/generate-outline"
CONTENT_PATH = "/api/generate-content"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class GenerationError(Exception):
    """Base class for failures of a generation run."""


class UserInputError(GenerationError):
    """Rejected before any network call (e.g. blank description)."""


class GenerationCancelled(GenerationError):
    """The user aborted the run."""


class UpstreamError(GenerationError):
    """A generation endpoint failed, or answered with something unusable."""

    def __init__(
        self,
        message: str,
        *,
        stage: str,
        status_code: int | None = None,
        section_index: int | None = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.status_code = status_code
        self.section_index = section_index


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

class CancellationToken:
    """One-shot abort signal shared by the calls of a single run."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelled("Generation cancelled")

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first, in which case abort it."""
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise GenerationCancelled("Generation cancelled")
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if self.cancelled:
            if task.done():
                # Retrieve a failed result so it is not reported as unhandled
                if not task.cancelled():
                    task.exception()
            else:
                task.cancel()
                await asyncio.wait({task})
            raise GenerationCancelled("Generation cancelled")

        return task.result()


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class GenerationClient:
    """Calls POST /api/generate-outline and POST /api/generate-content.

    No timeout is applied: a hung call waits until its token is cancelled.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.GENERATOR_BASE_URL,
            timeout=None,
        )

    @property
    def http(self) -> httpx.AsyncClient:
        """Underlying client, for calls outside the two generation endpoints."""
        return self._client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GenerationClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def generate_outline(
        self, description: str, ebook_id: str, *, token: CancellationToken,
    ) -> list[str]:
        """Return the ordered, non-empty list of section titles."""
        data = await self._post(
            OUTLINE_PATH,
            {"description": description, "ebookId": ebook_id},
            stage="outline",
            token=token,
        )
        outline = data.get("outline") if isinstance(data, dict) else None
        if (
            not isinstance(outline, list)
            or not outline
            or not all(isinstance(title, str) for title in outline)
        ):
            raise UpstreamError("Outline response is malformed", stage="outline")
        return outline

    async def generate_section(
        self,
        *,
        ebook_id: str,
        section_title: str,
        section_index: int,
        total_sections: int,
        description: str,
        token: CancellationToken,
    ) -> dict[str, Any]:
        """Have the endpoint write one section and persist it as a page."""
        data = await self._post(
            CONTENT_PATH,
            {
                "ebookId": ebook_id,
                "sectionTitle": section_title,
                "sectionIndex": section_index,
                "totalSections": total_sections,
                "description": description,
            },
            stage="expanding",
            token=token,
            section_index=section_index,
        )
        if not isinstance(data, dict):
            raise UpstreamError(
                f"Failed to generate section {section_index + 1}: malformed response",
                stage="expanding",
                section_index=section_index,
            )
        return data

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        *,
        stage: str,
        token: CancellationToken,
        section_index: int | None = None,
    ) -> Any:
        try:
            response = await token.run(self._client.post(path, json=payload))
        except httpx.HTTPError as e:
            raise UpstreamError(
                f"{stage} request failed: {e}",
                stage=stage,
                section_index=section_index,
            ) from e

        if not response.is_success:
            raise UpstreamError(
                f"{stage} request returned HTTP {response.status_code}: {response.text[:200]}",
                stage=stage,
                status_code=response.status_code,
                section_index=section_index,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(
                f"{stage} response is not JSON",
                stage=stage,
                status_code=response.status_code,
                section_index=section_index,
            ) from e
