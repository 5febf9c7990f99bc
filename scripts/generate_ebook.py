"""Generate a whole ebook from a one-line topic against a running backend.

Run with:
    python3 scripts/generate_ebook.py "A beginner's guide to sourdough baking"

The script asks the backend for an outline, then has it write every section
in order, printing progress as it goes. Press Ctrl-C once to cancel; pages
already written stay in the ebook.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ebook_builder.config import get_settings  # noqa: E402
from ebook_builder.services.generation_client import (  # noqa: E402
    GenerationCancelled,
    GenerationClient,
    GenerationError,
)
from ebook_builder.services.generation_orchestrator import (  # noqa: E402
    GenerationOrchestrator,
    GenerationProgress,
)

logger = logging.getLogger("generate_ebook")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("description", help="Topic of the ebook")
    parser.add_argument(
        "--base-url",
        default=settings.GENERATOR_BASE_URL,
        help="Backend base URL (default: %(default)s)",
    )
    parser.add_argument(
        "--ebook-id",
        help="Target ebook; defaults to the backend's current ebook",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def print_progress(progress: GenerationProgress) -> None:
    if not progress.current_step:
        return
    print(f"[{progress.percent:5.1f}%] {progress.stage.value:<9} {progress.current_step}")


async def _current_ebook_id(client: GenerationClient) -> str:
    response = await client.http.get("/api/ebooks/current")
    response.raise_for_status()
    return response.json()["id"]


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    async with GenerationClient(args.base_url) as client:
        ebook_id = args.ebook_id or await _current_ebook_id(client)
        orchestrator = GenerationOrchestrator(client, on_progress=print_progress)

        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, orchestrator.cancel)
        except NotImplementedError:
            pass  # Windows event loops

        try:
            progress = await orchestrator.run(args.description, ebook_id)
        except GenerationCancelled:
            logger.warning("Cancelled; pages written so far were kept")
            return 130
        except GenerationError as e:
            logger.error("Generation failed: %s", e)
            return 1

    print(f"Done: {len(progress.outline)} sections written to ebook {ebook_id}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
