from __future__ import annotations
"""Image generation service - OpenAI-compatible images endpoint.

Generated images are downloaded into the media volume so that pages keep
working after the provider's temporary URL expires.
"""

import base64
import logging
import os
import time

import httpx

from ebook_builder.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

MEDIA_URL_PREFIX = "/media"
IMAGES_DIR = "images"

# Module-level httpx client for connection reuse (lazy init)
_http_client: httpx.AsyncClient | None = None


def _get_http_client(timeout: float = 180.0) -> httpx.AsyncClient:
    """Return a module-level httpx.AsyncClient, creating it on first use."""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(timeout=timeout)
    return _http_client


async def close_client() -> None:
    """Close the shared HTTP client (application shutdown)."""
    global _http_client
    if _http_client is not None and not _http_client.is_closed:
        await _http_client.aclose()
    _http_client = None


async def generate_image(prompt: str) -> str:
    """Generate an image for ``prompt`` and return its public URL under /media."""
    if settings.USE_MOCK_API:
        rel_path = _mock_image(prompt)
    else:
        rel_path = await _generate_via_openai(prompt)
    return f"{MEDIA_URL_PREFIX}/{rel_path}"


async def _generate_via_openai(prompt: str) -> str:
    """Call the images/generations endpoint and store the first result."""
    if not settings.OPENAI_API_KEY:
        raise RuntimeError("OpenAI API key not configured")

    url = f"{settings.OPENAI_BASE_URL.rstrip('/')}/images/generations"
    headers = {
        "Authorization": f"Bearer {settings.OPENAI_API_KEY}",
        "Content-Type": "application/json",
    }
    payload = {
        "model": settings.IMAGE_MODEL,
        "prompt": prompt,
        "n": 1,
        "size": settings.IMAGE_SIZE,
        "quality": "standard",
    }

    logger.info("Calling image model=%s size=%s", settings.IMAGE_MODEL, settings.IMAGE_SIZE)
    client = _get_http_client()
    response = await client.post(url, headers=headers, json=payload)
    response.raise_for_status()
    result = response.json()

    data_list = result.get("data", [])
    if not data_list:
        raise RuntimeError(f"Image API returned empty data. Response keys: {list(result.keys())}")

    item = data_list[0]
    image_data: bytes | None = None

    # Handle b64_json response
    if item.get("b64_json"):
        image_data = base64.b64decode(item["b64_json"])

    # Handle URL response (temporary provider URL)
    if not image_data and item.get("url"):
        image_data = await _download_bytes(item["url"])

    if not image_data:
        raise RuntimeError("Image API returned no image data (no b64_json or url)")

    rel_path = _save_image(image_data)
    logger.info("Image saved: %s (%d bytes)", rel_path, len(image_data))
    return rel_path


async def _download_bytes(url: str) -> bytes:
    """Download binary content from URL."""
    client = _get_http_client(timeout=60.0)
    response = await client.get(url)
    response.raise_for_status()
    return response.content


def _new_filename() -> str:
    return f"ai-generated-{int(time.time() * 1000)}.png"


def _save_image(image_data: bytes) -> str:
    """Save image bytes under the media volume; returns the path relative to it."""
    dir_path = os.path.join(settings.MEDIA_VOLUME, IMAGES_DIR)
    os.makedirs(dir_path, exist_ok=True)
    filename = _new_filename()
    with open(os.path.join(dir_path, filename), "wb") as f:
        f.write(image_data)
    return f"{IMAGES_DIR}/{filename}"


def _mock_image(prompt: str) -> str:
    """Generate a mock placeholder image (solid color PNG with the prompt)."""
    from PIL import Image, ImageDraw, ImageFont

    img = Image.new("RGB", (1024, 1024), color=(35, 35, 60))
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default()
    wrapped = prompt[:100] + "..." if len(prompt) > 100 else prompt
    draw.text((40, 40), wrapped, fill=(180, 180, 220), font=font)
    draw.text((40, 980), "[MOCK IMAGE - Ebook AI Builder]", fill=(100, 100, 140), font=font)

    dir_path = os.path.join(settings.MEDIA_VOLUME, IMAGES_DIR)
    os.makedirs(dir_path, exist_ok=True)
    filename = _new_filename()
    img.save(os.path.join(dir_path, filename), format="PNG")
    return f"{IMAGES_DIR}/{filename}"
