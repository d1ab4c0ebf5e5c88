from __future__ import annotations

import base64
from urllib.parse import urljoin

import httpx

from tocr.core.config import settings
from tocr.services.ocr.types import ALLOWED_IMAGE_TYPES, OcrImage


class ImageFetchError(Exception):
    pass


def resolve_image_url(url: str, base_url: str) -> str:
    """Uploaded images are referenced by site-relative paths; make them absolute."""
    if url.startswith(("http://", "https://")):
        return url
    return urljoin(base_url, url)


async def fetch_image(
    url: str, *, transport: httpx.AsyncBaseTransport | None = None
) -> OcrImage:
    try:
        async with httpx.AsyncClient(
            timeout=settings.image_fetch_timeout_secs,
            follow_redirects=True,
            transport=transport,
        ) as client:
            resp = await client.get(url, headers={"User-Agent": settings.user_agent})
            resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise ImageFetchError(f"Failed to fetch image from URL: {url}") from exc

    mime_type = (resp.headers.get("content-type") or "image/jpeg").split(";")[0].strip()
    if mime_type not in ALLOWED_IMAGE_TYPES:
        raise ImageFetchError(f"Invalid image type from URL: {mime_type}")

    return OcrImage(base64=base64.b64encode(resp.content).decode("ascii"), mime_type=mime_type)
