"""
Card image cache.

Best-effort in-memory store of image bytes keyed by card name. A missing
entry is a cache miss, never an error; readers fall back to the
placeholder image loaded at process start.

The first successful fetch for a name wins: later results (including
failed ones) never overwrite it.
"""

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

import httpx

from mtgorganizer.config import settings

logger = logging.getLogger(__name__)

ImageFetchResult = tuple[str, bytes | None]
"""(resolved card name, image bytes or None on failure)"""

ImageFetcher = Callable[[str], Awaitable[ImageFetchResult]]


def load_placeholder_image(path: Path | None = None) -> bytes:
    """
    Read the placeholder image shown for uncached cards.

    Raises:
        FileNotFoundError: If the placeholder file is missing
    """
    return (path or settings.placeholder_image_path).read_bytes()


async def download_image(
    client: httpx.AsyncClient,
    card_name: str,
    image_ref: str,
    timeout: float | None = None,
) -> ImageFetchResult:
    """
    Download a card image.

    Never raises for network problems: any failure yields None bytes so the
    cache simply stays empty for this card.

    Args:
        client: Shared httpx client
        card_name: Name the result is cached under
        image_ref: Image URL ("" means the card has no image)
        timeout: Per-request timeout, defaults to settings.request_timeout

    Returns:
        (card_name, bytes or None)
    """
    if not image_ref:
        return card_name, None

    try:
        response = await client.get(
            image_ref,
            headers={"User-Agent": settings.user_agent},
            timeout=timeout if timeout is not None else settings.request_timeout,
            follow_redirects=True,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning(
            "Image download for %r failed: HTTP %d", card_name, e.response.status_code
        )
        return card_name, None
    except httpx.HTTPError as e:
        logger.warning("Image download for %r failed: %s", card_name, e)
        return card_name, None

    return card_name, response.content


class ImageCache:
    """Deduplicating card name -> image bytes store."""

    def __init__(self, placeholder: bytes) -> None:
        self._placeholder = placeholder
        self._images: dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._images)

    def __contains__(self, key: object) -> bool:
        return key in self._images

    def get(self, key: str) -> bytes | None:
        return self._images.get(key)

    def image_for(self, key: str) -> bytes:
        """Cached bytes for key, or the placeholder image."""
        return self._images.get(key, self._placeholder)

    def store(self, resolved_name: str, data: bytes | None) -> bool:
        """
        Record a fetch result.

        Returns:
            True if the cache changed. None data and names that are already
            cached leave it untouched.
        """
        if data is None:
            return False
        if resolved_name in self._images:
            logger.debug("Image for %r already cached, keeping first result", resolved_name)
            return False
        self._images[resolved_name] = data
        return True

    def clear(self) -> None:
        self._images.clear()

    async def get_or_fetch(self, key: str, fetch: ImageFetcher) -> bytes | None:
        """
        Return cached bytes for key, fetching them on a miss.

        The fetch result is stored under the name the fetcher reports, which
        is re-checked against the cache on completion so a concurrent fetch
        that finished first is not overwritten.

        Returns:
            Image bytes, or None if the fetch failed
        """
        cached = self._images.get(key)
        if cached is not None:
            logger.debug("Image cache hit for %r", key)
            return cached

        resolved_name, data = await fetch(key)
        self.store(resolved_name, data)
        return self._images.get(key)
