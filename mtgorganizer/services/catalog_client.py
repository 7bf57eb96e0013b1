"""
Scryfall card catalog client.

Resolves a free-text card name to the catalog's canonical card using
Scryfall's fuzzy named lookup:

    GET https://api.scryfall.com/cards/named?fuzzy=<name>

Fuzzy matching happens on Scryfall's side. Every failure surfaces as a
CatalogError so callers can report it per decklist line.
"""

import asyncio
import logging
import time
from typing import Any

import httpx

from mtgorganizer.config import settings
from mtgorganizer.models.card import Card
from mtgorganizer.models.failure import CardNotFoundError, CatalogUnavailableError

logger = logging.getLogger(__name__)

# Smallest usable image first
_IMAGE_PREFERENCE = ("small", "png")


def extract_image_ref(card_data: dict[str, Any]) -> str:
    """
    Pick a representative image URL from Scryfall card data.

    Double-faced cards carry images per face; the front face is used.

    Returns:
        Image URL, or "" if the card has none
    """
    image_uris = card_data.get("image_uris")
    if not image_uris:
        faces = card_data.get("card_faces") or []
        image_uris = faces[0].get("image_uris") if faces else None

    if not image_uris:
        return ""

    for size in _IMAGE_PREFERENCE:
        url = image_uris.get(size)
        if url:
            return str(url)

    return ""


def card_from_scryfall(card_data: dict[str, Any]) -> Card:
    """Build a canonical Card from a Scryfall card object."""
    return Card(name=str(card_data["name"]), image_ref=extract_image_ref(card_data))


def _error_details(response: httpx.Response) -> str | None:
    """Scryfall error objects explain themselves in a "details" field."""
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get("details"):
        return str(payload["details"])
    return None


class ScryfallCatalogClient:
    """
    Async catalog client for canonical card lookups.

    The httpx client is injected so one connection pool serves the whole
    process; it is not closed here.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None = None,
        timeout: float | None = None,
        min_interval: float | None = None,
    ) -> None:
        self._client = client
        self._base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._min_interval = (
            min_interval if min_interval is not None else settings.min_request_interval
        )
        self._throttle_lock = asyncio.Lock()
        self._next_request_at = 0.0

    async def _throttle(self) -> None:
        """Space request starts at least min_interval seconds apart."""
        async with self._throttle_lock:
            wait = self._next_request_at - time.monotonic()
            if wait > 0:
                await asyncio.sleep(wait)
            self._next_request_at = time.monotonic() + self._min_interval

    async def lookup_fuzzy(self, name: str) -> Card:
        """
        Look up the canonical card for a user-typed name.

        Args:
            name: Card name as typed, misspellings allowed

        Returns:
            Canonical Card with Scryfall's spelling and image

        Raises:
            CardNotFoundError: Scryfall found no (unambiguous) match, or the
                name cannot be encoded into a request
            CatalogUnavailableError: Timeout, transport or unexpected HTTP error
        """
        url = f"{self._base_url}/cards/named"
        logger.debug("Looking up card %r", name)
        await self._throttle()

        try:
            response = await self._client.get(
                url,
                params={"fuzzy": name},
                headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise CatalogUnavailableError(name, f"Catalog lookup timed out: {e}") from e
        except httpx.RequestError as e:
            raise CatalogUnavailableError(name, f"Catalog lookup failed: {e}") from e
        except (UnicodeEncodeError, httpx.InvalidURL) as e:
            raise CardNotFoundError(
                name, "Card name contains characters that cannot be looked up"
            ) from e

        if response.status_code == 404:
            message = _error_details(response) or f"No cards found matching {name!r}"
            raise CardNotFoundError(name, message)

        if response.status_code != 200:
            message = _error_details(response) or f"HTTP {response.status_code}"
            raise CatalogUnavailableError(name, f"Catalog lookup failed: {message}")

        try:
            card_data = response.json()
            return card_from_scryfall(card_data)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise CatalogUnavailableError(name, "Catalog returned malformed card data") from e
