import asyncio

import httpx
import pytest

from mtgorganizer.models.card import Card
from mtgorganizer.models.failure import CardNotFoundError
from mtgorganizer.services.decklist_resolver import DecklistResolver
from mtgorganizer.services.organizer import Organizer

PLACEHOLDER = b"\x89PNG placeholder"


class FakeCatalog:
    """In-memory catalog keyed by lowercase name, with optional per-name delays."""

    def __init__(
        self,
        cards: dict[str, Card],
        delays: dict[str, float] | None = None,
    ) -> None:
        self._cards = {k.lower(): v for k, v in cards.items()}
        self._delays = delays or {}
        self.lookups: list[str] = []

    async def lookup_fuzzy(self, name: str) -> Card:
        self.lookups.append(name)
        delay = self._delays.get(name)
        if delay:
            await asyncio.sleep(delay)
        card = self._cards.get(name.lower())
        if card is None:
            raise CardNotFoundError(name, f"No cards found matching “{name}”")
        return card


@pytest.fixture
def catalog_cards() -> dict[str, Card]:
    """Catalog entries keyed by the spelling users type."""
    bolt = Card(name="Lightning Bolt", image_ref="https://img.test/bolt.jpg")
    return {
        "Lightning Bolt": bolt,
        "lightning blt": bolt,
        "Monastery Swiftspear": Card(
            name="Monastery Swiftspear", image_ref="https://img.test/swiftspear.jpg"
        ),
        "Mountain": Card(name="Mountain", image_ref="https://img.test/mountain.jpg"),
        "Counterspell": Card(name="Counterspell", image_ref="https://img.test/counterspell.jpg"),
        "Island": Card(name="Island", image_ref=""),
    }


@pytest.fixture
def fake_catalog(catalog_cards: dict[str, Card]) -> FakeCatalog:
    return FakeCatalog(catalog_cards)


@pytest.fixture
def resolver(fake_catalog: FakeCatalog) -> DecklistResolver:
    return DecklistResolver(fake_catalog, max_concurrency=4)


@pytest.fixture
async def http_client():
    """httpx client for image downloads; mock routes with respx."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def organizer(resolver: DecklistResolver, http_client: httpx.AsyncClient) -> Organizer:
    return Organizer(resolver, http_client, PLACEHOLDER)


@pytest.fixture
def sample_decklist() -> str:
    """Burn decklist with one misspelled name and a blank line."""
    return """4 Lightning Bolt
4 Monastery Swiftspear

20 Mountain"""
