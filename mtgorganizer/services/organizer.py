"""
Organizer application state.

The single owner of the deck store, card index, image cache, pending
resolution and search state. Every mutation goes through a synchronous
method here, run on the event loop thread, so mutations never interleave.
Async methods only await I/O (catalog lookups, image downloads) and then
hand the results to those synchronous methods.
"""

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path
from uuid import UUID

import httpx

from mtgorganizer.config import settings
from mtgorganizer.models.card import IndexedCard
from mtgorganizer.models.deck import CardProgress, Deck
from mtgorganizer.models.failure import NoPendingResolutionError
from mtgorganizer.models.resolution import ResolutionResult
from mtgorganizer.services.card_index import CardIndex, build_card_index
from mtgorganizer.services.decklist_resolver import DecklistResolver
from mtgorganizer.services.deck_store import DeckStore
from mtgorganizer.services.fuzzy_search import search
from mtgorganizer.services.image_cache import (
    ImageCache,
    ImageFetchResult,
    download_image,
)
from mtgorganizer.services.persistence import export_decks, import_decks, load_decks, save_decks

logger = logging.getLogger(__name__)


class Organizer:
    """
    Owns all organizer state.

    Usage:
        organizer = Organizer(resolver, http_client, placeholder_bytes)
        result = await organizer.analyze(decklist_text)
        deck = organizer.create_deck("Burn")
        hits = organizer.search("bolt")
        await organizer.fetch_images(hits)
    """

    def __init__(
        self,
        resolver: DecklistResolver,
        http_client: httpx.AsyncClient,
        placeholder_image: bytes,
    ) -> None:
        self._resolver = resolver
        self._http_client = http_client

        self.store = DeckStore()
        self.index = CardIndex()
        self.images = ImageCache(placeholder_image)

        self.pending: ResolutionResult | None = None
        self.search_query: str = ""
        self.search_results: list[IndexedCard] = []

    # ============= Decklist Resolution =============

    async def analyze(self, raw_text: str) -> ResolutionResult:
        """Resolve a decklist and stage the result for create_deck()."""
        result = await self._resolver.resolve(raw_text)
        self.pending = result
        return result

    def create_deck(self, name: str) -> Deck:
        """
        Commit the staged resolution as a new deck.

        Raises:
            NoPendingResolutionError: If analyze() has not produced a result
        """
        if self.pending is None:
            raise NoPendingResolutionError()

        deck = self.store.create_deck(name, self.pending.cards)
        self.index.add_deck(deck)
        self.pending = None
        return deck

    # ============= Deck Mutation =============

    def delete_deck(self, deck_id: UUID) -> None:
        """
        Delete a deck and every derived entry that points at it.

        Raises:
            DeckNotFoundError: If no deck has this id
        """
        self.store.delete_deck(deck_id)
        self.index.remove_deck(deck_id)
        self.search_results = [r for r in self.search_results if r.deck_id != deck_id]

    def add_card(self, deck_id: UUID, card_name: str) -> CardProgress | None:
        """Check off one copy of card_name. Returns its updated progress."""
        self.store.adjust_quantity(deck_id, card_name, +1)
        return self._progress_for(deck_id, card_name)

    def remove_card(self, deck_id: UUID, card_name: str) -> CardProgress | None:
        """Un-check one copy of card_name. Returns its updated progress."""
        self.store.adjust_quantity(deck_id, card_name, -1)
        return self._progress_for(deck_id, card_name)

    # ============= Search =============

    def search(self, query: str, limit: int | None = None) -> list[CardProgress]:
        """
        Fuzzy-search all indexed cards.

        Results are remembered as the current search state and returned
        joined with live quantities from the deck store.
        """
        self.search_query = query
        self.search_results = search(
            query,
            self.index.entries(),
            settings.search_limit if limit is None else limit,
        )
        return self.progress_for(self.search_results)

    def card_progress(self, entry: IndexedCard) -> CardProgress | None:
        """Join an index entry against the deck store. None if it went stale."""
        return self._progress_for(entry.deck_id, entry.name)

    def progress_for(self, entries: Iterable[IndexedCard]) -> list[CardProgress]:
        progress = (self.card_progress(e) for e in entries)
        return [p for p in progress if p is not None]

    def deck_progress(self, deck_id: UUID) -> list[CardProgress]:
        """
        Progress of every card in a deck, in decklist order.

        Raises:
            DeckNotFoundError: If no deck has this id
        """
        deck = self.store.require_deck(deck_id)
        return self.progress_for(build_card_index(deck.id, deck.cards))

    def _progress_for(self, deck_id: UUID, card_name: str) -> CardProgress | None:
        deck = self.store.get_deck(deck_id)
        if deck is None:
            return None
        entry = deck.find_card(card_name)
        if entry is None:
            return None
        return CardProgress(
            deck_id=deck_id,
            deck_name=deck.name,
            name=entry.card.name,
            image_ref=entry.card.image_ref,
            quantity=entry.quantity,
            current_quantity=entry.current_quantity,
        )

    # ============= Images =============

    def image_for(self, card_name: str) -> bytes:
        return self.images.image_for(card_name)

    def images_to_fetch(self, cards: Iterable[CardProgress | IndexedCard]) -> dict[str, str]:
        """Uncached card names mapped to their image refs, first occurrence wins."""
        missing: dict[str, str] = {}
        for card in cards:
            if card.name in self.images or card.name in missing:
                continue
            missing[card.name] = card.image_ref
        return missing

    async def fetch_images(self, cards: Iterable[CardProgress | IndexedCard]) -> int:
        """
        Download images for uncached cards concurrently.

        Results for cards no longer in the index (deck deleted while the
        download ran) are dropped.

        Returns:
            Number of images added to the cache
        """
        missing = self.images_to_fetch(cards)
        if not missing:
            return 0

        before = len(self.images)

        async def fetch(name: str) -> ImageFetchResult:
            resolved_name, data = await download_image(self._http_client, name, missing[name])
            if data is not None and not self.index.contains_name(resolved_name):
                logger.debug("Dropping image for %r, no deck holds it anymore", resolved_name)
                return resolved_name, None
            return resolved_name, data

        await asyncio.gather(*(self.images.get_or_fetch(name, fetch) for name in missing))

        added = len(self.images) - before
        logger.debug("Fetched %d of %d missing images", added, len(missing))
        return added

    # ============= Import / Export =============

    def export_json(self) -> str:
        return export_decks(self.store.snapshot())

    def import_json(self, payload: str | bytes) -> int:
        """
        Replace all state with decks parsed from payload.

        Raises:
            PersistenceError: If the payload is malformed (state is untouched)
        """
        decks = import_decks(payload)
        self._replace_decks(decks)
        return len(decks)

    def save(self, path: Path) -> None:
        save_decks(self.store.snapshot(), path)

    def load(self, path: Path) -> int:
        decks = load_decks(path)
        self._replace_decks(decks)
        return len(decks)

    def _replace_decks(self, decks: dict[UUID, Deck]) -> None:
        self.store.replace_all(decks)
        self.index.rebuild(self.store.list_decks())
        self.images.clear()
        self.pending = None
        self.search_query = ""
        self.search_results = []
        logger.info("Loaded %d decks (%d indexed cards)", len(decks), len(self.index))
