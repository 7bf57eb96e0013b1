"""
Cross-deck card index.

A flattened, searchable projection with one IndexedCard per CardInDeck.
It never stores quantities, so it can lag behind the deck store in
composition but never in quantity. It can be rebuilt from the deck store
at any time.
"""

from collections.abc import Iterable
from uuid import UUID

from mtgorganizer.models.card import CardInDeck, IndexedCard
from mtgorganizer.models.deck import Deck


def build_card_index(deck_id: UUID, cards: Iterable[CardInDeck]) -> list[IndexedCard]:
    """Project a deck's cards into index entries."""
    return [
        IndexedCard(name=c.card.name, image_ref=c.card.image_ref, deck_id=deck_id) for c in cards
    ]


class CardIndex:
    """Ordered collection of IndexedCard entries across all decks."""

    def __init__(self, entries: Iterable[IndexedCard] = ()) -> None:
        self._entries: list[IndexedCard] = list(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> tuple[IndexedCard, ...]:
        """Snapshot of the index in insertion order."""
        return tuple(self._entries)

    def add_deck(self, deck: Deck) -> None:
        """Append entries for a newly created deck."""
        self._entries.extend(build_card_index(deck.id, deck.cards))

    def remove_deck(self, deck_id: UUID) -> None:
        """Drop every entry belonging to deck_id."""
        self._entries = [e for e in self._entries if e.deck_id != deck_id]

    def rebuild(self, decks: Iterable[Deck]) -> None:
        """Reconstruct the whole index from the source of truth."""
        self._entries = []
        for deck in decks:
            self.add_deck(deck)

    def contains_name(self, name: str) -> bool:
        return any(e.name == name for e in self._entries)
