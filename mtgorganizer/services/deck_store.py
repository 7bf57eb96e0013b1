"""
Deck store.

Exclusive owner of all Deck and CardInDeck data. The card index and image
cache only ever hold derived copies.
"""

import logging
import uuid
from collections.abc import Mapping
from uuid import UUID

from mtgorganizer.models.card import CardInDeck
from mtgorganizer.models.deck import Deck
from mtgorganizer.models.failure import DeckNotFoundError, NoPendingResolutionError

logger = logging.getLogger(__name__)

VALID_DELTAS = frozenset({1, -1})


class DeckStore:
    """Mapping of deck id -> Deck with clamped quantity mutation."""

    def __init__(self, decks: Mapping[UUID, Deck] | None = None) -> None:
        self._decks: dict[UUID, Deck] = dict(decks or {})

    def __len__(self) -> int:
        return len(self._decks)

    def __contains__(self, deck_id: object) -> bool:
        return deck_id in self._decks

    def create_deck(self, name: str, resolved_cards: list[CardInDeck] | None) -> Deck:
        """
        Create a deck from a completed resolution.

        Args:
            name: Deck name
            resolved_cards: Cards from ResolutionResult.cards

        Returns:
            The new Deck with a fresh id

        Raises:
            NoPendingResolutionError: If resolved_cards is None
        """
        if resolved_cards is None:
            raise NoPendingResolutionError()

        deck_id = uuid.uuid4()
        while deck_id in self._decks:
            deck_id = uuid.uuid4()

        deck = Deck(id=deck_id, name=name, cards=list(resolved_cards))
        self._decks[deck_id] = deck
        logger.info("Created deck %s (%r, %d cards)", deck_id, name, len(deck.cards))
        return deck

    def delete_deck(self, deck_id: UUID) -> Deck:
        """
        Remove a deck.

        Raises:
            DeckNotFoundError: If no deck has this id
        """
        try:
            deck = self._decks.pop(deck_id)
        except KeyError:
            raise DeckNotFoundError(deck_id) from None

        logger.info("Deleted deck %s (%r)", deck_id, deck.name)
        return deck

    def adjust_quantity(self, deck_id: UUID, card_name: str, delta: int) -> int:
        """
        Check off (+1) or un-check (-1) a card in a deck.

        Applies to every entry whose card name equals card_name. Values are
        clamped to [0, quantity]; stepping past a bound is a no-op.

        Returns:
            Number of entries whose current_quantity changed

        Raises:
            ValueError: If delta is not +1 or -1
            DeckNotFoundError: If no deck has this id
        """
        if delta not in VALID_DELTAS:
            raise ValueError(f"delta must be +1 or -1, got {delta}")

        deck = self._decks.get(deck_id)
        if deck is None:
            raise DeckNotFoundError(deck_id)

        changed = 0
        for entry in deck.cards:
            if entry.card.name != card_name:
                continue
            if entry.increment() if delta > 0 else entry.decrement():
                changed += 1

        return changed

    def get_deck(self, deck_id: UUID) -> Deck | None:
        return self._decks.get(deck_id)

    def require_deck(self, deck_id: UUID) -> Deck:
        """Like get_deck(), but raises DeckNotFoundError when absent."""
        deck = self._decks.get(deck_id)
        if deck is None:
            raise DeckNotFoundError(deck_id)
        return deck

    def list_decks(self) -> list[Deck]:
        """All decks in creation (or import) order."""
        return list(self._decks.values())

    def find_card(self, deck_id: UUID, card_name: str) -> CardInDeck | None:
        """First entry named card_name in the deck, None if deck or card is missing."""
        deck = self._decks.get(deck_id)
        if deck is None:
            return None
        return deck.find_card(card_name)

    def snapshot(self) -> dict[UUID, Deck]:
        """Shallow copy of the id -> Deck mapping."""
        return dict(self._decks)

    def replace_all(self, decks: Mapping[UUID, Deck]) -> None:
        """Swap in a fully parsed set of decks (import)."""
        self._decks = dict(decks)
