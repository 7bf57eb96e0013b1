"""
Deck store persistence.

JSON layout (one object, keyed by deck UUID):

    {
      "3f2c...": {
        "name": "Burn",
        "cards": [
          {"quantity": 4, "current_quantity": 1,
           "card": {"name": "Lightning Bolt", "img": "https://..."}}
        ]
      }
    }

Import is parse-then-swap: the payload is fully validated into new Deck
objects before anything in memory is touched.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from uuid import UUID

from pydantic import BaseModel, Field, RootModel, ValidationError

from mtgorganizer.models.card import Card, CardInDeck
from mtgorganizer.models.deck import Deck
from mtgorganizer.models.failure import PersistenceError

logger = logging.getLogger(__name__)


class CardRecord(BaseModel):
    name: str
    img: str = ""


class CardInDeckRecord(BaseModel):
    quantity: int = Field(ge=0)
    current_quantity: int
    card: CardRecord


class DeckRecord(BaseModel):
    name: str
    cards: list[CardInDeckRecord] = Field(default_factory=list)


class DeckFile(RootModel[dict[UUID, DeckRecord]]):
    """Whole persisted deck store."""


def _clamp_current(record: CardInDeckRecord, deck_id: UUID) -> int:
    """Bring current_quantity back into [0, quantity], warning if it was outside."""
    clamped = min(max(record.current_quantity, 0), record.quantity)
    if clamped != record.current_quantity:
        logger.warning(
            "Deck %s: clamped current_quantity of %r from %d to %d",
            deck_id,
            record.card.name,
            record.current_quantity,
            clamped,
        )
    return clamped


def deck_from_record(deck_id: UUID, record: DeckRecord) -> Deck:
    cards = [
        CardInDeck(
            card=Card(name=c.card.name, image_ref=c.card.img),
            quantity=c.quantity,
            current_quantity=_clamp_current(c, deck_id),
        )
        for c in record.cards
    ]
    return Deck(id=deck_id, name=record.name, cards=cards)


def deck_to_record(deck: Deck) -> DeckRecord:
    return DeckRecord(
        name=deck.name,
        cards=[
            CardInDeckRecord(
                quantity=c.quantity,
                current_quantity=c.current_quantity,
                card=CardRecord(name=c.card.name, img=c.card.image_ref),
            )
            for c in deck.cards
        ],
    )


def export_decks(decks: Mapping[UUID, Deck]) -> str:
    """Serialize decks to the persisted JSON layout."""
    payload = DeckFile({deck_id: deck_to_record(deck) for deck_id, deck in decks.items()})
    return payload.model_dump_json()


def import_decks(payload: str | bytes) -> dict[UUID, Deck]:
    """
    Parse persisted JSON into decks.

    Raises:
        PersistenceError: If the payload is not valid deck JSON
    """
    try:
        parsed = DeckFile.model_validate_json(payload)
    except ValidationError as e:
        raise PersistenceError(
            "Deck file is malformed",
            detail=f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}",
        ) from e

    return {deck_id: deck_from_record(deck_id, record) for deck_id, record in parsed.root.items()}


def save_decks(decks: Mapping[UUID, Deck], path: Path) -> None:
    """
    Write decks to a JSON file.

    Raises:
        PersistenceError: If the file cannot be written
    """
    data = export_decks(decks)
    try:
        path.write_text(data, encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Could not write deck file {path}", detail=str(e)) from e

    logger.info("Exported %d decks to %s", len(decks), path)


def load_decks(path: Path) -> dict[UUID, Deck]:
    """
    Read decks from a JSON file.

    Raises:
        PersistenceError: If the file cannot be read or is malformed
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise PersistenceError(f"Could not read deck file {path}", detail=str(e)) from e

    decks = import_decks(data)
    logger.info("Imported %d decks from %s", len(decks), path)
    return decks
