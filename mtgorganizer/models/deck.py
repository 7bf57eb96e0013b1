from dataclasses import dataclass, field
from uuid import UUID

from mtgorganizer.models.card import CardInDeck


@dataclass
class Deck:
    """
    A named collection of target card quantities.

    Attributes:
        id: Identity assigned at creation, never reused
        name: User-supplied deck name
        cards: Entries in decklist order (not alphabetical)
    """

    id: UUID
    name: str
    cards: list[CardInDeck] = field(default_factory=list)

    def total_quantity(self) -> int:
        """Copies the deck needs in total."""
        return sum(c.quantity for c in self.cards)

    def current_total(self) -> int:
        """Copies checked off so far."""
        return sum(c.current_quantity for c in self.cards)

    def find_card(self, name: str) -> CardInDeck | None:
        """First entry whose card name equals name."""
        return next((c for c in self.cards if c.card.name == name), None)

    def progress_label(self) -> str:
        return f"{self.name} ({self.current_total()}/{self.total_quantity()} cards)"


@dataclass(frozen=True)
class CardProgress:
    """An indexed card joined with its live quantities from the deck store."""

    deck_id: UUID
    deck_name: str
    name: str
    image_ref: str
    quantity: int
    current_quantity: int

    @property
    def can_add(self) -> bool:
        return self.current_quantity < self.quantity

    @property
    def can_remove(self) -> bool:
        return self.current_quantity > 0
