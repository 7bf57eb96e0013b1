from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Card:
    """
    A canonical card as resolved by the catalog.

    Attributes:
        name: Catalog-assigned spelling, the card's identity
        image_ref: URL of a representative image ("" if the catalog has none)
    """

    name: str
    image_ref: str = ""


@dataclass(slots=True)
class CardInDeck:
    """
    A card entry in a deck with target and held quantities.

    INVARIANT: 0 <= current_quantity <= quantity after every mutation.
    Use increment()/decrement() rather than assigning current_quantity.

    Attributes:
        card: The canonical card
        quantity: How many copies the deck needs
        current_quantity: How many copies the user has checked off
    """

    card: Card
    quantity: int
    current_quantity: int = 0

    @property
    def name(self) -> str:
        return self.card.name

    @property
    def can_add(self) -> bool:
        return self.current_quantity < self.quantity

    @property
    def can_remove(self) -> bool:
        return self.current_quantity > 0

    def increment(self) -> bool:
        """Check off one more copy. Returns False if already complete."""
        if not self.can_add:
            return False
        self.current_quantity += 1
        return True

    def decrement(self) -> bool:
        """Un-check one copy. Returns False if none are checked off."""
        if not self.can_remove:
            return False
        self.current_quantity -= 1
        return True


@dataclass(frozen=True, slots=True)
class IndexedCard:
    """
    Search projection of one CardInDeck.

    Derived data only. Quantities are never stored here; they are read
    back from the deck store by (deck_id, name).
    """

    name: str
    image_ref: str
    deck_id: UUID
