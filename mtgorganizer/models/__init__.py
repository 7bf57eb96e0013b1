from mtgorganizer.models.card import Card, CardInDeck, IndexedCard
from mtgorganizer.models.deck import CardProgress, Deck
from mtgorganizer.models.failure import (
    CardNotFoundError,
    CatalogError,
    CatalogUnavailableError,
    DeckNotFoundError,
    FailureDetail,
    FailureKind,
    InvalidQuantityError,
    KnownError,
    NoPendingResolutionError,
    PersistenceError,
)
from mtgorganizer.models.resolution import DeckErrorInsight, ResolutionResult

__all__ = [
    "Card",
    "CardInDeck",
    "CardNotFoundError",
    "CardProgress",
    "CatalogError",
    "CatalogUnavailableError",
    "Deck",
    "DeckErrorInsight",
    "DeckNotFoundError",
    "FailureDetail",
    "FailureKind",
    "IndexedCard",
    "InvalidQuantityError",
    "KnownError",
    "NoPendingResolutionError",
    "PersistenceError",
    "ResolutionResult",
]
