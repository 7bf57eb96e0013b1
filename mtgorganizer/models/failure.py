"""
Failure classification for the organizer.

Every failure the organizer knows how to explain is a KnownError subclass
carrying a FailureKind and an HTTP status code. Per-line decklist failures
(InvalidQuantityError, CatalogError) are collected by the resolver and never
abort a resolution. PersistenceError aborts the whole import/export.
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Decklist line failures
    INVALID_QUANTITY = "invalid_quantity"
    CARD_NOT_FOUND = "card_not_found"

    # Service failures
    CATALOG_UNAVAILABLE = "catalog_unavailable"

    # Deck store failures
    DECK_NOT_FOUND = "deck_not_found"
    NO_PENDING_RESOLUTION = "no_pending_resolution"

    # Import/export failures
    PERSISTENCE_ERROR = "persistence_error"


class FailureDetail(BaseModel):
    """Failure body returned by the HTTP layer."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a FailureDetail body."""
        return FailureDetail(kind=self.kind, message=self.message, detail=self.detail)


class InvalidQuantityError(KnownError):
    """Decklist line without a positive leading integer."""

    def __init__(self, line: str, message: str) -> None:
        self.line = line
        super().__init__(
            kind=FailureKind.INVALID_QUANTITY,
            message=message,
            detail=line,
            status_code=422,
        )


class CatalogError(KnownError):
    """Base class for card catalog lookup failures."""


class CardNotFoundError(CatalogError):
    """The catalog could not match the requested name."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(
            kind=FailureKind.CARD_NOT_FOUND,
            message=message,
            detail=name,
            status_code=404,
        )


class CatalogUnavailableError(CatalogError):
    """The catalog could not be reached or answered unexpectedly."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(
            kind=FailureKind.CATALOG_UNAVAILABLE,
            message=message,
            detail=name,
            status_code=503,
        )


class DeckNotFoundError(KnownError):
    """No deck exists with the given id."""

    def __init__(self, deck_id: UUID) -> None:
        self.deck_id = deck_id
        super().__init__(
            kind=FailureKind.DECK_NOT_FOUND,
            message=f"Deck {deck_id} not found",
            status_code=404,
        )


class NoPendingResolutionError(KnownError):
    """A deck was committed without a completed decklist resolution."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.NO_PENDING_RESOLUTION,
            message="Analyze a decklist before creating a deck",
            status_code=409,
        )


class PersistenceError(KnownError):
    """Import or export of the deck store failed."""

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(
            kind=FailureKind.PERSISTENCE_ERROR,
            message=message,
            detail=detail,
            status_code=422,
        )
