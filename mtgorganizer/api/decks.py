"""
Deck API endpoints.

Analyze a decklist, commit it as a deck, track per-card progress and
import/export the whole deck store.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field

from mtgorganizer.api.dependencies import get_organizer
from mtgorganizer.models.deck import CardProgress, Deck
from mtgorganizer.services.organizer import Organizer

router = APIRouter(prefix="/decks", tags=["decks"])


class AnalyzeRequest(BaseModel):
    """Request model for decklist analysis."""

    decklist: str = Field(..., description="One '<quantity> <card name>' per line")


class ResolvedCardResponse(BaseModel):
    name: str
    image_ref: str
    quantity: int


class ErrorInsightResponse(BaseModel):
    input_name: str
    error_message: str


class AnalyzeResponse(BaseModel):
    """Response model for decklist analysis."""

    cards: list[ResolvedCardResponse]
    errors: list[ErrorInsightResponse]
    unique_count: int
    total_count: int
    summary: str


class CreateDeckRequest(BaseModel):
    name: str = Field(..., min_length=1)


class CardProgressResponse(BaseModel):
    """A card with its have/need counts."""

    deck_id: UUID
    deck_name: str
    name: str
    image_ref: str
    quantity: int
    current_quantity: int
    can_add: bool
    can_remove: bool

    @classmethod
    def from_progress(cls, progress: CardProgress) -> "CardProgressResponse":
        return cls(
            deck_id=progress.deck_id,
            deck_name=progress.deck_name,
            name=progress.name,
            image_ref=progress.image_ref,
            quantity=progress.quantity,
            current_quantity=progress.current_quantity,
            can_add=progress.can_add,
            can_remove=progress.can_remove,
        )


class DeckSummaryResponse(BaseModel):
    id: UUID
    name: str
    current_total: int
    total_quantity: int
    label: str

    @classmethod
    def from_deck(cls, deck: Deck) -> "DeckSummaryResponse":
        return cls(
            id=deck.id,
            name=deck.name,
            current_total=deck.current_total(),
            total_quantity=deck.total_quantity(),
            label=deck.progress_label(),
        )


class DeckResponse(DeckSummaryResponse):
    """Response model for a single deck with its cards."""

    cards: list[CardProgressResponse]


class DeckListResponse(BaseModel):
    decks: list[DeckSummaryResponse]
    count: int


class ImportResponse(BaseModel):
    imported: int


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_decklist(
    body: AnalyzeRequest,
    organizer: Annotated[Organizer, Depends(get_organizer)],
) -> AnalyzeResponse:
    """
    Resolve a decklist against the card catalog.

    The result is staged; POST /decks commits it under a name.
    Per-line failures are reported in `errors`, never as an HTTP error.
    """
    result = await organizer.analyze(body.decklist)

    return AnalyzeResponse(
        cards=[
            ResolvedCardResponse(name=c.card.name, image_ref=c.card.image_ref, quantity=c.quantity)
            for c in result.cards
        ],
        errors=[
            ErrorInsightResponse(input_name=e.input_name, error_message=e.error_message)
            for e in result.errors
        ],
        unique_count=result.unique_count,
        total_count=result.total_count,
        summary=result.summary(),
    )


@router.post("", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
async def create_deck(
    body: CreateDeckRequest,
    organizer: Annotated[Organizer, Depends(get_organizer)],
) -> DeckResponse:
    """
    Commit the staged decklist as a new deck.

    Returns 409 if no decklist has been analyzed.
    """
    deck = organizer.create_deck(body.name)
    return _deck_response(organizer, deck)


@router.get("", response_model=DeckListResponse)
async def list_decks(organizer: Annotated[Organizer, Depends(get_organizer)]) -> DeckListResponse:
    """List all decks with their progress totals."""
    decks = [DeckSummaryResponse.from_deck(d) for d in organizer.store.list_decks()]
    return DeckListResponse(decks=decks, count=len(decks))


@router.get("/export")
async def export_decks(organizer: Annotated[Organizer, Depends(get_organizer)]) -> Response:
    """Export the deck store as JSON."""
    return Response(content=organizer.export_json(), media_type="application/json")


@router.post("/import", response_model=ImportResponse)
async def import_decks(
    request: Request,
    organizer: Annotated[Organizer, Depends(get_organizer)],
) -> ImportResponse:
    """
    Replace every deck with the JSON request body.

    Returns 422 and keeps the current decks if the body is malformed.
    """
    payload = await request.body()
    return ImportResponse(imported=organizer.import_json(payload))


@router.get("/{deck_id}", response_model=DeckResponse)
async def get_deck(
    deck_id: UUID,
    background_tasks: BackgroundTasks,
    organizer: Annotated[Organizer, Depends(get_organizer)],
) -> DeckResponse:
    """
    Get a deck with per-card progress.

    Images for its uncached cards are downloaded after the response is sent.
    Returns 404 if deck not found.
    """
    deck = organizer.store.require_deck(deck_id)
    response = _deck_response(organizer, deck)
    background_tasks.add_task(organizer.fetch_images, organizer.deck_progress(deck_id))
    return response


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_deck(
    deck_id: UUID,
    organizer: Annotated[Organizer, Depends(get_organizer)],
) -> Response:
    """Delete a deck and its search entries. Returns 404 if deck not found."""
    organizer.delete_deck(deck_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{deck_id}/cards/{card_name:path}/add", response_model=CardProgressResponse)
async def add_card(
    deck_id: UUID,
    card_name: str,
    organizer: Annotated[Organizer, Depends(get_organizer)],
) -> CardProgressResponse:
    """Check off one copy of a card. No-op once every copy is checked off."""
    return _card_response(organizer.add_card(deck_id, card_name), card_name)


@router.post("/{deck_id}/cards/{card_name:path}/remove", response_model=CardProgressResponse)
async def remove_card(
    deck_id: UUID,
    card_name: str,
    organizer: Annotated[Organizer, Depends(get_organizer)],
) -> CardProgressResponse:
    """Un-check one copy of a card. No-op at zero."""
    return _card_response(organizer.remove_card(deck_id, card_name), card_name)


def _deck_response(organizer: Organizer, deck: Deck) -> DeckResponse:
    summary = DeckSummaryResponse.from_deck(deck)
    return DeckResponse(
        **summary.model_dump(),
        cards=[CardProgressResponse.from_progress(p) for p in organizer.deck_progress(deck.id)],
    )


def _card_response(progress: CardProgress | None, card_name: str) -> CardProgressResponse:
    if progress is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card '{card_name}' not found in deck",
        )
    return CardProgressResponse.from_progress(progress)
