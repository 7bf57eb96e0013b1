"""
Health check endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from mtgorganizer.api.dependencies import get_organizer
from mtgorganizer.services.organizer import Organizer

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    decks: int
    indexed_cards: int


@router.get("/health", response_model=HealthResponse)
async def health(organizer: Annotated[Organizer, Depends(get_organizer)]) -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running, with store sizes.
    """
    return HealthResponse(
        status="healthy",
        decks=len(organizer.store),
        indexed_cards=len(organizer.index),
    )
