"""
Card search and image endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from pydantic import BaseModel

from mtgorganizer.api.decks import CardProgressResponse
from mtgorganizer.api.dependencies import get_organizer
from mtgorganizer.services.organizer import Organizer

router = APIRouter(tags=["search"])


class SearchResponse(BaseModel):
    query: str
    results: list[CardProgressResponse]
    count: int


@router.get("/search", response_model=SearchResponse)
async def search_cards(
    background_tasks: BackgroundTasks,
    organizer: Annotated[Organizer, Depends(get_organizer)],
    q: str = "",
    limit: Annotated[int | None, Query(ge=0, le=100)] = None,
) -> SearchResponse:
    """
    Fuzzy-search cards across all decks.

    Cards whose name does not contain the query as a subsequence are
    left out. Images for uncached hits are downloaded in the background.
    """
    hits = organizer.search(q, limit)
    background_tasks.add_task(organizer.fetch_images, hits)

    return SearchResponse(
        query=q,
        results=[CardProgressResponse.from_progress(h) for h in hits],
        count=len(hits),
    )


@router.get("/images/{card_name:path}")
async def card_image(
    card_name: str,
    organizer: Annotated[Organizer, Depends(get_organizer)],
) -> Response:
    """Cached image bytes for a card, or the placeholder image."""
    data = organizer.image_for(card_name)
    return Response(content=data, media_type=_media_type(data))


def _media_type(data: bytes) -> str:
    if data.startswith(b"\x89PNG"):
        return "image/png"
    if data.startswith(b"\xff\xd8"):
        return "image/jpeg"
    return "application/octet-stream"
