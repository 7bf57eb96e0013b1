import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mtgorganizer.api import decks_router, health_router, search_router
from mtgorganizer.config import settings
from mtgorganizer.models.failure import KnownError
from mtgorganizer.services.catalog_client import ScryfallCatalogClient
from mtgorganizer.services.decklist_resolver import DecklistResolver
from mtgorganizer.services.image_cache import load_placeholder_image
from mtgorganizer.services.organizer import Organizer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the shared HTTP client and the Organizer; close the client on shutdown."""
    placeholder = load_placeholder_image()
    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        resolver = DecklistResolver(ScryfallCatalogClient(client))
        app.state.organizer = Organizer(resolver, client, placeholder)
        logger.info("%s started", settings.app_name)
        yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("mtg-organizer"),
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(decks_router)
app.include_router(health_router)
app.include_router(search_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render known failures as {kind, message, detail} with their status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_detail().model_dump(mode="json"),
    )
