from mtgorganizer.api.decks import router as decks_router
from mtgorganizer.api.health import router as health_router
from mtgorganizer.api.search import router as search_router

__all__ = [
    "decks_router",
    "health_router",
    "search_router",
]
