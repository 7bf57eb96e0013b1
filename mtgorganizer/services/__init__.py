"""
Organizer services.

Decklist resolution, deck storage, card search and image caching.
"""

from mtgorganizer.services.card_index import CardIndex, build_card_index
from mtgorganizer.services.catalog_client import (
    ScryfallCatalogClient,
    card_from_scryfall,
    extract_image_ref,
)
from mtgorganizer.services.deck_store import DeckStore
from mtgorganizer.services.decklist_resolver import CardCatalog, DecklistResolver
from mtgorganizer.services.fuzzy_search import fuzzy_score, search
from mtgorganizer.services.image_cache import (
    ImageCache,
    ImageFetcher,
    ImageFetchResult,
    download_image,
    load_placeholder_image,
)
from mtgorganizer.services.organizer import Organizer
from mtgorganizer.services.persistence import (
    export_decks,
    import_decks,
    load_decks,
    save_decks,
)

__all__ = [
    "CardCatalog",
    "CardIndex",
    "DeckStore",
    "DecklistResolver",
    "ImageCache",
    "ImageFetchResult",
    "ImageFetcher",
    "Organizer",
    "ScryfallCatalogClient",
    "build_card_index",
    "card_from_scryfall",
    "download_image",
    "export_decks",
    "extract_image_ref",
    "fuzzy_score",
    "import_decks",
    "load_decks",
    "load_placeholder_image",
    "save_decks",
    "search",
]
