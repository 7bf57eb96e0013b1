"""
Import a decklist file into a JSON deck store.

Resolves every line against Scryfall, prints the analysis report and saves
the new deck next to any decks already in the store file.

    python -m mtgorganizer.jobs.import_decklist burn.txt --name Burn --store decks.json
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx

from mtgorganizer.config import settings
from mtgorganizer.models.failure import PersistenceError
from mtgorganizer.services.catalog_client import ScryfallCatalogClient
from mtgorganizer.services.decklist_resolver import DecklistResolver
from mtgorganizer.services.image_cache import load_placeholder_image
from mtgorganizer.services.organizer import Organizer

logger = logging.getLogger(__name__)


async def run_import(decklist_path: Path, deck_name: str, store_path: Path) -> int:
    """
    Resolve a decklist file and append it to the store file.

    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    try:
        text = decklist_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Could not read decklist %s: %s", decklist_path, e)
        return 1

    async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
        organizer = Organizer(
            DecklistResolver(ScryfallCatalogClient(client)),
            client,
            load_placeholder_image(),
        )

        try:
            if store_path.exists():
                organizer.load(store_path)

            result = await organizer.analyze(text)
            print(result.summary(), end="")

            if not result.cards:
                logger.warning("No cards resolved; %s left unchanged", store_path)
                return 1

            deck = organizer.create_deck(deck_name)
            organizer.save(store_path)
        except PersistenceError as e:
            logger.error("%s: %s", e.message, e.detail)
            return 1

    logger.info("Saved deck %r (%s) to %s", deck.name, deck.id, store_path)
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Import a decklist into a deck store file")
    parser.add_argument("decklist", type=Path, help="Text file, one '<quantity> <name>' per line")
    parser.add_argument("--name", required=True, help="Name of the new deck")
    parser.add_argument("--store", type=Path, default=Path("decks.json"), help="Deck store file")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    sys.exit(asyncio.run(run_import(args.decklist, args.name, args.store)))


if __name__ == "__main__":
    main()
