"""
Decklist Resolution Service.

Turns raw decklist text into canonical CardInDeck entries plus per-line
errors.

INVARIANTS:
1. Lines are independent: a failing line never aborts the others
2. Output order follows input order, however lookups overlap in time
3. Every non-blank line lands in exactly one of cards / errors
4. Resolved entries use the catalog's spelling, never the user's
5. No deck store side effects; committing is the caller's decision
"""

import asyncio
import logging
from typing import Protocol

from mtgorganizer.config import INVALID_QUANTITY_MESSAGE, MISSING_NAME_MESSAGE, settings
from mtgorganizer.models.card import Card, CardInDeck
from mtgorganizer.models.failure import CatalogError
from mtgorganizer.models.resolution import DeckErrorInsight, ResolutionResult
from mtgorganizer.parsers.decklist import DecklistLine, parse_decklist

logger = logging.getLogger(__name__)


class CardCatalog(Protocol):
    """Anything that can turn a typed name into a canonical card."""

    async def lookup_fuzzy(self, name: str) -> Card: ...


class DecklistResolver:
    """
    Resolves decklist text against a card catalog.

    Usage:
        resolver = DecklistResolver(ScryfallCatalogClient(http_client))
        result = await resolver.resolve("4 Lightning Bolt\\n20 Mountain")
    """

    def __init__(self, catalog: CardCatalog, max_concurrency: int | None = None) -> None:
        self._catalog = catalog
        limit = max_concurrency if max_concurrency is not None else settings.max_concurrent_lookups
        if limit < 1:
            raise ValueError(f"max_concurrency must be at least 1, got {limit}")
        self._max_concurrency = limit

    async def resolve(self, raw_text: str) -> ResolutionResult:
        """
        Resolve a decklist.

        Args:
            raw_text: Free-form decklist, one "<quantity> <name>" per line

        Returns:
            ResolutionResult with resolved cards and per-line errors
        """
        entries = parse_decklist(raw_text)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(entry: DecklistLine) -> CardInDeck | DeckErrorInsight:
            async with semaphore:
                return await self._resolve_line(entry)

        # gather() returns results in argument order
        outcomes = await asyncio.gather(*(bounded(entry) for entry in entries))

        result = ResolutionResult()
        for outcome in outcomes:
            if isinstance(outcome, CardInDeck):
                result.cards.append(outcome)
            else:
                result.errors.append(outcome)

        logger.info(
            "Resolved decklist: %d lines, %d cards, %d errors",
            len(entries),
            len(result.cards),
            len(result.errors),
        )
        return result

    async def _resolve_line(self, entry: DecklistLine) -> CardInDeck | DeckErrorInsight:
        """Resolve one parsed line. Returns the entry or the reason it failed."""
        if entry.error is not None or entry.quantity is None:
            message = entry.error.message if entry.error is not None else INVALID_QUANTITY_MESSAGE
            return DeckErrorInsight(entry.name, message)

        if not entry.name:
            return DeckErrorInsight(entry.name, MISSING_NAME_MESSAGE)

        try:
            card = await self._catalog.lookup_fuzzy(entry.name)
        except CatalogError as e:
            logger.debug("Line %d (%r) failed: %s", entry.line_number, entry.name, e.message)
            return DeckErrorInsight(entry.name, e.message)

        return CardInDeck(card=card, quantity=entry.quantity, current_quantity=0)
