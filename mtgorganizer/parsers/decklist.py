"""
Decklist text parser.

THIS MODULE HANDLES SYNTAX ONLY.

Turns free-form decklist text into (quantity, name) entries:

    4 Lightning Bolt
    20   Mountain

Blank lines are skipped. Every other line yields exactly one DecklistLine,
either with a quantity or with the InvalidQuantityError explaining why not.
Card names are NOT checked here; the resolver asks the catalog.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from mtgorganizer.config import INVALID_QUANTITY_MESSAGE
from mtgorganizer.models.failure import InvalidQuantityError

# ASCII digits only; int() alone would also take "+4", "4_0" and non-ASCII digits
_QUANTITY_PATTERN = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class DecklistLine:
    """One non-blank decklist line."""

    line_number: int
    name: str  # Tokens after the quantity, joined by single spaces
    quantity: int | None = None
    error: InvalidQuantityError | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


def parse_quantity(token: str) -> int:
    """
    Parse the leading quantity token of a decklist line.

    Raises:
        InvalidQuantityError: If token is not a positive base-10 integer
    """
    if not _QUANTITY_PATTERN.fullmatch(token):
        raise InvalidQuantityError(token, INVALID_QUANTITY_MESSAGE)

    quantity = int(token)
    if quantity == 0:
        raise InvalidQuantityError(token, INVALID_QUANTITY_MESSAGE)

    return quantity


def parse_line(line: str, line_number: int) -> DecklistLine | None:
    """
    Parse a single decklist line.

    Returns None for blank lines.
    """
    tokens = line.split()
    if not tokens:
        return None

    name = " ".join(tokens[1:])
    try:
        quantity = parse_quantity(tokens[0])
    except InvalidQuantityError as e:
        return DecklistLine(line_number=line_number, name=name, error=e)

    return DecklistLine(line_number=line_number, name=name, quantity=quantity)


def parse_decklist(text: str) -> list[DecklistLine]:
    """
    Parse raw decklist text.

    Args:
        text: Raw decklist, one "<quantity> <card name>" per line

    Returns:
        One DecklistLine per non-blank line, in input order
    """
    entries: list[DecklistLine] = []

    for line_number, line in enumerate(text.splitlines(), 1):
        entry = parse_line(line, line_number)
        if entry is not None:
            entries.append(entry)

    return entries
