from mtgorganizer.parsers.decklist import DecklistLine, parse_decklist, parse_line, parse_quantity

__all__ = [
    "DecklistLine",
    "parse_decklist",
    "parse_line",
    "parse_quantity",
]
