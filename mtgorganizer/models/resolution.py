from dataclasses import dataclass, field

from mtgorganizer.models.card import CardInDeck


@dataclass(frozen=True, slots=True)
class DeckErrorInsight:
    """
    A decklist line that could not be resolved.

    Attributes:
        input_name: Name text as the user typed it
        error_message: Why it failed (catalog text passed through)
    """

    input_name: str
    error_message: str


@dataclass
class ResolutionResult:
    """Result of resolving a decklist."""

    cards: list[CardInDeck] = field(default_factory=list)
    """Resolved entries in decklist order."""

    errors: list[DeckErrorInsight] = field(default_factory=list)
    """Lines that failed, in decklist order."""

    @property
    def unique_count(self) -> int:
        return len(self.cards)

    @property
    def total_count(self) -> int:
        return sum(c.quantity for c in self.cards)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def summary(self) -> str:
        """Human-readable analysis report."""
        lines = [f"Found {self.unique_count} unique cards ({self.total_count} total cards).\n"]
        if self.errors:
            lines.append("Errors:\n")
        for error in self.errors:
            lines.append(f"{error.input_name}: {error.error_message}\n")
        return "".join(lines)
