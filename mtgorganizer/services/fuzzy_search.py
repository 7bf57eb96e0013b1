"""
Fuzzy card search.

Ranks the card index against a query with a subsequence matcher in the
style of fzf/skim: every query character must appear in the name in
order, and the best alignment is scored.

Scoring (case-insensitive):
- Each matched character: SCORE_MATCH
- Match at a word start: + BONUS_BOUNDARY ("b" in "Lightning Bolt")
- Match at a lower->upper transition: + BONUS_CAMEL
- Match right after the previous match: + at least BONUS_CONSECUTIVE
- First query character: bonus multiplied by FIRST_CHAR_MULTIPLIER
- Skipped characters between matches: GAP_START, then GAP_EXTENSION each

Names the query is not a subsequence of do not match and are left out
of the results entirely.
"""

from collections.abc import Sequence

from mtgorganizer.models.card import IndexedCard

SCORE_MATCH = 16
BONUS_BOUNDARY = 8
BONUS_CAMEL = 7
BONUS_CONSECUTIVE = 4
FIRST_CHAR_MULTIPLIER = 2
GAP_START = -3
GAP_EXTENSION = -1


def _char_bonus(text: str, pos: int) -> int:
    """Positional bonus for matching text[pos]."""
    char = text[pos]
    if not char.isalnum():
        return 0
    if pos == 0:
        return BONUS_BOUNDARY

    prev = text[pos - 1]
    if not prev.isalnum():
        return BONUS_BOUNDARY
    if prev.islower() and char.isupper():
        return BONUS_CAMEL
    return 0


def _fold(text: str) -> str:
    """Lowercase without changing length (str.lower() expands "İ" to two chars)."""
    return "".join(c.lower()[0] for c in text)


def fuzzy_score(query: str, text: str) -> int | None:
    """
    Score how well query fuzzy-matches text.

    Args:
        query: Search string
        text: Candidate card name

    Returns:
        Non-negative score (higher is better), or None when query is not a
        subsequence of text. An empty query scores 0 against anything.
    """
    if not query:
        return 0

    needle = _fold(query)
    haystack = _fold(text)
    n = len(haystack)
    if len(needle) > n:
        return None

    bonuses = [_char_bonus(text, j) for j in range(n)]

    # prev[j]: best score with the previous query char matched at text[j]
    prev: list[int | None] = []
    for j in range(n):
        if haystack[j] == needle[0]:
            prev.append(SCORE_MATCH + bonuses[j] * FIRST_CHAR_MULTIPLIER)
        else:
            prev.append(None)

    for qc in needle[1:]:
        cur: list[int | None] = [None] * n
        gap_best: int | None = None

        for j in range(n):
            if gap_best is not None:
                gap_best += GAP_EXTENSION
            earlier = prev[j - 2] if j >= 2 else None
            if earlier is not None:
                candidate = earlier + GAP_START
                if gap_best is None or candidate > gap_best:
                    gap_best = candidate

            if haystack[j] != qc:
                continue

            best: int | None = None
            before = prev[j - 1] if j >= 1 else None
            if before is not None:
                best = before + SCORE_MATCH + max(bonuses[j], BONUS_CONSECUTIVE)
            if gap_best is not None:
                gapped = gap_best + SCORE_MATCH + bonuses[j]
                if best is None or gapped > best:
                    best = gapped
            cur[j] = best

        prev = cur

    scores = [s for s in prev if s is not None]
    if not scores:
        return None
    return max(max(scores), 0)


def search(query: str, index: Sequence[IndexedCard], limit: int) -> list[IndexedCard]:
    """
    Return the top matches for query from the index.

    Args:
        query: Search string (empty matches everything with equal score)
        index: Card index snapshot
        limit: Maximum number of results

    Returns:
        Up to limit matching entries, best first. Ties keep index order.

    Raises:
        ValueError: If limit is negative
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    scored: list[tuple[int, int, IndexedCard]] = []
    for position, entry in enumerate(index):
        score = fuzzy_score(query, entry.name)
        if score is not None:
            scored.append((score, position, entry))

    scored.sort(key=lambda item: (-item[0], item[1]))

    return [entry for _, _, entry in scored[:limit]]
