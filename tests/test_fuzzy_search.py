"""Tests for fuzzy card search."""

import uuid

import pytest

from mtgorganizer.models.card import IndexedCard
from mtgorganizer.services.fuzzy_search import fuzzy_score, search

DECK_A = uuid.uuid4()
DECK_B = uuid.uuid4()


@pytest.fixture
def index() -> list[IndexedCard]:
    return [
        IndexedCard("Lightning Bolt", "", DECK_A),
        IndexedCard("Mountain", "", DECK_A),
        IndexedCard("Monastery Swiftspear", "", DECK_A),
        IndexedCard("Counterspell", "", DECK_B),
        IndexedCard("Lightning Bolt", "", DECK_B),
        IndexedCard("Fireball", "", DECK_B),
        IndexedCard("Fiery Inferno", "", DECK_B),
    ]


class TestFuzzyScore:
    def test_non_subsequence_is_no_match(self) -> None:
        """Query characters must appear in order."""
        assert fuzzy_score("tlob", "Lightning Bolt") is None
        assert fuzzy_score("xyz", "Mountain") is None

    def test_query_longer_than_text(self) -> None:
        """A query longer than the name cannot match."""
        assert fuzzy_score("mountains", "Mountain") is None

    def test_case_insensitive(self) -> None:
        """Case does not affect whether a name matches."""
        assert fuzzy_score("LIGHTNING", "Lightning Bolt") is not None
        assert fuzzy_score("bolt", "Lightning Bolt") is not None

    def test_case_folding_keeps_positions(self) -> None:
        """Names whose lowercase form is longer still score position by position."""
        assert fuzzy_score("o", "İo") is not None
        assert fuzzy_score("inf", "İnferno Titan") == fuzzy_score("inf", "Inferno Titan")
        assert fuzzy_score("tit", "İnferno Titan") == fuzzy_score("tit", "Inferno Titan")

    def test_empty_query_scores_zero(self) -> None:
        """Empty query matches everything equally."""
        assert fuzzy_score("", "Mountain") == 0
        assert fuzzy_score("", "") == 0

    def test_contiguous_prefix_beats_scattered(self) -> None:
        """A contiguous match at a word start outranks a scattered one."""
        contiguous = fuzzy_score("fire", "Fireball")
        scattered = fuzzy_score("fire", "Fiery Inferno")

        assert contiguous is not None and scattered is not None
        assert contiguous > scattered

    def test_word_boundary_bonus(self) -> None:
        """Matching word starts scores higher than mid-word letters."""
        initials = fuzzy_score("lb", "Lightning Bolt")
        inner = fuzzy_score("ib", "Lightning Bolt")

        assert initials is not None and inner is not None
        assert initials > inner

    def test_scores_are_non_negative(self) -> None:
        """Long gaps never push a match below zero."""
        score = fuzzy_score("az", "a" + "-" * 200 + "z")

        assert score is not None
        assert score >= 0


class TestSearch:
    def test_excludes_non_matches(self, index: list[IndexedCard]) -> None:
        """Entries the query does not match are left out."""
        results = search("bolt", index, limit=10)

        assert {r.name for r in results} == {"Lightning Bolt"}
        assert len(results) == 2

    def test_sorted_by_descending_score(self, index: list[IndexedCard]) -> None:
        """Results come best-first."""
        results = search("fire", index, limit=10)
        scores = [fuzzy_score("fire", r.name) for r in results]

        assert [r.name for r in results] == ["Fireball", "Fiery Inferno"]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_index_order(self, index: list[IndexedCard]) -> None:
        """Equal scores keep their index order."""
        results = search("bolt", index, limit=10)

        assert [r.deck_id for r in results] == [DECK_A, DECK_B]

    def test_limit(self, index: list[IndexedCard]) -> None:
        """No more than limit results are returned."""
        assert len(search("", index, limit=3)) == 3
        assert search("n", index, limit=0) == []

    def test_limit_larger_than_index(self, index: list[IndexedCard]) -> None:
        """A generous limit returns every match."""
        assert len(search("", index, limit=100)) == len(index)

    def test_empty_query_is_stable(self, index: list[IndexedCard]) -> None:
        """Empty query returns the index order, identically on every call."""
        first = search("", index, limit=5)
        second = search("", index, limit=5)

        assert first == second == index[:5]

    def test_results_are_subset_of_index(self, index: list[IndexedCard]) -> None:
        """Search never invents entries."""
        for query in ["m", "sp", "ell", "zz", ""]:
            for result in search(query, index, limit=4):
                assert result in index

    def test_expanding_lowercase_name(self, index: list[IndexedCard]) -> None:
        """One unusual name does not break search across the index."""
        titan = IndexedCard("İnferno Titan", "", DECK_A)

        results = search("t", [*index, titan], limit=20)

        assert titan in results

    def test_negative_limit(self, index: list[IndexedCard]) -> None:
        """A negative limit is rejected."""
        with pytest.raises(ValueError, match="limit"):
            search("bolt", index, limit=-1)
