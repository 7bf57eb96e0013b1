"""Tests for the Organizer application state."""

import json
import uuid
from pathlib import Path

import httpx
import pytest
import respx

from mtgorganizer.models.failure import (
    DeckNotFoundError,
    NoPendingResolutionError,
    PersistenceError,
)
from mtgorganizer.services.organizer import Organizer
from tests.conftest import PLACEHOLDER

BURN = "4 Lightning Bolt\n4 Monastery Swiftspear\n20 Mountain"
CONTROL = "4 Counterspell\n4 Lightning Bolt\n20 Island"


async def make_deck(organizer: Organizer, name: str, decklist: str) -> uuid.UUID:
    await organizer.analyze(decklist)
    return organizer.create_deck(name).id


class TestCreateDeck:
    async def test_analyze_stages_result(self, organizer: Organizer) -> None:
        """analyze() stages the resolution without creating a deck."""
        result = await organizer.analyze(BURN)

        assert organizer.pending is result
        assert len(organizer.store) == 0

    async def test_create_commits_and_indexes(self, organizer: Organizer) -> None:
        """create_deck() stores the staged cards and indexes them."""
        await organizer.analyze(BURN)

        deck = organizer.create_deck("Burn")

        assert organizer.pending is None
        assert organizer.store.get_deck(deck.id) is deck
        assert [e.name for e in organizer.index.entries()] == [
            "Lightning Bolt",
            "Monastery Swiftspear",
            "Mountain",
        ]

    async def test_create_without_analysis(self, organizer: Organizer) -> None:
        """Creating twice from one analysis fails the second time."""
        await make_deck(organizer, "Burn", BURN)

        with pytest.raises(NoPendingResolutionError):
            organizer.create_deck("Burn again")


class TestDeleteDeck:
    async def test_removes_index_entries_and_search_results(self, organizer: Organizer) -> None:
        """Deleting drops the deck's index entries and stale search hits."""
        burn = await make_deck(organizer, "Burn", BURN)
        control = await make_deck(organizer, "Control", CONTROL)
        organizer.search("bolt")
        assert {r.deck_id for r in organizer.search_results} == {burn, control}

        organizer.delete_deck(burn)

        assert all(e.deck_id == control for e in organizer.index.entries())
        assert [r.deck_id for r in organizer.search_results] == [control]

    async def test_unknown_deck(self, organizer: Organizer) -> None:
        """Deleting an unknown deck raises DeckNotFoundError."""
        with pytest.raises(DeckNotFoundError):
            organizer.delete_deck(uuid.uuid4())


class TestCardProgress:
    async def test_add_and_remove(self, organizer: Organizer) -> None:
        """add_card/remove_card return the clamped progress."""
        deck_id = await make_deck(organizer, "Burn", BURN)

        progress = organizer.add_card(deck_id, "Lightning Bolt")
        assert progress is not None
        assert (progress.current_quantity, progress.quantity) == (1, 4)
        assert progress.can_add and progress.can_remove

        organizer.remove_card(deck_id, "Lightning Bolt")
        progress = organizer.remove_card(deck_id, "Lightning Bolt")
        assert progress is not None
        assert progress.current_quantity == 0
        assert not progress.can_remove

    async def test_unknown_card(self, organizer: Organizer) -> None:
        """Cards not in the deck have no progress."""
        deck_id = await make_deck(organizer, "Burn", BURN)

        assert organizer.add_card(deck_id, "Counterspell") is None

    async def test_search_reads_live_quantities(self, organizer: Organizer) -> None:
        """Search hits reflect quantity changes made after indexing."""
        deck_id = await make_deck(organizer, "Burn", BURN)
        organizer.add_card(deck_id, "Mountain")
        organizer.add_card(deck_id, "Mountain")

        hits = organizer.search("mountain")

        assert len(hits) == 1
        assert hits[0].deck_name == "Burn"
        assert (hits[0].current_quantity, hits[0].quantity) == (2, 20)

    async def test_deck_progress(self, organizer: Organizer) -> None:
        """deck_progress lists every card in decklist order."""
        deck_id = await make_deck(organizer, "Burn", BURN)

        names = [p.name for p in organizer.deck_progress(deck_id)]

        assert names == ["Lightning Bolt", "Monastery Swiftspear", "Mountain"]


class TestSearch:
    async def test_default_limit(self, organizer: Organizer) -> None:
        """Search remembers the query and applies the configured limit."""
        await make_deck(organizer, "Burn", BURN)
        await make_deck(organizer, "Control", CONTROL)

        hits = organizer.search("")

        assert organizer.search_query == ""
        assert len(hits) == 6

    async def test_explicit_limit(self, organizer: Organizer) -> None:
        """An explicit limit caps the hits."""
        await make_deck(organizer, "Control", CONTROL)

        assert len(organizer.search("", limit=2)) == 2


class TestImages:
    @respx.mock
    async def test_fetch_images_fills_cache(self, organizer: Organizer) -> None:
        """Uncached hits are downloaded and cached under the card name."""
        respx.get("https://img.test/bolt.jpg").mock(
            return_value=httpx.Response(200, content=b"bolt")
        )
        await make_deck(organizer, "Burn", "4 Lightning Bolt")

        added = await organizer.fetch_images(organizer.search("bolt"))

        assert added == 1
        assert organizer.image_for("Lightning Bolt") == b"bolt"

    @respx.mock
    async def test_cached_images_are_not_refetched(self, organizer: Organizer) -> None:
        """A second fetch for the same card makes no request."""
        route = respx.get("https://img.test/bolt.jpg").mock(
            return_value=httpx.Response(200, content=b"bolt")
        )
        await make_deck(organizer, "Burn", "4 Lightning Bolt")
        await make_deck(organizer, "Other", "1 Lightning Bolt")

        await organizer.fetch_images(organizer.search("bolt"))
        await organizer.fetch_images(organizer.search("bolt"))

        assert route.call_count == 1

    @respx.mock
    async def test_failed_download_keeps_placeholder(self, organizer: Organizer) -> None:
        """Download failures leave the placeholder in place."""
        respx.get("https://img.test/bolt.jpg").mock(return_value=httpx.Response(500))
        await make_deck(organizer, "Burn", "4 Lightning Bolt")

        added = await organizer.fetch_images(organizer.search("bolt"))

        assert added == 0
        assert organizer.image_for("Lightning Bolt") == PLACEHOLDER

    @respx.mock
    async def test_result_for_deleted_deck_is_dropped(self, organizer: Organizer) -> None:
        """Images arriving after their deck was deleted are not cached."""
        deck_id = await make_deck(organizer, "Burn", "4 Lightning Bolt")
        hits = organizer.search("bolt")

        def delete_then_respond(request: httpx.Request) -> httpx.Response:
            organizer.delete_deck(deck_id)
            return httpx.Response(200, content=b"bolt")

        respx.get("https://img.test/bolt.jpg").mock(side_effect=delete_then_respond)

        added = await organizer.fetch_images(hits)

        assert added == 0
        assert "Lightning Bolt" not in organizer.images

    async def test_images_to_fetch_dedupes(self, organizer: Organizer) -> None:
        """Each uncached name appears once."""
        await make_deck(organizer, "Burn", "4 Lightning Bolt")
        await make_deck(organizer, "Other", "1 Lightning Bolt")

        missing = organizer.images_to_fetch(organizer.index.entries())

        assert missing == {"Lightning Bolt": "https://img.test/bolt.jpg"}


class TestImportExport:
    async def test_round_trip(self, organizer: Organizer) -> None:
        """Export then import restores decks with quantities."""
        deck_id = await make_deck(organizer, "Burn", BURN)
        organizer.add_card(deck_id, "Lightning Bolt")
        exported = organizer.export_json()

        organizer.delete_deck(deck_id)
        assert organizer.import_json(exported) == 1

        bolt = organizer.store.find_card(deck_id, "Lightning Bolt")
        assert bolt is not None
        assert bolt.current_quantity == 1
        assert len(organizer.index) == 3

    async def test_import_resets_derived_state(self, organizer: Organizer) -> None:
        """Import clears image cache, pending resolution and search state."""
        await make_deck(organizer, "Burn", BURN)
        organizer.images.store("Lightning Bolt", b"bolt")
        organizer.search("bolt")
        await organizer.analyze(CONTROL)

        organizer.import_json("{}")

        assert len(organizer.store) == 0
        assert len(organizer.index) == 0
        assert len(organizer.images) == 0
        assert organizer.pending is None
        assert organizer.search_query == ""
        assert organizer.search_results == []

    async def test_failed_import_keeps_state(self, organizer: Organizer) -> None:
        """Malformed payloads leave every piece of state untouched."""
        deck_id = await make_deck(organizer, "Burn", BURN)
        organizer.images.store("Lightning Bolt", b"bolt")
        organizer.search("bolt")
        before = json.loads(organizer.export_json())

        with pytest.raises(PersistenceError):
            organizer.import_json('{"broken": ')

        assert json.loads(organizer.export_json()) == before
        assert organizer.store.get_deck(deck_id) is not None
        assert len(organizer.index) == 3
        assert organizer.image_for("Lightning Bolt") == b"bolt"
        assert organizer.search_query == "bolt"

    async def test_save_and_load(self, organizer: Organizer, tmp_path: Path) -> None:
        """Decks saved to a file load back into a fresh state."""
        deck_id = await make_deck(organizer, "Burn", BURN)
        path = tmp_path / "decks.json"
        organizer.save(path)

        organizer.import_json("{}")
        assert organizer.load(path) == 1

        deck = organizer.store.get_deck(deck_id)
        assert deck is not None
        assert deck.name == "Burn"
