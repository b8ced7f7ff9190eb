"""
Tests for client matching and label mappings.
"""

import pytest

from models.events import Client, Pet
from models.matching import ClientMappings
from services.client_matching import (
    auto_match,
    client_candidate,
    confident_match,
    get_client_id,
    levenshtein_distance,
    normalize_label,
    remove_mapping,
    remove_mappings_for_client,
    score_client,
    search_clients,
    set_mapping,
    similarity,
    suggest,
)


class RecordingStore:
    """Captures write-through calls."""

    def __init__(self):
        self.calls = []

    def set(self, normalized_label, client_id, label):
        self.calls.append(("set", normalized_label, client_id, label))

    def remove(self, normalized_label):
        self.calls.append(("remove", normalized_label))

    def remove_for_client(self, client_id):
        self.calls.append(("remove_for_client", client_id))


class TestSimilarity:
    def test_normalize_label(self):
        assert normalize_label("  Bella   &  MAX ") == "bella & max"
        assert normalize_label(None) == ""

    @pytest.mark.parametrize(
        "a,b,expected",
        [("kitten", "sitting", 3), ("", "abc", 3), ("abc", "", 3), ("same", "same", 0), ("ab", "ba", 2)],
    )
    def test_levenshtein(self, a, b, expected):
        assert levenshtein_distance(a, b) == expected

    def test_similarity_is_symmetric_and_reflexive(self):
        pairs = [("garcia", "garcai"), ("johnson family", "max - 30"), ("a", "")]
        for a, b in pairs:
            assert similarity(a, b) == similarity(b, a)
            assert similarity(a, a) == 1.0

    def test_similarity_of_empty_strings(self):
        assert similarity("", "") == 1.0

    def test_similarity_range(self):
        assert 0.0 <= similarity("abc", "xyz") <= 1.0
        assert similarity("abc", "xyz") == 0.0


class TestScoring:
    def test_pet_name_signal(self, clients):
        suggestions = auto_match("Max - 30", clients)

        assert len(suggestions) == 1
        top = suggestions[0]
        assert top.client_id == "c1"
        assert top.confidence >= 0.6
        assert any("Max" in reason for reason in top.reasons)
        assert top.source == "auto-match"

    def test_name_and_prefix_are_capped(self, clients):
        confidence, reasons = score_client("Smith - walk", clients[1])
        assert confidence == 1.0
        assert len(reasons) == 2

    def test_first_word_signal(self, clients):
        confidence, reasons = score_client("Johnson - 30", clients[0])
        assert confidence == pytest.approx(0.4)
        assert reasons == ['Client name contains "johnson"']

    def test_similarity_signal(self, clients):
        confidence, reasons = score_client("Garcai", clients[2])
        assert confidence == pytest.approx((4 / 6) * 0.5)
        assert reasons == ["Name similarity: 67%"]

    def test_no_signal(self, clients):
        assert score_client("Dentist", clients[0]) == (0.0, [])

    def test_confidence_bounds(self, clients):
        for title in ["Max - 30", "Smith - walk", "Johnson Family Max", "zzz"]:
            for client in clients:
                confidence, _ = score_client(title, client)
                assert 0.0 <= confidence <= 1.0

    def test_threshold_filters(self, clients):
        assert auto_match("Johnson - 30", clients, threshold=0.5) == []
        assert len(auto_match("Johnson - 30", clients, threshold=0.4)) == 1

    def test_zero_threshold_keeps_every_client(self):
        roster = [Client(id="a", name="Zzz"), Client(id="b", name="Owner", pets=[Pet(name="Max")])]

        suggestions = auto_match("Max - 30", roster, threshold=0)

        assert [s.client_id for s in suggestions] == ["b", "a"]
        assert suggestions[1].confidence == 0.0
        assert suggestions[1].reasons == []

    def test_sorted_by_confidence(self):
        roster = [
            Client(id="a", name="Smithers"),
            Client(id="b", name="Smith"),
        ]
        suggestions = auto_match("Smith - walk", roster)
        assert [s.client_id for s in suggestions] == ["b", "a"]

    def test_larger_roster(self, fake_roster):
        suggestions = auto_match("Pet7 - 30", fake_roster)
        assert suggestions[0].client_id == "fake-7"


class TestMappings:
    def test_set_mapping_returns_new_snapshot(self):
        store = RecordingStore()
        original = ClientMappings()

        updated = set_mapping("  Bella  ", "c1", original, store)

        assert len(original) == 0
        assert get_client_id("bella", updated) == "c1"
        assert store.calls == [("set", "bella", "c1", "Bella")]

    def test_remove_mapping(self):
        store = RecordingStore()
        mappings = ClientMappings({"bella": "c1", "max": "c1"})

        updated = remove_mapping("BELLA", mappings, store)

        assert updated.entries == {"max": "c1"}
        assert store.calls == [("remove", "bella")]

    def test_remove_mappings_for_client(self):
        mappings = ClientMappings({"bella": "c1", "max": "c1", "tucker": "c2"})
        updated = remove_mappings_for_client("c1", mappings)
        assert updated.entries == {"tucker": "c2"}

    def test_existing_mapping_comes_first(self, clients):
        mappings = ClientMappings({"max": "c2"})

        suggestions = suggest("Max - 30", "Max", clients, mappings)

        assert [s.client_id for s in suggestions] == ["c2", "c1"]
        assert suggestions[0].confidence == 1.0
        assert suggestions[0].source == "existing-mapping"

    def test_mapped_client_listed_once(self, clients):
        mappings = ClientMappings({"max": "c1"})
        suggestions = suggest("Max - 30", "max", clients, mappings)
        assert [s.client_id for s in suggestions] == ["c1"]

    def test_mapping_to_unknown_client_is_ignored(self, clients):
        mappings = ClientMappings({"max": "gone"})
        suggestions = suggest("Max - 30", "Max", clients, mappings)
        assert [s.source for s in suggestions] == ["auto-match"]


class TestRosterLookups:
    def test_confident_match(self, clients):
        assert confident_match(clients, "smith") == "c2"
        assert confident_match(clients, None, "Garcia - walk") == "c3"

    def test_ambiguous_match_is_not_confident(self, clients):
        roster = clients + [Client(id="c9", name="Smith")]
        assert confident_match(roster, "Smith") is None

    @pytest.mark.parametrize("title", ["X - 30", "Visit - Bella", "Walk"])
    def test_rejected_candidates(self, title):
        assert client_candidate(None, title) is None

    def test_search_clients(self, clients):
        assert [c.id for c in search_clients(clients, "oak")] == ["c3"]
        assert [c.id for c in search_clients(clients, "example.com")] == ["c2"]
        assert len(search_clients(clients, None)) == 3
