"""Tests for state normalization."""

import json

import pytest

from royale.core.normalize import default_state, normalize_state
from royale.models.state import DEFAULT_LAST_EVENT, GameState


class TestDefaults:
    @pytest.mark.parametrize("raw", [None, [], "players", 42, True])
    def test_non_mapping_yields_default(self, raw):
        assert normalize_state(raw) == default_state()

    def test_empty_mapping_yields_default(self):
        state = normalize_state({})
        assert state.season == 1
        assert state.started is False
        assert state.alive == []
        assert state.eliminated == []
        assert state.winner is None
        assert state.last_event == DEFAULT_LAST_EVENT
        assert state.last_tick is None
        assert state.next_elimination is None
        assert state.pending_reset is False
        assert state.winners == []


class TestScalars:
    @pytest.mark.parametrize("season", [0, -3, 1.5, "2", True, None])
    def test_bad_season_resets_to_one(self, season):
        assert normalize_state({"season": season}).season == 1

    def test_valid_season_kept(self):
        assert normalize_state({"season": 7}).season == 7

    def test_non_bool_started_falls_back(self):
        assert normalize_state({"gameStarted": "yes"}).started is False
        assert normalize_state({"gameStarted": True}).started is True

    def test_non_string_timestamps_dropped(self):
        state = normalize_state({"lastTick": 12345, "nextEliminationTime": ["x"]})
        assert state.last_tick is None
        assert state.next_elimination is None

    def test_non_string_last_event_falls_back(self):
        assert normalize_state({"lastEvent": {"a": 1}}).last_event == DEFAULT_LAST_EVENT


class TestPlayerLists:
    def test_dedup_preserves_first_occurrence(self):
        state = normalize_state({"alivePlayers": ["b", "a", "b", "c", "a"]})
        assert state.alive == ["b", "a", "c"]

    def test_non_strings_and_empty_names_dropped(self):
        state = normalize_state({"alivePlayers": ["a", 3, None, "", {"x": 1}, "b"]})
        assert state.alive == ["a", "b"]

    def test_eliminated_takes_precedence(self):
        state = normalize_state(
            {"alivePlayers": ["a", "b", "c"], "eliminatedPlayers": ["b"]}
        )
        assert state.alive == ["a", "c"]
        assert state.eliminated == ["b"]

    def test_list_field_of_wrong_type_is_empty(self):
        assert normalize_state({"alivePlayers": "a,b"}).alive == []


class TestWinner:
    def test_winner_not_alive_is_cleared(self):
        state = normalize_state({"alivePlayers": ["a"], "winner": "z"})
        assert state.winner is None

    def test_winner_alive_is_kept(self):
        state = normalize_state({"alivePlayers": ["a"], "winner": "a"})
        assert state.winner == "a"

    def test_winner_eliminated_is_cleared(self):
        state = normalize_state(
            {"alivePlayers": ["a"], "eliminatedPlayers": ["a"], "winner": "a"}
        )
        assert state.alive == []
        assert state.winner is None

    def test_pending_reset_without_winner_is_cleared(self):
        assert normalize_state({"pendingReset": True}).pending_reset is False

    def test_pending_reset_with_winner_is_kept(self):
        state = normalize_state({"alivePlayers": ["a"], "winner": "a", "pendingReset": True})
        assert state.pending_reset is True

    @pytest.mark.parametrize("latch", [None, False, "yes"])
    def test_winner_always_latches_reset(self, latch):
        raw = {"alivePlayers": ["a"], "winner": "a", "gameStarted": True}
        if latch is not None:
            raw["pendingReset"] = latch
        state = normalize_state(raw)
        assert state.pending_reset is True
        assert state.started is False


class TestWinnersHistory:
    def test_malformed_records_dropped(self):
        state = normalize_state(
            {
                "winners": [
                    {"season": 1, "username": "a"},
                    {"season": 0, "username": "b"},
                    {"season": 2},
                    {"season": "3", "username": "c"},
                    "d",
                    {"season": 4, "username": "e"},
                ]
            }
        )
        assert [(r.season, r.username) for r in state.winners] == [(1, "a"), (4, "e")]

    def test_dedup_by_season_keeps_first(self):
        state = normalize_state(
            {"winners": [{"season": 2, "username": "x"}, {"season": 2, "username": "y"}]}
        )
        assert len(state.winners) == 1
        assert state.winners[0].username == "x"


class TestIdempotence:
    @pytest.mark.parametrize(
        "raw",
        [
            None,
            {},
            {"season": -1, "alivePlayers": ["a", "a", 1], "winner": "q"},
            {
                "season": 3,
                "gameStarted": True,
                "alivePlayers": ["a", "b", "c"],
                "eliminatedPlayers": ["c", "d", "d"],
                "winner": "a",
                "pendingReset": True,
                "winners": [{"season": 1, "username": "z"}, {"season": 1, "username": "y"}],
                "lastTick": "2026-03-01T12:00:00+00:00",
            },
        ],
    )
    def test_normalize_twice_is_stable(self, raw):
        once = normalize_state(raw)
        twice = normalize_state(once.to_document())
        assert once == twice
        assert json.dumps(once.to_document()) == json.dumps(twice.to_document())

    def test_document_uses_stored_key_names(self):
        doc = GameState(alive=["a"]).to_document()
        assert set(doc) == {
            "season",
            "gameStarted",
            "alivePlayers",
            "eliminatedPlayers",
            "winner",
            "lastEvent",
            "lastTick",
            "nextEliminationTime",
            "pendingReset",
            "winners",
        }
        assert doc["alivePlayers"] == ["a"]
