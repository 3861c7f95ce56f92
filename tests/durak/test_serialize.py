"""
Tests for game snapshots and per-viewer redaction.
"""

import json

import pytest

from durachok.durak.state import HistoryKind
from durachok.errors import UnknownPlayer

ALICE = ["7 of ♡", "7 of ♢", "2 of ♢", "3 of ♢", "4 of ♢", "5 of ♢"]
BOB = ["9 of ♡", "9 of ♢", "2 of ♤", "3 of ♤", "4 of ♤", "5 of ♤"]


@pytest.fixture
def game(make_game, rig):
    game = rig(make_game(), {"alice": ALICE, "bob": BOB}, stock=["Ace of ♡", "King of ♡"])
    game.attack("alice", "7 of ♡")
    game.defend("bob", "7 of ♡", "9 of ♡")
    game.attack("alice", "7 of ♢")
    return game


def players_by_id(snapshot):
    return {p["id"]: p for p in snapshot["players"]}


def test_viewer_sees_only_their_own_hand(game):
    snapshot = game.serialize("alice")
    players = players_by_id(snapshot)

    assert sorted(players["alice"]["hand"]) == sorted(
        ["2 of ♢", "3 of ♢", "4 of ♢", "5 of ♢"]
    )
    assert "hand" not in players["bob"]
    assert players["bob"]["hand_size"] == 5
    assert snapshot["viewer_id"] == "alice"


def test_no_viewer_hides_every_hand(game):
    snapshot = game.serialize()
    assert all("hand" not in p for p in snapshot["players"])
    assert [p["hand_size"] for p in snapshot["players"]] == [4, 5]


def test_unknown_viewer(game):
    with pytest.raises(UnknownPlayer):
        game.serialize("mallory")


def test_snapshot_contents(game):
    snapshot = game.serialize("bob")
    assert snapshot["game_id"] == game.id
    assert snapshot["stage"] == "ROUND_IN_PROGRESS"
    assert snapshot["current_round"] == 1
    assert snapshot["trump_suit"] == "♣"
    assert snapshot["deck_remaining"] == 2
    assert snapshot["discard_pile_size"] == len(game.discard_pile)
    assert snapshot["table"] == [
        {"attack": "7 of ♡", "cover": "9 of ♡"},
        {"attack": "7 of ♢", "cover": None},
    ]
    assert snapshot["attackers"] == ["alice"]
    assert snapshot["defender"] == "bob"
    assert snapshot["lead_attacker"] == "alice"
    assert snapshot["loser_id"] is None
    assert snapshot["is_draw"] is False
    assert snapshot["rules"]["hand_size"] == 6


def test_history_in_snapshot(game):
    history = game.serialize()["history"]
    assert [h["kind"] for h in history] == ["ATTACK", "DEFEND", "ATTACK"]
    assert history[1] == {
        "sequence": 2,
        "actor": "bob",
        "kind": "DEFEND",
        "payload": {"attacked": "7 of ♡", "covering": "9 of ♡"},
    }


def test_to_json_round_trips(game):
    data = json.loads(game.to_json("bob"))
    assert data == game.serialize("bob")
    assert "9 of ♢" in players_by_id(data)["bob"]["hand"]


def test_snapshot_does_not_alias_game_state(game):
    snapshot = game.serialize("alice")
    snapshot["history"][0]["payload"]["card"] = "Ace of ♤"
    assert game.history[0].payload["card"] == "7 of ♡"


def test_snapshot_does_not_alias_nested_history(make_game, rig):
    game = rig(make_game(), {"alice": ALICE, "bob": BOB}, stock=["Ace of ♡", "King of ♡"])
    game.attack("alice", "7 of ♡")
    game.concede("bob")

    snapshot = game.serialize()
    resolved = snapshot["history"][-1]["payload"]
    resolved["cards"].append("Ace of ♣")
    resolved["drawn"]["alice"] = 6
    snapshot["history"][1]["payload"]["cards"].clear()

    assert game.history[-1].payload["cards"] == ("7 of ♡",)
    assert dict(game.history[-1].payload["drawn"]) == {"alice": 1}
    assert game.history[1].payload["cards"] == ("7 of ♡",)
    assert game.serialize()["history"][-1]["payload"]["cards"] == ["7 of ♡"]


def test_history_records_are_read_only(game):
    record = game.history[0]
    with pytest.raises(TypeError):
        record.payload["card"] = "Ace of ♣"
    with pytest.raises(AttributeError):
        record.payload = {}
    assert game.history[0].payload["card"] == "7 of ♡"


def test_recorded_payload_is_copied(make_game, rig):
    game = rig(make_game(), {"alice": ALICE, "bob": BOB})
    payload = {"cards": ["7 of ♡"]}
    game._record("alice", HistoryKind.CONCEDE, payload)
    payload["cards"].append("Ace of ♣")

    assert game.history[-1].payload["cards"] == ("7 of ♡",)
