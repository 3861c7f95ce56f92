"""
Tests for cover legality, first-player policies and rule configuration.
"""

import pytest

from durachok.common.card import Card, Rank, Suit
from durachok.common.deck import generate_deck
from durachok.common.hand import Hand
from durachok.durak.rules import (
    DurakRules,
    beats,
    first_seat_starts,
    lowest_trump_starts,
)


def c(text):
    return Card.from_str(text)


@pytest.mark.parametrize(
    "covering,attacked,expected",
    [
        ("9 of ♡", "7 of ♡", True),
        ("6 of ♡", "7 of ♡", False),
        ("7 of ♡", "7 of ♡", False),
        ("Ace of ♢", "7 of ♡", False),
        ("2 of ♣", "Ace of ♡", True),
        ("2 of ♣", "3 of ♣", False),
        ("4 of ♣", "3 of ♣", True),
        ("Ace of ♡", "2 of ♣", False),
    ],
)
def test_beats(covering, attacked, expected):
    assert beats(c(covering), c(attacked), Suit.CLUBS) is expected


def test_beats_matches_definition_for_every_pair():
    trump = Suit.SPADES
    cards = generate_deck()
    for attacked in cards:
        for covering in cards:
            same_suit_higher = (
                covering.suit == attacked.suit and covering.rank > attacked.rank
            )
            trump_on_plain = covering.suit == trump and attacked.suit != trump
            assert beats(covering, attacked, trump) == (
                same_suit_higher or trump_on_plain
            )


def test_lowest_trump_starts():
    hands = [
        Hand([c("King of ♣"), c("2 of ♡")]),
        Hand([c("6 of ♣"), c("Ace of ♣")]),
        Hand([c("3 of ♡")]),
    ]
    assert lowest_trump_starts(hands, Suit.CLUBS) == 1


def test_lowest_trump_without_trumps_falls_back_to_first_seat():
    hands = [Hand([c("King of ♡")]), Hand([c("2 of ♡")])]
    assert lowest_trump_starts(hands, Suit.CLUBS) == 0


def test_first_seat_starts():
    hands = [Hand([c("King of ♣")]), Hand([c("2 of ♣")])]
    assert first_seat_starts(hands, Suit.CLUBS) == 0


class TestDurakRules:
    def test_defaults(self):
        rules = DurakRules()
        assert rules.hand_size == 6
        assert rules.max_table_cards == 6
        assert (rules.min_players, rules.max_players) == (1, 8)
        assert rules.first_player_policy is lowest_trump_starts

    def test_from_config_merges_defaults(self):
        rules = DurakRules.from_config({"first_player": "first_seat", "colour": "red"})
        assert rules.first_player_policy is first_seat_starts
        assert rules.hand_size == 6

    def test_from_empty_config(self):
        assert DurakRules.from_config() == DurakRules()

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            DurakRules(first_player="youngest")

    @pytest.mark.parametrize(
        "limits",
        [
            {"min_players": 0},
            {"max_players": 9},
            {"min_players": 5, "max_players": 4},
            {"min_players": -1, "max_players": 0},
        ],
    )
    def test_player_limits_out_of_range(self, limits):
        with pytest.raises(ValueError):
            DurakRules(**limits)

    def test_player_limits_within_range(self):
        rules = DurakRules(min_players=2, max_players=4)
        assert (rules.min_players, rules.max_players) == (2, 4)

    def test_rules_are_frozen(self):
        rules = DurakRules()
        with pytest.raises(Exception):
            rules.hand_size = 7

    def test_to_dict(self):
        assert DurakRules().to_dict()["first_player"] == "lowest_trump"


def test_rank_comparison_used_by_beats():
    assert Rank.KING > Rank.QUEEN
