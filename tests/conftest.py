"""
Pytest configuration for tests at the root level.

This module contains pytest fixtures shared by the engine tests.
"""

import pytest

from durachok.common.card import Card, Rank, Suit
from durachok.common.deck import generate_deck
from durachok.common.hand import Hand
from durachok.durak.game import Game
from durachok.durak.rules import first_seat_starts
from durachok.events import EventBus, EventEmitter


# Reset event bus before each test
@pytest.fixture(scope="function", autouse=True)
def reset_event_bus():
    """Reset the event bus singleton before each test."""
    EventBus.reset()
    yield
    EventBus.reset()


@pytest.fixture
def emitter():
    """A private emitter so tests only see their own game's events."""
    return EventEmitter()


@pytest.fixture
def make_game(emitter):
    """Build a seeded game where seat 0 leads and players are named."""

    def _make(names=("alice", "bob"), seed=7, **kwargs):
        kwargs.setdefault("first_player", first_seat_starts)
        kwargs.setdefault("emitter", emitter)
        return Game(len(names), seed=seed, player_ids=list(names), **kwargs)

    return _make


@pytest.fixture
def rig():
    """
    Replace the hands, stock and trump of a game with known cards.

    Every card not placed in a hand or the stock goes to the discard pile,
    so the game still accounts for all 52 cards.
    """

    def _rig(game, hands, stock=(), trump=Suit.CLUBS):
        used = set()
        for player_id, cards in hands.items():
            hand = Hand(Card.from_str(c) for c in cards)
            game.get_player(player_id).hand = hand
        for player in game.players:
            used.update(player.hand.cards)
        game.deck.cards = [Card.from_str(c) for c in stock]
        used.update(game.deck.cards)
        game.discard_pile = [c for c in generate_deck() if c not in used]
        game.trump_suit = trump
        game.trump_card = Card(trump, Rank.TWO)
        return game

    return _rig
