"""
Card primitives shared by the engine: cards, the stock and hands.
"""

from durachok.common.card import Card, Rank, Suit, parse_card
from durachok.common.deck import Deck, generate_deck, shuffle_cards
from durachok.common.hand import Hand, deal

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "parse_card",
    "Deck",
    "generate_deck",
    "shuffle_cards",
    "Hand",
    "deal",
]
