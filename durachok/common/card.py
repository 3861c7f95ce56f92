"""
This module defines the `Suit`, `Rank`, and `Card` classes, which are used to represent playing cards.

- `Suit`: An enum representing the four suits of the deck, keyed by the glyph
used in the canonical card string: Hearts, Diamonds, Clubs, and Spades.

- `Rank`: An enum representing the thirteen ranks from Two to Ace. Ranks are
ordered, Ace being the highest, as Durak compares cards by rank.

- `Card`: An immutable playing card. A card has a suit and a rank, compares
equal by both, and converts to and from the canonical string form
``"<rank> of <suit>"`` used on the wire and in the history log.

This module is part of the `durachok` package, a Durak card game engine.
"""

from enum import Enum, unique
from typing import Tuple

from durachok.errors import InvalidCard, InvalidCardFormat

SEPARATOR = " of "


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "♡"
    DIAMONDS = "♢"
    CLUBS = "♣"
    SPADES = "♤"

    def __str__(self) -> str:
        return self.value


@unique
class Rank(Enum):
    """
    Enum for ranks in a card deck, valued by their Durak strength.
    """

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def rank_value(self) -> int:
        """The strength of the rank, used for covering."""
        return self.value

    @property
    def rank_str(self) -> str:
        """The English label used in the canonical card string."""
        if self.value > 10:
            return self.name.capitalize()
        return str(self.value)

    @classmethod
    def from_label(cls, label: str) -> "Rank":
        for rank in cls:
            if rank.rank_str == label:
                return rank
        raise InvalidCard(f"Unknown rank: {label!r}")

    def __lt__(self, other):
        if isinstance(other, Rank):
            return self.value < other.value
        return NotImplemented

    def __str__(self) -> str:
        return self.rank_str


def parse_card(text: str) -> Tuple[Rank, Suit]:
    """
    Split a canonical card string into its rank and suit.

    >>> parse_card("Queen of ♤")
    (<Rank.QUEEN: 12>, <Suit.SPADES: '♤'>)

    :param text: A string such as ``"10 of ♡"``.
    :return: The rank and suit named by the string.
    :raises InvalidCardFormat: If the string has no ``" of "`` separator.
    :raises InvalidCard: If either side is not a known rank label or suit glyph.
    """
    if not isinstance(text, str) or SEPARATOR not in text:
        raise InvalidCardFormat(f"Malformed card string: {text!r}")

    label, glyph = text.split(SEPARATOR, 1)
    rank = Rank.from_label(label)
    try:
        suit = Suit(glyph)
    except ValueError as exc:
        raise InvalidCard(f"Unknown suit: {glyph!r}") from exc
    return rank, suit


class Card:
    """
    Class representing a playing card. This class is a member of a card deck.

    >>> card = Card(Suit.HEARTS, Rank.SEVEN)
    >>> print(card)
    7 of ♡
    >>> Card.from_str("Ace of ♣") == Card(Suit.CLUBS, Rank.ACE)
    True
    """

    __slots__ = ("_suit", "_rank")

    def __init__(self, suit: Suit, rank: Rank):
        """
        Initialize a Card instance.

        :param suit: Suit of the card (one of the Suit enums)
        :param rank: Rank of the card (one of the Rank enums)
        """
        if not isinstance(suit, Suit):
            raise TypeError(f"Invalid suit: {suit}")
        if not isinstance(rank, Rank):
            raise TypeError(f"Invalid rank: {rank}")
        object.__setattr__(self, "_suit", suit)
        object.__setattr__(self, "_rank", rank)

    @classmethod
    def from_str(cls, text: str) -> "Card":
        """Build a card from its canonical string form."""
        rank, suit = parse_card(text)
        return cls(suit, rank)

    @property
    def suit(self) -> Suit:
        return self._suit

    @property
    def rank(self) -> Rank:
        return self._rank

    def __setattr__(self, name, value):
        raise AttributeError("Card is immutable")

    def __eq__(self, other):
        """
        Checks if this card is equal to another card.

        :param other: The other card to compare to.
        :return: True if the cards have the same rank and suit, False otherwise.
        """
        if isinstance(other, Card):
            return self.rank == other.rank and self.suit == other.suit
        return NotImplemented

    def __hash__(self):
        return hash((self.suit, self.rank))

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"Card(Suit.{self.suit.name}, Rank.{self.rank.name})"

    def __str__(self) -> str:
        """
        Provide the canonical string form of the card.

        :return: A string such as ``"Jack of ♢"``.
        """
        return f"{self.rank.rank_str}{SEPARATOR}{self.suit}"
