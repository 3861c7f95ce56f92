"""
This module contains the Deck class, which represents the undealt stock of cards.

Cards are drawn from the head of the stock. The 52-card universe is produced
in rank-major order by `generate_deck` and shuffled with `shuffle_cards`,
which takes the random source as a parameter so games can be replayed from
a seed.

>>> deck = Deck()
>>> deck.size
52
>>> deck.draw(2)
[Card(Suit.HEARTS, Rank.TWO), Card(Suit.DIAMONDS, Rank.TWO)]
>>> deck.size
50
"""

import random
from typing import List, Optional, Union

from durachok.common.card import Card, Rank, Suit


def generate_deck() -> List[Card]:
    """
    Produce the 52-card universe, every suit of Two first, then of Three, and so on.

    :return: A new list of Card instances.
    """
    return [Card(suit, rank) for rank in Rank for suit in Suit]


def shuffle_cards(
    cards: List[Card], rng: Union[random.Random, None] = None
) -> List[Card]:
    """
    Shuffle a list of cards in place with the Fisher-Yates algorithm.

    Each position, from the last down to the second, is swapped with a
    uniformly chosen position at or below it, so every permutation is
    equally likely when `rng` is unbiased.

    :param cards: The cards to shuffle.
    :param rng: Random source to draw from; the module-level generator if omitted.
    :return: The same list, shuffled.
    """
    source = rng if rng is not None else random
    for index in range(len(cards) - 1, 0, -1):
        swap = source.randrange(index + 1)
        cards[index], cards[swap] = cards[swap], cards[index]
    return cards


class Deck:
    """
    A class representing the stock of undealt cards.
    """

    def __init__(self, cards: Union[List[Card], None] = None):
        """
        Initialize a Deck instance.

        :param cards: A list of Card instances to populate the deck (optional).
                      If not provided, the full ordered universe is used.
        >>> Deck().size
        52
        """
        if cards is None:
            self.cards: List[Card] = generate_deck()
        else:
            self.cards = cards.copy()

    def shuffle(self, rng: Union[random.Random, None] = None) -> "Deck":
        """
        Shuffle the cards in the deck.
        """
        shuffle_cards(self.cards, rng)
        return self

    def draw(self, num_cards: int = 1) -> List[Card]:
        """
        Remove up to `num_cards` cards from the head of the deck.

        Running out of cards is not an error: when fewer cards remain, all
        of them are returned, and an empty deck returns an empty list.

        :return: The drawn cards, head first.
        >>> deck = Deck()
        >>> len(deck.draw(60))
        52
        >>> deck.draw()
        []
        """
        count = max(0, min(num_cards, len(self.cards)))
        drawn = self.cards[:count]
        del self.cards[:count]
        return drawn

    def peek(self) -> Optional[Card]:
        """Return the head card without removing it."""
        return self.cards[0] if self.cards else None

    def cycle_head_to_back(self) -> Optional[Card]:
        """
        Move the head card to the back of the deck.

        :return: The moved card, or None if the deck is empty.
        """
        if not self.cards:
            return None
        card = self.cards.pop(0)
        self.cards.append(card)
        return card

    @property
    def size(self) -> int:
        """
        Return the number of remaining cards in the deck.
        """
        return len(self.cards)

    def is_empty(self) -> bool:
        """
        Check if the deck is empty.

        :return: True if the deck is empty, False otherwise.
        """
        return len(self.cards) == 0

    def reset(self):
        """
        Reset the deck to the full ordered universe.
        """
        self.cards = generate_deck()

    def __len__(self) -> int:
        return len(self.cards)

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the deck.
        """
        return f"Deck({[repr(card) for card in self.cards]})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the deck.

        >>> str(Deck())
        'Deck of 52 cards'
        """
        return f"Deck of {len(self.cards)} cards"
