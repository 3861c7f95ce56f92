"""
This module contains the `Hand` class and the round-robin `deal` function.

A hand behaves as a set of cards: the rules never depend on the order the
cards are held in, and a card can only be held once. Insertion order is
kept so hands display and serialize stably.

Classes:

Hand: The cards held by one participant.
"""
from typing import Iterable, Iterator, List, Optional

from durachok.common.card import Card, Suit
from durachok.common.deck import Deck
from durachok.errors import CardNotHeld, InsufficientCards


class Hand:
    """
    The cards held by one participant.
    """

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self._cards: List[Card] = []
        for card in cards or ():
            self.give_card(card)

    @property
    def cards(self) -> List[Card]:
        """Returns a copy of the cards in the hand."""
        return list(self._cards)

    @property
    def size(self) -> int:
        return len(self._cards)

    def give_card(self, card: Card) -> None:
        """
        Adds a card to the hand.

        Args:
            card: The card to add.

        Raises:
            ValueError: If the card is already in the hand.
        """
        if card in self._cards:
            raise ValueError(f"Card {card} is already in hand.")
        self._cards.append(card)

    def take_card(self, card: Card) -> Card:
        """
        Removes a card from the hand.

        Args:
            card: The card to remove.

        Returns:
            The removed card.

        Raises:
            CardNotHeld: If the card is not found in the hand.
        """
        try:
            self._cards.remove(card)
        except ValueError as exc:
            raise CardNotHeld(f"Card {card} not found in hand.") from exc
        return card

    def lowest_of_suit(self, suit: Suit) -> Optional[Card]:
        """Return the lowest ranked card of `suit`, if any is held."""
        of_suit = [card for card in self._cards if card.suit == suit]
        if not of_suit:
            return None
        return min(of_suit, key=lambda card: card.rank.rank_value)

    def sorted(self, trump: Optional[Suit] = None) -> List[Card]:
        """
        Cards ordered for display: by suit then rank, trumps last.
        """
        suit_order = list(Suit)
        return sorted(
            self._cards,
            key=lambda card: (
                card.suit == trump,
                suit_order.index(card.suit),
                card.rank.rank_value,
            ),
        )

    def __contains__(self, card: Card) -> bool:
        return card in self._cards

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards))

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Hand({self._cards!r})"

    def __str__(self) -> str:
        return ", ".join(str(card) for card in self._cards)


def deal(deck: Deck, player_count: int, hand_size: int = 6) -> List[Hand]:
    """
    Deal `hand_size` cards to each of `player_count` hands, one card per hand per pass.

    Args:
        deck: The stock to draw from; cards are taken from its head.
        player_count: Number of hands to deal.
        hand_size: Number of cards each hand receives.

    Returns:
        The dealt hands, in seat order.

    Raises:
        InsufficientCards: If the deck cannot fill every hand.
    """
    needed = player_count * hand_size
    if needed > deck.size:
        raise InsufficientCards(
            f"Dealing {hand_size} cards to {player_count} players needs {needed} "
            f"cards, deck has {deck.size}"
        )

    hands = [Hand() for _ in range(player_count)]
    for _ in range(hand_size):
        for hand in hands:
            hand.give_card(deck.draw(1)[0])
    return hands
