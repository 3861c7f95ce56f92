"""
Rules and configuration for a Durak game.

`DurakRules` holds the tunable numbers of the game. `beats` is the single
source of truth for cover legality, and the first-player policies decide
who leads the opening round.
"""

from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Optional, Sequence

from durachok.common.card import Card, Suit
from durachok.common.hand import Hand
from durachok.durak.constants import (
    FIRST_SEAT,
    HAND_SIZE,
    LOWEST_TRUMP,
    MAX_PLAYERS,
    MAX_TABLE_CARDS,
    MIN_PLAYERS,
)

# Picks the seat index of the opening attacker from the dealt hands
FirstPlayerPolicy = Callable[[Sequence[Hand], Suit], int]


def beats(covering: Card, attacked: Card, trump: Suit) -> bool:
    """
    Check whether `covering` may cover `attacked`.

    A cover must be of the attacked suit and strictly higher, or a trump
    played on a non-trump. Trump on trump therefore needs a higher rank.
    """
    if covering.suit == attacked.suit:
        return covering.rank.rank_value > attacked.rank.rank_value
    return covering.suit == trump


def lowest_trump_starts(hands: Sequence[Hand], trump: Suit) -> int:
    """
    The holder of the lowest trump leads. If nobody holds a trump, seat 0 leads.
    """
    best_seat, best_value = 0, None
    for seat, hand in enumerate(hands):
        card = hand.lowest_of_suit(trump)
        if card is None:
            continue
        if best_value is None or card.rank.rank_value < best_value:
            best_seat, best_value = seat, card.rank.rank_value
    return best_seat


def first_seat_starts(hands: Sequence[Hand], trump: Suit) -> int:
    """Seat 0 always leads."""
    return 0


FIRST_PLAYER_POLICIES: Dict[str, FirstPlayerPolicy] = {
    LOWEST_TRUMP: lowest_trump_starts,
    FIRST_SEAT: first_seat_starts,
}


@dataclass(frozen=True)
class DurakRules:
    """
    Immutable representation of the rules for a Durak game.

    Attributes:
        hand_size: Cards dealt to each player and refilled to after every round
        max_table_cards: Maximum number of attacks in one round
        min_players: Smallest accepted player count
        max_players: Largest accepted player count
        first_player: Name of the policy choosing the opening attacker
    """

    hand_size: int = HAND_SIZE
    max_table_cards: int = MAX_TABLE_CARDS
    min_players: int = MIN_PLAYERS
    max_players: int = MAX_PLAYERS
    first_player: str = LOWEST_TRUMP

    def __post_init__(self):
        if self.first_player not in FIRST_PLAYER_POLICIES:
            raise ValueError(f"Unknown first player policy: {self.first_player}")
        if self.hand_size < 1 or self.max_table_cards < 1:
            raise ValueError("Hand size and table size must be positive")
        if not MIN_PLAYERS <= self.min_players <= self.max_players <= MAX_PLAYERS:
            raise ValueError(
                f"Player limits must satisfy {MIN_PLAYERS} <= min_players <= "
                f"max_players <= {MAX_PLAYERS}"
            )

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "DurakRules":
        """
        Build rules from a plain configuration dict, merged over the defaults.

        Keys that are not rule fields are ignored.
        """
        default_config = {f.name: f.default for f in fields(cls)}
        if config:
            default_config.update(
                {k: v for k, v in config.items() if k in default_config}
            )
        return cls(**default_config)

    @property
    def first_player_policy(self) -> FirstPlayerPolicy:
        return FIRST_PLAYER_POLICIES[self.first_player]

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
