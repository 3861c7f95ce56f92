"""
The table top: the attack/defense battlefield of the current round.

The table is a small state machine. It starts `EMPTY`, becomes `ATTACKING`
with the first attack and is `ALL_COVERED` whenever every attack has been
covered. Further attacks move it back to `ATTACKING`; `clear` returns it to
`EMPTY` at the end of the round. Each transition checks its own
invariants, so the table can never hold more attacks than allowed or a
cover that does not beat its attack.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Set, Tuple

from durachok.common.card import Card, Rank, Suit
from durachok.durak.constants import MAX_TABLE_CARDS
from durachok.durak.rules import beats
from durachok.errors import (
    IllegalCover,
    InsufficientDefenderCards,
    NoSuchAttack,
    RankNotOnTable,
    TableFull,
)


class TableStage(Enum):
    """Stages of the table top within a round."""

    EMPTY = auto()
    ATTACKING = auto()
    ALL_COVERED = auto()


@dataclass
class Battle:
    """An attacking card and the card covering it, if any."""

    attack: Card
    cover: Optional[Card] = None

    @property
    def is_covered(self) -> bool:
        return self.cover is not None


class TableTop:
    """
    Ordered attack/cover pairs of the current round.
    """

    def __init__(self, max_cards: int = MAX_TABLE_CARDS):
        self.max_cards = max_cards
        self._battles: List[Battle] = []

    @property
    def battles(self) -> Tuple[Battle, ...]:
        return tuple(Battle(b.attack, b.cover) for b in self._battles)

    @property
    def stage(self) -> TableStage:
        if not self._battles:
            return TableStage.EMPTY
        if self.all_covered():
            return TableStage.ALL_COVERED
        return TableStage.ATTACKING

    @property
    def size(self) -> int:
        """Number of attacks on the table."""
        return len(self._battles)

    def is_empty(self) -> bool:
        return not self._battles

    def is_full(self) -> bool:
        return len(self._battles) >= self.max_cards

    def uncovered(self) -> List[Card]:
        return [b.attack for b in self._battles if not b.is_covered]

    def all_covered(self) -> bool:
        """True iff the table holds at least one attack and every attack is covered."""
        return bool(self._battles) and all(b.is_covered for b in self._battles)

    def cards(self) -> List[Card]:
        """Every card on the table, each attack followed by its cover."""
        out = []
        for battle in self._battles:
            out.append(battle.attack)
            if battle.cover is not None:
                out.append(battle.cover)
        return out

    def ranks(self) -> Set[Rank]:
        return {card.rank for card in self.cards()}

    def check_capacity(self, defender_hand_size: int) -> None:
        """
        Raise if no further attack fits on the table.

        Raises:
            TableFull: If the table already holds the maximum number of attacks.
            InsufficientDefenderCards: If the defender could not cover one more attack.
        """
        if self.is_full():
            raise TableFull(f"Table already holds {self.max_cards} attacks")
        outstanding = len(self.uncovered()) + 1
        if outstanding > defender_hand_size:
            raise InsufficientDefenderCards(
                f"Defender holds {defender_hand_size} cards, "
                f"cannot face {outstanding} uncovered attacks"
            )

    def check_rank(self, card: Card) -> None:
        """
        Raise unless `card` may follow up the attacks already made.

        Raises:
            RankNotOnTable: If the table is not empty and no card on it shares the rank.
        """
        if self._battles and card.rank not in self.ranks():
            raise RankNotOnTable(f"No {card.rank} on the table")

    def add_attack(self, card: Card, defender_hand_size: int) -> None:
        """
        Place an uncovered attack on the table.

        The caller has already taken `card` out of the attacker's hand.
        """
        self.check_capacity(defender_hand_size)
        self.check_rank(card)
        self._battles.append(Battle(card))

    def find_uncovered(self, attacked: Card) -> Battle:
        """
        Raises:
            NoSuchAttack: If `attacked` is not an uncovered attack on the table.
        """
        for battle in self._battles:
            if battle.attack == attacked and not battle.is_covered:
                return battle
        raise NoSuchAttack(f"{attacked} is not an uncovered attack")

    def check_cover(self, attacked: Card, covering: Card, trump: Suit) -> Battle:
        """
        Raises:
            NoSuchAttack: If `attacked` is not an uncovered attack on the table.
            IllegalCover: If `covering` does not beat `attacked`.
        """
        battle = self.find_uncovered(attacked)
        if not beats(covering, attacked, trump):
            raise IllegalCover(f"{covering} does not beat {attacked}")
        return battle

    def cover(self, attacked: Card, covering: Card, trump: Suit) -> None:
        """Cover an attack. The caller has already taken `covering` from the defender."""
        battle = self.check_cover(attacked, covering, trump)
        battle.cover = covering

    def clear(self) -> List[Card]:
        """Empty the table and return every card that was on it."""
        cards = self.cards()
        self._battles = []
        return cards

    def to_list(self) -> List[dict]:
        return [
            {
                "attack": str(b.attack),
                "cover": str(b.cover) if b.cover is not None else None,
            }
            for b in self._battles
        ]

    def __str__(self) -> str:
        if not self._battles:
            return "(empty)"
        return " | ".join(
            f"{b.attack} / {b.cover if b.cover is not None else '_'}"
            for b in self._battles
        )
