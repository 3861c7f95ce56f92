"""
State models for the Durak card game.

This module provides the player record, the game and round enums, and the
append-only history records a game keeps for audit and replay.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping
from enum import Enum, auto
import uuid

from durachok.common.hand import Hand


class GameStage(Enum):
    """Possible stages of a Durak game."""

    DEALING = auto()
    ROUND_IN_PROGRESS = auto()
    ROUND_RESOLVING = auto()
    GAME_OVER = auto()


class RoundOutcome(Enum):
    """How a round ended."""

    DEFENDED = auto()
    TOOK_CARDS = auto()


class HistoryKind(Enum):
    """Kinds of history record."""

    ATTACK = auto()
    DEFEND = auto()
    PASS = auto()
    CONCEDE = auto()
    ROUND_RESOLVED = auto()


@dataclass
class Player:
    """
    A participant in a Durak game.

    Attributes:
        id: Opaque identifier for this player
        hand: Cards held by the player
        is_attacker: Whether this player may attack this round
        is_defender: Whether this player defends this round
        starts_round: Whether this player leads (opens) the round
        is_out: Whether this player has left play (empty hand, empty stock)
        has_passed: Whether this attacker has declared they are done this round
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    hand: Hand = field(default_factory=Hand)
    is_attacker: bool = False
    is_defender: bool = False
    starts_round: bool = False
    is_out: bool = False
    has_passed: bool = False

    @property
    def card_count(self) -> int:
        """Get the number of cards in the player's hand."""
        return len(self.hand)

    def clear_roles(self) -> None:
        self.is_attacker = False
        self.is_defender = False
        self.starts_round = False
        self.has_passed = False


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class HistoryRecord:
    """
    One entry of a game's history log.

    The payload is frozen on construction: mappings become read-only
    proxies and lists become tuples, so a record never changes once logged.

    Attributes:
        sequence: Position of the record in the log, starting at 1
        actor: ID of the player who acted, or None for engine actions
        kind: What happened
        payload: Details, cards given in their canonical string form
    """

    sequence: int
    actor: Any
    kind: HistoryKind
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "payload", _freeze(self.payload))

    def to_dict(self) -> Dict[str, Any]:
        """Plain, independently mutable copy of the record."""
        return {
            "sequence": self.sequence,
            "actor": self.actor,
            "kind": self.kind.name,
            "payload": _thaw(self.payload),
        }
