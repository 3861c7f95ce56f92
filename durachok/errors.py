"""
Error kinds raised by the Durak engine.

Every rule violation is a caller-recoverable validation failure. Each kind
has its own exception class so callers may catch a specific failure, and
every class carries its `ErrorKind` so a hosting service can map failures
onto its own messaging without inspecting exception types.
"""

from enum import Enum, auto


class ErrorKind(Enum):
    """Kinds of validation failure the engine reports."""

    INVALID_PLAYER_COUNT = auto()
    INSUFFICIENT_CARDS = auto()
    TABLE_FULL = auto()
    UNKNOWN_PLAYER = auto()
    INSUFFICIENT_DEFENDER_CARDS = auto()
    INVALID_CARD = auto()
    CARD_NOT_HELD = auto()
    RANK_NOT_ON_TABLE = auto()
    NO_SUCH_ATTACK = auto()
    ILLEGAL_COVER = auto()
    NOT_YOUR_TURN = auto()
    INVALID_CARD_FORMAT = auto()


class DurakError(ValueError):
    """Base class for all engine validation failures."""

    kind: ErrorKind = None

    def __init__(self, message: str = ""):
        if not message and self.kind is not None:
            message = self.kind.name.replace("_", " ").capitalize()
        super().__init__(message)


class InvalidPlayerCount(DurakError):
    kind = ErrorKind.INVALID_PLAYER_COUNT


class InsufficientCards(DurakError):
    kind = ErrorKind.INSUFFICIENT_CARDS


class TableFull(DurakError):
    kind = ErrorKind.TABLE_FULL


class UnknownPlayer(DurakError):
    kind = ErrorKind.UNKNOWN_PLAYER


class InsufficientDefenderCards(DurakError):
    kind = ErrorKind.INSUFFICIENT_DEFENDER_CARDS


class InvalidCard(DurakError):
    kind = ErrorKind.INVALID_CARD


class CardNotHeld(DurakError):
    kind = ErrorKind.CARD_NOT_HELD


class RankNotOnTable(DurakError):
    kind = ErrorKind.RANK_NOT_ON_TABLE


class NoSuchAttack(DurakError):
    kind = ErrorKind.NO_SUCH_ATTACK


class IllegalCover(DurakError):
    kind = ErrorKind.ILLEGAL_COVER


class NotYourTurn(DurakError):
    kind = ErrorKind.NOT_YOUR_TURN


class InvalidCardFormat(InvalidCard):
    """A card string without the `" of "` separator."""

    kind = ErrorKind.INVALID_CARD_FORMAT
