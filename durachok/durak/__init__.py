"""
Durak card game module.

This module provides the game state machine, the table top, the rules and
the state records of a Durak game.
"""

from durachok.durak.game import Game as Game, GameCreation as GameCreation
from durachok.durak.game import create_game as create_game
from durachok.durak.rules import DurakRules as DurakRules, beats as beats
from durachok.durak.state import (
    GameStage as GameStage,
    HistoryKind as HistoryKind,
    HistoryRecord as HistoryRecord,
    Player as Player,
    RoundOutcome as RoundOutcome,
)
from durachok.durak.table import (
    Battle as Battle,
    TableStage as TableStage,
    TableTop as TableTop,
)

__all__ = [
    "Game",
    "GameCreation",
    "create_game",
    "DurakRules",
    "beats",
    "GameStage",
    "HistoryKind",
    "HistoryRecord",
    "Player",
    "RoundOutcome",
    "Battle",
    "TableStage",
    "TableTop",
]
