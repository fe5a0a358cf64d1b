"""Data models - Dataclass definitions for players, teams and games."""

from .player import Player, Team, PlayerStats, StatType
from .game import (
    ActionType,
    ClockState,
    Game,
    GameAction,
    GameSettings,
    Phase,
    SnapshotError,
    TeamGameInfo,
    TeamType,
)

__all__ = [
    'Player',
    'Team',
    'PlayerStats',
    'StatType',
    'ActionType',
    'ClockState',
    'Game',
    'GameAction',
    'GameSettings',
    'Phase',
    'SnapshotError',
    'TeamGameInfo',
    'TeamType',
]
