"""Database layer - Repository pattern implementations."""

from .base import BaseRepository
from .init_db import init_database
from .game import GameRepository, SQLiteGameRepository, MockGameRepository
from .roster import (
    PlayerRepository,
    TeamRepository,
    SQLitePlayerRepository,
    SQLiteTeamRepository,
    MockPlayerRepository,
    MockTeamRepository,
)

__all__ = [
    # Base
    'BaseRepository',
    'init_database',
    # Game
    'GameRepository',
    'SQLiteGameRepository',
    'MockGameRepository',
    # Roster
    'PlayerRepository',
    'TeamRepository',
    'SQLitePlayerRepository',
    'SQLiteTeamRepository',
    'MockPlayerRepository',
    'MockTeamRepository',
]
