"""Game Repository - Storage for the live game snapshot and finished games."""

import json
import logging
import sqlite3
from abc import abstractmethod
from typing import Dict, List, Optional

from .base import BaseRepository
from ..models.game import Game

logger = logging.getLogger(__name__)


class GameRepository(BaseRepository[Game]):
    """
    Abstract interface for game data access.

    The BaseRepository methods address the game history; the *_current
    methods manage the single game being scored.
    """

    @abstractmethod
    def load_current(self) -> Optional[Game]:
        """Get the game being scored, if any."""
        pass

    @abstractmethod
    def save_current(self, game: Game) -> None:
        """Replace the stored current game."""
        pass

    @abstractmethod
    def clear_current(self) -> None:
        """Forget the current game."""
        pass

    @abstractmethod
    def get_history(self, limit: Optional[int] = None) -> List[Game]:
        """Finished games, most recent first."""
        pass

    def save_to_history(self, game: Game) -> None:
        """Archive a game and clear it as the current game."""
        self.save(game)
        current = self.load_current()
        if current is not None and current.id == game.id:
            self.clear_current()

    def get_all(self) -> List[Game]:
        return self.get_history()


class SQLiteGameRepository(GameRepository):
    """SQLite implementation of GameRepository. Snapshots are stored as JSON."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def load_current(self) -> Optional[Game]:
        conn = self._get_connection()
        try:
            row = conn.execute("SELECT snapshot FROM current_game WHERE slot = 1").fetchone()
            if row is None:
                return None
            return Game.from_dict(json.loads(row['snapshot']))
        finally:
            conn.close()

    def save_current(self, game: Game) -> None:
        conn = self._get_connection()
        try:
            conn.execute("""
                INSERT OR REPLACE INTO current_game (slot, game_id, snapshot, updated_at)
                VALUES (1, ?, ?, CURRENT_TIMESTAMP)
            """, (game.id, json.dumps(game.to_dict())))
            conn.commit()
        finally:
            conn.close()

    def clear_current(self) -> None:
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM current_game")
            conn.commit()
        finally:
            conn.close()

    def get_by_id(self, game_id: str) -> Optional[Game]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT snapshot FROM game_history WHERE game_id = ?",
                (game_id,)
            ).fetchone()
            if row is None:
                return None
            return Game.from_dict(json.loads(row['snapshot']))
        finally:
            conn.close()

    def get_history(self, limit: Optional[int] = None) -> List[Game]:
        conn = self._get_connection()
        try:
            query = "SELECT snapshot FROM game_history ORDER BY end_time DESC, saved_at DESC"
            params = ()
            if limit is not None:
                query += " LIMIT ?"
                params = (limit,)
            cursor = conn.execute(query, params)
            return [Game.from_dict(json.loads(row['snapshot'])) for row in cursor.fetchall()]
        finally:
            conn.close()

    def save(self, game: Game) -> None:
        conn = self._get_connection()
        try:
            conn.execute("""
                INSERT OR REPLACE INTO game_history
                (game_id, home_name, away_name, home_score, away_score,
                 winning_team, start_time, end_time, snapshot)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                game.id, game.home_team.name, game.away_team.name,
                game.home_team.score, game.away_team.score,
                game.winning_team, game.start_time, game.end_time,
                json.dumps(game.to_dict()),
            ))
            conn.commit()
            logger.info("Archived game %s", game.id)
        finally:
            conn.close()

    def delete(self, game_id: str) -> bool:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "DELETE FROM game_history WHERE game_id = ?",
                (game_id,)
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()


class MockGameRepository(GameRepository):
    """In-memory mock for testing."""

    def __init__(self):
        self.current: Optional[Game] = None
        self.history: Dict[str, Game] = {}
        self.save_count = 0

    def load_current(self) -> Optional[Game]:
        return self.current

    def save_current(self, game: Game) -> None:
        self.current = game
        self.save_count += 1

    def clear_current(self) -> None:
        self.current = None

    def get_by_id(self, game_id: str) -> Optional[Game]:
        return self.history.get(game_id)

    def get_history(self, limit: Optional[int] = None) -> List[Game]:
        games = list(reversed(list(self.history.values())))
        return games[:limit] if limit is not None else games

    def save(self, game: Game) -> None:
        self.history.pop(game.id, None)
        self.history[game.id] = game

    def delete(self, game_id: str) -> bool:
        if game_id in self.history:
            del self.history[game_id]
            return True
        return False
