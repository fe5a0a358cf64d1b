"""Roster Repositories - Database operations for the player registry and predefined teams."""

import sqlite3
from abc import abstractmethod
from typing import Dict, Optional, List

from .base import BaseRepository
from ..models.player import Player, Team


class PlayerRepository(BaseRepository[Player]):
    """Abstract interface for the player registry."""

    def load_roster(self) -> List[Player]:
        """Every registered player, ordered by name."""
        return sorted(self.get_all(), key=lambda p: p.name.lower())

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Player]:
        """Find a player by (partial, case-insensitive) name."""
        pass


class TeamRepository(BaseRepository[Team]):
    """Abstract interface for predefined teams."""

    def load_teams(self) -> List[Team]:
        """Every predefined team, ordered by name."""
        return sorted(self.get_all(), key=lambda t: t.name.lower())


class SQLitePlayerRepository(PlayerRepository):
    """SQLite implementation of PlayerRepository."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _row_to_player(self, row) -> Player:
        return Player(
            id=row['player_id'],
            name=row['name'],
            number=row['number'] or '',
            position=row['position'],
        )

    def get_by_id(self, player_id: str) -> Optional[Player]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM players WHERE player_id = ?",
                (player_id,)
            ).fetchone()
            return self._row_to_player(row) if row else None
        finally:
            conn.close()

    def get_by_name(self, name: str) -> Optional[Player]:
        conn = self._get_connection()
        try:
            row = conn.execute(
                "SELECT * FROM players WHERE name LIKE ? ORDER BY name LIMIT 1",
                (f"%{name}%",)
            ).fetchone()
            return self._row_to_player(row) if row else None
        finally:
            conn.close()

    def get_all(self) -> List[Player]:
        conn = self._get_connection()
        try:
            cursor = conn.execute("SELECT * FROM players ORDER BY name")
            return [self._row_to_player(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def save(self, player: Player) -> None:
        conn = self._get_connection()
        try:
            conn.execute("""
                INSERT OR REPLACE INTO players (player_id, name, number, position)
                VALUES (?, ?, ?, ?)
            """, (player.id, player.name, player.number, player.position))
            conn.commit()
        finally:
            conn.close()

    def delete(self, player_id: str) -> bool:
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM team_players WHERE player_id = ?", (player_id,))
            cursor = conn.execute("DELETE FROM players WHERE player_id = ?", (player_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()


class SQLiteTeamRepository(TeamRepository):
    """SQLite implementation of TeamRepository."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _player_ids(self, conn: sqlite3.Connection, team_id: str) -> List[str]:
        cursor = conn.execute(
            "SELECT player_id FROM team_players WHERE team_id = ? ORDER BY slot",
            (team_id,)
        )
        return [row['player_id'] for row in cursor.fetchall()]

    def get_by_id(self, team_id: str) -> Optional[Team]:
        conn = self._get_connection()
        try:
            row = conn.execute("SELECT * FROM teams WHERE team_id = ?", (team_id,)).fetchone()
            if row is None:
                return None
            return Team(id=row['team_id'], name=row['name'], player_ids=self._player_ids(conn, team_id))
        finally:
            conn.close()

    def get_all(self) -> List[Team]:
        conn = self._get_connection()
        try:
            rows = conn.execute("SELECT * FROM teams ORDER BY name").fetchall()
            return [
                Team(id=row['team_id'], name=row['name'], player_ids=self._player_ids(conn, row['team_id']))
                for row in rows
            ]
        finally:
            conn.close()

    def save(self, team: Team) -> None:
        conn = self._get_connection()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO teams (team_id, name) VALUES (?, ?)",
                (team.id, team.name)
            )
            conn.execute("DELETE FROM team_players WHERE team_id = ?", (team.id,))
            conn.executemany(
                "INSERT INTO team_players (team_id, player_id, slot) VALUES (?, ?, ?)",
                [(team.id, pid, slot) for slot, pid in enumerate(team.player_ids)]
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, team_id: str) -> bool:
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM team_players WHERE team_id = ?", (team_id,))
            cursor = conn.execute("DELETE FROM teams WHERE team_id = ?", (team_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()


class MockPlayerRepository(PlayerRepository):
    """In-memory mock for testing."""

    def __init__(self, players: Optional[List[Player]] = None):
        self.data: Dict[str, Player] = {p.id: p for p in players or []}

    def get_by_id(self, player_id: str) -> Optional[Player]:
        return self.data.get(player_id)

    def get_by_name(self, name: str) -> Optional[Player]:
        for player in self.data.values():
            if name.lower() in player.name.lower():
                return player
        return None

    def get_all(self) -> List[Player]:
        return list(self.data.values())

    def save(self, player: Player) -> None:
        self.data[player.id] = player

    def delete(self, player_id: str) -> bool:
        if player_id in self.data:
            del self.data[player_id]
            return True
        return False


class MockTeamRepository(TeamRepository):
    """In-memory mock for testing."""

    def __init__(self, teams: Optional[List[Team]] = None):
        self.data: Dict[str, Team] = {t.id: t for t in teams or []}

    def get_by_id(self, team_id: str) -> Optional[Team]:
        return self.data.get(team_id)

    def get_all(self) -> List[Team]:
        return list(self.data.values())

    def save(self, team: Team) -> None:
        self.data[team.id] = team

    def delete(self, team_id: str) -> bool:
        if team_id in self.data:
            del self.data[team_id]
            return True
        return False
