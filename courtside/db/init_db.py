"""
Courtside Database Initialization

Creates the tables the scorebook stores its registry and games in. Safe to
run repeatedly; every statement is CREATE ... IF NOT EXISTS.

Usage:
    python -m courtside.db.init_db
"""

import logging
import os
import sqlite3
from typing import Optional

logger = logging.getLogger(__name__)


def init_database(db_path: Optional[str] = None) -> None:
    """
    Create all database tables.

    Tables created:
        - players: Global player registry
        - teams: Predefined teams
        - team_players: Ordered roster of each predefined team
        - current_game: The single game being scored (JSON snapshot)
        - game_history: Finished games (JSON snapshot plus summary columns)

    Args:
        db_path: Path to the SQLite database file
    """
    from ..config import get_db_path
    if db_path is None:
        db_path = get_db_path()

    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    # =========================================================================
    # PLAYER REGISTRY
    # =========================================================================
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS players (
            player_id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            number TEXT DEFAULT '',
            position TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # =========================================================================
    # TEAMS
    # =========================================================================
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS teams (
            team_id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS team_players (
            team_id TEXT NOT NULL,
            player_id TEXT NOT NULL,
            slot INTEGER NOT NULL,

            PRIMARY KEY (team_id, player_id),
            FOREIGN KEY (team_id) REFERENCES teams(team_id),
            FOREIGN KEY (player_id) REFERENCES players(player_id)
        )
    ''')

    # =========================================================================
    # CURRENT GAME (at most one row)
    # =========================================================================
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS current_game (
            slot INTEGER PRIMARY KEY CHECK (slot = 1),
            game_id TEXT NOT NULL,
            snapshot TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # =========================================================================
    # GAME HISTORY
    # =========================================================================
    cursor.execute('''
        CREATE TABLE IF NOT EXISTS game_history (
            game_id TEXT PRIMARY KEY,
            home_name TEXT NOT NULL,
            away_name TEXT NOT NULL,
            home_score INTEGER,
            away_score INTEGER,
            winning_team TEXT,
            start_time TEXT,
            end_time TEXT,
            snapshot TEXT NOT NULL,
            saved_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    cursor.execute('CREATE INDEX IF NOT EXISTS idx_history_end_time ON game_history(end_time)')

    conn.commit()
    conn.close()
    logger.debug("Database ready at %s", db_path)

if __name__ == '__main__':
    init_database()
