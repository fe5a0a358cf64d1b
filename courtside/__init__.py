"""Courtside - Live basketball scorebook.

This package tracks a live basketball game: the clock across warm-up,
periods, breaks, timeouts and overtime, per-player box-score stats, the
team score derived from them, fouls and substitutions.

Modules:
    models - Data models (dataclasses)
    engine - Clock, phase state machine, stat ledger and orchestrator
    db - Database repositories
    reports - Box score and score-by-period views
    monitoring - Sentry error tracking
    config - Configuration
    cli - Command-line scorebook
"""

from .config import Config, ClockConfig
from .engine import GameOrchestrator, create_game, reduce

__all__ = [
    'Config',
    'ClockConfig',
    'GameOrchestrator',
    'create_game',
    'reduce',
]

__version__ = '1.0.0'
