"""
Game engine - Clock, phase state machine and stat consistency.

Modules:
    ledger - Per-player counters and derived team score
    roster - On-court/bench partition and substitutions
    phases - Phase state machine and period arithmetic
    ticker - Wall-clock countdown and catch-up after suspension
    reducer - Pure (game, action) -> result transition function
    orchestrator - Snapshot holder and ticker owner
    setup - Settings validation and game creation
"""

from .actions import (
    ACTION_TYPES,
    AddPlayers,
    ApplyStat,
    BeginBreak,
    EndGame,
    GameCommand,
    NextPeriod,
    PauseTimer,
    PrevPeriod,
    Reconcile,
    ResetTimer,
    StartTimer,
    Substitute,
    Tick,
    UseTimeout,
)
from .orchestrator import GameOrchestrator
from .reducer import reduce
from .result import ActionResult, ActionStatus, FoulOut, GuardRejection, InvalidGameSetup
from .setup import create_game, validate_settings

__all__ = [
    'ACTION_TYPES',
    'AddPlayers',
    'ApplyStat',
    'BeginBreak',
    'EndGame',
    'GameCommand',
    'NextPeriod',
    'PauseTimer',
    'PrevPeriod',
    'Reconcile',
    'ResetTimer',
    'StartTimer',
    'Substitute',
    'Tick',
    'UseTimeout',
    'GameOrchestrator',
    'reduce',
    'ActionResult',
    'ActionStatus',
    'FoulOut',
    'GuardRejection',
    'InvalidGameSetup',
    'create_game',
    'validate_settings',
]
