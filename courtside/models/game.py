from copy import deepcopy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from .player import Player, PlayerStats


class SnapshotError(ValueError):
    """Raised when a stored game snapshot cannot be decoded."""


class Phase(Enum):
    """Mode of the game clock."""
    NOT_STARTED = "not_started"
    WARMUP = "warmup"
    IN_PROGRESS = "in_progress"
    TIMEOUT = "timeout"
    QUARTER_BREAK = "quarter_break"
    HALFTIME = "halftime"
    OVERTIME_BREAK = "overtime_break"
    FINISHED = "finished"


class TeamType(Enum):
    HOME = "home"
    AWAY = "away"

    @property
    def attr(self) -> str:
        return f"{self.value}_team"


class ActionType(Enum):
    """Kinds of entries in the game action log."""
    STAT_UPDATE = "stat_update"
    SCORE_UPDATE = "score_update"
    FOUL_UPDATE = "foul_update"
    SUBSTITUTION = "substitution"
    TIMER_CHANGE = "timer_change"
    PLAYER_ADDED = "player_added_to_team"
    TIMEOUT_USED = "timeout_used"


@dataclass(frozen=True)
class GameSettings:
    """Rules for one game. Fixed once the game has been created."""
    quarters: int = 4
    quarter_duration: int = 10 * 60
    overtime_duration: int = 5 * 60
    break_duration: int = 60
    fouls_for_bonus: int = 5
    max_personal_fouls: int = 5
    allow_foul_outs: bool = False

    @property
    def halftime_duration(self) -> int:
        return 2 * self.break_duration

    def to_dict(self) -> dict:
        return {
            'quarters': self.quarters,
            'quarterDuration': self.quarter_duration,
            'overtimeDuration': self.overtime_duration,
            'breakDuration': self.break_duration,
            'foulsForBonus': self.fouls_for_bonus,
            'maxPersonalFouls': self.max_personal_fouls,
            'allowFoulOuts': self.allow_foul_outs,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'GameSettings':
        break_duration = data.get('breakDuration')
        return cls(
            quarters=int(data['quarters']),
            quarter_duration=int(data['quarterDuration']),
            overtime_duration=int(data['overtimeDuration']),
            break_duration=cls.break_duration if break_duration is None else int(break_duration),
            fouls_for_bonus=int(data['foulsForBonus']),
            max_personal_fouls=int(data['maxPersonalFouls']),
            allow_foul_outs=bool(data.get('allowFoulOuts', False)),
        )


@dataclass(frozen=True)
class ClockState:
    """Period, phase and countdown. Replaced, never mutated."""
    current_period: int = 1
    is_overtime: bool = False
    phase: Phase = Phase.WARMUP
    remaining_seconds: float = 0.0
    timer_running: bool = False
    last_tick_at: Optional[float] = None  # epoch milliseconds

    def evolve(self, **changes) -> 'ClockState':
        return replace(self, **changes)


@dataclass
class TeamGameInfo:
    """One side of a game: roster split, per-player stats and team counters."""
    name: str
    players: List[Player] = field(default_factory=list)
    on_court: List[Player] = field(default_factory=list)
    bench: List[Player] = field(default_factory=list)
    stats: Dict[str, PlayerStats] = field(default_factory=dict)
    score: int = 0
    fouls_this_quarter: int = 0
    timeouts_left: int = 5

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def player_stats(self, player_id: str) -> PlayerStats:
        return self.stats.get(player_id) or PlayerStats()

    def in_bonus(self, settings: GameSettings) -> bool:
        return self.fouls_this_quarter >= settings.fouls_for_bonus

    def is_partitioned(self) -> bool:
        """on_court and bench are disjoint and together cover exactly the team's players."""
        on_court = [p.id for p in self.on_court]
        bench = [p.id for p in self.bench]
        roster = [p.id for p in self.players]

        if len(set(on_court)) != len(on_court) or len(set(bench)) != len(bench):
            return False
        if set(on_court) & set(bench):
            return False
        return set(on_court) | set(bench) == set(roster) and len(on_court) + len(bench) == len(roster)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'players': [p.to_dict() for p in self.players],
            'onCourt': [p.to_dict() for p in self.on_court],
            'bench': [p.to_dict() for p in self.bench],
            'stats': {pid: s.to_dict() for pid, s in self.stats.items()},
            'score': self.score,
            'foulsThisQuarter': self.fouls_this_quarter,
            'timeoutsLeft': self.timeouts_left,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TeamGameInfo':
        team = cls(
            name=data['name'],
            players=[Player.from_dict(p) for p in data.get('players', [])],
            on_court=[Player.from_dict(p) for p in data.get('onCourt', [])],
            bench=[Player.from_dict(p) for p in data.get('bench', [])],
            stats={pid: PlayerStats.from_dict(s) for pid, s in data.get('stats', {}).items()},
            score=int(data.get('score', 0)),
            fouls_this_quarter=int(data.get('foulsThisQuarter', 0)),
            timeouts_left=int(data.get('timeoutsLeft', 5)),
        )
        if not team.is_partitioned():
            raise SnapshotError(f"On-court and bench players of {team.name} do not match the roster")
        return team


@dataclass
class GameAction:
    """One entry of the chronological action log."""
    id: str
    timestamp: float  # epoch milliseconds
    type: ActionType
    description: str
    payload: Dict[str, Any] = field(default_factory=dict)
    team: Optional[TeamType] = None
    player_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'type': self.type.value,
            'payload': deepcopy(self.payload),
            'teamId': self.team.value if self.team else None,
            'playerId': self.player_id,
            'description': self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'GameAction':
        team = data.get('teamId')
        return cls(
            id=data['id'],
            timestamp=data['timestamp'],
            type=ActionType(data['type']),
            description=data.get('description', ''),
            payload=deepcopy(data.get('payload') or {}),
            team=TeamType(team) if team else None,
            player_id=data.get('playerId'),
        )


@dataclass
class Game:
    """
    One contest: settings, clock, both teams and the action log.

    Snapshots are treated as values. The reducer deep-copies a snapshot
    before changing anything, so a published Game is never modified.
    """
    id: str
    settings: GameSettings
    home_team: TeamGameInfo
    away_team: TeamGameInfo
    clock: ClockState = field(default_factory=ClockState)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    game_log: List[GameAction] = field(default_factory=list)
    winning_team: Optional[str] = None  # 'home', 'away' or 'tie'

    # Clock-derived fields, named as they appear in stored snapshots

    @property
    def current_quarter(self) -> int:
        return self.clock.current_period

    @property
    def is_overtime(self) -> bool:
        return self.clock.is_overtime

    @property
    def game_phase(self) -> Phase:
        return self.clock.phase

    @property
    def current_time_remaining_in_phase(self) -> float:
        return self.clock.remaining_seconds

    @property
    def timer_is_running(self) -> bool:
        return self.clock.timer_running

    @property
    def last_tick_timestamp(self) -> Optional[float]:
        return self.clock.last_tick_at

    @property
    def is_finished(self) -> bool:
        return self.clock.phase == Phase.FINISHED

    def team(self, team_type: TeamType) -> TeamGameInfo:
        return getattr(self, team_type.attr)

    def in_bonus(self, team_type: TeamType) -> bool:
        return self.team(team_type).in_bonus(self.settings)

    def copy(self) -> 'Game':
        return deepcopy(self)

    def to_dict(self) -> dict:
        """Plain JSON-compatible structure (camelCase keys, like the stored app data)."""
        return {
            'id': self.id,
            'settings': self.settings.to_dict(),
            'homeTeam': self.home_team.to_dict(),
            'awayTeam': self.away_team.to_dict(),
            'currentQuarter': self.clock.current_period,
            'isOvertime': self.clock.is_overtime,
            'gamePhase': self.clock.phase.value,
            'currentTimeRemainingInPhase': self.clock.remaining_seconds,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'gameLog': [a.to_dict() for a in self.game_log],
            'winningTeam': self.winning_team,
            'timerIsRunning': self.clock.timer_running,
            'lastTickTimestamp': self.clock.last_tick_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Game':
        try:
            clock = ClockState(
                current_period=int(data['currentQuarter']),
                is_overtime=bool(data['isOvertime']),
                phase=Phase(data['gamePhase']),
                remaining_seconds=data['currentTimeRemainingInPhase'],
                timer_running=bool(data.get('timerIsRunning', False)),
                last_tick_at=data.get('lastTickTimestamp'),
            )
            return cls(
                id=data['id'],
                settings=GameSettings.from_dict(data['settings']),
                home_team=TeamGameInfo.from_dict(data['homeTeam']),
                away_team=TeamGameInfo.from_dict(data['awayTeam']),
                clock=clock,
                start_time=data.get('startTime'),
                end_time=data.get('endTime'),
                game_log=[GameAction.from_dict(a) for a in data.get('gameLog', [])],
                winning_team=data.get('winningTeam'),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Malformed game snapshot: {e}") from e
