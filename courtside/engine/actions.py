"""Game actions - One frozen dataclass per operation the orchestrator accepts."""

from dataclasses import dataclass
from typing import Tuple, Union

from ..models.game import TeamType
from ..models.player import Player, StatType


@dataclass(frozen=True)
class StartTimer:
    pass


@dataclass(frozen=True)
class PauseTimer:
    pass


@dataclass(frozen=True)
class ResetTimer:
    pass


@dataclass(frozen=True)
class NextPeriod:
    pass


@dataclass(frozen=True)
class PrevPeriod:
    pass


@dataclass(frozen=True)
class BeginBreak:
    pass


@dataclass(frozen=True)
class ApplyStat:
    team: TeamType
    player_id: str
    stat: StatType
    direction: int = 1


@dataclass(frozen=True)
class Substitute:
    team: TeamType
    player_out_id: str
    player_in_id: str


@dataclass(frozen=True)
class AddPlayers:
    team: TeamType
    players: Tuple[Player, ...]


@dataclass(frozen=True)
class UseTimeout:
    team: TeamType


@dataclass(frozen=True)
class EndGame:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Reconcile:
    """Catch the clock up after the host was inactive."""
    threshold_ms: float = 2000


GameCommand = Union[
    StartTimer, PauseTimer, ResetTimer, NextPeriod, PrevPeriod, BeginBreak,
    ApplyStat, Substitute, AddPlayers, UseTimeout, EndGame, Tick, Reconcile,
]

ACTION_TYPES = (
    StartTimer, PauseTimer, ResetTimer, NextPeriod, PrevPeriod, BeginBreak,
    ApplyStat, Substitute, AddPlayers, UseTimeout, EndGame, Tick, Reconcile,
)
