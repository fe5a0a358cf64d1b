"""Action results - Outcome type returned by every game action."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..models.game import Game, TeamType


class ActionStatus(Enum):
    """Status of an action applied to a game."""
    APPLIED = "applied"
    SKIPPED = "skipped"
    REJECTED = "rejected"


class GuardRejection(Exception):
    """
    Raised inside the engine when an action is not legal in the current state.

    Never escapes the engine: the reducer turns it into a rejected
    ActionResult carrying the message.
    """


class InvalidGameSetup(ValueError):
    """Settings or rosters that cannot start a game."""


@dataclass(frozen=True)
class FoulOut:
    """A player just reached the personal foul limit."""
    team: TeamType
    player_id: str
    player_name: str
    fouls: int

    @property
    def message(self) -> str:
        return f"{self.player_name} has fouled out with {self.fouls} personal fouls."


@dataclass
class ActionResult:
    """Snapshot produced by an action plus what the caller should be told."""
    status: ActionStatus
    game: Game
    message: str = ""
    foul_out: Optional[FoulOut] = None
    notices: List[str] = field(default_factory=list)

    @staticmethod
    def applied(game: Game, message: str = "", foul_out: Optional[FoulOut] = None) -> 'ActionResult':
        """Create an applied result. A foul-out is also surfaced as a notice."""
        notices = [foul_out.message] if foul_out else []
        return ActionResult(ActionStatus.APPLIED, game, message, foul_out, notices)

    @staticmethod
    def skipped(game: Game, message: str) -> 'ActionResult':
        """Nothing to do: the snapshot is returned unchanged."""
        return ActionResult(ActionStatus.SKIPPED, game, message)

    @staticmethod
    def rejected(game: Game, reason: str) -> 'ActionResult':
        """Guard rejection: the snapshot is returned unchanged."""
        return ActionResult(ActionStatus.REJECTED, game, reason)

    @property
    def is_applied(self) -> bool:
        return self.status == ActionStatus.APPLIED

    @property
    def is_skipped(self) -> bool:
        return self.status == ActionStatus.SKIPPED

    @property
    def is_rejected(self) -> bool:
        return self.status == ActionStatus.REJECTED
