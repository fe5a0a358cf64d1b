"""
Stat Ledger

Per-player counters for one team in one game. Keeps made/attempted shot
pairs consistent, detects foul-outs and derives the team score.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict

from ..models.game import GameSettings, TeamGameInfo
from ..models.player import PlayerStats, StatType
from .result import GuardRejection

logger = logging.getLogger(__name__)

# made -> attempted
SHOT_PAIRS: Dict[StatType, StatType] = {
    StatType.POINTS_1_MADE: StatType.POINTS_1_ATTEMPTED,
    StatType.POINTS_2_MADE: StatType.POINTS_2_ATTEMPTED,
    StatType.POINTS_3_MADE: StatType.POINTS_3_ATTEMPTED,
}

# attempted -> made
ATTEMPT_PAIRS: Dict[StatType, StatType] = {att: made for made, att in SHOT_PAIRS.items()}

VALID_DIRECTIONS = (1, -1)


@dataclass(frozen=True)
class StatChange:
    """What one stat mutation did to a player and the team."""
    player_id: str
    stat: StatType
    direction: int
    before: PlayerStats
    after: PlayerStats
    points_delta: int
    fouls_delta: int
    fouled_out: bool

    @property
    def changed(self) -> bool:
        return self.before != self.after


def apply_delta(stats: PlayerStats, stat: StatType, direction: int) -> PlayerStats:
    """
    Apply +1/-1 to one counter and return a new PlayerStats.

    This is a PURE FUNCTION: the input is never modified.

    Counters are clamped at zero. Incrementing a made counter raises the
    paired attempted counter so makes never exceed attempts; decrementing an
    attempted counter below the made count pulls the made count down with it.

    Args:
        stats: Current counters
        stat: Counter to change
        direction: +1 or -1

    Returns:
        Updated counters
    """
    if direction not in VALID_DIRECTIONS:
        raise GuardRejection(f"Stat direction must be +1 or -1, got {direction}")

    updated = replace(stats)
    new_value = max(0, stats.get(stat) + direction)
    updated.set(stat, new_value)

    if direction > 0 and stat in SHOT_PAIRS:
        attempted = SHOT_PAIRS[stat]
        updated.set(attempted, max(updated.get(attempted), new_value))
    elif direction < 0 and stat in ATTEMPT_PAIRS:
        made = ATTEMPT_PAIRS[stat]
        if new_value < updated.get(made):
            updated.set(made, new_value)

    return updated


def is_fouled_out(stats: PlayerStats, settings: GameSettings) -> bool:
    """Player has reached the foul limit and foul-outs are enforced."""
    return settings.allow_foul_outs and stats.personal_fouls >= settings.max_personal_fouls


def team_score(team: TeamGameInfo) -> int:
    """Sum of 1PM + 2*2PM + 3*3PM over every player. Always recomputed, never incremented."""
    return sum(stats.points for stats in team.stats.values())


def recompute_score(team: TeamGameInfo) -> None:
    team.score = team_score(team)


def record_stat(
    team: TeamGameInfo,
    player_id: str,
    stat: StatType,
    direction: int,
    settings: GameSettings,
) -> StatChange:
    """
    Record one stat change on a team (the team object is modified in place,
    so callers pass a copy of the published snapshot).

    Returns:
        StatChange describing the mutation, including the foul-out signal

    Raises:
        GuardRejection: unknown player or invalid direction
    """
    if team.find_player(player_id) is None:
        raise GuardRejection(f"Player {player_id} is not on {team.name}")

    before = team.player_stats(player_id)
    after = apply_delta(before, stat, direction)

    team.stats[player_id] = after
    old_score = team.score
    recompute_score(team)

    fouls_delta = after.personal_fouls - before.personal_fouls
    if fouls_delta > 0:
        team.fouls_this_quarter += fouls_delta
    elif fouls_delta < 0:
        team.fouls_this_quarter = max(0, team.fouls_this_quarter + fouls_delta)

    fouled_out = (
        settings.allow_foul_outs
        and stat == StatType.FOULS_PERSONAL
        and direction > 0
        and fouls_delta > 0
        and after.personal_fouls == settings.max_personal_fouls
    )
    if fouled_out:
        logger.info("Player %s on %s reached %d personal fouls",
                    player_id, team.name, after.personal_fouls)

    return StatChange(
        player_id=player_id,
        stat=stat,
        direction=direction,
        before=before,
        after=after,
        points_delta=team.score - old_score,
        fouls_delta=fouls_delta,
        fouled_out=fouled_out,
    )
