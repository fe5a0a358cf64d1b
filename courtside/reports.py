"""
Game reports

Read-only views over a Game snapshot: the box score, the score by period
and the leading scorers. Nothing here changes a game.
"""

import logging
from typing import List, Tuple

import pandas as pd

from .engine.phases import format_clock, period_label
from .models.game import ActionType, Game, TeamType
from .models.player import Player, StatType

logger = logging.getLogger(__name__)

BOX_SCORE_STATS = [stat.value for stat in StatType]

__all__ = ['box_score', 'period_scores', 'leading_scorers', 'clock_display', 'format_clock']


def box_score(game: Game, team_type: TeamType, include_totals: bool = False) -> pd.DataFrame:
    """
    Per-player box score for one team.

    Args:
        game: Snapshot to report on
        team_type: HOME or AWAY
        include_totals: Append a TOTAL row summing every counter

    Returns:
        DataFrame indexed by player id with name, number, on-court flag,
        the raw counters, PTS, REB and shooting percentages
    """
    team = game.team(team_type)
    on_court = {p.id for p in team.on_court}

    rows = []
    for player in team.players:
        stats = team.player_stats(player.id)
        row = {
            'player_id': player.id,
            'player': player.name,
            'number': player.number,
            'on_court': player.id in on_court,
        }
        row.update(stats.to_dict())
        row['PTS'] = stats.points
        row['REB'] = stats.total_rebounds
        rows.append(row)

    columns = ['player_id', 'player', 'number', 'on_court'] + BOX_SCORE_STATS + ['PTS', 'REB']
    df = pd.DataFrame(rows, columns=columns).set_index('player_id')

    if include_totals and not df.empty:
        totals = df[BOX_SCORE_STATS + ['PTS', 'REB']].sum().to_dict()
        totals.update(player='TOTAL', number='', on_court=False)
        df = pd.concat([df, pd.DataFrame([totals], index=['TOTAL'])])

    df['FG%'] = _pct(df['2PM'] + df['3PM'], df['2PA'] + df['3PA'])
    df['FT%'] = _pct(df['1PM'], df['1PA'])
    df['3P%'] = _pct(df['3PM'], df['3PA'])
    return df


def _pct(made: pd.Series, attempted: pd.Series) -> pd.Series:
    """Percentage rounded to one decimal, 0.0 where nothing was attempted."""
    made = made.astype(float)
    attempted = attempted.astype(float)
    pct = (made / attempted.where(attempted > 0) * 100).fillna(0.0)
    return pct.round(1)


def _period_labels(game: Game, log_periods: List[int]) -> List[int]:
    last = max([game.settings.quarters, game.clock.current_period] + log_periods)
    return list(range(1, last + 1))


def period_scores(game: Game) -> pd.DataFrame:
    """
    Points per period for both teams, rebuilt from score_update log entries.

    Returns:
        DataFrame with rows 'home' and 'away' (plus a 'team' name column),
        one column per period (Q1.., OT1..) and a 'T' total column
    """
    points = {TeamType.HOME.value: {}, TeamType.AWAY.value: {}}
    seen_periods = []

    for entry in game.game_log:
        if entry.type != ActionType.SCORE_UPDATE:
            continue
        team_id = entry.payload.get('teamId') or (entry.team.value if entry.team else None)
        period = entry.payload.get('quarter')
        if team_id not in points or period is None:
            logger.debug("Skipping score entry without team or period: %s", entry.id)
            continue
        period = int(period)
        seen_periods.append(period)
        points[team_id][period] = points[team_id].get(period, 0) + int(entry.payload.get('pointsScored', 0))

    periods = _period_labels(game, seen_periods)
    labels = [period_label(p, game.settings) for p in periods]

    rows = []
    for team_type in (TeamType.HOME, TeamType.AWAY):
        by_period = points[team_type.value]
        row = {'team': game.team(team_type).name}
        for period, label in zip(periods, labels):
            row[label] = by_period.get(period, 0)
        row['T'] = sum(by_period.values())
        rows.append(row)

    return pd.DataFrame(rows, index=[TeamType.HOME.value, TeamType.AWAY.value], columns=['team'] + labels + ['T'])


def leading_scorers(game: Game, team_type: TeamType, limit: int = 3) -> List[Tuple[Player, int]]:
    """Top scorers of a team, highest first; players without points are left out."""
    team = game.team(team_type)
    scored = [(p, team.player_stats(p.id).points) for p in team.players]
    scored = [item for item in scored if item[1] > 0]
    scored.sort(key=lambda item: (-item[1], item[0].name))
    return scored[:limit]


def clock_display(game: Game) -> str:
    """Scoreboard line, e.g. 'Q3 07:42 in_progress (running)'."""
    label = period_label(game.clock.current_period, game.settings)
    state = 'running' if game.clock.timer_running else 'stopped'
    return f"{label} {format_clock(game.clock.remaining_seconds)} {game.clock.phase.value} ({state})"
