"""Game setup - Settings validation and creation of a fresh game."""

import logging
import uuid
from dataclasses import replace
from typing import List, Optional, Sequence

from ..models.game import Game, GameSettings, TeamGameInfo
from ..models.player import Player, PlayerStats
from .phases import initial_clock
from .result import InvalidGameSetup

logger = logging.getLogger(__name__)

STARTERS = 5
TIMEOUTS_PER_TEAM = 5


def validate_settings(settings: GameSettings) -> GameSettings:
    """
    Check the rules before a game exists.

    Returns:
        The settings to use (max_personal_fouls lifted to 1 when foul-outs
        are enabled with a non-positive limit)

    Raises:
        InvalidGameSetup: a count or duration below 1
    """
    for name in ('quarters', 'quarter_duration', 'overtime_duration', 'fouls_for_bonus'):
        if getattr(settings, name) < 1:
            raise InvalidGameSetup(f"{name} must be at least 1, got {getattr(settings, name)}")
    if settings.break_duration < 0:
        raise InvalidGameSetup(f"break_duration cannot be negative, got {settings.break_duration}")

    if settings.allow_foul_outs and settings.max_personal_fouls < 1:
        logger.info("max_personal_fouls %d raised to 1", settings.max_personal_fouls)
        settings = replace(settings, max_personal_fouls=1)

    return settings


def _team_info(name: str, players: Sequence[Player]) -> TeamGameInfo:
    players = list(players)
    return TeamGameInfo(
        name=name,
        players=players,
        on_court=players[:STARTERS],
        bench=players[STARTERS:],
        stats={p.id: PlayerStats() for p in players},
        timeouts_left=TIMEOUTS_PER_TEAM,
    )


def _check_roster(name: str, players: List[Player]) -> None:
    if not name.strip():
        raise InvalidGameSetup("Team name cannot be empty")
    if not players:
        raise InvalidGameSetup(f"{name} needs at least one player")
    ids = [p.id for p in players]
    if len(set(ids)) != len(ids):
        raise InvalidGameSetup(f"{name} lists the same player twice")


def create_game(
    settings: GameSettings,
    home_name: str,
    home_players: Sequence[Player],
    away_name: str,
    away_players: Sequence[Player],
    game_id: Optional[str] = None,
) -> Game:
    """
    Create a game in WARMUP with a full quarter on the clock.

    The first five players listed for each team start on court.

    Raises:
        InvalidGameSetup: invalid settings, an empty roster or a player on both teams
    """
    settings = validate_settings(settings)
    home_players = list(home_players)
    away_players = list(away_players)

    _check_roster(home_name, home_players)
    _check_roster(away_name, away_players)

    shared = {p.id for p in home_players} & {p.id for p in away_players}
    if shared:
        raise InvalidGameSetup(f"Players cannot be on both teams: {', '.join(sorted(shared))}")

    game = Game(
        id=game_id or f"game_{uuid.uuid4().hex[:12]}",
        settings=settings,
        home_team=_team_info(home_name, home_players),
        away_team=_team_info(away_name, away_players),
        clock=initial_clock(settings),
    )
    logger.info("Created game %s: %s vs %s", game.id, home_name, away_name)
    return game
