"""Roster Partition - On-court/bench split for one team."""

import logging
from typing import Iterable, List, Tuple

from ..models.game import TeamGameInfo
from ..models.player import Player, PlayerStats
from .result import GuardRejection

logger = logging.getLogger(__name__)


def _index_of(players: List[Player], player_id: str) -> int:
    for i, player in enumerate(players):
        if player.id == player_id:
            return i
    return -1


def substitute(team: TeamGameInfo, player_out_id: str, player_in_id: str) -> Tuple[Player, Player]:
    """
    Swap an on-court player with a bench player (team is modified in place).

    Returns:
        (player_out, player_in)

    Raises:
        GuardRejection: player_out is not on court or player_in is not on the bench
    """
    if player_out_id == player_in_id:
        raise GuardRejection("A player cannot be substituted for themselves")

    out_idx = _index_of(team.on_court, player_out_id)
    if out_idx < 0:
        raise GuardRejection(f"Player {player_out_id} is not on court for {team.name}")

    in_idx = _index_of(team.bench, player_in_id)
    if in_idx < 0:
        raise GuardRejection(f"Player {player_in_id} is not on the bench for {team.name}")

    player_out = team.on_court[out_idx]
    player_in = team.bench[in_idx]

    team.on_court = [p for p in team.on_court if p.id != player_out_id] + [player_in]
    team.bench = [p for p in team.bench if p.id != player_in_id] + [player_out]

    return player_out, player_in


def add_players(team: TeamGameInfo, players: Iterable[Player]) -> List[Player]:
    """
    Add late players to the team. New players go to the bench with zeroed stats.

    Players already on the team (by id) are skipped.

    Returns:
        The players actually added
    """
    added = []
    known = {p.id for p in team.players}

    for player in players:
        if player.id in known:
            logger.debug("Player %s already on %s, skipping", player.id, team.name)
            continue
        team.players.append(player)
        team.bench.append(player)
        team.stats[player.id] = PlayerStats()
        known.add(player.id)
        added.append(player)

    return added


def is_partitioned(team: TeamGameInfo) -> bool:
    """on_court and bench are disjoint and together cover exactly the team's players."""
    return team.is_partitioned()
