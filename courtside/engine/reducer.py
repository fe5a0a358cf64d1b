"""
Game reducer

Pure transition function: (Game, action, now) -> ActionResult. The input
snapshot is never modified; accepted actions work on a deep copy which is
returned as the new snapshot. Guard rejections and no-ops hand back the
original snapshot untouched.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from ..models.game import ActionType, Game, GameAction, Phase, TeamType
from ..models.player import StatType
from . import ledger, phases, roster
from .actions import (
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
from .phases import format_clock
from .result import ActionResult, FoulOut, GuardRejection
from .ticker import now_ms, reconcile, tick

logger = logging.getLogger(__name__)

STAT_ENTRY_PHASES = frozenset({Phase.IN_PROGRESS, Phase.TIMEOUT})


def iso_timestamp(ms: float) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat()


def compute_winner(game: Game) -> str:
    if game.home_team.score > game.away_team.score:
        return TeamType.HOME.value
    if game.away_team.score > game.home_team.score:
        return TeamType.AWAY.value
    return 'tie'


def _label(game: Game) -> str:
    return phases.period_label(game.clock.current_period, game.settings)


def _log(
    game: Game,
    now: float,
    action_type: ActionType,
    description: str,
    payload: Optional[Dict[str, Any]] = None,
    team: Optional[TeamType] = None,
    player_id: Optional[str] = None,
) -> None:
    game.game_log.append(GameAction(
        id=str(uuid.uuid4()),
        timestamp=now,
        type=action_type,
        description=description,
        payload=payload or {},
        team=team,
        player_id=player_id,
    ))


def _timer_payload(game: Game, action: str, **extra) -> Dict[str, Any]:
    payload = {
        'action': action,
        'phase': game.clock.phase.value,
        'quarter': game.clock.current_period,
        'isOvertime': game.clock.is_overtime,
        'time': game.clock.remaining_seconds,
    }
    payload.update(extra)
    return payload


def _reset_quarter_fouls(game: Game) -> None:
    game.home_team.fouls_this_quarter = 0
    game.away_team.fouls_this_quarter = 0


# =========================================================================
# CLOCK ACTIONS
# =========================================================================

def _start_timer(game: Game, action: StartTimer, now: float) -> ActionResult:
    before = game.clock
    game.clock = phases.start(before, game.settings, now)

    if before.phase in phases.PRE_GAME_PHASES:
        if game.start_time is None:
            game.start_time = iso_timestamp(now)
        description = f"Game started. {_label(game)} under way."
    elif before.phase == Phase.TIMEOUT:
        description = f"Play resumed from timeout ({_label(game)})."
    elif before.phase in phases.BREAK_PHASES and game.clock.phase == Phase.IN_PROGRESS:
        description = f"Break over. {_label(game)} under way."
    else:
        description = f"Timer started ({game.clock.phase.value})."

    _log(game, now, ActionType.TIMER_CHANGE, description, _timer_payload(game, 'started'))
    return ActionResult.applied(game, description)


def _pause_timer(game: Game, action: PauseTimer, now: float) -> ActionResult:
    game.clock = phases.pause(game.clock)
    if game.clock.phase == Phase.TIMEOUT:
        description = "Timeout called. Game paused."
    else:
        description = f"Timer paused ({game.clock.phase.value})."
    _log(game, now, ActionType.TIMER_CHANGE, description, _timer_payload(game, 'paused'))
    return ActionResult.applied(game, description)


def _reset_timer(game: Game, action: ResetTimer, now: float) -> ActionResult:
    old_time = game.clock.remaining_seconds
    game.clock = phases.reset(game.clock, game.settings)
    description = (
        f"Timer reset for {game.clock.phase.value} "
        f"to {format_clock(game.clock.remaining_seconds)}."
    )
    _log(game, now, ActionType.TIMER_CHANGE, description,
         _timer_payload(game, 'reset', oldTime=old_time, newTime=game.clock.remaining_seconds))
    return ActionResult.applied(game, description)


def _change_period(game: Game, now: float, transition: Callable, action_name: str, verb: str) -> ActionResult:
    old_period = game.clock.current_period
    game.clock = transition(game.clock, game.settings)
    _reset_quarter_fouls(game)
    description = f"{verb} {_label(game)}."
    _log(game, now, ActionType.TIMER_CHANGE, description,
         _timer_payload(game, action_name, oldQuarter=old_period, newQuarter=game.clock.current_period))
    return ActionResult.applied(game, description)


def _next_period(game: Game, action: NextPeriod, now: float) -> ActionResult:
    return _change_period(game, now, phases.next_period, 'period_advanced', "Advanced to")


def _prev_period(game: Game, action: PrevPeriod, now: float) -> ActionResult:
    return _change_period(game, now, phases.prev_period, 'period_reverted', "Went back to")


def _begin_break(game: Game, action: BeginBreak, now: float) -> ActionResult:
    return _change_period(game, now, phases.begin_break, 'break_started', "Break before")


def _tick(game: Game, action: Tick, now: float) -> ActionResult:
    before = game.clock
    game.clock = tick(before, now)
    if game.clock == before:
        return ActionResult.skipped(game, "Clock is not running")
    return ActionResult.applied(game)


def _reconcile(game: Game, action: Reconcile, now: float) -> ActionResult:
    before = game.clock
    game.clock = reconcile(before, now, action.threshold_ms)
    if game.clock == before:
        return ActionResult.skipped(game, "Clock already up to date")
    return ActionResult.applied(game)


# =========================================================================
# TEAM ACTIONS
# =========================================================================

def _apply_stat(game: Game, action: ApplyStat, now: float) -> ActionResult:
    if game.clock.phase not in STAT_ENTRY_PHASES:
        raise GuardRejection("Stats can only be recorded during live play or a timeout")

    team = game.team(action.team)
    player = team.find_player(action.player_id)
    if player is None:
        raise GuardRejection(f"Player {action.player_id} is not on {team.name}")

    if (action.stat != StatType.FOULS_PERSONAL
            and ledger.is_fouled_out(team.player_stats(player.id), game.settings)):
        raise GuardRejection(f"{player.name} has fouled out; only fouls can be changed")

    change = ledger.record_stat(team, player.id, action.stat, action.direction, game.settings)
    if not change.changed:
        return ActionResult.skipped(game, f"{action.stat.value} for {player.name} is already 0")

    base = {
        'teamId': action.team.value,
        'playerId': player.id,
        'statType': action.stat.value,
        'quarter': game.clock.current_period,
        'isOvertime': game.clock.is_overtime,
    }

    if change.points_delta:
        verb = "scored" if change.points_delta > 0 else "had corrected"
        _log(game, now, ActionType.SCORE_UPDATE,
             f"{player.name} ({team.name}) {verb} {abs(change.points_delta)} point(s). Team score: {team.score}.",
             dict(base, pointsScored=change.points_delta),
             team=action.team, player_id=player.id)

    if change.fouls_delta:
        if change.fouls_delta > 0:
            description = f"{player.name} ({team.name}) committed a foul. Personal fouls: {change.after.personal_fouls}."
        else:
            description = f"Foul corrected for {player.name} ({team.name}). Personal fouls: {change.after.personal_fouls}."
        _log(game, now, ActionType.FOUL_UPDATE, description,
             dict(base, foulsAdded=change.fouls_delta, newTotalPersonalFouls=change.after.personal_fouls),
             team=action.team, player_id=player.id)

    if not change.points_delta and not change.fouls_delta:
        sign = '+' if action.direction > 0 else '-'
        _log(game, now, ActionType.STAT_UPDATE,
             f"{player.name} ({team.name}) {sign}1 {action.stat.value}.",
             dict(base, delta=action.direction, newValue=change.after.get(action.stat)),
             team=action.team, player_id=player.id)

    foul_out = None
    if change.fouled_out:
        foul_out = FoulOut(action.team, player.id, player.name, change.after.personal_fouls)

    return ActionResult.applied(game, f"{action.stat.value} updated for {player.name}", foul_out)


def _substitute(game: Game, action: Substitute, now: float) -> ActionResult:
    team = game.team(action.team)
    player_out, player_in = roster.substitute(team, action.player_out_id, action.player_in_id)
    description = f"Substitution ({team.name}): {player_in.label} in, {player_out.label} out"
    _log(game, now, ActionType.SUBSTITUTION, description, {
        'teamId': action.team.value,
        'playerInId': player_in.id,
        'playerInName': player_in.name,
        'playerOutId': player_out.id,
        'playerOutName': player_out.name,
        'quarter': game.clock.current_period,
        'isOvertime': game.clock.is_overtime,
        'timeRemaining': game.clock.remaining_seconds,
    }, team=action.team)
    return ActionResult.applied(game, description)


def _add_players(game: Game, action: AddPlayers, now: float) -> ActionResult:
    team = game.team(action.team)
    other = game.team(TeamType.AWAY if action.team == TeamType.HOME else TeamType.HOME)
    for player in action.players:
        if other.find_player(player.id) is not None:
            raise GuardRejection(f"{player.name} already plays for {other.name}")

    added = roster.add_players(team, action.players)
    if not added:
        return ActionResult.skipped(game, f"All players are already on {team.name}")

    for player in added:
        _log(game, now, ActionType.PLAYER_ADDED, f"{player.name} added to {team.name} during the game.", {
            'teamId': action.team.value,
            'playerId': player.id,
            'playerName': player.name,
            'quarter': game.clock.current_period,
            'isOvertime': game.clock.is_overtime,
        }, team=action.team, player_id=player.id)

    return ActionResult.applied(game, f"Added {len(added)} player(s) to {team.name}")


def _use_timeout(game: Game, action: UseTimeout, now: float) -> ActionResult:
    team = game.team(action.team)
    if team.timeouts_left <= 0:
        raise GuardRejection(f"{team.name} has no timeouts left")
    team.timeouts_left -= 1
    description = f"{team.name} used a timeout ({team.timeouts_left} left)."
    _log(game, now, ActionType.TIMEOUT_USED, description, {
        'teamId': action.team.value,
        'timeoutsLeft': team.timeouts_left,
        'quarter': game.clock.current_period,
        'isOvertime': game.clock.is_overtime,
    }, team=action.team)
    return ActionResult.applied(game, description)


def _end_game(game: Game, action: EndGame, now: float) -> ActionResult:
    game.clock = phases.finish(game.clock)
    game.end_time = iso_timestamp(now)
    ledger.recompute_score(game.home_team)
    ledger.recompute_score(game.away_team)
    game.winning_team = compute_winner(game)
    description = (
        f"Game over. Final: {game.home_team.name} {game.home_team.score} - "
        f"{game.away_team.name} {game.away_team.score}."
    )
    _log(game, now, ActionType.TIMER_CHANGE, description, {
        'action': 'game_ended',
        'phase': Phase.FINISHED.value,
        'homeScore': game.home_team.score,
        'awayScore': game.away_team.score,
        'winningTeam': game.winning_team,
    })
    return ActionResult.applied(game, description)


_HANDLERS: Dict[type, Callable[[Game, Any, float], ActionResult]] = {
    StartTimer: _start_timer,
    PauseTimer: _pause_timer,
    ResetTimer: _reset_timer,
    NextPeriod: _next_period,
    PrevPeriod: _prev_period,
    BeginBreak: _begin_break,
    ApplyStat: _apply_stat,
    Substitute: _substitute,
    AddPlayers: _add_players,
    UseTimeout: _use_timeout,
    EndGame: _end_game,
    Tick: _tick,
    Reconcile: _reconcile,
}


def reduce(game: Game, action: GameCommand, now: Optional[float] = None) -> ActionResult:
    """
    Apply one action to a snapshot.

    Args:
        game: Current snapshot (not modified)
        action: One of the dataclasses in courtside.engine.actions
        now: Event time in epoch milliseconds (defaults to the wall clock)

    Returns:
        ActionResult with the next snapshot, or the same snapshot when the
        action was rejected or had nothing to do
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported game action: {action!r}")

    if game.is_finished:
        return ActionResult.rejected(game, "Game is finished")

    if now is None:
        now = now_ms()

    draft = game.copy()
    try:
        result = handler(draft, action, now)
    except GuardRejection as e:
        logger.info("Rejected %s: %s", type(action).__name__, e)
        return ActionResult.rejected(game, str(e))

    if not result.is_applied:
        return ActionResult.skipped(game, result.message)

    # Derived numbers are rebuilt from the counters on every accepted action
    ledger.recompute_score(draft.home_team)
    ledger.recompute_score(draft.away_team)
    return result
