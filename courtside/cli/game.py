"""Live game commands."""

import logging
import time
from dataclasses import replace
from typing import Callable, List

import click

from ..db import SQLiteGameRepository, SQLitePlayerRepository, SQLiteTeamRepository
from ..engine import ActionResult, GameOrchestrator, InvalidGameSetup, create_game
from ..engine.ticker import is_counting
from ..models.game import Game, TeamType
from ..models.player import Player, StatType, Team
from ..monitoring import set_game_context
from ..reports import box_score, clock_display, leading_scorers, period_scores

logger = logging.getLogger(__name__)

TEAM_CHOICE = click.Choice([t.value for t in TeamType], case_sensitive=False)


def _repo(ctx) -> SQLiteGameRepository:
    return SQLiteGameRepository(ctx.obj['db'])


def _load_game(ctx) -> Game:
    game = _repo(ctx).load_current()
    if game is None:
        raise click.ClickException("No game in progress. Start one with 'courtside game new'.")
    set_game_context(game.id, game.game_phase.value, game.current_quarter,
                     f"{game.home_team.score}-{game.away_team.score}")
    return game


def _orchestrator(ctx, game: Game, save: bool = True) -> GameOrchestrator:
    config = ctx.obj['config']
    return GameOrchestrator(
        game,
        on_publish=_repo(ctx).save_current if save else None,
        tick_interval=config.clock.tick_interval,
        catch_up_threshold_ms=config.clock.catch_up_threshold_ms,
        ticker_factory=None,
    )


def _catch_up(orchestrator: GameOrchestrator) -> None:
    """Bring a stored running clock up to now before acting on it."""
    orchestrator.resume()
    orchestrator.tick()


def _report(result: ActionResult) -> None:
    if result.is_rejected:
        raise click.ClickException(result.message)
    if result.is_skipped:
        click.echo(click.style(f"  Skipped: {result.message}", fg='yellow'))
        return
    if result.message:
        click.echo(click.style(result.message, fg='green'))
    for notice in result.notices:
        click.echo(click.style(f"  ! {notice}", fg='red', bold=True))


def _live_view(ctx) -> Game:
    """Stored game with the clock brought up to now. Nothing is written back."""
    orchestrator = _orchestrator(ctx, _load_game(ctx), save=False)
    _catch_up(orchestrator)
    return orchestrator.game


def _run(ctx, action: Callable[[GameOrchestrator], ActionResult]) -> Game:
    """Load the current game, catch the clock up, apply one action and save."""
    game = _load_game(ctx)
    orchestrator = _orchestrator(ctx, game)
    try:
        _catch_up(orchestrator)
        _report(action(orchestrator))
    finally:
        orchestrator.close()
    click.echo(_scoreboard(orchestrator.game))
    return orchestrator.game


def _bonus(game: Game, team_type: TeamType) -> str:
    return " BONUS" if game.in_bonus(team_type) else ""


def _scoreboard(game: Game) -> str:
    home, away = game.home_team, game.away_team
    return (
        f"{home.name} {home.score} - {away.score} {away.name} | {clock_display(game)}\n"
        f"  fouls {home.fouls_this_quarter}{_bonus(game, TeamType.HOME)} / "
        f"{away.fouls_this_quarter}{_bonus(game, TeamType.AWAY)} | "
        f"timeouts {home.timeouts_left} / {away.timeouts_left}"
    )


def _resolve_team(teams: SQLiteTeamRepository, key: str) -> Team:
    record = teams.get_by_id(key)
    if record is None:
        for candidate in teams.load_teams():
            if candidate.name.lower() == key.lower():
                return candidate
        raise click.ClickException(f"Unknown team: {key}")
    return record


def _resolve_players(players: SQLitePlayerRepository, player_ids) -> List[Player]:
    resolved = []
    for pid in player_ids:
        player = players.get_by_id(pid)
        if player is None:
            raise click.ClickException(f"Unknown player id: {pid}")
        resolved.append(player)
    return resolved


def _parse_stat(value: str) -> StatType:
    try:
        return StatType.parse(value)
    except (KeyError, ValueError):
        codes = ', '.join(s.value for s in StatType)
        raise click.BadParameter(f"'{value}' is not a stat ({codes})", param_hint='STAT')


@click.group()
@click.pass_context
def game(ctx):
    """Score the current game."""
    pass


@game.command('new')
@click.argument('home')
@click.argument('away')
@click.option('--quarters', type=int, default=None, help='Number of regulation periods')
@click.option('--quarter-minutes', type=float, default=None, help='Length of a period in minutes')
@click.option('--overtime-minutes', type=float, default=None, help='Length of an overtime in minutes')
@click.option('--break-seconds', type=int, default=None, help='Break length (halftime is twice this)')
@click.option('--bonus', 'fouls_for_bonus', type=int, default=None, help='Team fouls per period for the bonus')
@click.option('--max-fouls', type=int, default=None, help='Personal fouls to foul out')
@click.option('--foul-outs/--no-foul-outs', default=None, help='Enforce foul-outs')
@click.option('--force', is_flag=True, help='Replace an unfinished current game')
@click.pass_context
def new(ctx, home, away, quarters, quarter_minutes, overtime_minutes, break_seconds,
        fouls_for_bonus, max_fouls, foul_outs, force):
    """Set up a game between two predefined teams (id or name)."""
    repo = _repo(ctx)
    current = repo.load_current()
    if current is not None and not current.is_finished and not force:
        raise click.ClickException(
            f"Game {current.id} is still in progress. End it first or pass --force."
        )

    teams = SQLiteTeamRepository(ctx.obj['db'])
    players = SQLitePlayerRepository(ctx.obj['db'])
    home_team = _resolve_team(teams, home)
    away_team = _resolve_team(teams, away)

    overrides = {
        'quarters': quarters,
        'quarter_duration': int(quarter_minutes * 60) if quarter_minutes is not None else None,
        'overtime_duration': int(overtime_minutes * 60) if overtime_minutes is not None else None,
        'break_duration': break_seconds,
        'fouls_for_bonus': fouls_for_bonus,
        'max_personal_fouls': max_fouls,
        'allow_foul_outs': foul_outs,
    }
    settings = replace(ctx.obj['config'].settings, **{k: v for k, v in overrides.items() if v is not None})

    try:
        created = create_game(
            settings,
            home_team.name, _resolve_players(players, home_team.player_ids),
            away_team.name, _resolve_players(players, away_team.player_ids),
        )
    except InvalidGameSetup as e:
        raise click.ClickException(str(e))

    repo.save_current(created)
    click.echo(click.style(f"Created game {created.id}", fg='green'))
    click.echo(_scoreboard(created))


@game.command()
@click.option('--log', 'log_entries', type=int, default=0, help='Also show the last N log entries')
@click.pass_context
def show(ctx, log_entries):
    """Show the scoreboard."""
    current = _load_game(ctx)
    orchestrator = _orchestrator(ctx, current)
    _catch_up(orchestrator)
    current = orchestrator.game

    click.echo(_scoreboard(current))
    for team_type in TeamType:
        info = current.team(team_type)
        on_court = ', '.join(p.label for p in info.on_court) or '-'
        click.echo(f"  {info.name} on court: {on_court}")

    if log_entries > 0:
        click.echo("")
        for entry in current.game_log[-log_entries:]:
            click.echo(f"  [{entry.type.value}] {entry.description}")


@game.command()
@click.pass_context
def start(ctx):
    """Start or resume the timer."""
    _run(ctx, lambda o: o.start_timer())


@game.command()
@click.pass_context
def pause(ctx):
    """Pause the timer (a timeout during live play)."""
    _run(ctx, lambda o: o.pause_timer())


@game.command()
@click.pass_context
def reset(ctx):
    """Reset the timer for the current phase."""
    _run(ctx, lambda o: o.reset_timer())


@game.command('next')
@click.pass_context
def next_period(ctx):
    """Go to the next period."""
    _run(ctx, lambda o: o.go_to_next_period())


@game.command('prev')
@click.pass_context
def prev_period(ctx):
    """Go back to the previous period."""
    _run(ctx, lambda o: o.go_to_prev_period())


@game.command('break')
@click.pass_context
def begin_break(ctx):
    """End the period and start the break before the next one."""
    _run(ctx, lambda o: o.begin_break())


@game.command()
@click.argument('team_type', metavar='TEAM', type=TEAM_CHOICE)
@click.argument('player_id')
@click.argument('stat')
@click.option('--undo', is_flag=True, help='Subtract one instead of adding')
@click.pass_context
def stat(ctx, team_type, player_id, stat, undo):
    """Record a stat, e.g. 'game stat home p_1 2PM'."""
    stat_type = _parse_stat(stat)
    direction = -1 if undo else 1
    _run(ctx, lambda o: o.apply_stat(TeamType(team_type.lower()), player_id, stat_type, direction))


@game.command()
@click.argument('team_type', metavar='TEAM', type=TEAM_CHOICE)
@click.argument('player_out')
@click.argument('player_in')
@click.pass_context
def sub(ctx, team_type, player_out, player_in):
    """Substitute PLAYER_IN (bench) for PLAYER_OUT (on court)."""
    _run(ctx, lambda o: o.substitute(TeamType(team_type.lower()), player_out, player_in))


@game.command('add-player')
@click.argument('team_type', metavar='TEAM', type=TEAM_CHOICE)
@click.argument('player_ids', nargs=-1, required=True)
@click.pass_context
def add_player(ctx, team_type, player_ids):
    """Add registered players to a team's bench during the game."""
    players = _resolve_players(SQLitePlayerRepository(ctx.obj['db']), player_ids)
    _run(ctx, lambda o: o.add_players_to_team(TeamType(team_type.lower()), players))


@game.command()
@click.argument('team_type', metavar='TEAM', type=TEAM_CHOICE)
@click.pass_context
def timeout(ctx, team_type):
    """Charge a timeout to a team."""
    _run(ctx, lambda o: o.use_timeout(TeamType(team_type.lower())))


@game.command()
@click.pass_context
def end(ctx):
    """End the game and archive it."""
    finished = _run(ctx, lambda o: o.end_game())
    _repo(ctx).save_to_history(finished)
    winner = finished.winning_team
    if winner == 'tie':
        click.echo("Result: tie")
    else:
        click.echo(f"Winner: {finished.team(TeamType(winner)).name}")


@game.command()
@click.option('--duration', type=float, default=None, help='Stop after this many seconds')
@click.option('--refresh', type=float, default=1.0, help='Display refresh in seconds')
@click.pass_context
def live(ctx, duration, refresh):
    """
    Print the running clock until it stops or the command is interrupted.

    The stored game is reloaded on every refresh, so scoring from other
    commands shows up here. This command never saves.
    """
    current = _live_view(ctx)
    if not is_counting(current.clock):
        click.echo(click.style("Clock is stopped. Run 'courtside game start' first.", fg='yellow'))
        return

    started = time.monotonic()
    try:
        while is_counting(current.clock):
            click.echo(clock_display(current))
            if duration is not None and time.monotonic() - started >= duration:
                break
            time.sleep(refresh)
            current = _live_view(ctx)
    except KeyboardInterrupt:
        logger.debug("Live display interrupted")

    click.echo(_scoreboard(current))


@game.command('box-score')
@click.option('--archived', 'game_id', default=None, help='Report on an archived game id')
@click.pass_context
def box_score_cmd(ctx, game_id):
    """Print box scores and the score by period."""
    if game_id:
        current = _repo(ctx).get_by_id(game_id)
        if current is None:
            raise click.ClickException(f"No archived game {game_id}")
    else:
        current = _load_game(ctx)

    for team_type in TeamType:
        info = current.team(team_type)
        click.echo(f"\n{info.name} ({info.score})")
        df = box_score(current, team_type, include_totals=True)
        click.echo(df.drop(columns=['on_court']).to_string())
        leaders = leading_scorers(current, team_type)
        if leaders:
            click.echo("Leading scorers: " + ', '.join(f"{p.name} {pts}" for p, pts in leaders))

    click.echo("")
    click.echo(period_scores(current).to_string())


@game.command()
@click.option('--limit', type=int, default=10, help='Number of games to show')
@click.pass_context
def history(ctx, limit):
    """List archived games."""
    games = _repo(ctx).get_history(limit)
    if not games:
        click.echo("No archived games.")
        return
    for past in games:
        winner = past.winning_team or '-'
        click.echo(
            f"{past.id}  {past.home_team.name} {past.home_team.score} - "
            f"{past.away_team.score} {past.away_team.name}  winner: {winner}  ended: {past.end_time or '-'}"
        )
