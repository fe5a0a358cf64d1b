"""Player registry and predefined team commands."""

import uuid

import click

from ..db import SQLitePlayerRepository, SQLiteTeamRepository
from ..models.player import Player, Team


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


@click.group()
@click.pass_context
def roster(ctx):
    """Player registry commands."""
    pass


@roster.command('add')
@click.argument('name')
@click.option('--number', default='', help='Jersey number')
@click.option('--position', default=None, help='Position (PG, SG, SF, PF, C)')
@click.option('--id', 'player_id', default=None, help='Player id (generated if omitted)')
@click.pass_context
def roster_add(ctx, name, number, position, player_id):
    """Register a player."""
    repo = SQLitePlayerRepository(ctx.obj['db'])
    player = Player(id=player_id or _new_id('p'), name=name.strip(), number=number, position=position)
    if not player.name:
        raise click.BadParameter("Player name cannot be empty", param_hint='NAME')
    repo.save(player)
    click.echo(click.style(f"Added {player.label} [{player.id}]", fg='green'))


@roster.command('list')
@click.pass_context
def roster_list(ctx):
    """List registered players."""
    players = SQLitePlayerRepository(ctx.obj['db']).load_roster()
    if not players:
        click.echo("No players registered.")
        return
    for player in players:
        position = f" {player.position}" if player.position else ""
        click.echo(f"{player.id:<14} #{player.number or '-':<3} {player.name}{position}")


@click.group()
@click.pass_context
def team(ctx):
    """Predefined team commands."""
    pass


@team.command('add')
@click.argument('name')
@click.argument('player_ids', nargs=-1)
@click.option('--id', 'team_id', default=None, help='Team id (generated if omitted)')
@click.pass_context
def team_add(ctx, name, player_ids, team_id):
    """Create a team from registered player ids (first five start)."""
    players = SQLitePlayerRepository(ctx.obj['db'])
    missing = [pid for pid in player_ids if not players.exists(pid)]
    if missing:
        raise click.ClickException(f"Unknown player id(s): {', '.join(missing)}")

    record = Team(id=team_id or _new_id('t'), name=name.strip(), player_ids=list(dict.fromkeys(player_ids)))
    SQLiteTeamRepository(ctx.obj['db']).save(record)
    click.echo(click.style(f"Saved team {record.name} [{record.id}] with {len(record.player_ids)} player(s)", fg='green'))


@team.command('list')
@click.pass_context
def team_list(ctx):
    """List predefined teams."""
    teams = SQLiteTeamRepository(ctx.obj['db']).load_teams()
    if not teams:
        click.echo("No teams defined.")
        return
    for record in teams:
        click.echo(f"{record.id:<14} {record.name} ({len(record.player_ids)} players)")
