"""
Courtside CLI

Command-line scorebook for a live basketball game.

Usage:
    courtside [OPTIONS] COMMAND [ARGS]...

Commands:
    roster    Player registry
    team      Predefined teams
    game      Score the current game
"""

import click
import logging
import sys
from dotenv import load_dotenv

# Load .env file
load_dotenv()

from ..config import Config
from ..db import init_database
from ..monitoring import capture_errors, init_sentry


def setup_logging(verbose: bool):
    """Configure logging to output to stdout."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(message)s',  # Simple format for CLI
        handlers=[logging.StreamHandler(sys.stdout)]
    )


@click.group()
@click.option('--db', default=None, help='Database path (default: $COURTSIDE_DB_PATH or data/courtside.db)')
@click.option('-v', '--verbose', is_flag=True, help='Verbose output (show DEBUG logs)')
@click.option('-q', '--quiet', is_flag=True, help='Quiet mode (only show warnings/errors)')
@click.pass_context
def cli(ctx, db, verbose, quiet):
    """Courtside - Live basketball scorebook."""
    # Configure logging based on verbosity
    if quiet:
        logging.basicConfig(level=logging.WARNING, format='%(message)s')
    else:
        setup_logging(verbose)

    init_sentry()

    config = Config.from_env()
    if db:
        config.db_path = db
    init_database(config.db_path)

    ctx.ensure_object(dict)
    ctx.obj['db'] = config.db_path
    ctx.obj['config'] = config
    ctx.obj['verbose'] = verbose


# Import and register command groups
from .roster import roster, team
from .game import game

cli.add_command(roster)
cli.add_command(team)
cli.add_command(game)


@capture_errors(step_name="cli")
def main():
    cli(obj={})


if __name__ == '__main__':
    main()
