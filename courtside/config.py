from dataclasses import dataclass
import os

from .models.game import GameSettings

# Default database path constant
DEFAULT_DB_PATH = 'data/courtside.db'


def get_db_path() -> str:
    """
    Get the database path from environment variable or default.

    Uses COURTSIDE_DB_PATH if set, otherwise returns the default path.
    This is the single source of truth for database path configuration.

    Returns:
        Path to the SQLite database file
    """
    return os.getenv('COURTSIDE_DB_PATH', DEFAULT_DB_PATH)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class ClockConfig:
    tick_interval: float = 1.0
    catch_up_threshold_ms: float = 2000


@dataclass
class Config:
    db_path: str = DEFAULT_DB_PATH
    clock: ClockConfig = None
    settings: GameSettings = None

    def __post_init__(self):
        if self.clock is None:
            self.clock = ClockConfig()
        if self.settings is None:
            self.settings = GameSettings()

    @classmethod
    def from_env(cls) -> 'Config':
        defaults = GameSettings()
        return cls(
            db_path = get_db_path(),
            clock=ClockConfig(
                tick_interval = float(os.getenv('COURTSIDE_TICK_INTERVAL', 1.0)),
                catch_up_threshold_ms = float(os.getenv('COURTSIDE_CATCHUP_THRESHOLD_MS', 2000)),
            ),
            settings=GameSettings(
                quarters = int(os.getenv('COURTSIDE_QUARTERS', defaults.quarters)),
                quarter_duration = int(float(os.getenv('COURTSIDE_QUARTER_MINUTES', defaults.quarter_duration / 60)) * 60),
                overtime_duration = int(float(os.getenv('COURTSIDE_OVERTIME_MINUTES', defaults.overtime_duration / 60)) * 60),
                break_duration = int(os.getenv('COURTSIDE_BREAK_SECONDS', defaults.break_duration)),
                fouls_for_bonus = int(os.getenv('COURTSIDE_FOULS_FOR_BONUS', defaults.fouls_for_bonus)),
                max_personal_fouls = int(os.getenv('COURTSIDE_MAX_PERSONAL_FOULS', defaults.max_personal_fouls)),
                allow_foul_outs = _env_bool('COURTSIDE_ALLOW_FOUL_OUTS', defaults.allow_foul_outs),
            )
        )
