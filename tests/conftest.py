"""Shared pytest fixtures for Courtside tests."""

import pytest

from courtside.models.game import GameSettings, TeamType
from courtside.models.player import Player


T0 = 1_700_000_000_000.0  # fixed epoch ms for deterministic clocks


class FakeTicker:
    """Stands in for engine.ticker.Ticker; records start/cancel calls."""

    def __init__(self, callback, interval, lock=None):
        self.callback = callback
        self.interval = interval
        self.lock = lock
        self.active = False
        self.starts = 0
        self.cancels = 0

    def start(self):
        self.active = True
        self.starts += 1

    def cancel(self):
        self.active = False
        self.cancels += 1

    def fire(self):
        """Deliver one tick the way the timer thread would."""
        if self.active:
            self.callback()


class ManualClock:
    """Callable epoch-ms clock advanced by hand."""

    def __init__(self, start=T0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds * 1000


def make_players(prefix, count):
    return [Player(id=f"{prefix}{i}", name=f"{prefix.upper()} Player {i}", number=str(i)) for i in range(1, count + 1)]


@pytest.fixture
def settings():
    """Default rules: 4 x 10 min, 5 min OT, 60 s breaks, foul-outs at 5."""
    return GameSettings(allow_foul_outs=True)


@pytest.fixture
def home_players():
    return make_players('h', 7)


@pytest.fixture
def away_players():
    return make_players('a', 6)


@pytest.fixture
def new_game(settings, home_players, away_players):
    """A freshly created game in WARMUP."""
    from courtside.engine.setup import create_game
    return create_game(settings, 'Hawks', home_players, 'Owls', away_players, game_id='game_test')


@pytest.fixture
def live_game(new_game):
    """A game with the timer started at T0 (Q1, IN_PROGRESS, running)."""
    from courtside.engine.actions import StartTimer
    from courtside.engine.reducer import reduce
    return reduce(new_game, StartTimer(), T0).game


@pytest.fixture
def timeout_game(live_game):
    """Q1 in TIMEOUT, clock stopped: stats can be recorded, periods changed."""
    from courtside.engine.actions import PauseTimer
    from courtside.engine.reducer import reduce
    return reduce(live_game, PauseTimer(), T0).game


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def orchestrator(new_game, manual_clock):
    """Orchestrator over a new game with a fake ticker and a manual clock."""
    from courtside.engine.orchestrator import GameOrchestrator
    published = []
    orch = GameOrchestrator(new_game, on_publish=published.append, clock=manual_clock, ticker_factory=FakeTicker)
    orch.published = published
    return orch


@pytest.fixture
def test_db(tmp_path):
    """
    Create a test database with all tables initialized.

    Uses tmp_path fixture to ensure isolation between tests.
    """
    db_path = str(tmp_path / "test.db")
    from courtside.db.init_db import init_database
    init_database(db_path)
    return db_path


@pytest.fixture
def mock_game_repository():
    from courtside.db.game import MockGameRepository
    return MockGameRepository()


@pytest.fixture
def mock_player_repository(home_players, away_players):
    from courtside.db.roster import MockPlayerRepository
    return MockPlayerRepository(home_players + away_players)


HOME = TeamType.HOME
AWAY = TeamType.AWAY
