"""
Game Orchestrator

Holds the current Game snapshot and owns the clock ticker. Every action,
whether it comes from the caller or from the ticker thread, goes through
dispatch(): read snapshot -> reduce -> publish, under one lock.
"""

import logging
import threading
from typing import Callable, Iterable, Optional

from ..models.game import Game, TeamType
from ..models.player import Player, StatType
from ..monitoring import add_breadcrumb, capture_errors, capture_message
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
from .reducer import reduce
from .result import ActionResult
from .ticker import CATCH_UP_THRESHOLD_MS, TICK_INTERVAL_SECONDS, Ticker, is_counting, needs_catch_up, now_ms

logger = logging.getLogger(__name__)


class GameOrchestrator:
    """
    Single point of mutation for one live game.

    Usage::

        orchestrator = GameOrchestrator(game, on_publish=repo.save_current)
        orchestrator.start_timer()
        orchestrator.apply_stat(TeamType.HOME, 'p1', StatType.POINTS_2_MADE)
        ...
        orchestrator.close()

    The ticker runs only while the clock is counting; it is started and
    cancelled automatically after every action.
    """

    def __init__(
        self,
        game: Game,
        on_publish: Optional[Callable[[Game], None]] = None,
        clock: Callable[[], float] = now_ms,
        tick_interval: float = TICK_INTERVAL_SECONDS,
        catch_up_threshold_ms: float = CATCH_UP_THRESHOLD_MS,
        ticker_factory: Optional[Callable[..., Ticker]] = Ticker,
    ):
        self._lock = threading.RLock()
        self._game = game
        self._on_publish = on_publish
        self._clock = clock
        self.catch_up_threshold_ms = catch_up_threshold_ms

        on_tick = capture_errors(step_name="clock_tick", reraise=False)(self.tick)
        self._ticker = ticker_factory(on_tick, tick_interval, self._lock) if ticker_factory else None

    @property
    def game(self) -> Game:
        """The latest published snapshot."""
        return self._game

    @property
    def ticking(self) -> bool:
        return self._ticker is not None and self._ticker.active

    def dispatch(self, action: GameCommand) -> ActionResult:
        """Reduce one action against the current snapshot and publish the result."""
        with self._lock:
            result = reduce(self._game, action, self._clock())

            if result.is_applied:
                self._game = result.game
                if not isinstance(action, Tick):
                    add_breadcrumb(
                        message=result.message or type(action).__name__,
                        category="game",
                        data={"phase": self._game.game_phase.value},
                    )
                if self._on_publish is not None:
                    self._on_publish(self._game)

            if result.foul_out is not None:
                logger.warning(result.foul_out.message)
                capture_message(result.foul_out.message, level="warning", tags={"game_id": self._game.id})

            self._sync_ticker()
            return result

    def _sync_ticker(self) -> None:
        if self._ticker is None:
            return
        counting = is_counting(self._game.clock)
        if counting and not self._ticker.active:
            self._ticker.start()
        elif not counting and self._ticker.active:
            self._ticker.cancel()

    # Clock
    def start_timer(self) -> ActionResult:
        return self.dispatch(StartTimer())

    def pause_timer(self) -> ActionResult:
        return self.dispatch(PauseTimer())

    def reset_timer(self) -> ActionResult:
        return self.dispatch(ResetTimer())

    def go_to_next_period(self) -> ActionResult:
        return self.dispatch(NextPeriod())

    def go_to_prev_period(self) -> ActionResult:
        return self.dispatch(PrevPeriod())

    def begin_break(self) -> ActionResult:
        return self.dispatch(BeginBreak())

    def end_game(self) -> ActionResult:
        return self.dispatch(EndGame())

    def tick(self) -> ActionResult:
        return self.dispatch(Tick())

    def resume(self) -> ActionResult:
        """
        Call after the host was suspended or when taking over a stored game.

        Catches the clock up in a single step if the gap is large, then
        restarts the ticker so the next tick is a full interval away.
        """
        with self._lock:
            caught_up = needs_catch_up(self._game.clock, self._clock(), self.catch_up_threshold_ms)
            result = self.dispatch(Reconcile(self.catch_up_threshold_ms))
            if caught_up and result.is_applied:
                capture_message("Clock caught up after suspension", tags={"game_id": self._game.id})
            if self._ticker is not None and is_counting(self._game.clock):
                self._ticker.start()
            return result

    # Teams
    def apply_stat(self, team: TeamType, player_id: str, stat: StatType, direction: int = 1) -> ActionResult:
        return self.dispatch(ApplyStat(team, player_id, stat, direction))

    def substitute(self, team: TeamType, player_out_id: str, player_in_id: str) -> ActionResult:
        return self.dispatch(Substitute(team, player_out_id, player_in_id))

    def add_players_to_team(self, team: TeamType, players: Iterable[Player]) -> ActionResult:
        return self.dispatch(AddPlayers(team, tuple(players)))

    def use_timeout(self, team: TeamType) -> ActionResult:
        return self.dispatch(UseTimeout(team))

    def close(self) -> None:
        """Stop the ticker. No tick is delivered after this returns."""
        if self._ticker is not None:
            self._ticker.cancel()
