"""
Tick / Reconciliation Engine

The countdown is driven by wall-clock time, not by counting callbacks: every
tick subtracts the real time elapsed since the previous one. When the host
process was suspended (laptop lid closed, terminal backgrounded) the first
tick after resuming covers the whole gap in one step.
"""

import logging
import threading
import time
from typing import Callable, Optional

from ..models.game import ClockState
from .phases import COUNTING_PHASES

logger = logging.getLogger(__name__)

TICK_INTERVAL_SECONDS = 1.0
CATCH_UP_THRESHOLD_MS = 2000


def now_ms() -> float:
    """Current wall-clock time in epoch milliseconds."""
    return time.time() * 1000


def is_counting(clock: ClockState) -> bool:
    return clock.timer_running and clock.phase in COUNTING_PHASES


def tick(clock: ClockState, now: float, default_elapsed: float = TICK_INTERVAL_SECONDS) -> ClockState:
    """
    Advance the countdown to `now` (epoch ms).

    Without a previous tick the elapsed time is one tick interval. A tick
    that reports zero or negative elapsed time only moves the reference
    point. The countdown is clamped at zero; reaching zero does not end the
    phase.
    """
    if not is_counting(clock):
        return clock

    if clock.last_tick_at is None:
        elapsed = default_elapsed
    else:
        elapsed = (now - clock.last_tick_at) / 1000

    if elapsed <= 0:
        return clock.evolve(last_tick_at=now)

    return clock.evolve(
        remaining_seconds=max(0.0, clock.remaining_seconds - elapsed),
        last_tick_at=now,
    )


def needs_catch_up(clock: ClockState, now: float, threshold_ms: float = CATCH_UP_THRESHOLD_MS) -> bool:
    return (
        is_counting(clock)
        and clock.last_tick_at is not None
        and now - clock.last_tick_at > threshold_ms
    )


def reconcile(clock: ClockState, now: float, threshold_ms: float = CATCH_UP_THRESHOLD_MS) -> ClockState:
    """
    Bring a running clock up to date after the process was inactive.

    - gap above the threshold: one catch-up tick covering the whole gap
    - no reference point yet: start counting from `now`, nothing is caught up
    - otherwise the regular ticks take care of it
    """
    if not is_counting(clock):
        return clock

    if clock.last_tick_at is None:
        return clock.evolve(last_tick_at=now)

    if needs_catch_up(clock, now, threshold_ms):
        gap = (now - clock.last_tick_at) / 1000
        logger.debug("Catching up %.1fs of game time", gap)
        return tick(clock, now)

    return clock


class Ticker:
    """
    Cancellable fixed-interval callback.

    Usage::

        ticker = Ticker(orchestrator.tick, interval=1.0)
        ticker.start()
        ...
        ticker.cancel()   # no callback runs after this returns

    Each start() opens a new generation and cancels the previous one. A timer
    thread only delivers its tick while holding the lock and only if its
    generation is still current, so cancel() (which takes the same lock) is a
    hard stop. Pass the owner's RLock as `lock` to serialise ticks with the
    owner's other work.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval: float = TICK_INTERVAL_SECONDS,
        lock: Optional[threading.RLock] = None,
    ):
        self.callback = callback
        self.interval = interval
        self._lock = lock or threading.RLock()
        self._generation = 0
        self._timer: Optional[threading.Timer] = None

    @property
    def active(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._schedule(self._generation)

    def cancel(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule(self, generation: int) -> None:
        timer = threading.Timer(self.interval, self._fire, args=(generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            try:
                self.callback()
            finally:
                # The callback may have cancelled us
                if generation == self._generation:
                    self._schedule(generation)
