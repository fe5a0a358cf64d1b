"""
Phase State Machine

Owns the game phase, the current period, the overtime flag and the countdown.
Every function takes a ClockState and returns a new one; illegal requests
raise GuardRejection and leave the input untouched.

Periods are numbered consecutively: 1..quarters are regulation, anything
above is overtime (OT1 = quarters + 1).
"""

import logging

from ..models.game import ClockState, GameSettings, Phase
from .result import GuardRejection

logger = logging.getLogger(__name__)

# Phases whose countdown advances while the timer runs. TIMEOUT is frozen.
COUNTING_PHASES = frozenset({
    Phase.IN_PROGRESS,
    Phase.WARMUP,
    Phase.QUARTER_BREAK,
    Phase.HALFTIME,
    Phase.OVERTIME_BREAK,
})

BREAK_PHASES = frozenset({Phase.QUARTER_BREAK, Phase.HALFTIME, Phase.OVERTIME_BREAK})

PRE_GAME_PHASES = frozenset({Phase.NOT_STARTED, Phase.WARMUP})


def period_duration(settings: GameSettings, is_overtime: bool) -> int:
    return settings.overtime_duration if is_overtime else settings.quarter_duration


def canonical_duration(phase: Phase, settings: GameSettings, is_overtime: bool) -> int:
    """Time a phase is reset to."""
    if phase in (Phase.IN_PROGRESS, Phase.TIMEOUT):
        return period_duration(settings, is_overtime)
    if phase in (Phase.QUARTER_BREAK, Phase.OVERTIME_BREAK):
        return settings.break_duration
    if phase == Phase.HALFTIME:
        return settings.halftime_duration
    # WARMUP and NOT_STARTED count down a full quarter
    return settings.quarter_duration


def format_clock(seconds: float) -> str:
    """mm:ss, never negative."""
    total = int(max(0.0, seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


def period_label(period: int, settings: GameSettings) -> str:
    """Q1..Qn for regulation, OT1.. for overtime."""
    if period > settings.quarters:
        return f"OT{period - settings.quarters}"
    return f"Q{period}"


def is_consistent(clock: ClockState, settings: GameSettings) -> bool:
    return (
        clock.current_period >= 1
        and clock.is_overtime == (clock.current_period > settings.quarters)
        and clock.remaining_seconds >= 0
    )


def initial_clock(settings: GameSettings) -> ClockState:
    """Clock of a freshly created game: warm-up, period 1, timer stopped."""
    return ClockState(
        current_period=1,
        is_overtime=False,
        phase=Phase.WARMUP,
        remaining_seconds=settings.quarter_duration,
        timer_running=False,
        last_tick_at=None,
    )


def _require_not_finished(clock: ClockState) -> None:
    if clock.phase == Phase.FINISHED:
        raise GuardRejection("Game is finished")


def _require_stopped(clock: ClockState, what: str) -> None:
    if clock.timer_running:
        raise GuardRejection(f"Pause the timer before {what}")


def start(clock: ClockState, settings: GameSettings, now_ms: float) -> ClockState:
    """
    Start or resume the timer.

    - NOT_STARTED/WARMUP: tip-off, period 1 begins with a full quarter
    - TIMEOUT: play resumes with the frozen time
    - break with no time left: the next period begins
    - break with time left, or stopped IN_PROGRESS: countdown resumes
    """
    _require_not_finished(clock)

    if clock.phase in PRE_GAME_PHASES:
        return clock.evolve(
            phase=Phase.IN_PROGRESS,
            current_period=1,
            is_overtime=False,
            remaining_seconds=settings.quarter_duration,
            timer_running=True,
            last_tick_at=now_ms,
        )

    if clock.phase in BREAK_PHASES and clock.remaining_seconds <= 0:
        return clock.evolve(
            phase=Phase.IN_PROGRESS,
            remaining_seconds=period_duration(settings, clock.is_overtime),
            timer_running=True,
            last_tick_at=now_ms,
        )

    if clock.timer_running:
        raise GuardRejection("Timer is already running")

    if clock.phase == Phase.TIMEOUT:
        return clock.evolve(phase=Phase.IN_PROGRESS, timer_running=True, last_tick_at=now_ms)

    return clock.evolve(timer_running=True, last_tick_at=now_ms)


def pause(clock: ClockState) -> ClockState:
    """Stop the timer. Pausing live play calls a timeout."""
    _require_not_finished(clock)
    if not clock.timer_running:
        raise GuardRejection("Timer is not running")

    if clock.phase == Phase.IN_PROGRESS:
        return clock.evolve(phase=Phase.TIMEOUT, timer_running=False)
    return clock.evolve(timer_running=False)


def reset(clock: ClockState, settings: GameSettings) -> ClockState:
    """Put the countdown back to the canonical duration of the current phase."""
    _require_not_finished(clock)
    _require_stopped(clock, "resetting the clock")

    return clock.evolve(
        remaining_seconds=canonical_duration(clock.phase, settings, clock.is_overtime),
        last_tick_at=None,
    )


def _advance(clock: ClockState, settings: GameSettings):
    """(period, is_overtime) after the current one."""
    if not clock.is_overtime and clock.current_period < settings.quarters:
        return clock.current_period + 1, False
    # Last regulation period rolls into OT1; overtime keeps counting up
    return clock.current_period + 1, True


def next_period(clock: ClockState, settings: GameSettings) -> ClockState:
    """Move to the following period with a full clock, timer stopped."""
    _require_not_finished(clock)
    _require_stopped(clock, "changing period")

    period, overtime = _advance(clock, settings)
    return clock.evolve(
        current_period=period,
        is_overtime=overtime,
        phase=Phase.IN_PROGRESS,
        remaining_seconds=period_duration(settings, overtime),
        timer_running=False,
        last_tick_at=None,
    )


def prev_period(clock: ClockState, settings: GameSettings) -> ClockState:
    """Mirror of next_period. Not available from the first regulation period."""
    _require_not_finished(clock)
    _require_stopped(clock, "changing period")
    if clock.current_period <= 1 and not clock.is_overtime:
        raise GuardRejection("Already at the first period")

    if clock.is_overtime and clock.current_period > settings.quarters + 1:
        period, overtime = clock.current_period - 1, True
    elif clock.is_overtime:
        period, overtime = settings.quarters, False
    else:
        period, overtime = clock.current_period - 1, False

    return clock.evolve(
        current_period=period,
        is_overtime=overtime,
        phase=Phase.IN_PROGRESS,
        remaining_seconds=period_duration(settings, overtime),
        timer_running=False,
        last_tick_at=None,
    )


def begin_break(clock: ClockState, settings: GameSettings) -> ClockState:
    """
    End the current period and enter the break before the next one.

    The period number moves on immediately; starting the timer once the break
    countdown reaches zero begins play in that period. The break after the
    middle regulation period is halftime; any break leading into overtime is
    an overtime break.
    """
    _require_not_finished(clock)
    _require_stopped(clock, "starting a break")
    if clock.phase not in (Phase.IN_PROGRESS, Phase.TIMEOUT):
        raise GuardRejection(f"Cannot start a break during {clock.phase.value}")

    period, overtime = _advance(clock, settings)
    if overtime:
        phase = Phase.OVERTIME_BREAK
    elif settings.quarters % 2 == 0 and clock.current_period == settings.quarters // 2:
        phase = Phase.HALFTIME
    else:
        phase = Phase.QUARTER_BREAK

    return clock.evolve(
        current_period=period,
        is_overtime=overtime,
        phase=phase,
        remaining_seconds=canonical_duration(phase, settings, overtime),
        timer_running=False,
        last_tick_at=None,
    )


def finish(clock: ClockState) -> ClockState:
    """Terminal transition. Allowed from any phase except FINISHED itself."""
    _require_not_finished(clock)
    return clock.evolve(phase=Phase.FINISHED, timer_running=False, last_tick_at=None)
