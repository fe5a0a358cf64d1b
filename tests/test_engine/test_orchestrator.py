"""Tests for the game orchestrator."""

import logging
import time

import pytest

from courtside.engine.orchestrator import GameOrchestrator
from courtside.models.game import Phase, TeamType
from courtside.models.player import Player, StatType

from conftest import FakeTicker, ManualClock, T0


class TestTickerOwnership:
    """The ticker runs exactly while the clock is counting."""

    def test_start_starts_ticker(self, orchestrator):
        result = orchestrator.start_timer()

        assert result.is_applied
        assert orchestrator.ticking
        assert orchestrator.published[-1] is orchestrator.game

    def test_tick_uses_wall_clock(self, orchestrator, manual_clock):
        orchestrator.start_timer()
        manual_clock.advance(3)

        orchestrator._ticker.fire()

        assert orchestrator.game.current_time_remaining_in_phase == pytest.approx(597.0)

    def test_pause_cancels_ticker(self, orchestrator):
        orchestrator.start_timer()

        orchestrator.pause_timer()

        assert not orchestrator.ticking
        assert orchestrator.game.game_phase == Phase.TIMEOUT

    def test_end_game_cancels_ticker(self, orchestrator):
        orchestrator.start_timer()

        orchestrator.end_game()

        assert not orchestrator.ticking
        assert orchestrator.game.is_finished

    def test_restart_does_not_stack_tickers(self, orchestrator):
        orchestrator.start_timer()
        orchestrator.pause_timer()
        orchestrator.start_timer()

        assert orchestrator._ticker.starts == 2
        assert orchestrator._ticker.cancels == 1

    def test_close_cancels(self, orchestrator):
        orchestrator.start_timer()

        orchestrator.close()

        assert not orchestrator.ticking


class TestPublishing:

    def test_rejected_action_not_published(self, orchestrator):
        result = orchestrator.pause_timer()

        assert result.is_rejected
        assert orchestrator.published == []

    def test_each_applied_action_published_in_order(self, orchestrator):
        orchestrator.start_timer()
        orchestrator.apply_stat(TeamType.HOME, 'h1', StatType.POINTS_2_MADE)
        orchestrator.substitute(TeamType.AWAY, 'a1', 'a6')

        assert len(orchestrator.published) == 3
        assert orchestrator.published[1].home_team.score == 2
        assert orchestrator.published[0].home_team.score == 0

    def test_action_surface(self, orchestrator):
        assert orchestrator.start_timer().is_applied
        assert orchestrator.use_timeout(TeamType.HOME).is_applied
        assert orchestrator.pause_timer().is_applied
        assert orchestrator.reset_timer().is_applied
        assert orchestrator.go_to_next_period().is_applied
        assert orchestrator.go_to_prev_period().is_applied
        assert orchestrator.add_players_to_team(TeamType.AWAY, [Player(id='a9', name='Late')]).is_applied
        assert orchestrator.begin_break().is_applied
        assert orchestrator.end_game().is_applied
        assert orchestrator.game.is_finished

    def test_foul_out_logged(self, orchestrator, caplog):
        orchestrator.start_timer()
        with caplog.at_level(logging.WARNING):
            for _ in range(5):
                result = orchestrator.apply_stat(TeamType.HOME, 'h1', StatType.FOULS_PERSONAL)

        assert result.foul_out is not None
        assert "fouled out" in caplog.text


class TestResume:
    """Taking over a running game after a suspension."""

    def test_resume_catches_up_and_restarts_ticker(self, live_game):
        clock = ManualClock(T0 + 45_000)
        orch = GameOrchestrator(live_game, clock=clock, ticker_factory=FakeTicker)

        result = orch.resume()

        assert result.is_applied
        assert orch.game.current_time_remaining_in_phase == pytest.approx(555.0)
        assert orch.ticking

    def test_resume_stopped_game_leaves_ticker_off(self, timeout_game):
        orch = GameOrchestrator(timeout_game, clock=ManualClock(T0 + 45_000), ticker_factory=FakeTicker)

        result = orch.resume()

        assert result.is_skipped
        assert not orch.ticking

    def test_without_ticker(self, live_game):
        orch = GameOrchestrator(live_game, clock=ManualClock(T0 + 1000), ticker_factory=None)

        orch.tick()

        assert not orch.ticking
        assert orch.game.current_time_remaining_in_phase == pytest.approx(599.0)


class TestTickErrors:

    def test_tick_failure_does_not_escape_callback(self, orchestrator, monkeypatch):
        orchestrator.start_timer()

        def boom(action):
            raise RuntimeError("storage unavailable")

        monkeypatch.setattr(orchestrator, 'dispatch', boom)

        orchestrator._ticker.fire()  # must not raise


class TestRealTicker:

    def test_countdown_runs_and_stops_on_close(self, new_game):
        orch = GameOrchestrator(new_game, tick_interval=0.01)
        orch.start_timer()
        time.sleep(0.2)
        orch.close()

        stopped_at = orch.game.current_time_remaining_in_phase
        time.sleep(0.1)

        assert stopped_at < 600
        assert orch.game.current_time_remaining_in_phase == stopped_at
