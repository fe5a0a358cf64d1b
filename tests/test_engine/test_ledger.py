"""Tests for the stat ledger."""

import random

import pytest

from courtside.engine import ledger
from courtside.engine.result import GuardRejection
from courtside.models.game import GameSettings, TeamGameInfo
from courtside.models.player import Player, PlayerStats, StatType


def _team(*player_ids):
    players = [Player(id=pid, name=pid.upper()) for pid in player_ids]
    return TeamGameInfo(
        name='Hawks',
        players=players,
        on_court=list(players),
        stats={p.id: PlayerStats() for p in players},
    )


class TestApplyDelta:
    """Tests for the pure counter update."""

    def test_made_increment_raises_attempted(self):
        stats = ledger.apply_delta(PlayerStats(), StatType.POINTS_2_MADE, 1)

        assert stats.two_made == 1
        assert stats.two_attempted == 1

    def test_made_increment_keeps_higher_attempted(self):
        start = PlayerStats(three_made=1, three_attempted=4)

        stats = ledger.apply_delta(start, StatType.POINTS_3_MADE, 1)

        assert stats.three_made == 2
        assert stats.three_attempted == 4

    def test_attempted_decrement_clamps_made(self):
        start = PlayerStats(two_made=2, two_attempted=2)

        stats = ledger.apply_delta(start, StatType.POINTS_2_ATTEMPTED, -1)

        assert stats.two_attempted == 1
        assert stats.two_made == 1

    def test_made_decrement_leaves_attempted(self):
        start = PlayerStats(one_made=2, one_attempted=3)

        stats = ledger.apply_delta(start, StatType.POINTS_1_MADE, -1)

        assert stats.one_made == 1
        assert stats.one_attempted == 3

    def test_decrement_at_zero_is_clamped(self):
        stats = ledger.apply_delta(PlayerStats(), StatType.STEALS, -1)

        assert stats == PlayerStats()

    def test_input_is_not_modified(self):
        start = PlayerStats(assists=3)

        ledger.apply_delta(start, StatType.ASSISTS, 1)

        assert start.assists == 3

    @pytest.mark.parametrize("direction", [0, 2, -5])
    def test_invalid_direction_rejected(self, direction):
        with pytest.raises(GuardRejection):
            ledger.apply_delta(PlayerStats(), StatType.ASSISTS, direction)


class TestRecordStat:
    """Tests for recording a stat against a team."""

    def test_score_recomputed_from_counters(self):
        team = _team('p1', 'p2')
        settings = GameSettings()

        ledger.record_stat(team, 'p1', StatType.POINTS_3_MADE, 1, settings)
        ledger.record_stat(team, 'p2', StatType.POINTS_2_MADE, 1, settings)
        change = ledger.record_stat(team, 'p2', StatType.POINTS_1_MADE, 1, settings)

        assert team.score == 6
        assert change.points_delta == 1

    def test_attempt_correction_lowers_score(self):
        team = _team('p1')
        settings = GameSettings()
        ledger.record_stat(team, 'p1', StatType.POINTS_2_MADE, 1, settings)

        change = ledger.record_stat(team, 'p1', StatType.POINTS_2_ATTEMPTED, -1, settings)

        assert team.score == 0
        assert change.points_delta == -2
        assert team.stats['p1'].two_made == 0

    def test_foul_increment_counts_team_fouls(self):
        team = _team('p1')

        change = ledger.record_stat(team, 'p1', StatType.FOULS_PERSONAL, 1, GameSettings())

        assert change.fouls_delta == 1
        assert team.fouls_this_quarter == 1

    def test_foul_correction_lowers_team_fouls_floored(self):
        team = _team('p1')
        settings = GameSettings()
        ledger.record_stat(team, 'p1', StatType.FOULS_PERSONAL, 1, settings)
        team.fouls_this_quarter = 0  # period changed since the foul

        ledger.record_stat(team, 'p1', StatType.FOULS_PERSONAL, -1, settings)

        assert team.fouls_this_quarter == 0
        assert team.stats['p1'].personal_fouls == 0

    def test_foul_out_signalled_exactly_at_limit(self):
        team = _team('p1')
        settings = GameSettings(max_personal_fouls=2, allow_foul_outs=True)

        first = ledger.record_stat(team, 'p1', StatType.FOULS_PERSONAL, 1, settings)
        second = ledger.record_stat(team, 'p1', StatType.FOULS_PERSONAL, 1, settings)
        third = ledger.record_stat(team, 'p1', StatType.FOULS_PERSONAL, 1, settings)

        assert not first.fouled_out
        assert second.fouled_out
        assert not third.fouled_out

    def test_no_foul_out_when_disabled(self):
        team = _team('p1')
        settings = GameSettings(max_personal_fouls=1, allow_foul_outs=False)

        change = ledger.record_stat(team, 'p1', StatType.FOULS_PERSONAL, 1, settings)

        assert not change.fouled_out
        assert not ledger.is_fouled_out(team.stats['p1'], settings)

    def test_unknown_player_rejected(self):
        team = _team('p1')

        with pytest.raises(GuardRejection):
            ledger.record_stat(team, 'nobody', StatType.ASSISTS, 1, GameSettings())

    def test_clamped_decrement_reports_no_change(self):
        team = _team('p1')

        change = ledger.record_stat(team, 'p1', StatType.BLOCKS, -1, GameSettings())

        assert not change.changed

    def test_random_sequences_keep_invariants(self):
        rng = random.Random(7)
        team = _team('p1', 'p2', 'p3')
        settings = GameSettings()
        stats = list(StatType)

        for _ in range(2000):
            pid = rng.choice(['p1', 'p2', 'p3'])
            ledger.record_stat(team, pid, rng.choice(stats), rng.choice([1, -1]), settings)

            assert all(s.is_consistent() for s in team.stats.values())
            assert team.score == sum(
                s.one_made + 2 * s.two_made + 3 * s.three_made for s in team.stats.values()
            )
            assert team.fouls_this_quarter >= 0
