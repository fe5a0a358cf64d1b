"""Tests for snapshot serialization."""

import json

import pytest

from courtside.engine.actions import ApplyStat, PauseTimer, Substitute
from courtside.engine.reducer import reduce
from courtside.engine.setup import create_game
from courtside.models.game import Game, GameSettings, Phase, SnapshotError, TeamType
from courtside.models.player import Player, PlayerStats, StatType, Team

from conftest import T0


class TestGameSnapshot:
    """Game.to_dict / Game.from_dict."""

    def test_round_trip_through_json(self, live_game):
        game = live_game
        for action in [
            ApplyStat(TeamType.HOME, 'h1', StatType.POINTS_3_MADE),
            ApplyStat(TeamType.AWAY, 'a2', StatType.FOULS_PERSONAL),
            Substitute(TeamType.HOME, 'h2', 'h6'),
            PauseTimer(),
        ]:
            game = reduce(game, action, T0 + 1000).game

        restored = Game.from_dict(json.loads(json.dumps(game.to_dict())))

        assert restored == game
        assert restored.game_phase == Phase.TIMEOUT

    def test_uses_stored_key_names(self, new_game):
        data = new_game.to_dict()

        assert {'currentQuarter', 'isOvertime', 'gamePhase', 'currentTimeRemainingInPhase',
                'timerIsRunning', 'lastTickTimestamp', 'homeTeam', 'awayTeam', 'gameLog'} <= set(data)
        assert data['gamePhase'] == 'warmup'
        assert data['homeTeam']['onCourt'][0]['id'] == 'h1'
        assert set(data['homeTeam']['stats']['h1']) == {s.value for s in StatType}

    def test_missing_field_raises_snapshot_error(self, new_game):
        data = new_game.to_dict()
        del data['gamePhase']

        with pytest.raises(SnapshotError):
            Game.from_dict(data)

    def test_unknown_phase_raises_snapshot_error(self, new_game):
        data = new_game.to_dict()
        data['gamePhase'] = 'second_half'

        with pytest.raises(SnapshotError):
            Game.from_dict(data)

    def test_zero_break_survives_reload(self, home_players, away_players):
        game = create_game(GameSettings(break_duration=0), 'Hawks', home_players, 'Owls', away_players)

        restored = Game.from_dict(json.loads(json.dumps(game.to_dict())))

        assert restored.settings.break_duration == 0
        assert restored == game

    def test_missing_break_duration_uses_default(self, new_game):
        data = new_game.to_dict()
        del data['settings']['breakDuration']

        assert Game.from_dict(data).settings.break_duration == 60

    def test_player_on_court_and_bench_rejected(self, new_game):
        data = new_game.to_dict()
        data['homeTeam']['bench'].append(data['homeTeam']['onCourt'][0])

        with pytest.raises(SnapshotError, match="Hawks"):
            Game.from_dict(data)

    def test_player_missing_from_split_rejected(self, new_game):
        data = new_game.to_dict()
        data['awayTeam']['bench'].pop()

        with pytest.raises(SnapshotError):
            Game.from_dict(data)


class TestRecords:

    def test_settings_round_trip(self):
        settings = GameSettings(quarters=2, quarter_duration=1200, allow_foul_outs=True)

        assert GameSettings.from_dict(settings.to_dict()) == settings
        assert settings.halftime_duration == 2 * settings.break_duration

    def test_team_round_trip(self):
        team = Team(id='t1', name='Hawks', player_ids=['p1', 'p2'])

        assert Team.from_dict(team.to_dict()) == team
        assert team.to_dict()['playerIds'] == ['p1', 'p2']

    def test_player_label(self):
        assert Player(id='p1', name='Ann', number='7').label == 'Ann (#7)'
        assert Player(id='p2', name='Bo').label == 'Bo'

    def test_player_stats_derived_values(self):
        stats = PlayerStats(one_made=3, one_attempted=4, two_made=2, two_attempted=5,
                            three_made=1, three_attempted=2, offensive_rebounds=2, defensive_rebounds=5)

        assert stats.points == 10
        assert stats.total_rebounds == 7

    @pytest.mark.parametrize("value,expected", [
        ('2pm', StatType.POINTS_2_MADE),
        ('PF', StatType.FOULS_PERSONAL),
        ('assists', StatType.ASSISTS),
    ])
    def test_stat_type_parse(self, value, expected):
        assert StatType.parse(value) == expected

    def test_is_consistent(self):
        assert PlayerStats(two_made=1, two_attempted=1).is_consistent()
        assert not PlayerStats(two_made=2, two_attempted=1).is_consistent()
        assert not PlayerStats(steals=-1).is_consistent()
