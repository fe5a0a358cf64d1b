"""Tests for game setup."""

import pytest

from courtside.engine.result import InvalidGameSetup
from courtside.engine.setup import create_game, validate_settings
from courtside.models.game import GameSettings, Phase
from courtside.models.player import Player, PlayerStats

from conftest import make_players


class TestValidateSettings:

    @pytest.mark.parametrize("field", ['quarters', 'quarter_duration', 'overtime_duration', 'fouls_for_bonus'])
    def test_zero_counts_rejected(self, field):
        with pytest.raises(InvalidGameSetup, match=field):
            validate_settings(GameSettings(**{field: 0}))

    def test_max_fouls_lifted_when_foul_outs_enabled(self):
        settings = validate_settings(GameSettings(allow_foul_outs=True, max_personal_fouls=0))

        assert settings.max_personal_fouls == 1

    def test_max_fouls_untouched_when_disabled(self):
        settings = validate_settings(GameSettings(allow_foul_outs=False, max_personal_fouls=0))

        assert settings.max_personal_fouls == 0


class TestCreateGame:

    def test_fresh_game_state(self, new_game, settings):
        assert new_game.game_phase == Phase.WARMUP
        assert new_game.current_quarter == 1
        assert new_game.current_time_remaining_in_phase == settings.quarter_duration
        assert not new_game.timer_is_running
        assert new_game.start_time is None
        assert new_game.game_log == []

    def test_first_five_start(self, new_game):
        home = new_game.home_team

        assert [p.id for p in home.on_court] == ['h1', 'h2', 'h3', 'h4', 'h5']
        assert [p.id for p in home.bench] == ['h6', 'h7']
        assert home.timeouts_left == 5
        assert all(s == PlayerStats() for s in home.stats.values())

    def test_short_roster_all_on_court(self, settings):
        game = create_game(settings, 'A', make_players('x', 3), 'B', make_players('y', 5))

        assert len(game.home_team.on_court) == 3
        assert game.home_team.bench == []
        assert game.id.startswith('game_')

    def test_empty_team_rejected(self, settings):
        with pytest.raises(InvalidGameSetup, match="at least one player"):
            create_game(settings, 'A', [], 'B', make_players('y', 5))

    def test_shared_player_rejected(self, settings):
        shared = Player(id='s1', name='Shared')

        with pytest.raises(InvalidGameSetup, match="both teams"):
            create_game(settings, 'A', [shared], 'B', [shared, Player(id='b1', name='B1')])

    def test_invalid_settings_rejected(self):
        with pytest.raises(InvalidGameSetup):
            create_game(GameSettings(quarters=0), 'A', make_players('x', 5), 'B', make_players('y', 5))
