"""Tests for configuration classes."""

import os
from unittest.mock import patch

import pytest


class TestGameConfig:
    """Tests for GameConfig class."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            from config import GameConfig

            game = GameConfig()

            assert game.num_decks == 1
            assert game.starting_chips == 200
            assert game.table_min == 20
            assert game.upcard_mode is False
            assert game.text_speed == 1
            assert game.stats_file == "player_stats.db"

    def test_env_overrides(self):
        env = {
            "PARLOR_DECKS": "4",
            "PARLOR_STARTING_CHIPS": "500",
            "PARLOR_TABLE_MIN": "25",
            "PARLOR_UPCARD_MODE": "TRUE",
            "PARLOR_TEXT_SPEED": "2",
            "PARLOR_STATS_FILE": "/tmp/stats.db",
        }
        with patch.dict(os.environ, env):
            from config import GameConfig

            game = GameConfig()

            assert game.num_decks == 4
            assert game.starting_chips == 500
            assert game.table_min == 25
            assert game.upcard_mode is True
            assert game.delay_seconds == 0.3
            assert game.stats_file == "/tmp/stats.db"

    @pytest.mark.parametrize("value", ["3", "many", "0"])
    def test_bad_deck_count_falls_back(self, value):
        with patch.dict(os.environ, {"PARLOR_DECKS": value}):
            from config import _parse_decks

            assert _parse_decks() == 1

    @pytest.mark.parametrize("value", ["7", "slow"])
    def test_bad_text_speed_falls_back(self, value):
        with patch.dict(os.environ, {"PARLOR_TEXT_SPEED": value}):
            from config import _parse_text_speed

            assert _parse_text_speed() == 1

    def test_to_rules(self):
        from config import GameConfig

        rules = GameConfig(num_decks=6, starting_chips=300, table_min=15).to_rules()

        assert rules.num_decks == 6
        assert rules.starting_chips == 300
        assert rules.table_min == 15
        assert rules.low_card_threshold == 15


class TestAppConfig:
    def test_log_level_uppercased(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            from config import AppConfig

            assert AppConfig().log_level == "DEBUG"

    def test_debug_flag(self):
        with patch.dict(os.environ, {"DEBUG": "true"}):
            from config import ApiConfig

            assert ApiConfig().debug is True
