"""
Tests for environment-driven settings
Run with: pytest tests/test_config.py -v
"""

import pytest
from cfb_edge.config import Settings, get_settings

_ENV_VARS = (
    "DEFAULT_TOTAL_STAKE",
    "MIN_EV_THRESHOLD",
    "MIN_ARB_MARGIN",
    "ACTIVE_SPORTSBOOKS",
    "ARB_MARKETS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


class TestDefaults:
    """Test defaults with nothing configured"""

    def test_from_env_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.default_total_stake == 100.0
        assert settings.min_ev_threshold == 0.0
        assert settings.min_arb_margin == 0.0
        assert settings.active_sportsbooks == ()
        assert settings.arbitrage_markets == ("moneyline", "spread")


class TestOverrides:
    """Test environment overrides"""

    def test_numeric_values(self, clean_env):
        clean_env.setenv("DEFAULT_TOTAL_STAKE", "250")
        clean_env.setenv("MIN_EV_THRESHOLD", "2.5")
        clean_env.setenv("MIN_ARB_MARGIN", "0.5")
        settings = Settings.from_env()

        assert settings.default_total_stake == 250.0
        assert settings.min_ev_threshold == 2.5
        assert settings.min_arb_margin == 0.5

    def test_csv_values(self, clean_env):
        clean_env.setenv("ACTIVE_SPORTSBOOKS", "DraftKings, Bovada ,,ESPN Bet")
        clean_env.setenv("ARB_MARKETS", "moneyline,total")
        settings = Settings.from_env()

        assert settings.active_sportsbooks == ("DraftKings", "Bovada", "ESPN Bet")
        assert settings.arbitrage_markets == ("moneyline", "total")

    def test_blank_markets_fall_back(self, clean_env):
        clean_env.setenv("ARB_MARKETS", " , ")
        assert Settings.from_env().arbitrage_markets == ("moneyline", "spread")

    def test_get_settings_is_cached(self, clean_env):
        clean_env.setenv("DEFAULT_TOTAL_STAKE", "300")
        first = get_settings()
        clean_env.setenv("DEFAULT_TOTAL_STAKE", "400")

        assert get_settings() is first
        assert first.default_total_stake == 300.0


class TestValidation:
    """Test rejected settings"""

    def test_unknown_market(self):
        with pytest.raises(ValueError):
            Settings(arbitrage_markets=("moneyline", "props"))

    def test_non_positive_stake(self):
        with pytest.raises(ValueError):
            Settings(default_total_stake=0)

    def test_unknown_market_from_env(self, clean_env):
        clean_env.setenv("ARB_MARKETS", "halftime")
        with pytest.raises(ValueError):
            Settings.from_env()
