"""
Tests for quote parsing and the market vocabulary
Run with: pytest tests/test_quotes.py -v
"""

import dataclasses

import pytest
from cfb_edge.core.quotes import (
    Quote,
    filter_providers,
    market_sides,
    quotes_from_lines,
)


class TestQuoteFromLine:
    """Test building quotes from the lines feed"""

    def test_camel_case_keys(self):
        q = Quote.from_line({
            "provider": "DraftKings",
            "homeMoneyline": -150,
            "awayMoneyline": "+130",
            "homeSpreadOdds": -110,
            "awaySpreadOdds": -110,
            "overUnder": 52.5,
            "overOdds": -105,
            "underOdds": -115,
        })

        assert q.provider == "DraftKings"
        assert q.home_moneyline == -150
        assert q.away_moneyline == "+130"
        assert q.over_under == 52.5
        assert q.price("total", "under") == -115

    def test_legacy_spread_key(self):
        q = Quote.from_line({"provider": "Bovada", "spread": -6.5})
        assert q.home_spread == -6.5

    def test_home_spread_wins_over_legacy_key(self):
        q = Quote.from_line({"provider": "Bovada", "spread": -6.5, "homeSpread": -7})
        assert q.home_spread == -7

    def test_unknown_keys_ignored(self):
        q = Quote.from_line({"provider": "ESPN Bet", "spreadOpen": -3, "formattedSpread": "x"})
        assert q.home_moneyline is None

    def test_missing_provider_raises(self):
        with pytest.raises(ValueError):
            Quote.from_line({"homeMoneyline": -110})
        with pytest.raises(ValueError):
            Quote.from_line({"provider": "  "})

    def test_quote_is_immutable(self):
        q = Quote("BookA", home_moneyline=-110)
        with pytest.raises(dataclasses.FrozenInstanceError):
            q.home_moneyline = -120


class TestPriceLookup:
    """Test market/side resolution"""

    def test_sides(self):
        assert market_sides("moneyline") == ("home", "away")
        assert market_sides("spread") == ("home", "away")
        assert market_sides("total") == ("over", "under")

    def test_unknown_market(self):
        with pytest.raises(ValueError):
            market_sides("parlay")

    def test_unknown_side(self):
        q = Quote("BookA")
        with pytest.raises(ValueError):
            q.price("moneyline", "over")

    def test_spread_uses_spread_odds(self):
        q = Quote("BookA", home_spread=-3.5, home_spread_odds=-115)
        assert q.price("spread", "home") == -115


class TestQuotesFromLines:
    """Test bulk conversion"""

    def test_skips_bad_entries(self):
        quotes = quotes_from_lines([
            {"provider": "A", "homeMoneyline": -110},
            {"homeMoneyline": -110},
            "not a line",
            Quote("B"),
        ])
        assert [q.provider for q in quotes] == ["A", "B"]

    def test_none_is_empty(self):
        assert quotes_from_lines(None) == []


class TestFilterProviders:
    """Test sportsbook selection"""

    def test_case_insensitive(self):
        quotes = [Quote("DraftKings"), Quote("Bovada"), Quote("ESPN Bet")]
        kept = filter_providers(quotes, ["draftkings", "ESPN BET"])
        assert [q.provider for q in kept] == ["DraftKings", "ESPN Bet"]

    def test_empty_selection_keeps_all(self):
        quotes = [Quote("DraftKings"), Quote("Bovada")]
        assert filter_providers(quotes, []) == quotes
        assert filter_providers(quotes, None) == quotes
        assert filter_providers(quotes, ["", " "]) == quotes
