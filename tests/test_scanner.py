"""
Tests for the game and slate scanner
Run with: pytest tests/test_scanner.py -v
"""

import logging

import pytest
from cfb_edge.config import Settings
from cfb_edge.core.stake import InvalidInputError
from cfb_edge.services.scanner import GameLines, analyze_game, scan_slate


def _game(game_id=401, lines=None):
    return {
        "id": game_id,
        "week": 3,
        "homeTeam": "Nebraska",
        "awayTeam": "Colorado",
        "lines": lines if lines is not None else [
            {"provider": "DraftKings", "homeMoneyline": -150, "awayMoneyline": 130},
            {"provider": "Bovada", "homeMoneyline": 140, "awayMoneyline": -160},
            {"provider": "ESPN Bet", "homeMoneyline": -140, "awayMoneyline": 115},
        ],
    }


class TestGameLines:
    """Test game payload parsing"""

    def test_from_payload(self):
        game = GameLines.from_payload(_game())

        assert game.game_id == 401
        assert game.week == 3
        assert game.matchup == "Colorado @ Nebraska"
        assert [q.provider for q in game.quotes] == ["DraftKings", "Bovada", "ESPN Bet"]

    def test_game_id_alias(self):
        payload = _game()
        del payload["id"]
        payload["gameId"] = 77
        assert GameLines.from_payload(payload).game_id == 77

    def test_missing_team_raises(self):
        payload = _game()
        del payload["awayTeam"]
        with pytest.raises(ValueError):
            GameLines.from_payload(payload)

    def test_no_lines(self):
        payload = _game()
        del payload["lines"]
        assert GameLines.from_payload(payload).quotes == []


class TestAnalyzeGame:
    """Test single-game analysis"""

    def test_arbitrage_and_plan(self):
        result = analyze_game(GameLines.from_payload(_game()), settings=Settings())

        assert result.best_pair is not None
        assert result.best_pair.home_quote.provider == "Bovada"
        assert result.best_pair.away_quote.provider == "DraftKings"
        assert result.best_pair == result.arbitrage[0]
        assert result.stake_plan.total_stake == pytest.approx(100.0)
        assert result.stake_plan.profit > 0
        assert result.has_opportunity

    def test_custom_stake(self):
        result = analyze_game(
            GameLines.from_payload(_game()), settings=Settings(), total_stake=500,
        )
        assert result.stake_plan.total_stake == pytest.approx(500.0)
        assert result.stake_plan.roi_percent == pytest.approx(
            result.best_pair.profit_margin / (1 - result.best_pair.profit_margin / 100),
        )

    def test_sportsbook_filter_removes_arbitrage(self):
        result = analyze_game(
            GameLines.from_payload(_game()),
            settings=Settings(),
            sportsbooks=["DraftKings", "ESPN Bet"],
        )
        assert result.providers == ["DraftKings", "ESPN Bet"]
        assert result.arbitrage == []
        assert result.best_pair is None
        assert result.stake_plan is None

    def test_settings_sportsbooks_used_by_default(self):
        settings = Settings(active_sportsbooks=("bovada", "draftkings"))
        result = analyze_game(GameLines.from_payload(_game()), settings=settings)
        assert result.providers == ["DraftKings", "Bovada"]

    def test_min_margin_filters_pairs(self):
        result = analyze_game(
            GameLines.from_payload(_game()), settings=Settings(min_arb_margin=20.0),
        )
        assert result.arbitrage == []

    def test_ev_threshold(self):
        game = GameLines.from_payload(_game())
        strict = analyze_game(game, settings=Settings(), min_ev_threshold=50.0)
        loose = analyze_game(game, settings=Settings(), min_ev_threshold=0.0)

        assert strict.ev_opportunities == []
        assert loose.ev_opportunities

    def test_invalid_stake_raises(self):
        with pytest.raises(InvalidInputError):
            analyze_game(GameLines.from_payload(_game()), settings=Settings(), total_stake=0)

    def test_empty_lines(self):
        result = analyze_game(GameLines.from_payload(_game(lines=[])), settings=Settings())
        assert not result.has_opportunity


class TestScanSlate:
    """Test multi-game scans"""

    def test_preserves_order(self):
        results = scan_slate([_game(1), _game(2), _game(3)], settings=Settings())
        assert [r.game.game_id for r in results] == [1, 2, 3]

    def test_skips_malformed_game(self, caplog):
        bad = {"id": 9, "homeTeam": "Iowa"}
        with caplog.at_level(logging.WARNING):
            results = scan_slate([_game(1), bad, "junk", _game(2)], settings=Settings())

        assert [r.game.game_id for r in results] == [1, 2]
        assert "Skipping unparsable game" in caplog.text

    def test_malformed_line_does_not_drop_game(self):
        lines = _game()["lines"] + [{"homeMoneyline": -110}, {"provider": "X", "homeMoneyline": "?"}]
        results = scan_slate([_game(lines=lines)], settings=Settings())

        assert len(results) == 1
        assert results[0].best_pair is not None

    def test_invalid_stake_raises_before_scan(self):
        with pytest.raises(InvalidInputError):
            scan_slate([_game()], settings=Settings(), total_stake=-10)

    @pytest.mark.parametrize("stake", [float("inf"), float("nan")])
    def test_non_finite_stake_raises_before_any_game_is_read(self, stake):
        seen = []

        def games():
            seen.append(True)
            yield _game()

        with pytest.raises(InvalidInputError):
            scan_slate(games(), settings=Settings(), total_stake=stake)
        assert seen == []

    def test_summary_logged(self, caplog):
        with caplog.at_level(logging.INFO):
            scan_slate([_game()], settings=Settings())
        assert "Slate scan complete" in caplog.text
