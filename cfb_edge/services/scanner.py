"""
Game and slate scanner for CFB Edge.

Turns the per-game ``lines`` payload the dashboard already holds into a
complete odds analysis: every arbitrage pair across the configured markets,
the best pair with a concrete stake plan, and every +EV price.

One malformed quote only removes that quote side; one malformed game only
removes that game from the slate.  Neither raises; skipped games are
logged as warnings.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from cfb_edge.config import Settings, get_settings
from cfb_edge.core.arbitrage import ArbitragePair, find_all_arbitrage, summarize_by_market
from cfb_edge.core.ev import EVOpportunity, find_all_ev_opportunities
from cfb_edge.core.quotes import Quote, filter_providers, quotes_from_lines
from cfb_edge.core.stake import InvalidInputError, StakeAllocation, allocate_for_pair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameLines:
    """A game and the quotes offered on it."""

    game_id: Any
    home_team: str
    away_team: str
    week: Optional[int] = None
    quotes: List[Quote] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "GameLines":
        """Build from a lines-feed game object.

        Expected keys: ``id`` (or ``gameId``), ``homeTeam``, ``awayTeam``,
        optional ``week`` and ``lines``.

        Raises:
            ValueError: If the game id or either team is missing.
        """
        game_id = payload.get("id", payload.get("gameId"))
        home = payload.get("homeTeam")
        away = payload.get("awayTeam")
        if game_id is None or not home or not away:
            raise ValueError(
                f"Game payload missing id/homeTeam/awayTeam: {dict(payload)!r}"
            )
        week = payload.get("week")
        return cls(
            game_id=game_id,
            home_team=str(home),
            away_team=str(away),
            week=int(week) if week is not None else None,
            quotes=quotes_from_lines(payload.get("lines")),
        )

    @property
    def matchup(self) -> str:
        return f"{self.away_team} @ {self.home_team}"


@dataclass(frozen=True)
class GameAnalysis:
    """Arbitrage and EV results for one game."""

    game: GameLines
    providers: List[str]
    arbitrage: List[ArbitragePair]
    best_pair: Optional[ArbitragePair]
    stake_plan: Optional[StakeAllocation]
    ev_opportunities: List[EVOpportunity]

    @property
    def has_opportunity(self) -> bool:
        return bool(self.arbitrage or self.ev_opportunities)


def _resolve_stake(settings: Settings, total_stake: Optional[float]) -> float:
    stake = settings.default_total_stake if total_stake is None else total_stake
    if isinstance(stake, bool) or not isinstance(stake, (int, float)):
        raise InvalidInputError(f"total_stake must be a number, got {stake!r}.")
    if not math.isfinite(stake) or stake <= 0:
        raise InvalidInputError(f"total_stake must be a finite amount > 0, got {stake!r}.")
    return stake


def analyze_game(
    game: GameLines,
    settings: Optional[Settings] = None,
    total_stake: Optional[float] = None,
    min_ev_threshold: Optional[float] = None,
    sportsbooks: Optional[Iterable[str]] = None,
) -> GameAnalysis:
    """
    Run the full odds analysis for a single game.

    Args:
        game: The game and its quotes.
        settings: Engine defaults; the process settings when omitted.
        total_stake: Bankroll for the best pair's stake plan.
        min_ev_threshold: EV percentage at which prices are flagged.
        sportsbooks: Providers to keep; falls back to
            ``settings.active_sportsbooks`` (empty keeps all).

    Returns:
        :class:`GameAnalysis`.  ``best_pair`` is the highest-margin pair
        (the first of ``arbitrage``) and ``stake_plan`` its allocation.

    Raises:
        InvalidInputError: If ``total_stake`` is not a finite positive amount.
    """
    settings = settings or get_settings()
    stake = _resolve_stake(settings, total_stake)
    threshold = settings.min_ev_threshold if min_ev_threshold is None else min_ev_threshold
    books = sportsbooks if sportsbooks is not None else settings.active_sportsbooks

    quotes = filter_providers(game.quotes, books)

    pairs = [
        p for p in find_all_arbitrage(quotes, settings.arbitrage_markets)
        if p.profit_margin >= settings.min_arb_margin
    ]
    best = pairs[0] if pairs else None
    plan = allocate_for_pair(best, stake) if best is not None else None

    ev_opps = find_all_ev_opportunities(quotes, threshold)

    if pairs:
        logger.info(
            "%s: %d arbitrage pair(s) %s, best %.2f%% (%s / %s)",
            game.matchup, len(pairs), summarize_by_market(pairs),
            best.profit_margin, best.first_quote.provider, best.second_quote.provider,
        )
    logger.debug(
        "%s: %d quote(s) analysed, %d +EV price(s) at >= %.2f%%",
        game.matchup, len(quotes), len(ev_opps), threshold,
    )

    return GameAnalysis(
        game=game,
        providers=[q.provider for q in quotes],
        arbitrage=pairs,
        best_pair=best,
        stake_plan=plan,
        ev_opportunities=ev_opps,
    )


def scan_slate(
    games: Iterable[Mapping[str, Any]],
    settings: Optional[Settings] = None,
    total_stake: Optional[float] = None,
    min_ev_threshold: Optional[float] = None,
    sportsbooks: Optional[Iterable[str]] = None,
) -> List[GameAnalysis]:
    """
    Analyse every game in a lines-feed slate.

    Games that cannot be parsed are skipped with a warning.  A non-positive or
    non-finite ``total_stake`` raises ``InvalidInputError`` before any game
    is read.

    Returns:
        One :class:`GameAnalysis` per parsable game, in input order.
    """
    settings = settings or get_settings()
    total_stake = _resolve_stake(settings, total_stake)
    books = list(sportsbooks) if sportsbooks is not None else None
    started = time.monotonic()

    results: List[GameAnalysis] = []
    skipped = 0
    for payload in games:
        try:
            game = GameLines.from_payload(payload)
        except (ValueError, TypeError, AttributeError) as exc:
            skipped += 1
            logger.warning("Skipping unparsable game: %s", exc)
            continue
        results.append(analyze_game(
            game,
            settings=settings,
            total_stake=total_stake,
            min_ev_threshold=min_ev_threshold,
            sportsbooks=books,
        ))

    summary: Dict[str, Any] = {
        "games_analyzed": len(results),
        "games_skipped": skipped,
        "arbitrage_games": sum(1 for r in results if r.arbitrage),
        "ev_prices": sum(len(r.ev_opportunities) for r in results),
        "duration_seconds": round(time.monotonic() - started, 3),
    }
    logger.info("Slate scan complete: %s", summary)
    return results
