"""Positive expected-value detection against a cross-book consensus price.

For one side of one market, every book's price is converted to an implied
probability and the valid ones are averaged.  The inverse of that average is
taken as the *fair* decimal price::

    avg_prob      =  mean(1 / d_k  for usable books k)
    fair_decimal  =  1 / avg_prob
    ev_percent    =  (d_k / fair_decimal − 1) · 100

A quote is flagged when ``ev_percent >= min_ev_threshold``.

Averaging implied probabilities across books approximates a vig-free
consensus without sharp-book or line-movement data.  It is a deliberate
simplification, not a statistical model: the average still carries the
books' margin, so flagged prices are the ones that stand out from the pack.
Moneyline, spread and total markets all use this same method.

A single book cannot price itself against a consensus, so fewer than two
providers with a usable price yields no fair price and no opportunities.

Run tests with::

    pytest tests/test_ev.py -v
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from cfb_edge.core.odds_math import (
    expected_value_percent,
    implied_probability_fraction,
    to_decimal,
)
from cfb_edge.core.quotes import ALL_MARKETS, Quote, market_sides

#: Minimum number of distinct providers needed to form a consensus price.
MIN_CONSENSUS_BOOKS = 2


@dataclass(frozen=True)
class EVOpportunity:
    """One book's price on one side, measured against the consensus.

    Attributes:
        market: Market name.
        side: Side within the market (``home``, ``away``, ``over``, ``under``).
        quote: The quote offering the price.
        american_odds: The raw price as delivered.
        decimal_odds: Decimal form of the price.
        fair_decimal: Consensus fair decimal price for the side.
        ev_percent: ``(decimal_odds / fair_decimal - 1) * 100``.
        consensus_books: Distinct providers averaged into ``fair_decimal``.
    """

    market: str
    side: str
    quote: Quote
    american_odds: object
    decimal_odds: float
    fair_decimal: float
    ev_percent: float
    consensus_books: int

    @property
    def provider(self) -> str:
        return self.quote.provider


def _usable_prices(
    quotes: Sequence[Quote], market: str, side: str
) -> List[Tuple[Quote, float, float]]:
    """``(quote, decimal, implied_prob)`` for every quote with a valid price."""
    usable = []
    for quote in quotes:
        decimal_odds = to_decimal(quote.price(market, side))
        prob = implied_probability_fraction(decimal_odds)
        if prob is None or not 0.0 < prob <= 1.0:
            continue
        usable.append((quote, decimal_odds, prob))
    return usable


def _consensus_books(usable: Sequence[Tuple[Quote, float, float]]) -> int:
    return len({quote.provider for quote, _, _ in usable})


def _fair_from_usable(usable: Sequence[Tuple[Quote, float, float]]) -> Optional[float]:
    # Two prices from one provider are not a consensus
    if _consensus_books(usable) < MIN_CONSENSUS_BOOKS:
        return None
    avg_prob = sum(prob for _, _, prob in usable) / len(usable)
    if avg_prob <= 0.0:
        return None
    return 1.0 / avg_prob


def fair_decimal_odds(quotes: Iterable[Quote], market: str, side: str) -> Optional[float]:
    """Consensus fair decimal price for ``side`` of ``market``.

    Returns:
        ``1 / mean(implied_prob)`` over usable prices, or ``None`` when fewer
        than :data:`MIN_CONSENSUS_BOOKS` distinct providers have a usable
        price.

    Raises:
        ValueError: If ``market`` or ``side`` is unknown.

    Example::

        home moneylines -110, -120, -105  →  fair ≈ 1.897
    """
    quotes = list(quotes)
    if side not in market_sides(market):
        raise ValueError(f"Unknown side {side!r} for market {market!r}.")
    return _fair_from_usable(_usable_prices(quotes, market, side))


def find_ev_opportunities(
    quotes: Iterable[Quote],
    market: str,
    side: str,
    min_ev_threshold: float,
) -> List[EVOpportunity]:
    """Books pricing ``side`` of ``market`` at or above the EV threshold.

    Args:
        quotes: Quotes for a single game.
        market: Market name.
        side: Side within ``market``.
        min_ev_threshold: Minimum EV percentage to flag (e.g. ``2.0``).

    Returns:
        Opportunities sorted by ``ev_percent`` descending (stable, so equal
        EVs keep quote order).  Empty when no consensus can be formed.
    """
    quotes = list(quotes)
    if side not in market_sides(market):
        raise ValueError(f"Unknown side {side!r} for market {market!r}.")

    usable = _usable_prices(quotes, market, side)
    fair = _fair_from_usable(usable)
    if fair is None:
        return []

    books = _consensus_books(usable)
    opportunities = []
    for quote, decimal_odds, _ in usable:
        ev = expected_value_percent(decimal_odds, fair)
        if ev >= min_ev_threshold:
            opportunities.append(EVOpportunity(
                market=market,
                side=side,
                quote=quote,
                american_odds=quote.price(market, side),
                decimal_odds=decimal_odds,
                fair_decimal=fair,
                ev_percent=ev,
                consensus_books=books,
            ))
    opportunities.sort(key=lambda o: o.ev_percent, reverse=True)
    return opportunities


def find_all_ev_opportunities(
    quotes: Iterable[Quote],
    min_ev_threshold: float,
    markets: Iterable[str] = ALL_MARKETS,
) -> List[EVOpportunity]:
    """Run :func:`find_ev_opportunities` on every side of every market.

    Results are merged and stable-sorted by ``ev_percent`` descending.
    """
    quotes = list(quotes)
    merged: List[EVOpportunity] = []
    for market in markets:
        for side in market_sides(market):
            merged.extend(find_ev_opportunities(quotes, market, side, min_ev_threshold))
    merged.sort(key=lambda o: o.ev_percent, reverse=True)
    return merged
