"""Cross-sportsbook arbitrage detection.

A two-way arbitrage exists when the first side of a market bought at one
book and the second side bought at another have combined implied
probability strictly below 1::

    sum_prob = 1 / d_first + 1 / d_second  <  1
    profit_margin = (1 - sum_prob) * 100

Search order
------------
Quotes are enumerated as *ordered* pairs ``(i, j)``, ``i != j``, taking the
first side (home / over) from ``quotes[i]`` and the second side (away /
under) from ``quotes[j]``.  Both directions of a provider pairing are
therefore visited as separate steps, each with its own side assignment.
This is O(n²) in the number of books, which is fine for the ≤ 10 books a
game carries.

Ranking
-------
:func:`find_arbitrage` sorts by ``profit_margin`` descending with Python's
stable sort, so ties keep their ``(i, j)`` discovery order and two calls on
the same input return identical lists.  :func:`best_arbitrage_pair` returns
the minimum ``sum_prob`` pair, first encountered on an exact tie.

Run tests with::

    pytest tests/test_arbitrage.py -v
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from cfb_edge.core.odds_math import to_decimal
from cfb_edge.core.quotes import DEFAULT_ARBITRAGE_MARKETS, MONEYLINE, Quote, market_sides


@dataclass(frozen=True)
class ArbitragePair:
    """Two quotes from distinct books covering complementary outcomes.

    Attributes:
        market: ``"moneyline"``, ``"spread"`` or ``"total"``.
        first_quote: Quote supplying the first side (home / over).
        second_quote: Quote supplying the second side (away / under).
        first_decimal: Decimal odds of the first side.
        second_decimal: Decimal odds of the second side.
        sum_prob: Combined implied probability, < 1.
        profit_margin: ``(1 - sum_prob) * 100``.
    """

    market: str
    first_quote: Quote
    second_quote: Quote
    first_decimal: float
    second_decimal: float
    sum_prob: float
    profit_margin: float

    @property
    def home_quote(self) -> Quote:
        return self.first_quote

    @property
    def away_quote(self) -> Quote:
        return self.second_quote

    @property
    def decimal_home(self) -> float:
        return self.first_decimal

    @property
    def decimal_away(self) -> float:
        return self.second_decimal

    @property
    def sides(self) -> Tuple[str, str]:
        return market_sides(self.market)


def _side_decimals(
    quotes: Sequence[Quote], market: str
) -> List[Tuple[Optional[float], Optional[float]]]:
    """Convert each quote's two prices once for the whole pairing loop."""
    first_side, second_side = market_sides(market)
    return [
        (to_decimal(q.price(market, first_side)), to_decimal(q.price(market, second_side)))
        for q in quotes
    ]


def _enumerate_pairs(quotes: Sequence[Quote], market: str) -> List[ArbitragePair]:
    decimals = _side_decimals(quotes, market)
    pairs: List[ArbitragePair] = []

    for i, first_quote in enumerate(quotes):
        decimal_first = decimals[i][0]
        if decimal_first is None:
            continue
        for j, second_quote in enumerate(quotes):
            if i == j or first_quote.provider == second_quote.provider:
                continue
            decimal_second = decimals[j][1]
            if decimal_second is None:
                continue

            sum_prob = 1.0 / decimal_first + 1.0 / decimal_second
            if sum_prob < 1.0:
                pairs.append(ArbitragePair(
                    market=market,
                    first_quote=first_quote,
                    second_quote=second_quote,
                    first_decimal=decimal_first,
                    second_decimal=decimal_second,
                    sum_prob=sum_prob,
                    profit_margin=(1.0 - sum_prob) * 100.0,
                ))
    return pairs


def find_arbitrage(quotes: Iterable[Quote], market: str = MONEYLINE) -> List[ArbitragePair]:
    """All arbitrage pairs for one market, best margin first.

    Args:
        quotes: Quotes for a single game.
        market: Market to pair on.

    Returns:
        Pairs sorted by ``profit_margin`` descending (stable).  Empty when
        fewer than two usable quotes from distinct books exist.

    Raises:
        ValueError: If ``market`` is unknown.

    Example::

        a = Quote("BookA", home_moneyline=-150, away_moneyline=130)
        b = Quote("BookB", home_moneyline=140, away_moneyline=-160)
        find_arbitrage([a, b])  → [BookB home 2.40 / BookA away 2.30, 14.86%]
    """
    quotes = list(quotes)
    market_sides(market)
    if len(quotes) < 2:
        return []
    pairs = _enumerate_pairs(quotes, market)
    pairs.sort(key=lambda p: p.profit_margin, reverse=True)
    return pairs


def find_all_arbitrage(
    quotes: Iterable[Quote],
    markets: Iterable[str] = DEFAULT_ARBITRAGE_MARKETS,
) -> List[ArbitragePair]:
    """Arbitrage pairs across several markets merged into one ranking.

    Markets are searched in the order given; the merged list is stable-sorted
    by ``profit_margin`` descending, so equal margins keep market order and
    then discovery order.
    """
    quotes = list(quotes)
    merged: List[ArbitragePair] = []
    for market in markets:
        merged.extend(find_arbitrage(quotes, market))
    merged.sort(key=lambda p: p.profit_margin, reverse=True)
    return merged


def best_arbitrage_pair(
    quotes: Iterable[Quote], market: str = MONEYLINE
) -> Optional[ArbitragePair]:
    """The lowest ``sum_prob`` pair for ``market``, or ``None``.

    On an exact tie the pair met first in ``(i, j)`` order wins.
    """
    quotes = list(quotes)
    market_sides(market)
    if len(quotes) < 2:
        return None
    best: Optional[ArbitragePair] = None
    for pair in _enumerate_pairs(quotes, market):
        if best is None or pair.sum_prob < best.sum_prob:
            best = pair
    return best


def summarize_by_market(pairs: Iterable[ArbitragePair]) -> Dict[str, int]:
    """Count pairs per market, for logging."""
    counts: Dict[str, int] = {}
    for pair in pairs:
        counts[pair.market] = counts.get(pair.market, 0) + 1
    return counts
