"""Sportsbook quotes and the market vocabulary shared by every finder.

A :class:`Quote` is one provider's point-in-time price sheet for one game.
It is frozen: prices are stored exactly as the feed delivered them (numbers
or numeric strings) and are only interpreted through
:func:`~cfb_edge.core.odds_math.to_decimal`.

Every market is a two-way market with a *first* and a *second* side:

==========  ===========  ===========
market      first side   second side
==========  ===========  ===========
moneyline   home         away
spread      home         away
total       over         under
==========  ===========  ===========

Arbitrage pairs always take the first side from one quote and the second
side from another; EV detection looks at one side at a time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Final, Iterable, List, Mapping, Optional, Tuple

MONEYLINE: Final[str] = "moneyline"
SPREAD: Final[str] = "spread"
TOTAL: Final[str] = "total"

#: market → (first side, second side)
MARKET_SIDES: Final[Dict[str, Tuple[str, str]]] = {
    MONEYLINE: ("home", "away"),
    SPREAD: ("home", "away"),
    TOTAL: ("over", "under"),
}

#: Markets searched for arbitrage when the caller does not choose.
DEFAULT_ARBITRAGE_MARKETS: Final[Tuple[str, ...]] = (MONEYLINE, SPREAD)

ALL_MARKETS: Final[Tuple[str, ...]] = (MONEYLINE, SPREAD, TOTAL)

# (market, side) → Quote attribute holding the American price
_PRICE_FIELDS: Final[Dict[Tuple[str, str], str]] = {
    (MONEYLINE, "home"): "home_moneyline",
    (MONEYLINE, "away"): "away_moneyline",
    (SPREAD, "home"): "home_spread_odds",
    (SPREAD, "away"): "away_spread_odds",
    (TOTAL, "over"): "over_odds",
    (TOTAL, "under"): "under_odds",
}

# Upstream lines payload key → Quote attribute
_LINE_KEYS: Final[Dict[str, str]] = {
    "homeMoneyline": "home_moneyline",
    "awayMoneyline": "away_moneyline",
    "homeSpread": "home_spread",
    "homeSpreadOdds": "home_spread_odds",
    "awaySpread": "away_spread",
    "awaySpreadOdds": "away_spread_odds",
    "overUnder": "over_under",
    "overOdds": "over_odds",
    "underOdds": "under_odds",
}


def market_sides(market: str) -> Tuple[str, str]:
    """Return the ``(first, second)`` sides of ``market``.

    Raises:
        ValueError: If ``market`` is not one of :data:`ALL_MARKETS`.
    """
    try:
        return MARKET_SIDES[market]
    except KeyError:
        raise ValueError(
            f"Unknown market {market!r}; expected one of {', '.join(ALL_MARKETS)}."
        ) from None


@dataclass(frozen=True)
class Quote:
    """One sportsbook's prices for one game.

    Attributes:
        provider: Sportsbook identifier, unique per game.
        home_moneyline / away_moneyline: American moneyline prices.
        home_spread / away_spread: Handicap points (informational only).
        home_spread_odds / away_spread_odds: American prices on the spread.
        over_under: Total points line (informational only).
        over_odds / under_odds: American prices on the total.
    """

    provider: str
    home_moneyline: Any = None
    away_moneyline: Any = None
    home_spread: Any = None
    home_spread_odds: Any = None
    away_spread: Any = None
    away_spread_odds: Any = None
    over_under: Any = None
    over_odds: Any = None
    under_odds: Any = None

    def price(self, market: str, side: str) -> Any:
        """Raw American price for ``side`` of ``market`` (may be ``None``)."""
        try:
            field_name = _PRICE_FIELDS[(market, side)]
        except KeyError:
            raise ValueError(
                f"Unknown side {side!r} for market {market!r}; "
                f"expected one of {', '.join(market_sides(market))}."
            ) from None
        return getattr(self, field_name)

    @classmethod
    def from_line(cls, line: Mapping[str, Any]) -> Quote:
        """Build a quote from one entry of an upstream ``lines`` array.

        Accepts the camelCase keys the college-football lines feed uses.
        The older ``spread`` key (home handicap, no price) fills
        ``home_spread`` when ``homeSpread`` is absent.  Unknown keys are
        ignored.

        Raises:
            ValueError: If the entry has no ``provider``.
        """
        provider = line.get("provider")
        if provider is None or str(provider).strip() == "":
            raise ValueError("Line entry has no provider")
        kwargs: Dict[str, Any] = {}
        for key, attr in _LINE_KEYS.items():
            if key in line:
                kwargs[attr] = line[key]
        if "home_spread" not in kwargs and "spread" in line:
            kwargs["home_spread"] = line["spread"]
        return cls(provider=str(provider), **kwargs)


def quotes_from_lines(lines: Optional[Iterable[Mapping[str, Any]]]) -> List[Quote]:
    """Convert an upstream ``lines`` array into quotes.

    Entries that are not mappings or carry no provider are skipped rather
    than failing the game.
    Entries that are already :class:`Quote` instances pass through.
    """
    quotes: List[Quote] = []
    for line in lines or ():
        if isinstance(line, Quote):
            quotes.append(line)
            continue
        if not isinstance(line, Mapping):
            continue
        try:
            quotes.append(Quote.from_line(line))
        except ValueError:
            continue
    return quotes


def filter_providers(
    quotes: Iterable[Quote],
    providers: Optional[Iterable[str]],
) -> List[Quote]:
    """Keep quotes whose provider is in ``providers`` (case-insensitive).

    An empty or ``None`` ``providers`` keeps every quote.
    """
    quotes = list(quotes)
    if not providers:
        return quotes
    wanted = {p.strip().lower() for p in providers if p and p.strip()}
    if not wanted:
        return quotes
    return [q for q in quotes if q.provider.strip().lower() in wanted]
