"""Runtime settings: every tunable default of the engine in one place.

:class:`Settings` is a frozen dataclass.  :meth:`Settings.from_env` reads the
process environment (after loading a ``.env`` file, if present) so the API
and the scanner never call ``os.getenv`` for engine defaults themselves.

Environment variables
---------------------
``DEFAULT_TOTAL_STAKE``   Bankroll used for bet plans when a request omits
                          one.  Default ``100``.
``MIN_EV_THRESHOLD``      Minimum EV percentage to flag a price.  Default
                          ``0.0`` (any price above consensus).
``MIN_ARB_MARGIN``        Minimum arbitrage profit margin (percent) to
                          report.  Default ``0.0``.
``ACTIVE_SPORTSBOOKS``    Comma-separated provider names to analyse.  Empty
                          means every provider in the feed.
``ARB_MARKETS``           Comma-separated markets searched for arbitrage.
                          Default ``moneyline,spread``.

Typical usage::

    from cfb_edge.config import get_settings

    settings = get_settings()

    # Override a single value for one request:
    from dataclasses import replace
    custom = replace(settings, min_ev_threshold=2.5)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Tuple

from dotenv import load_dotenv

from cfb_edge.core.quotes import ALL_MARKETS, DEFAULT_ARBITRAGE_MARKETS

logger = logging.getLogger(__name__)


def _split_csv(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Immutable engine defaults.

    Attributes:
        default_total_stake: Stake used for arbitrage bet plans.
        min_ev_threshold: EV percentage at or above which a price is flagged.
        min_arb_margin: Profit margin (percent) below which arbitrage pairs
            are dropped from reports.  ``0.0`` keeps every true arbitrage.
        active_sportsbooks: Providers to analyse; empty keeps all.
        arbitrage_markets: Markets searched for arbitrage.
    """

    default_total_stake: float = 100.0
    min_ev_threshold: float = 0.0
    min_arb_margin: float = 0.0
    active_sportsbooks: Tuple[str, ...] = field(default_factory=tuple)
    arbitrage_markets: Tuple[str, ...] = DEFAULT_ARBITRAGE_MARKETS

    def __post_init__(self) -> None:
        if self.default_total_stake <= 0:
            raise ValueError(
                f"default_total_stake must be > 0, got {self.default_total_stake!r}"
            )
        unknown = [m for m in self.arbitrage_markets if m not in ALL_MARKETS]
        if unknown:
            raise ValueError(
                f"Unknown arbitrage market(s) {unknown}; expected {list(ALL_MARKETS)}"
            )

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables (``.env`` honoured)."""
        load_dotenv()
        markets = _split_csv(os.getenv("ARB_MARKETS", ",".join(DEFAULT_ARBITRAGE_MARKETS)))
        settings = cls(
            default_total_stake=float(os.getenv("DEFAULT_TOTAL_STAKE", "100")),
            min_ev_threshold=float(os.getenv("MIN_EV_THRESHOLD", "0.0")),
            min_arb_margin=float(os.getenv("MIN_ARB_MARGIN", "0.0")),
            active_sportsbooks=_split_csv(os.getenv("ACTIVE_SPORTSBOOKS", "")),
            arbitrage_markets=markets or DEFAULT_ARBITRAGE_MARKETS,
        )
        logger.debug("Loaded settings: %s", settings)
        return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read from the environment once."""
    return Settings.from_env()
