"""Fundamental odds mathematics: the single source of truth.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement odds conversion locally in the
arbitrage, EV, or API layers.

The pillars exposed are:

1. **Odds conversion**: American → decimal (and back, for display).
2. **Implied probability**: on two explicit scales, a ``(0, 1]`` fraction
   and a ``(0, 100]`` percentage.  The two scales get separate functions so
   a caller can never silently mix them.
3. **Expected value**: percentage edge of a price over a fair price.

Design decisions
----------------
* :func:`to_decimal` never raises.  Sportsbook feeds deliver prices as
  integers, floats, numeric strings (``"-110"``, ``"+130"``) or nothing at
  all; any value that does not parse to a finite number returns ``None``.
  Callers treat ``None`` as "this quote side is unusable" and skip it, so a
  single malformed line can never poison a whole game's analysis with NaN.
* American odds of exactly ``0`` are not a real market price.  They follow
  the ``o <= 0`` branch with the even-money magnitude (100) so the result is
  a finite ``2.0`` instead of a division by zero.

Run tests with::

    pytest tests/test_odds_math.py -v
"""

from __future__ import annotations

import math
from typing import Any, Final, Optional

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

#: American-odds magnitude that represents an even-money price (+100 / -100).
EVEN_MONEY_AMERICAN: Final[int] = 100

#: Decimal odds of an even-money price.
EVEN_MONEY_DECIMAL: Final[float] = 2.0


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_american(value: Any) -> Optional[float]:
    """Parse an American odds value into a finite float.

    Accepts ``int``, ``float`` and numeric strings such as ``"-110"``,
    ``"+150"`` or ``" 120 "``.  ``bool`` is rejected even though it is an
    ``int`` subclass, since ``True`` is never a price.

    Returns:
        The parsed float, or ``None`` when the value is missing,
        non-numeric, NaN, or infinite.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


# ---------------------------------------------------------------------------
# Odds conversion
# ---------------------------------------------------------------------------


def to_decimal(american: Any) -> Optional[float]:
    """Convert American odds to decimal (European) format.

    Decimal odds represent the total payout per unit staked, **including**
    the return of the stake itself.  Examples::

        to_decimal(-110)   → 1.9091   (risk 110 to win 100)
        to_decimal("+150") → 2.5000   (risk 100 to win 150)
        to_decimal("N/A")  → None

    Args:
        american: American odds as a number or numeric string.  Sign
            convention: negative = favourite, positive = underdog.

    Returns:
        Decimal odds > 1.0, or ``None`` when ``american`` is not a finite
        number.  ``0`` returns :data:`EVEN_MONEY_DECIMAL`.
    """
    odds = parse_american(american)
    if odds is None:
        return None
    if odds > 0:
        return odds / 100.0 + 1.0
    if odds == 0:
        return 100.0 / EVEN_MONEY_AMERICAN + 1.0
    # Negative: risk |odds| to win 100
    return 100.0 / abs(odds) + 1.0


def decimal_to_american(decimal_odds: float) -> int:
    """Convert decimal odds to the nearest American integer.

    Inverse of :func:`to_decimal`.  Rounds to the nearest integer; use the
    result for display, not for further arithmetic.

    Raises:
        ValueError: If ``decimal_odds <= 1.0``, which has no American form.
    """
    if not decimal_odds > 1.0:
        raise ValueError(
            f"Decimal odds {decimal_odds!r} must be > 1.0 to convert to American."
        )
    if decimal_odds >= EVEN_MONEY_DECIMAL:
        return round((decimal_odds - 1.0) * 100)
    return round(-100.0 / (decimal_odds - 1.0))


# ---------------------------------------------------------------------------
# Implied probability
# ---------------------------------------------------------------------------


def _valid_decimal(decimal_odds: Optional[float]) -> bool:
    return (
        decimal_odds is not None
        and not isinstance(decimal_odds, bool)
        and math.isfinite(decimal_odds)
        and decimal_odds > 0.0
    )


def implied_probability_fraction(decimal_odds: Optional[float]) -> Optional[float]:
    """Raw implied probability as a fraction: ``1 / decimal_odds``.

    This is the bookmaker's *stated* probability and includes the vig.

    Examples::

        implied_probability_fraction(1.9091) → 0.5238
        implied_probability_fraction(2.5)    → 0.4000
        implied_probability_fraction(None)   → None
    """
    if not _valid_decimal(decimal_odds):
        return None
    return 1.0 / decimal_odds


def implied_probability_percent(decimal_odds: Optional[float]) -> Optional[float]:
    """Raw implied probability as a percentage: ``100 / decimal_odds``.

    Same quantity as :func:`implied_probability_fraction` on the 0-100 scale.
    """
    if not _valid_decimal(decimal_odds):
        return None
    return 100.0 / decimal_odds


# ---------------------------------------------------------------------------
# Expected value
# ---------------------------------------------------------------------------


def expected_value_percent(decimal_odds: float, fair_decimal: float) -> float:
    """Percentage edge of ``decimal_odds`` over a fair price.

    ``(decimal_odds / fair_decimal - 1) * 100``.  Positive means the book
    pays more than the fair price implies.

    Raises:
        ValueError: If ``fair_decimal`` is not positive.
    """
    if not fair_decimal > 0.0:
        raise ValueError(f"fair_decimal must be > 0, got {fair_decimal!r}.")
    return (decimal_odds / fair_decimal - 1.0) * 100.0
