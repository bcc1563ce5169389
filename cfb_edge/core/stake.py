"""Equal-payout stake allocation: the single source of truth for bet splits.

All functions here are **pure**: no I/O, no logging.

Given decimal odds for the two complementary outcomes of a market and a
total stake, :func:`allocate_stakes` splits the stake in proportion to each
side's implied probability::

    denom       =  1 / d_home  +  1 / d_away
    stake_home  =  total · (1 / d_home) / denom
    stake_away  =  total · (1 / d_away) / denom

Each side then returns ``total / denom`` if it wins, so the payout is the
same whichever way the game goes.  That equality is the invariant the tests
pin down.

* ``denom < 1``: a genuine arbitrage; profit is positive for every
  positive stake.
* ``denom >= 1``: the split is still a valid equal-payout *hedge*, but
  profit is zero or negative.  The allocator does not refuse these inputs;
  callers must not assume a positive result.

Invalid inputs (stake ≤ 0, odds ≤ 1, non-finite numbers) raise
:class:`InvalidInputError`.  Nothing is clamped: a silently adjusted split
would be a financially meaningless bet plan.

Run tests with::

    pytest tests/test_stake.py -v
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cfb_edge.core.arbitrage import ArbitragePair


class InvalidInputError(ValueError):
    """Allocator precondition violated (non-positive stake or odds ≤ 1)."""


@dataclass(frozen=True)
class StakeAllocation:
    """Concrete bet plan for a two-way market.

    Attributes:
        total_stake: Amount split across both sides.
        stake_home: Amount on the first side (home / over).
        stake_away: Amount on the second side (away / under).
        guaranteed_return: Payout whichever side wins.
        profit: ``guaranteed_return - total_stake``.
        roi_percent: ``profit / total_stake * 100``.
        is_arbitrage: True when the implied probabilities sum below 1.
    """

    total_stake: float
    stake_home: float
    stake_away: float
    guaranteed_return: float
    profit: float
    roi_percent: float
    is_arbitrage: bool


def _check_decimal(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number, got {value!r}.")
    if not math.isfinite(value) or value <= 1.0:
        raise InvalidInputError(
            f"{name} must be a finite decimal price > 1.0, got {value!r}."
        )
    return float(value)


def allocate_stakes(
    decimal_home: float,
    decimal_away: float,
    total_stake: float,
) -> StakeAllocation:
    """Split ``total_stake`` so both outcomes pay the same amount.

    Args:
        decimal_home: Decimal odds for the first side, > 1.0.
        decimal_away: Decimal odds for the second side, > 1.0.
        total_stake: Total amount to wager, > 0.

    Returns:
        The :class:`StakeAllocation`.

    Raises:
        InvalidInputError: If any precondition is violated.

    Examples::

        allocate_stakes(2.4, 2.3, 100)
            → stake_home 48.94, stake_away 51.06, return 117.45, roi 17.45%
        allocate_stakes(1.909, 1.909, 100)
            → stake_home 50.0, stake_away 50.0, profit -4.55  (a hedge)
    """
    decimal_home = _check_decimal("decimal_home", decimal_home)
    decimal_away = _check_decimal("decimal_away", decimal_away)
    if isinstance(total_stake, bool) or not isinstance(total_stake, (int, float)):
        raise InvalidInputError(f"total_stake must be a number, got {total_stake!r}.")
    if not math.isfinite(total_stake) or total_stake <= 0.0:
        raise InvalidInputError(
            f"total_stake must be a finite amount > 0, got {total_stake!r}."
        )
    total_stake = float(total_stake)

    prob_home = 1.0 / decimal_home
    prob_away = 1.0 / decimal_away
    denom = prob_home + prob_away

    stake_home = total_stake * prob_home / denom
    stake_away = total_stake * prob_away / denom
    # Equal to stake_away * decimal_away up to rounding
    guaranteed_return = stake_home * decimal_home
    profit = guaranteed_return - total_stake

    return StakeAllocation(
        total_stake=total_stake,
        stake_home=stake_home,
        stake_away=stake_away,
        guaranteed_return=guaranteed_return,
        profit=profit,
        roi_percent=profit / total_stake * 100.0,
        is_arbitrage=denom < 1.0,
    )


def allocate_for_pair(pair: ArbitragePair, total_stake: float) -> StakeAllocation:
    """Allocate ``total_stake`` across an :class:`ArbitragePair`'s two sides."""
    return allocate_stakes(pair.first_decimal, pair.second_decimal, total_stake)
