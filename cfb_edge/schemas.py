"""
Pydantic request/response schemas for the CFB Edge API.

Request models accept the lines feed as delivered (camelCase keys, prices as
numbers or numeric strings).  Feed fields are typed ``Any`` and reach the
engine untouched: a malformed line or game is skipped there, and a JSON
``true`` is never coerced into a price.

Response models mirror the core dataclasses field for field and are built
with ``model_validate(..., from_attributes=True)`` so the API never
hand-copies engine results.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Market = Literal["moneyline", "spread", "total"]
Price = Any


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class LineIn(BaseModel):
    """
    One sportsbook line as it appears in a game's ``lines`` array.

    Unknown keys are accepted and ignored so the dashboard can forward feed
    objects untouched.  Prices that are not numbers or numeric strings make
    only that quote side unusable.
    """

    model_config = ConfigDict(extra="allow")

    provider: Any = Field(None, description='e.g. "DraftKings"; lines without one are skipped')
    homeMoneyline: Price = None
    awayMoneyline: Price = None
    spread: Price = None
    homeSpread: Price = None
    homeSpreadOdds: Price = None
    awaySpread: Price = None
    awaySpreadOdds: Price = None
    overUnder: Price = None
    overOdds: Price = None
    underOdds: Price = None

    def to_feed_dict(self) -> dict:
        """Feed-shaped dict with unset keys dropped."""
        return self.model_dump(exclude_unset=True)


class ArbitrageRequest(BaseModel):
    """Payload for POST /api/arbitrage."""

    lines: List[LineIn] = Field(default_factory=list)
    markets: Optional[List[Market]] = Field(
        None, description="Markets to search; server default when omitted"
    )


class EVRequest(BaseModel):
    """Payload for POST /api/ev."""

    lines: List[LineIn] = Field(default_factory=list)
    min_ev_threshold: Optional[float] = Field(
        None, description="Minimum EV percentage to flag; server default when omitted"
    )
    markets: Optional[List[Market]] = None


class StakeRequest(BaseModel):
    """
    Payload for POST /api/stake.

    Odds and stake are range-checked by the allocator itself so the error
    message is the same whether the API or a library caller trips it.
    """

    decimal_home: float
    decimal_away: float
    total_stake: float

    model_config = {
        "json_schema_extra": {
            "example": {"decimal_home": 2.4, "decimal_away": 2.3, "total_stake": 100}
        }
    }


class GameIn(BaseModel):
    """One game object from the lines feed; games missing a team are skipped."""

    model_config = ConfigDict(extra="allow")

    id: Any = None
    gameId: Any = None
    week: Any = None
    homeTeam: Any = None
    awayTeam: Any = None
    lines: List[LineIn] = Field(default_factory=list)

    def to_feed_dict(self) -> dict:
        data = self.model_dump(exclude_unset=True, exclude={"lines"})
        data["lines"] = [line.to_feed_dict() for line in self.lines]
        return data


class ScanRequest(BaseModel):
    """Payload for POST /api/games/scan."""

    games: List[GameIn] = Field(default_factory=list)
    total_stake: Optional[float] = None
    min_ev_threshold: Optional[float] = None
    sportsbooks: Optional[List[str]] = Field(
        None, description="Providers to analyse; server default when omitted"
    )


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

class QuoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class ArbitragePairOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    market: Market
    first_quote: QuoteOut
    second_quote: QuoteOut
    first_decimal: float
    second_decimal: float
    sum_prob: float
    profit_margin: float


class StakeAllocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_stake: float
    stake_home: float
    stake_away: float
    guaranteed_return: float
    profit: float
    roi_percent: float
    is_arbitrage: bool


class EVOpportunityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    market: Market
    side: Literal["home", "away", "over", "under"]
    provider: str
    american_odds: Any = None
    decimal_odds: float
    fair_decimal: float
    ev_percent: float
    consensus_books: int


class ArbitrageResponse(BaseModel):
    """Response for POST /api/arbitrage."""

    total_pairs: int
    opportunities: List[ArbitragePairOut]
    best: Optional[ArbitragePairOut] = None


class EVResponse(BaseModel):
    """Response for POST /api/ev."""

    min_ev_threshold: float
    total_opportunities: int
    opportunities: List[EVOpportunityOut]


class GameAnalysisOut(BaseModel):
    game_id: Any
    week: Optional[int] = None
    home_team: str
    away_team: str
    providers: List[str]
    arbitrage: List[ArbitragePairOut]
    best_pair: Optional[ArbitragePairOut] = None
    stake_plan: Optional[StakeAllocationOut] = None
    ev_opportunities: List[EVOpportunityOut]


class ScanResponse(BaseModel):
    """Response for POST /api/games/scan."""

    games_analyzed: int
    games_with_arbitrage: int
    games: List[GameAnalysisOut]
