"""
FastAPI application for CFB Edge
Exposes the arbitrage, stake allocation and +EV engine to the dashboard
"""

from datetime import datetime, timezone
from typing import List
import logging
import os

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from cfb_edge import __version__
from cfb_edge.auth import verify_api_key
from cfb_edge.config import Settings, get_settings
from cfb_edge.core.arbitrage import find_all_arbitrage
from cfb_edge.core.ev import find_all_ev_opportunities
from cfb_edge.core.quotes import ALL_MARKETS, Quote, quotes_from_lines
from cfb_edge.core.stake import InvalidInputError, allocate_stakes
from cfb_edge.schemas import (
    ArbitragePairOut,
    ArbitrageRequest,
    ArbitrageResponse,
    EVOpportunityOut,
    EVRequest,
    EVResponse,
    GameAnalysisOut,
    LineIn,
    ScanRequest,
    ScanResponse,
    StakeAllocationOut,
    StakeRequest,
)
from cfb_edge.services.scanner import GameAnalysis, scan_slate

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="CFB Edge",
    description="College Football Arbitrage & +EV Analyzer",
    version=__version__,
)

# CORS (adjust origins for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _quotes(lines: List[LineIn]) -> List[Quote]:
    return quotes_from_lines(line.to_feed_dict() for line in lines)


def _analysis_out(result: GameAnalysis) -> GameAnalysisOut:
    return GameAnalysisOut(
        game_id=result.game.game_id,
        week=result.game.week,
        home_team=result.game.home_team,
        away_team=result.game.away_team,
        providers=result.providers,
        arbitrage=[ArbitragePairOut.model_validate(p) for p in result.arbitrage],
        best_pair=(
            ArbitragePairOut.model_validate(result.best_pair)
            if result.best_pair is not None else None
        ),
        stake_plan=(
            StakeAllocationOut.model_validate(result.stake_plan)
            if result.stake_plan is not None else None
        ),
        ev_opportunities=[
            EVOpportunityOut.model_validate(o) for o in result.ev_opportunities
        ],
    )


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Service banner"""
    return {
        "app": "CFB Edge",
        "version": __version__,
        "status": "operational",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "arbitrage_markets": list(settings.arbitrage_markets),
        "active_sportsbooks": list(settings.active_sportsbooks),
    }


# ============================================================================
# AUTHENTICATED ENDPOINTS - ODDS ANALYSIS
# ============================================================================

@app.post("/api/arbitrage", response_model=ArbitrageResponse)
async def find_arbitrage_pairs(
    payload: ArbitrageRequest,
    user: str = Depends(verify_api_key),
    settings: Settings = Depends(get_settings),
):
    """
    Find every cross-book arbitrage pair in one game's lines.

    Pairs are ranked by profit margin, best first.  ``best`` repeats the
    top-ranked pair, or is null when no arbitrage exists.
    """
    markets = payload.markets or list(settings.arbitrage_markets)
    pairs = [
        p for p in find_all_arbitrage(_quotes(payload.lines), markets)
        if p.profit_margin >= settings.min_arb_margin
    ]
    logger.info(
        "Arbitrage request from %s: %d line(s), %d pair(s)",
        user, len(payload.lines), len(pairs),
    )
    out = [ArbitragePairOut.model_validate(p) for p in pairs]
    return ArbitrageResponse(
        total_pairs=len(out),
        opportunities=out,
        best=out[0] if out else None,
    )


@app.post("/api/stake", response_model=StakeAllocationOut)
async def allocate_stake(
    payload: StakeRequest,
    user: str = Depends(verify_api_key),
):
    """Equal-payout stake split for two decimal prices."""
    try:
        allocation = allocate_stakes(
            payload.decimal_home, payload.decimal_away, payload.total_stake,
        )
    except InvalidInputError as exc:
        logger.warning("Rejected stake request from %s: %s", user, exc)
        raise HTTPException(status_code=422, detail=str(exc))
    return StakeAllocationOut.model_validate(allocation)


@app.post("/api/ev", response_model=EVResponse)
async def find_ev_bets(
    payload: EVRequest,
    user: str = Depends(verify_api_key),
    settings: Settings = Depends(get_settings),
):
    """Prices that beat the cross-book consensus by at least the threshold."""
    threshold = (
        settings.min_ev_threshold
        if payload.min_ev_threshold is None else payload.min_ev_threshold
    )
    markets = payload.markets or list(ALL_MARKETS)
    opportunities = find_all_ev_opportunities(_quotes(payload.lines), threshold, markets)
    logger.info(
        "EV request from %s: %d line(s), %d price(s) >= %.2f%%",
        user, len(payload.lines), len(opportunities), threshold,
    )
    return EVResponse(
        min_ev_threshold=threshold,
        total_opportunities=len(opportunities),
        opportunities=[EVOpportunityOut.model_validate(o) for o in opportunities],
    )


@app.post("/api/games/scan", response_model=ScanResponse)
async def scan_games(
    payload: ScanRequest,
    user: str = Depends(verify_api_key),
    settings: Settings = Depends(get_settings),
):
    """Full arbitrage + EV analysis for a slate of games."""
    try:
        results = scan_slate(
            [game.to_feed_dict() for game in payload.games],
            settings=settings,
            total_stake=payload.total_stake,
            min_ev_threshold=payload.min_ev_threshold,
            sportsbooks=payload.sportsbooks,
        )
    except InvalidInputError as exc:
        logger.warning("Rejected scan request from %s: %s", user, exc)
        raise HTTPException(status_code=422, detail=str(exc))

    games = [_analysis_out(r) for r in results]
    return ScanResponse(
        games_analyzed=len(games),
        games_with_arbitrage=sum(1 for g in games if g.arbitrage),
        games=games,
    )
