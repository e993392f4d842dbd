"""Monte Carlo simulation API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool

from cortexlab.analysis.simulation import run_monte_carlo
from cortexlab.api.market_client import MarketDataClient
from cortexlab.config import Settings
from cortexlab.exceptions import MarketDataError, SimulationInputError
from cortexlab.web.cache import CacheService
from cortexlab.web.dependencies import get_cache, get_market_client, get_settings
from cortexlab.web.history import load_history
from cortexlab.web.schemas import (
    ApiResponse,
    Meta,
    SimulationRequest,
    SimulationResult,
    to_simulation_result,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulation", tags=["simulation"])


def _check_bounds(settings: Settings, days: int, num_simulations: int) -> None:
    if days > settings.simulation_max_days:
        raise HTTPException(
            status_code=422,
            detail=f"days must be <= {settings.simulation_max_days}",
        )
    if num_simulations > settings.simulation_max_paths:
        raise HTTPException(
            status_code=422,
            detail=f"simulations must be <= {settings.simulation_max_paths}",
        )


@router.post("/run", response_model=ApiResponse[SimulationResult])
async def run_simulation(
    body: SimulationRequest,
    settings: Settings = Depends(get_settings),
):
    """Run a forecast from posted prices; no market data lookup."""
    _check_bounds(settings, body.days, body.num_simulations)
    drift = body.drift if body.drift is not None else settings.simulation_drift

    try:
        result = await run_in_threadpool(
            run_monte_carlo,
            body.prices,
            body.current_price,
            body.days,
            num_simulations=body.num_simulations,
            drift=drift,
            vol_multiplier=body.vol_multiplier,
            seed=body.seed,
            sample_size=body.sample_size,
            max_workers=settings.simulation_max_workers,
        )
    except SimulationInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ApiResponse(data=to_simulation_result(None, result))


@router.get("/{symbol}", response_model=ApiResponse[SimulationResult])
async def get_simulation(
    symbol: str,
    days: int | None = Query(None, ge=0),
    simulations: int | None = Query(None, gt=0),
    vol_multiplier: float = Query(1.0, ge=0),
    range_key: str | None = Query(None, alias="range"),
    seed: int | None = Query(None, ge=0),
    settings: Settings = Depends(get_settings),
    cache: CacheService = Depends(get_cache),
    client: MarketDataClient = Depends(get_market_client),
):
    """Forecast percentile bands for a symbol from its live price."""
    days = settings.simulation_default_days if days is None else days
    simulations = settings.simulation_num_paths if simulations is None else simulations
    range_key = range_key or settings.volatility_history_range
    _check_bounds(settings, days, simulations)

    try:
        history, cached = await load_history(client, cache, symbol, range_key)
        closes = [p["close"] for p in history]
        if len(closes) < settings.simulation_min_history_points:
            raise HTTPException(
                status_code=422,
                detail=(
                    f"Not enough historical data for {symbol}: {len(closes)} points "
                    f"(need {settings.simulation_min_history_points})"
                ),
            )
        quote = await run_in_threadpool(client.get_quote, symbol)
    except MarketDataError as e:
        logger.warning("Market data failure for %s: %s", symbol, e)
        raise HTTPException(status_code=502, detail=str(e))

    try:
        result = await run_in_threadpool(
            run_monte_carlo,
            closes,
            quote["price"],
            days,
            num_simulations=simulations,
            drift=settings.simulation_drift,
            vol_multiplier=vol_multiplier,
            seed=seed,
            sample_size=settings.simulation_sample_paths,
            max_workers=settings.simulation_max_workers,
        )
    except SimulationInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ApiResponse(
        data=to_simulation_result(symbol.upper(), result),
        meta=Meta(cached=cached),
    )
