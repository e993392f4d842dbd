"""Forecast outlook endpoints: history + forecast timeline and verdict."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool

from cortexlab.analysis.simulation import assess_outlook
from cortexlab.api.market_client import MarketDataClient
from cortexlab.config import Settings
from cortexlab.exceptions import MarketDataError, SimulationInputError
from cortexlab.web.cache import CacheService
from cortexlab.web.dependencies import get_cache, get_market_client, get_settings
from cortexlab.web.history import load_history
from cortexlab.web.schemas import ApiResponse, OutlookResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/outlook", tags=["outlook"])


@router.get("/{symbol}", response_model=ApiResponse[OutlookResult])
async def get_outlook(
    symbol: str,
    range_key: str = Query("1M", alias="range"),
    settings: Settings = Depends(get_settings),
    cache: CacheService = Depends(get_cache),
    client: MarketDataClient = Depends(get_market_client),
):
    """Displayed history joined to median forecasts, with a 1Y verdict."""
    try:
        history, _ = await load_history(client, cache, symbol, range_key)
        if not history:
            raise HTTPException(status_code=404, detail=f"No history for {symbol}")
        baseline, _ = await load_history(
            client, cache, symbol, settings.volatility_history_range
        )
        quote = await run_in_threadpool(client.get_quote, symbol)
    except MarketDataError as e:
        logger.warning("Market data failure for %s: %s", symbol, e)
        raise HTTPException(status_code=502, detail=str(e))

    try:
        outlook = await run_in_threadpool(
            assess_outlook,
            history,
            quote["price"],
            volatility_prices=[p["close"] for p in baseline],
            drift=settings.simulation_drift,
            min_history_points=settings.simulation_min_history_points,
        )
    except SimulationInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ApiResponse(data=OutlookResult(symbol=symbol.upper(), **outlook))
