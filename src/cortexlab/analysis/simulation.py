"""Monte Carlo forecast orchestrator.

Estimates volatility from history, simulates GBM paths from the live price
and reduces them to percentile bands. Also builds the history + forecast
timeline and the accumulate/caution verdict shown next to it.
"""

import logging
import math
from typing import Any, Mapping, Sequence

from cortexlab.analysis.sim_models import (
    DEFAULT_DRIFT,
    DEFAULT_SAMPLE_PATHS,
    PercentileCurve,
)
from cortexlab.analysis.sim_models.gbm import simulate_gbm
from cortexlab.analysis.sim_models.percentiles import (
    aggregate_percentiles,
    terminal_values,
)
from cortexlab.analysis.sim_models.random_source import NormalSource
from cortexlab.analysis.volatility import (
    classify_volatility,
    estimate_annualized_volatility,
)
from cortexlab.exceptions import SimulationInputError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_NUM_SIMULATIONS = 1000
OUTLOOK_NUM_SIMULATIONS = 500
MIN_HISTORY_POINTS = 10
FALLBACK_VOLATILITY = 0.20  # outlook only: thin or flat history

# (label, calendar-day horizon) for the forecast leg of the timeline
FORECAST_STEPS = (
    ("1D", 1),
    ("5D", 5),
    ("1M", 30),
    ("6M", 180),
    ("1Y", 365),
)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run_monte_carlo(
    prices: Sequence[float],
    current_price: float | None,
    days: int,
    num_simulations: int = DEFAULT_NUM_SIMULATIONS,
    drift: float = DEFAULT_DRIFT,
    vol_multiplier: float = 1.0,
    source: NormalSource | None = None,
    seed: int | None = None,
    sample_size: int = DEFAULT_SAMPLE_PATHS,
    max_workers: int = 1,
) -> dict[str, Any]:
    """Run a GBM Monte Carlo forecast for one instrument.

    Args:
        prices: Historical closing prices, oldest first. Used only for
            volatility; fewer than two usable points gives zero volatility.
        current_price: Live market price the paths start from. When None,
            the last positive historical close is used.
        days: Forecast horizon in trading days.
        num_simulations: Number of simulated paths.
        drift: Annualized drift (fixed assumption, not calibrated).
        vol_multiplier: Scenario stress factor applied to the estimated
            volatility.
        source: Standard-normal source override (tests).
        seed: Seed for the default source.
        sample_size: Number of raw paths to keep in the result.
        max_workers: Threads used for path simulation.

    Returns:
        Result dict with volatility stats, percentile curves, terminal
        percentiles and a handful of raw sample paths.

    Raises:
        SimulationInputError: On invalid simulation inputs.
    """
    if not math.isfinite(vol_multiplier) or vol_multiplier < 0:
        raise SimulationInputError(f"vol_multiplier must be >= 0, got {vol_multiplier}")
    if sample_size < 0:
        raise SimulationInputError(f"sample_size must be >= 0, got {sample_size}")

    prices = list(prices) if prices is not None else []
    start_price = current_price if current_price is not None else _last_close(prices)
    if start_price is None:
        raise SimulationInputError("No current price and no usable historical close")

    base_volatility = estimate_annualized_volatility(prices)
    volatility = base_volatility * vol_multiplier
    if volatility == 0.0:
        logger.debug("Zero volatility: forecast reduces to the deterministic drift path")

    ensemble = simulate_gbm(
        start_price,
        volatility,
        days,
        num_simulations,
        drift=drift,
        source=source,
        seed=seed,
        max_workers=max_workers,
    )
    percentiles = aggregate_percentiles(ensemble)
    terminal = terminal_values(percentiles)

    return {
        "start_price": float(start_price),
        "base_volatility": round(base_volatility, 6),
        "volatility": round(volatility, 6),
        "vol_multiplier": vol_multiplier,
        "drift": drift,
        "days": ensemble.days,
        "num_simulations": ensemble.num_simulations,
        "input_points_used": len(prices),
        "percentiles": percentiles,
        "terminal": {
            **terminal,
            "expected_move_pct": round((terminal["p50"] / start_price - 1) * 100, 4),
        },
        "sample_paths": ensemble.sample_paths(sample_size),
    }


def _last_close(prices: list[float]) -> float | None:
    for price in reversed(prices):
        if price is not None and math.isfinite(price) and price > 0:
            return float(price)
    return None


# ---------------------------------------------------------------------------
# Timeline, verdict and outlook
# ---------------------------------------------------------------------------


def build_forecast_timeline(
    history: Sequence[Mapping[str, Any]],
    current_price: float,
    percentiles: PercentileCurve,
    steps: tuple[tuple[str, int], ...] = FORECAST_STEPS,
) -> list[dict[str, Any]]:
    """Join the history series and the forecast series at one bridge point.

    The last history point is the bridge: it keeps its historical close and
    additionally carries ``forecast_price = current_price``, so projections
    visually originate at the live price. Forecast points take the median
    curve at each step's day index. The input history is not modified.

    Args:
        history: Records with ``date``, ``close`` and optional ``open``.
        current_price: Live market price.
        percentiles: Curves from a simulation at least as long as the
            longest step.
        steps: ``(label, days)`` pairs for the forecast leg.
    """
    horizon = len(percentiles["p50"]) - 1
    timeline: list[dict[str, Any]] = [
        {
            "label": str(h["date"]),
            "type": "history",
            "date": h["date"],
            "history_price": h["close"],
            "history_open": h.get("open"),
            "forecast_price": None,
        }
        for h in history
    ]

    if timeline:
        timeline[-1]["forecast_price"] = current_price
        timeline[-1]["type"] = "bridge"

    for label, step_days in steps:
        if step_days > horizon:
            logger.debug("Skipping forecast step %s: beyond simulated horizon %d", label, horizon)
            continue
        timeline.append({
            "label": f"+{label}",
            "type": "forecast",
            "date": None,
            "history_price": None,
            "history_open": None,
            "forecast_price": percentiles["p50"][step_days],
        })

    return timeline


def compute_verdict(current_price: float, target_price: float) -> dict[str, Any]:
    """ACCUMULATE when the projected move is non-negative, else CAUTION."""
    if current_price <= 0:
        raise SimulationInputError(f"current_price must be positive, got {current_price}")

    total_move_pct = (target_price - current_price) / current_price * 100
    return {
        "verdict": "ACCUMULATE" if total_move_pct >= 0 else "CAUTION",
        "total_move_pct": round(total_move_pct, 4),
        "target_price": target_price,
    }


def assess_outlook(
    history: Sequence[Mapping[str, Any]],
    current_price: float,
    volatility_prices: Sequence[float] | None = None,
    num_simulations: int = OUTLOOK_NUM_SIMULATIONS,
    drift: float = DEFAULT_DRIFT,
    min_history_points: int = MIN_HISTORY_POINTS,
    source: NormalSource | None = None,
    seed: int | None = None,
) -> dict[str, Any]:
    """Forecast timeline, 1Y target, verdict and volatility profile.

    Volatility comes from ``volatility_prices`` (typically a 1Y window) or,
    when omitted, from the displayed history. With fewer than
    ``min_history_points`` prices, or when the estimate comes out as zero
    (flat history), ``FALLBACK_VOLATILITY`` is used instead.
    """
    if volatility_prices is None:
        volatility_prices = [h["close"] for h in history]
    volatility_prices = list(volatility_prices)

    volatility = 0.0
    if len(volatility_prices) >= min_history_points:
        volatility = estimate_annualized_volatility(volatility_prices)
    volatility_estimated = volatility > 0.0

    if not volatility_estimated:
        logger.debug(
            "Outlook: no usable volatility from %d points (need %d), using fallback %.2f",
            len(volatility_prices), min_history_points, FALLBACK_VOLATILITY,
        )
        volatility = FALLBACK_VOLATILITY

    horizon = max(step_days for _, step_days in FORECAST_STEPS)
    ensemble = simulate_gbm(
        current_price, volatility, horizon, num_simulations,
        drift=drift, source=source, seed=seed,
    )
    percentiles = aggregate_percentiles(ensemble)
    timeline = build_forecast_timeline(history, current_price, percentiles)

    target_price = timeline[-1]["forecast_price"]
    verdict = compute_verdict(current_price, target_price)

    return {
        "current_price": float(current_price),
        "volatility": round(volatility, 6),
        "volatility_estimated": volatility_estimated,
        "profile": classify_volatility(volatility),
        "period_change_pct": _period_change_pct(history),
        "timeline": timeline,
        **verdict,
    }


def _period_change_pct(history: Sequence[Mapping[str, Any]]) -> float | None:
    if len(history) < 2:
        return None
    first = history[0]["close"]
    last = history[-1]["close"]
    if not first:
        return None
    return round((last - first) / first * 100, 4)
