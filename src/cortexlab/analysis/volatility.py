"""Historical volatility estimation.

Pure computation functions over closing-price series passed as arguments.
No provider dependency; results are recomputed on every call.
"""

import logging
import math
from typing import TypedDict

import numpy as np

logger = logging.getLogger(__name__)

TRADING_DAYS_PER_YEAR = 252

# Annualized volatility thresholds (fractions) for profile classification
STABLE_VOL_CEILING = 0.15
BALANCED_VOL_CEILING = 0.35


class VolatilityProfile(TypedDict):
    level: str
    label: str
    volatility_pct: float


def compute_log_returns(prices: list[float]) -> np.ndarray:
    """Log returns for each consecutive pair with a positive prior price.

    Pairs where either price is missing or non-finite, or where the prior
    price is not positive, are skipped rather than treated as errors.
    """
    returns = []
    for i in range(1, len(prices)):
        prev, current = prices[i - 1], prices[i]
        if prev is None or current is None:
            continue
        if not (math.isfinite(prev) and math.isfinite(current)):
            continue
        if prev > 0 and current > 0:
            returns.append(math.log(current / prev))
    return np.asarray(returns, dtype=float)


def estimate_annualized_volatility(prices: list[float]) -> float:
    """Annualized standard deviation of daily log returns.

    Uses the sample variance (ddof=1) and the sqrt(252) convention.

    Args:
        prices: Closing prices in chronological order (oldest first).

    Returns:
        Non-negative annualized volatility as a fraction (0.20 == 20%).
        0.0 when fewer than two valid log returns can be formed.
    """
    if prices is None or len(prices) < 2:
        return 0.0

    log_returns = compute_log_returns(list(prices))
    if len(log_returns) < 2:
        logger.debug(
            "Insufficient log returns for volatility: %d (need 2)", len(log_returns)
        )
        return 0.0

    daily_sigma = float(np.std(log_returns, ddof=1))
    return daily_sigma * math.sqrt(TRADING_DAYS_PER_YEAR)


def classify_volatility(volatility: float) -> VolatilityProfile:
    """Map an annualized volatility to a stability profile."""
    if volatility < STABLE_VOL_CEILING:
        level, label = "stable", "PREMIUM STABILITY"
    elif volatility < BALANCED_VOL_CEILING:
        level, label = "balanced", "BALANCED DYNAMICS"
    else:
        level, label = "aggressive", "AGGRESSIVE VOLATILITY"

    return VolatilityProfile(
        level=level,
        label=label,
        volatility_pct=round(volatility * 100, 4),
    )
