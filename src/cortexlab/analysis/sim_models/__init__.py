"""Monte Carlo simulation models package.

Provides the pieces of the GBM forecasting engine:
- random_source: injectable standard-normal generators
- gbm: Geometric Brownian Motion path ensembles
- percentiles: nearest-rank percentile bands over an ensemble
"""

from dataclasses import dataclass
from typing import TypedDict

import numpy as np

TRADING_DAYS_PER_YEAR = 252
DEFAULT_DRIFT = 0.10  # annualized; fixed modelling assumption
DEFAULT_SAMPLE_PATHS = 5

PERCENTILES = {
    "p05": 0.05,
    "p25": 0.25,
    "p50": 0.50,
    "p75": 0.75,
    "p95": 0.95,
}


class PercentileCurve(TypedDict):
    """Cross-sectional percentile bands, one value per day index 0..days."""
    p05: list[float]
    p25: list[float]
    p50: list[float]
    p75: list[float]
    p95: list[float]


@dataclass(frozen=True)
class PathEnsemble:
    """Simulated price trajectories sharing start price, volatility and drift.

    ``paths`` has shape ``(num_simulations, days + 1)``; column 0 is the
    start price.
    """
    paths: np.ndarray
    start_price: float
    volatility: float
    drift: float
    days: int

    @property
    def num_simulations(self) -> int:
        return int(self.paths.shape[0])

    def sample_paths(self, k: int = DEFAULT_SAMPLE_PATHS) -> list[list[float]]:
        """First ``k`` raw paths for inspection."""
        return self.paths[:k].tolist()


__all__ = [
    "PathEnsemble",
    "PercentileCurve",
    "PERCENTILES",
    "TRADING_DAYS_PER_YEAR",
    "DEFAULT_DRIFT",
    "DEFAULT_SAMPLE_PATHS",
]
