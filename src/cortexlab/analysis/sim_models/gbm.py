"""Geometric Brownian Motion (constant volatility) path simulation."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from cortexlab.exceptions import SimulationInputError

from . import DEFAULT_DRIFT, TRADING_DAYS_PER_YEAR, PathEnsemble
from .random_source import NormalSource, default_source

logger = logging.getLogger(__name__)

DT = 1.0 / TRADING_DAYS_PER_YEAR


def simulate_gbm(
    start_price: float,
    volatility: float,
    days: int,
    num_simulations: int,
    drift: float = DEFAULT_DRIFT,
    source: NormalSource | None = None,
    seed: int | None = None,
    max_workers: int = 1,
) -> PathEnsemble:
    """Simulate an ensemble of GBM price paths.

    Uses the exact log-normal step
    ``S(t+dt) = S(t) * exp((mu - sigma^2/2) dt + sigma sqrt(dt) Z)``
    accumulated in log space, so there is no discretization bias.

    Args:
        start_price: Price at day 0 (the live market price).
        volatility: Annualized volatility (0.20 == 20%).
        days: Number of trading days to project.
        num_simulations: Number of independent paths.
        drift: Annualized expected return.
        source: Standard-normal source. Default: fresh Box-Muller source.
        seed: Seed for the default source(s); ignored when ``source`` is given.
        max_workers: Thread count; paths are split into that many chunks.

    Returns:
        PathEnsemble with ``paths`` of shape ``(num_simulations, days + 1)``.

    Raises:
        SimulationInputError: On non-positive price, negative volatility or
            days, or a non-positive simulation count.
    """
    _validate(start_price, volatility, days, num_simulations, drift, max_workers)
    days, num_simulations = int(days), int(num_simulations)

    drift_term = (drift - 0.5 * volatility**2) * DT
    shock_scale = volatility * math.sqrt(DT)

    if max_workers == 1 or num_simulations < 2:
        if source is None:
            source = default_source(seed)
        z = source.standard_normal((num_simulations, days))
        paths = _build_paths(start_price, drift_term, shock_scale, z)
    else:
        paths = _simulate_parallel(
            start_price, drift_term, shock_scale, days, num_simulations,
            source, seed, max_workers,
        )

    logger.debug(
        "GBM: %d paths x %d days, sigma=%.4f, drift=%.4f",
        num_simulations, days, volatility, drift,
    )

    return PathEnsemble(
        paths=paths,
        start_price=float(start_price),
        volatility=float(volatility),
        drift=float(drift),
        days=days,
    )


def _validate(
    start_price: float,
    volatility: float,
    days: int,
    num_simulations: int,
    drift: float,
    max_workers: int,
) -> None:
    if not math.isfinite(start_price) or start_price <= 0:
        raise SimulationInputError(f"start_price must be positive, got {start_price}")
    if not math.isfinite(volatility) or volatility < 0:
        raise SimulationInputError(f"volatility must be >= 0, got {volatility}")
    if not math.isfinite(drift):
        raise SimulationInputError(f"drift must be finite, got {drift}")
    if int(days) != days or days < 0:
        raise SimulationInputError(f"days must be a non-negative integer, got {days}")
    if int(num_simulations) != num_simulations or num_simulations <= 0:
        raise SimulationInputError(
            f"num_simulations must be a positive integer, got {num_simulations}"
        )
    if max_workers < 1:
        raise SimulationInputError(f"max_workers must be >= 1, got {max_workers}")


def _build_paths(
    start_price: float, drift_term: float, shock_scale: float, z: np.ndarray
) -> np.ndarray:
    """Turn a ``(n, days)`` block of normals into ``(n, days + 1)`` prices."""
    log_steps = drift_term + shock_scale * z
    cumulative = np.hstack([np.zeros((z.shape[0], 1)), np.cumsum(log_steps, axis=1)])
    # exp(0) == 1.0 keeps column 0 exactly at start_price
    return start_price * np.exp(cumulative)


def _simulate_parallel(
    start_price: float,
    drift_term: float,
    shock_scale: float,
    days: int,
    num_simulations: int,
    source: NormalSource | None,
    seed: int | None,
    max_workers: int,
) -> np.ndarray:
    """Simulate path chunks on a thread pool and join them at one barrier."""
    n_chunks = min(max_workers, num_simulations)
    sizes = [len(c) for c in np.array_split(np.arange(num_simulations), n_chunks)]

    with ThreadPoolExecutor(max_workers=n_chunks) as executor:
        if source is None:
            # Independent child streams: no generator is shared across threads
            children = np.random.SeedSequence(seed).spawn(n_chunks)
            futures = [
                executor.submit(
                    _draw_and_build, child, n, days, start_price, drift_term, shock_scale
                )
                for child, n in zip(children, sizes)
            ]
        else:
            # A caller-supplied source is only touched from this thread
            futures = [
                executor.submit(
                    _build_paths, start_price, drift_term, shock_scale,
                    source.standard_normal((n, days)),
                )
                for n in sizes
            ]
        chunks = [f.result() for f in futures]

    return np.concatenate(chunks, axis=0)


def _draw_and_build(
    seed_seq: np.random.SeedSequence,
    n: int,
    days: int,
    start_price: float,
    drift_term: float,
    shock_scale: float,
) -> np.ndarray:
    z = default_source(seed_seq).standard_normal((n, days))
    return _build_paths(start_price, drift_term, shock_scale, z)


__all__ = ["simulate_gbm", "DT"]
