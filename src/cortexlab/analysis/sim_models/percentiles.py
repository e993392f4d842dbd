"""Nearest-rank percentile bands over a simulated path ensemble."""

import math
from typing import Any

import numpy as np

from . import PERCENTILES, PathEnsemble, PercentileCurve


def nearest_rank(percentile: float, n: int) -> int:
    """Index of ``percentile`` in an ascending sample of size ``n``.

    ``floor(percentile * n)`` clamped to ``n - 1``; no interpolation.
    """
    return min(math.floor(percentile * n), n - 1)


def aggregate_array(paths: np.ndarray) -> PercentileCurve:
    """Percentile curves of a ``(num_paths, num_steps)`` price array.

    Each column is a cross-section; values are always members of that
    cross-section. ``np.partition`` places every requested rank exactly
    where a full sort would, in linear time per column.
    """
    paths = np.asarray(paths, dtype=float)
    if paths.ndim != 2 or paths.shape[0] == 0:
        raise ValueError(f"Expected a non-empty 2-D path array, got shape {paths.shape}")

    n = paths.shape[0]
    ranks = {key: nearest_rank(p, n) for key, p in PERCENTILES.items()}
    kth = sorted(set(ranks.values()))
    selected = np.partition(paths, kth, axis=0)

    return PercentileCurve(**{
        key: selected[rank].tolist() for key, rank in ranks.items()
    })


def aggregate_percentiles(ensemble: PathEnsemble) -> PercentileCurve:
    """Collapse an ensemble into p05/p25/p50/p75/p95 curves of length days + 1."""
    return aggregate_array(ensemble.paths)


def curve_to_rows(curve: PercentileCurve) -> list[dict[str, Any]]:
    """Chart rows ``{day, p05, p25, p50, p75, p95}`` indexed by day offset."""
    return [
        {"day": day, **{key: curve[key][day] for key in PERCENTILES}}
        for day in range(len(curve["p50"]))
    ]


def terminal_values(curve: PercentileCurve) -> dict[str, float]:
    """Percentile values at the final day index."""
    return {key: curve[key][-1] for key in PERCENTILES}
