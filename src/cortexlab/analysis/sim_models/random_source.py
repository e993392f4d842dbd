"""Standard-normal random sources for path simulation.

Every source exposes ``standard_normal(shape)``. Instances hold their own
generator state and are meant to be created per simulation call.
"""

import logging
import math
from typing import Iterable, Protocol

import numpy as np

from cortexlab.exceptions import RandomSourceExhaustedError

logger = logging.getLogger(__name__)


class NormalSource(Protocol):
    def standard_normal(self, shape: tuple[int, ...]) -> np.ndarray:
        ...


class BoxMullerSource:
    """Box-Muller transform over two independent uniform(0, 1) streams.

    ``seed=None`` draws fresh OS entropy.
    """

    def __init__(self, seed: int | np.random.SeedSequence | None = None):
        self._rng = np.random.default_rng(seed)

    def _uniform_open(self, size: int) -> np.ndarray:
        # Generator.random() samples [0, 1); zero would make log(u) undefined
        u = self._rng.random(size)
        zeros = u == 0.0
        while zeros.any():
            u[zeros] = self._rng.random(int(zeros.sum()))
            zeros = u == 0.0
        return u

    def standard_normal(self, shape: tuple[int, ...]) -> np.ndarray:
        size = math.prod(shape)
        u = self._uniform_open(size)
        v = self._uniform_open(size)
        z = np.sqrt(-2.0 * np.log(u)) * np.cos(2.0 * np.pi * v)
        return z.reshape(shape)


class NumpyNormalSource:
    """numpy's ziggurat standard normal."""

    def __init__(self, seed: int | np.random.SeedSequence | None = None):
        self._rng = np.random.default_rng(seed)

    def standard_normal(self, shape: tuple[int, ...]) -> np.ndarray:
        return self._rng.standard_normal(shape)


class SequenceNormalSource:
    """Replays a fixed stream of variates in row-major order."""

    def __init__(self, values: Iterable[float]):
        self._values = np.asarray(list(values), dtype=float)
        self._pos = 0

    def standard_normal(self, shape: tuple[int, ...]) -> np.ndarray:
        size = math.prod(shape)
        end = self._pos + size
        if end > len(self._values):
            raise RandomSourceExhaustedError(
                f"Requested {size} variates, only {len(self._values) - self._pos} left"
            )
        out = self._values[self._pos:end].reshape(shape)
        self._pos = end
        return out

    @property
    def remaining(self) -> int:
        return len(self._values) - self._pos


def default_source(seed: int | np.random.SeedSequence | None = None) -> NormalSource:
    """Fresh Box-Muller source; the baseline generator for simulations."""
    return BoxMullerSource(seed)
