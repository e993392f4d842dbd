"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest


@pytest.fixture
def realistic_prices():
    """Generate 250 days of prices with ~20% annual volatility."""
    rng = np.random.default_rng(42)
    daily_returns = rng.normal(0.0003, 0.20 / np.sqrt(252), 250)
    prices = [100.0]
    for r in daily_returns:
        prices.append(prices[-1] * np.exp(r))
    return prices


@pytest.fixture
def sample_history():
    """A short open/close history as returned by the market client."""
    closes = [100.0, 102.0, 101.0, 103.0, 105.0, 104.0, 106.0, 107.0, 105.5, 108.0, 109.0, 110.0]
    return [
        {"date": f"2026-09-{i + 1:02d}", "open": c - 0.5, "close": c}
        for i, c in enumerate(closes)
    ]
