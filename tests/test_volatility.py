"""Unit tests for volatility estimation."""

import math
import statistics

import numpy as np
import pytest

from cortexlab.analysis.volatility import (
    classify_volatility,
    compute_log_returns,
    estimate_annualized_volatility,
)


class TestEstimateAnnualizedVolatility:
    def test_known_series(self):
        prices = [100, 102, 101, 103, 105, 104, 106]
        log_returns = [math.log(prices[i] / prices[i - 1]) for i in range(1, len(prices))]
        expected = statistics.stdev(log_returns) * math.sqrt(252)
        assert estimate_annualized_volatility(prices) == pytest.approx(expected, rel=1e-12)

    def test_empty_series(self):
        assert estimate_annualized_volatility([]) == 0.0

    def test_single_point(self):
        assert estimate_annualized_volatility([100.0]) == 0.0

    def test_two_points_single_return(self):
        """One log return cannot form a sample variance."""
        assert estimate_annualized_volatility([100.0, 110.0]) == 0.0

    def test_constant_series(self):
        assert estimate_annualized_volatility([50.0] * 20) == 0.0

    def test_scale_invariance(self, realistic_prices):
        base = estimate_annualized_volatility(realistic_prices)
        scaled = estimate_annualized_volatility([p * 37.5 for p in realistic_prices])
        assert scaled == pytest.approx(base, rel=1e-9)

    def test_non_negative_random_series(self):
        rng = np.random.default_rng(7)
        for _ in range(20):
            prices = list(rng.uniform(1, 500, rng.integers(0, 30)))
            assert estimate_annualized_volatility(prices) >= 0.0

    def test_recovers_simulated_volatility(self, realistic_prices):
        vol = estimate_annualized_volatility(realistic_prices)
        assert 0.15 < vol < 0.25

    def test_non_positive_prior_prices_skipped(self):
        prices = [100.0, 0.0, 102.0, 101.0, 103.0]
        # Only 102->101 and 101->103 survive; 100->0 and 0->102 are skipped
        expected = statistics.stdev([math.log(101 / 102), math.log(103 / 101)]) * math.sqrt(252)
        assert estimate_annualized_volatility(prices) == pytest.approx(expected)

    def test_does_not_mutate_input(self):
        prices = [100.0, 101.0, 99.0]
        estimate_annualized_volatility(prices)
        assert prices == [100.0, 101.0, 99.0]


class TestComputeLogReturns:
    def test_skips_missing_values(self):
        returns = compute_log_returns([100.0, None, 110.0, float("nan"), 120.0, 132.0])
        assert len(returns) == 1
        assert returns[0] == pytest.approx(math.log(1.1))

    def test_empty(self):
        assert len(compute_log_returns([])) == 0


class TestClassifyVolatility:
    def test_stable(self):
        profile = classify_volatility(0.10)
        assert profile["level"] == "stable"
        assert profile["label"] == "PREMIUM STABILITY"
        assert profile["volatility_pct"] == pytest.approx(10.0)

    def test_balanced(self):
        assert classify_volatility(0.15)["level"] == "balanced"
        assert classify_volatility(0.349)["level"] == "balanced"

    def test_aggressive(self):
        profile = classify_volatility(0.35)
        assert profile["level"] == "aggressive"
        assert profile["label"] == "AGGRESSIVE VOLATILITY"
