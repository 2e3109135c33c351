"""Tests for the public engine entry points.

Covers:
- Package-level facade functions
- Optimizer result cache: hits, equality with fresh results, bypass
- Structured calculation log events
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

import ma_retirement
from ma_retirement import engine
from ma_retirement.core.cache import InMemoryCache, compute_fingerprint
from ma_retirement.schemas.optimization import OptimizationPreferences


# ── Facade ────────────────────────────────────────────────────────────────────


class TestFacade:
    def test_pension(self, group_1_profile):
        result = ma_retirement.calculate_annual_pension(group_1_profile, "A", 62)
        assert result.annual_pension == pytest.approx(52800)

    def test_benefit_factor(self):
        assert ma_retirement.get_benefit_factor(62, "GROUP_1", "before_2012", 20) == 0.022
        assert ma_retirement.get_benefit_factor(50, "GROUP_1", "before_2012", 20) is None

    def test_taxes(self):
        assert ma_retirement.calculate_federal_tax(58000, "single").tax == pytest.approx(7813)
        assert ma_retirement.calculate_massachusetts_tax(60000, "single").tax == pytest.approx(2560)
        assert ma_retirement.calculate_social_security_tax(20000, 15000, "single").taxable_amount == 0
        total = ma_retirement.calculate_retirement_taxes(50000, 24000, 0, "single", True)
        assert total.total_tax == pytest.approx(8925)

    def test_invalid_input_error_exported(self):
        with pytest.raises(ma_retirement.InputValidationError):
            ma_retirement.calculate_federal_tax(float("nan"))

    def test_idempotent(self, group_1_profile):
        first = ma_retirement.calculate_annual_pension(group_1_profile, "C", 62, 60)
        second = ma_retirement.calculate_annual_pension(group_1_profile, "C", 62, 60)
        assert first.model_dump_json() == second.model_dump_json()

    def test_benefit_factor_idempotent(self):
        calls = [ma_retirement.get_benefit_factor(63.5, "GROUP_2", "after_2012", 31) for _ in range(2)]
        assert calls[0] == calls[1]
        assert calls[0] is not None

    @pytest.mark.parametrize("call", [
        lambda: ma_retirement.calculate_federal_tax(58000, "single"),
        lambda: ma_retirement.calculate_federal_tax(100000, "married_filing_jointly"),
        lambda: ma_retirement.calculate_massachusetts_tax(60000, "single", True),
        lambda: ma_retirement.calculate_social_security_tax(20000, 30000, "single"),
        lambda: ma_retirement.calculate_social_security_tax(30000, 40000, "married_filing_jointly"),
        lambda: ma_retirement.calculate_retirement_taxes(50000, 24000, 0, "single", True),
        lambda: ma_retirement.calculate_retirement_taxes(40000, 30000, 5000, "married_filing_jointly", False),
    ])
    def test_tax_calculations_idempotent(self, call):
        assert call().model_dump_json() == call().model_dump_json()


# ── Optimizer cache ───────────────────────────────────────────────────────────


class TestOptimizerCache:
    def test_cache_hit_returns_identical_result(self, optimization_request):
        cache = InMemoryCache()
        fresh = engine.optimize_retirement_strategy(optimization_request, cache=cache)
        assert len(cache) == 1

        optimizer = MagicMock()
        cached = engine.optimize_retirement_strategy(
            optimization_request, cache=cache, optimizer=optimizer
        )
        optimizer.optimize.assert_not_called()
        assert cached == fresh
        assert cached.model_dump_json() == fresh.model_dump_json()

    def test_cache_key_is_request_fingerprint(self, optimization_request):
        cache = InMemoryCache()
        engine.optimize_retirement_strategy(optimization_request, cache=cache)
        key = compute_fingerprint(optimization_request.model_dump_json(), namespace="optimize")
        assert cache.get(key) is not None

    def test_different_requests_cached_separately(self, optimization_request):
        cache = InMemoryCache()
        engine.optimize_retirement_strategy(optimization_request, cache=cache)
        other = optimization_request.model_copy(update={"life_expectancy": 90})
        engine.optimize_retirement_strategy(other, cache=cache)
        assert len(cache) == 2

    def test_injected_generator_bypasses_cache(self, optimization_request):
        request = optimization_request.model_copy(update={
            "preferences": OptimizationPreferences(include_monte_carlo_analysis=True, retirement_income_goal=4000)
        })
        cache = InMemoryCache()
        result = engine.optimize_retirement_strategy(
            request, cache=cache, rng=np.random.default_rng(5)
        )
        assert len(cache) == 0
        assert result.monte_carlo_results.seed is None

    def test_dict_request(self, optimization_request):
        result = ma_retirement.optimize_retirement_strategy(optimization_request.model_dump())
        assert len(result.alternatives) == 3


# ── Logging ───────────────────────────────────────────────────────────────────


class TestCalculationLogging:
    @patch("ma_retirement.engine.log_calculation")
    def test_logs_fresh_calculation(self, mock_log, optimization_request):
        engine.optimize_retirement_strategy(optimization_request)
        mock_log.assert_called_once()
        args, kwargs = mock_log.call_args
        assert args[1] == "optimize_retirement_strategy"
        assert kwargs["scenarios_evaluated"] == 108
        assert "cache_hit" not in kwargs

    @patch("ma_retirement.engine.log_calculation")
    def test_logs_cache_hit(self, mock_log, optimization_request):
        cache = InMemoryCache()
        engine.optimize_retirement_strategy(optimization_request, cache=cache)
        engine.optimize_retirement_strategy(optimization_request, cache=cache)
        assert mock_log.call_args.kwargs["cache_hit"] is True
