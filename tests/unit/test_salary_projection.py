"""Tests for salary and COLA projections.

Covers:
- Compound projection and its inverse
- Horizon resolution: date, age, default
- Rate and year validation
- Massachusetts base-capped retiree COLA
"""

from datetime import date

import pytest

from ma_retirement.schemas.projection import ProjectionMethod
from ma_retirement.services.pension.cola_calculator import (
    MA_COLA_BASE,
    calculate_ma_pension_cola,
    ma_pension_after_years,
    project_ma_pension_cola,
)
from ma_retirement.services.projection.salary_projection import (
    calculate_salary_projection,
    discount,
    project,
    resolve_projection_years,
)
from ma_retirement.utils.input_validation import InputValidationError


# ── Projection ────────────────────────────────────────────────────────────────


class TestProject:
    def test_compounds_annually(self):
        assert project(100000, 10, 0.025) == pytest.approx(128008.45, abs=0.01)

    def test_zero_years_is_identity(self):
        assert project(55000, 0, 0.03) == 55000

    def test_fractional_years(self):
        assert project(100000, 0.5, 0.04) == pytest.approx(100000 * 1.04 ** 0.5)

    @pytest.mark.parametrize("amount", [1.0, 48250.75, 250000])
    @pytest.mark.parametrize("years", [1, 7.5, 30])
    def test_discount_inverts_project(self, amount, years):
        assert discount(project(amount, years, 0.03), years, 0.03) == pytest.approx(amount)

    def test_rate_above_ten_percent_rejected(self):
        with pytest.raises(InputValidationError):
            project(100000, 5, 0.11)

    def test_negative_rate_rejected(self):
        with pytest.raises(InputValidationError):
            project(100000, 5, -0.01)

    def test_negative_years_rejected(self):
        with pytest.raises(InputValidationError):
            project(100000, -1, 0.02)

    def test_nan_amount_rejected(self):
        with pytest.raises(InputValidationError):
            project(float("nan"), 5, 0.02)


# ── Horizon resolution ────────────────────────────────────────────────────────


class TestResolveProjectionYears:
    def test_date_takes_priority(self):
        years, method = resolve_projection_years(
            target_date=date(2030, 1, 1),
            current_date=date(2025, 1, 1),
            target_age=70,
            current_age=50,
        )
        assert method is ProjectionMethod.DATE_BASED
        assert years == pytest.approx(5.0, abs=0.01)

    def test_age_based(self):
        years, method = resolve_projection_years(target_age=65, current_age=55)
        assert method is ProjectionMethod.AGE_BASED
        assert years == 10

    def test_default(self):
        years, method = resolve_projection_years()
        assert method is ProjectionMethod.DEFAULT
        assert years == 10

    def test_past_date_rejected(self):
        with pytest.raises(InputValidationError, match="in the past"):
            resolve_projection_years(target_date=date(2020, 1, 1), current_date=date(2025, 1, 1))

    def test_target_age_before_current_age_rejected(self):
        with pytest.raises(InputValidationError):
            resolve_projection_years(target_age=50, current_age=55)


class TestSalaryProjection:
    def test_age_based_projection(self):
        result = calculate_salary_projection(80000, 0.03, target_age=60, current_age=50)
        assert result.projected_salary == pytest.approx(80000 * 1.03 ** 10, abs=0.01)
        assert result.total_growth == pytest.approx(result.projected_salary - 80000, abs=0.01)
        assert result.total_growth_percent == pytest.approx(34.3916, abs=0.001)
        assert result.projection_method is ProjectionMethod.AGE_BASED

    def test_zero_salary(self):
        result = calculate_salary_projection(0, 0.025)
        assert result.projected_salary == 0
        assert result.total_growth_percent == 0


# ── Massachusetts retiree COLA ────────────────────────────────────────────────


class TestMassachusettsCola:
    def test_capped_at_base(self):
        assert calculate_ma_pension_cola(50000) == pytest.approx(390)

    def test_small_pension_gets_full_rate(self):
        assert calculate_ma_pension_cola(10000) == pytest.approx(300)

    def test_multi_year_projection(self):
        projection = project_ma_pension_cola(50000, 3)
        assert [y.annual_pension for y in projection.years] == [50390, 50780, 51170]
        assert projection.total_increase == pytest.approx(1170)

    def test_small_pension_compounds_until_base(self):
        after = ma_pension_after_years(12000, 5)
        expected = 12000 * 1.03 ** 2
        for _ in range(3):
            expected += min(expected, MA_COLA_BASE) * 0.03
        assert after == pytest.approx(expected)

    def test_negative_years_rejected(self):
        with pytest.raises(InputValidationError):
            project_ma_pension_cola(50000, -1)
