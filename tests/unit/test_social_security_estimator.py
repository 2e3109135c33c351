"""Tests for Social Security benefit estimator.

Covers:
- FRA (Full Retirement Age) by birth year
- PIA (Primary Insurance Amount) calculation from AIME
- AIME estimation from salary
- Early/delayed claiming age adjustments and the 62-70 window
- Full estimation integration
"""

import pytest

from ma_retirement.services.retirement.social_security_estimator import (
    BEND_POINT_1,
    BEND_POINT_2,
    adjust_for_claiming_age,
    benefits_by_claiming_age,
    claiming_adjustment_factor,
    estimate_aime_from_salary,
    estimate_pia,
    estimate_social_security,
    full_retirement_claiming_age,
    get_fra,
    resolve_pia,
)
from ma_retirement.utils.input_validation import InputValidationError


# ── FRA by birth year ─────────────────────────────────────────────────────────


class TestGetFRA:
    def test_born_1937_or_earlier(self):
        assert get_fra(1935) == 65.0
        assert get_fra(1937) == 65.0

    def test_born_1943_to_1954(self):
        for year in range(1943, 1955):
            assert get_fra(year) == 66.0

    def test_born_1960_or_later(self):
        assert get_fra(1960) == 67.0
        assert get_fra(1990) == 67.0

    def test_transitional_years(self):
        # 1955: 66 years 2 months
        assert get_fra(1955) == pytest.approx(66 + 2 / 12, abs=0.01)
        # 1957: 66 years 6 months
        assert get_fra(1957) == pytest.approx(66.5, abs=0.01)
        # 1959: 66 years 10 months
        assert get_fra(1959) == pytest.approx(66 + 10 / 12, abs=0.01)

    def test_first_whole_claiming_age_at_fra(self):
        assert full_retirement_claiming_age(67.0) == 67
        assert full_retirement_claiming_age(66.5) == 67
        assert full_retirement_claiming_age(66.0) == 66


# ── PIA from AIME ─────────────────────────────────────────────────────────────


class TestEstimatePIA:
    def test_zero_aime(self):
        assert estimate_pia(0) == 0.0
        assert estimate_pia(-100) == 0.0

    def test_below_first_bend_point(self):
        assert estimate_pia(1000) == pytest.approx(900, abs=0.01)

    def test_between_bend_points(self):
        expected = 0.90 * BEND_POINT_1 + 0.32 * (3000 - BEND_POINT_1)
        assert estimate_pia(3000) == pytest.approx(expected, abs=0.01)

    def test_above_second_bend_point(self):
        expected = (
            0.90 * BEND_POINT_1
            + 0.32 * (BEND_POINT_2 - BEND_POINT_1)
            + 0.15 * (10000 - BEND_POINT_2)
        )
        assert estimate_pia(10000) == pytest.approx(expected, abs=0.01)


# ── AIME from salary ──────────────────────────────────────────────────────────


class TestEstimateAIME:
    def test_zero_salary(self):
        assert estimate_aime_from_salary(0, 45, 22) == 0.0

    def test_age_at_career_start(self):
        assert estimate_aime_from_salary(75000, 22, 22) == 0.0

    def test_positive_salary(self):
        aime = estimate_aime_from_salary(75000, 45, 22)
        assert 2000 < aime < 8000

    def test_longer_career_higher_aime(self):
        assert estimate_aime_from_salary(75000, 55, 22) > estimate_aime_from_salary(75000, 30, 22)


class TestResolvePIA:
    def test_manual_pia_wins(self):
        assert resolve_pia(1965, 59, manual_pia=1500, current_salary=90000) == 1500

    def test_estimated_from_salary(self):
        assert resolve_pia(1965, 59, current_salary=90000) > 0

    def test_nothing_known(self):
        assert resolve_pia(1965, 59) == 0.0

    def test_negative_manual_pia_rejected(self):
        with pytest.raises(InputValidationError):
            resolve_pia(1965, 59, manual_pia=-10)


# ── Claiming age adjustments ──────────────────────────────────────────────────


class TestAdjustForClaimingAge:
    def test_zero_pia(self):
        assert adjust_for_claiming_age(0, 67, 62) == 0.0

    def test_claim_at_fra(self):
        assert adjust_for_claiming_age(2000, 67, 67) == pytest.approx(2000, abs=0.01)

    def test_claim_at_62_is_seventy_percent(self):
        assert adjust_for_claiming_age(2000, 67, 62) == pytest.approx(1400, abs=0.01)

    def test_claim_at_70_is_124_percent(self):
        assert adjust_for_claiming_age(2000, 67, 70) == pytest.approx(2480, abs=0.01)

    def test_first_36_months_use_higher_rate(self):
        # 36 months early at 5/9 of 1% per month
        assert claiming_adjustment_factor(67, 64) == pytest.approx(0.80)

    def test_claim_before_62_rejected(self):
        with pytest.raises(InputValidationError):
            adjust_for_claiming_age(2000, 67, 61)

    def test_claim_after_70_rejected(self):
        with pytest.raises(InputValidationError):
            claiming_adjustment_factor(67, 71)

    def test_benefits_increase_with_age(self):
        benefits = benefits_by_claiming_age(1800, 67)
        assert list(benefits) == list(range(62, 71))
        values = list(benefits.values())
        assert values == sorted(values)
        assert benefits[67] == pytest.approx(1800)


# ── Full estimate ─────────────────────────────────────────────────────────────


class TestEstimateSocialSecurity:
    def test_manual_override(self):
        result = estimate_social_security(
            current_salary=80000,
            current_age=55,
            birth_year=1970,
            claiming_age=62,
            manual_pia_override=2000,
        )
        assert result.estimated_pia == 2000
        assert result.fra_age == 67.0
        assert result.monthly_at_62 == pytest.approx(1400)
        assert result.monthly_at_fra == pytest.approx(2000)
        assert result.monthly_at_70 == pytest.approx(2480)
        assert result.monthly_benefit == pytest.approx(1400)

    def test_estimated_from_salary(self):
        result = estimate_social_security(current_salary=75000, current_age=45, birth_year=1980)
        assert result.estimated_pia > 0
        assert result.monthly_at_62 < result.monthly_at_fra < result.monthly_at_70
