"""Tests for MSRB benefit factor tables.

Covers:
- Pre-2012 schedule by group
- Post-2012 schedules (under and over 30 years of service)
- Ages above and below the table range
- Group 3 any-age rule
- Table shape and immutability
"""

import pytest

from ma_retirement.schemas.common import HireEra, MembershipGroup
from ma_retirement.services.pension.benefit_factors import (
    BENEFIT_FACTOR_TABLES,
    MAX_BENEFIT_FACTOR,
    POST_2012,
    POST_2012_30_YEARS,
    PRE_2012,
    get_benefit_factor,
    minimum_retirement_age,
    select_schedule,
)

BEFORE = HireEra.BEFORE_2012
AFTER = HireEra.AFTER_2012


# ── Pre-2012 schedule ─────────────────────────────────────────────────────────


class TestPre2012Factors:
    def test_group_1_ramp(self):
        assert get_benefit_factor(55, "GROUP_1", BEFORE, 20) == 0.015
        assert get_benefit_factor(60, "GROUP_1", BEFORE, 20) == 0.020
        assert get_benefit_factor(62, "GROUP_1", BEFORE, 20) == 0.022
        assert get_benefit_factor(65, "GROUP_1", BEFORE, 20) == 0.025

    def test_group_2_reaches_full_factor_at_60(self):
        assert get_benefit_factor(55, "GROUP_2", BEFORE, 20) == 0.020
        assert get_benefit_factor(60, "GROUP_2", BEFORE, 20) == 0.025

    def test_group_4_starts_at_50(self):
        assert get_benefit_factor(50, "GROUP_4", BEFORE, 25) == 0.020
        assert get_benefit_factor(55, "GROUP_4", BEFORE, 25) == 0.025

    def test_fractional_age_is_floored(self):
        assert get_benefit_factor(62.9, "GROUP_1", BEFORE, 20) == 0.022

    def test_service_length_does_not_change_pre_2012_schedule(self):
        assert get_benefit_factor(62, "GROUP_1", BEFORE, 35) == 0.022


# ── Post-2012 schedules ───────────────────────────────────────────────────────


class TestPost2012Factors:
    def test_group_1_under_30_years(self):
        assert get_benefit_factor(60, "GROUP_1", AFTER, 15) == 0.0145
        assert get_benefit_factor(63, "GROUP_1", AFTER, 15) == 0.0190
        assert get_benefit_factor(67, "GROUP_1", AFTER, 15) == 0.0250

    def test_group_1_with_30_years(self):
        assert get_benefit_factor(60, "GROUP_1", AFTER, 30) == 0.01625
        assert get_benefit_factor(62, "GROUP_1", AFTER, 30) == 0.01875

    def test_group_2_and_4(self):
        assert get_benefit_factor(58, "GROUP_2", AFTER, 12) == 0.0190
        assert get_benefit_factor(57, "GROUP_4", AFTER, 12) == 0.0250

    def test_30_year_schedule_never_below_under_30(self):
        for age in range(60, 68):
            assert get_benefit_factor(age, "GROUP_1", AFTER, 30) >= get_benefit_factor(
                age, "GROUP_1", AFTER, 29
            )


# ── Table edges ───────────────────────────────────────────────────────────────


class TestTableEdges:
    def test_age_above_table_uses_last_factor(self):
        assert get_benefit_factor(72, "GROUP_1", BEFORE, 20) == 0.025
        assert get_benefit_factor(75, "GROUP_4", AFTER, 20) == 0.025

    def test_age_below_table_is_ineligible(self):
        assert get_benefit_factor(54, "GROUP_1", BEFORE, 20) is None
        assert get_benefit_factor(59, "GROUP_1", AFTER, 15) is None
        assert get_benefit_factor(49, "GROUP_4", BEFORE, 25) is None

    def test_group_3_any_age_with_20_years(self):
        assert get_benefit_factor(45, "GROUP_3", AFTER, 20) == MAX_BENEFIT_FACTOR
        assert get_benefit_factor(45, "GROUP_3", BEFORE, 22) == MAX_BENEFIT_FACTOR

    def test_group_3_under_20_years_needs_minimum_age(self):
        assert get_benefit_factor(50, "GROUP_3", AFTER, 12) is None
        assert get_benefit_factor(55, "GROUP_3", AFTER, 12) == 0.025

    def test_group_accepts_loose_spellings(self):
        assert get_benefit_factor(60, "Group 2", BEFORE, 20) == 0.025
        assert get_benefit_factor(60, 2, BEFORE, 20) == 0.025

    def test_unknown_group_rejected(self):
        with pytest.raises(ValueError):
            get_benefit_factor(60, "GROUP_5", BEFORE, 20)


# ── Schedules ─────────────────────────────────────────────────────────────────


class TestSchedules:
    def test_select_schedule(self):
        assert select_schedule(BEFORE, 35) == PRE_2012
        assert select_schedule(AFTER, 29.9) == POST_2012
        assert select_schedule(AFTER, 30) == POST_2012_30_YEARS

    def test_minimum_retirement_age(self):
        assert minimum_retirement_age(MembershipGroup.GROUP_1, BEFORE) == 55
        assert minimum_retirement_age(MembershipGroup.GROUP_1, AFTER) == 60
        assert minimum_retirement_age(MembershipGroup.GROUP_4, AFTER) == 50

    def test_tables_are_dense_and_non_decreasing(self):
        for key, table in BENEFIT_FACTOR_TABLES.items():
            ages = [age for age, _ in table]
            factors = [factor for _, factor in table]
            assert ages == list(range(ages[0], ages[0] + len(ages))), key
            assert factors == sorted(factors), key
            assert factors[-1] == pytest.approx(MAX_BENEFIT_FACTOR), key

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            BENEFIT_FACTOR_TABLES[(PRE_2012, MembershipGroup.GROUP_1)] = ((55, 0.5),)
