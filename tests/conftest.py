"""Pytest configuration and shared fixtures."""

import pytest

from ma_retirement.schemas.common import FilingStatus, HireEra, MembershipGroup
from ma_retirement.schemas.optimization import OptimizationPreferences, OptimizationRequest
from ma_retirement.schemas.pension import MemberProfile


@pytest.fixture
def group_1_profile():
    """Group 1 member hired before 2012 with 30 years of service."""
    return MemberProfile(
        birth_year=1965,
        current_age=59,
        group=MembershipGroup.GROUP_1,
        hire_era=HireEra.BEFORE_2012,
        years_of_service=30,
        average_salary=80000,
        social_security_pia=1500,
    )


@pytest.fixture
def post_2012_profile():
    """Group 1 member hired after the 2012 reform."""
    return MemberProfile(
        birth_year=1970,
        current_age=54,
        group=MembershipGroup.GROUP_1,
        hire_era=HireEra.AFTER_2012,
        years_of_service=12,
        average_salary=70000,
        social_security_pia=1800,
    )


@pytest.fixture
def group_4_profile():
    return MemberProfile(
        birth_year=1972,
        current_age=52,
        group=MembershipGroup.GROUP_4,
        hire_era=HireEra.BEFORE_2012,
        years_of_service=28,
        average_salary=100000,
        social_security_pia=900,
        filing_status=FilingStatus.MARRIED_FILING_JOINTLY,
    )


@pytest.fixture
def optimization_request(group_1_profile):
    return OptimizationRequest(
        profile=group_1_profile.model_copy(update={"years_of_service": 28}),
        life_expectancy=85,
        retirement_goal_age=60,
        savings_balance=150000,
        preferences=OptimizationPreferences(retirement_income_goal=4000),
    )
