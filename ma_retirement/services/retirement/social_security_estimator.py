"""Social Security benefit estimator.

Implements PIA (Primary Insurance Amount) estimation using 2024 bend points,
early/delayed claiming adjustments, and FRA (Full Retirement Age) lookup.
Most Massachusetts state employees hired after 1986 pay Medicare tax only,
so the PIA usually reflects private-sector or pre-state earnings; callers
that know the member's PIA from their SSA statement should pass it in.
"""

import math
from typing import Iterable, Optional

from pydantic import BaseModel

from ma_retirement.utils.input_validation import InputValidationError, validate_amount


# 2024 PIA bend points (monthly amounts)
BEND_POINT_1 = 1174
BEND_POINT_2 = 7078

RATE_1 = 0.90  # 90% of AIME up to the first bend point
RATE_2 = 0.32  # 32% between the bend points
RATE_3 = 0.15  # 15% above the second bend point

TAXABLE_MAXIMUM_2024 = 168_600
ASSUMED_WAGE_GROWTH = 0.025

EARLIEST_CLAIMING_AGE = 62
LATEST_CLAIMING_AGE = 70

# Early reduction per month before FRA
EARLY_REDUCTION_FIRST_36 = 5 / 9 / 100
EARLY_REDUCTION_BEYOND_36 = 5 / 12 / 100
# Delayed retirement credit per month after FRA
DELAYED_CREDIT_PER_MONTH = 2 / 3 / 100

# FRA by birth year for the transitional cohorts: (years, months)
FRA_TABLE = {
    1938: (65, 2),
    1939: (65, 4),
    1940: (65, 6),
    1941: (65, 8),
    1942: (65, 10),
    1955: (66, 2),
    1956: (66, 4),
    1957: (66, 6),
    1958: (66, 8),
    1959: (66, 10),
}


class SocialSecurityEstimate(BaseModel):
    estimated_pia: float
    fra_age: float
    claiming_age: float
    monthly_at_62: float
    monthly_at_fra: float
    monthly_at_70: float
    monthly_benefit: float


def get_fra(birth_year: int) -> float:
    """Full Retirement Age as a decimal (66.5 is 66 years 6 months)."""
    if birth_year <= 1937:
        return 65.0
    if 1943 <= birth_year <= 1954:
        return 66.0
    if birth_year >= 1960:
        return 67.0
    years, months = FRA_TABLE[birth_year]
    return years + months / 12


def estimate_pia(aime: float) -> float:
    """Monthly PIA from Average Indexed Monthly Earnings via the bend point formula."""
    if aime <= 0:
        return 0.0

    pia = RATE_1 * min(aime, BEND_POINT_1)
    if aime > BEND_POINT_1:
        pia += RATE_2 * (min(aime, BEND_POINT_2) - BEND_POINT_1)
    if aime > BEND_POINT_2:
        pia += RATE_3 * (aime - BEND_POINT_2)
    return round(pia, 2)


def estimate_aime_from_salary(
    current_salary: float,
    current_age: float,
    career_start_age: int = 22,
) -> float:
    """Rough AIME assuming the salary grew 2.5% a year since career start.

    Uses the highest 35 years, each capped at the taxable maximum.
    """
    if current_salary <= 0 or current_age <= career_start_age:
        return 0.0

    years_worked = int(current_age - career_start_age)
    earnings = sorted(
        (
            min(current_salary / (1 + ASSUMED_WAGE_GROWTH) ** years_ago, TAXABLE_MAXIMUM_2024)
            for years_ago in range(1, years_worked + 1)
        ),
        reverse=True,
    )[:35]
    return round(sum(earnings) / (35 * 12), 2)


def claiming_adjustment_factor(fra: float, claiming_age: float) -> float:
    """Multiplier applied to the PIA for claiming at claiming_age.

    Early: 5/9 of 1% per month for the first 36 months, 5/12 of 1% beyond.
    Delayed: 2/3 of 1% per month, earned only up to age 70.
    """
    if claiming_age < EARLIEST_CLAIMING_AGE or claiming_age > LATEST_CLAIMING_AGE + 1e-9:
        raise InputValidationError(
            f"Social Security claiming age must be between {EARLIEST_CLAIMING_AGE} "
            f"and {LATEST_CLAIMING_AGE}, got {claiming_age}"
        )

    months_diff = round((claiming_age - fra) * 12)
    if months_diff < 0:
        months_early = -months_diff
        reduction = min(months_early, 36) * EARLY_REDUCTION_FIRST_36
        reduction += max(months_early - 36, 0) * EARLY_REDUCTION_BEYOND_36
        return 1 - reduction

    months_delayed = min(months_diff, round((LATEST_CLAIMING_AGE - fra) * 12))
    return 1 + months_delayed * DELAYED_CREDIT_PER_MONTH


def adjust_for_claiming_age(pia: float, fra: float, claiming_age: float) -> float:
    """Monthly benefit when claiming at claiming_age."""
    if pia <= 0:
        return 0.0
    return round(max(pia * claiming_adjustment_factor(fra, claiming_age), 0.0), 2)


def benefits_by_claiming_age(
    pia: float,
    fra: float,
    ages: Iterable[int] = range(EARLIEST_CLAIMING_AGE, LATEST_CLAIMING_AGE + 1),
) -> dict[int, float]:
    return {age: adjust_for_claiming_age(pia, fra, age) for age in ages}


def resolve_pia(
    birth_year: int,
    current_age: float,
    manual_pia: Optional[float] = None,
    current_salary: Optional[float] = None,
    career_start_age: int = 22,
) -> float:
    """Use the member's stated PIA, else estimate one from salary, else zero."""
    if manual_pia is not None:
        return validate_amount(manual_pia, "social_security_pia")
    if current_salary:
        return estimate_pia(estimate_aime_from_salary(current_salary, current_age, career_start_age))
    return 0.0


def estimate_social_security(
    current_salary: float,
    current_age: float,
    birth_year: int,
    claiming_age: float = 67,
    career_start_age: int = 22,
    manual_pia_override: Optional[float] = None,
) -> SocialSecurityEstimate:
    """Full Social Security estimate for one claiming age."""
    fra = get_fra(birth_year)
    pia = resolve_pia(
        birth_year,
        current_age,
        manual_pia=manual_pia_override,
        current_salary=current_salary,
        career_start_age=career_start_age,
    )

    return SocialSecurityEstimate(
        estimated_pia=round(pia, 2),
        fra_age=fra,
        claiming_age=claiming_age,
        monthly_at_62=adjust_for_claiming_age(pia, fra, EARLIEST_CLAIMING_AGE),
        monthly_at_fra=round(pia, 2),
        monthly_at_70=adjust_for_claiming_age(pia, fra, LATEST_CLAIMING_AGE),
        monthly_benefit=adjust_for_claiming_age(pia, fra, claiming_age),
    )


def full_retirement_claiming_age(fra: float) -> int:
    """First whole claiming age at or after FRA."""
    return int(math.ceil(fra - 1e-9))
