"""MSRB benefit factor (age factor) tables.

A member's annual allowance is average salary x years of service x the
factor for their group and age at retirement. Three schedules apply:

- members hired before April 2, 2012
- members hired on/after April 2, 2012 with fewer than 30 years of service
- members hired on/after April 2, 2012 with 30 or more years of service

Each table is dense from its first eligible age up to the age where the
factor reaches 2.5%; older ages keep the last factor.
"""

import math
from types import MappingProxyType
from typing import Optional

from ma_retirement.schemas.common import HireEra, MembershipGroup

PRE_2012 = "pre_2012"
POST_2012 = "post_2012"
POST_2012_30_YEARS = "post_2012_30_years"

MAX_BENEFIT_FACTOR = 0.025
POST_2012_FULL_SCHEDULE_YEARS = 30

# Group 3 members with this much service may retire at any age at the full factor
GROUP_3_ANY_AGE_YEARS = 20

G1, G2, G3, G4 = (
    MembershipGroup.GROUP_1,
    MembershipGroup.GROUP_2,
    MembershipGroup.GROUP_3,
    MembershipGroup.GROUP_4,
)

# (schedule, group) -> ((age, factor), ...) ascending by age
BENEFIT_FACTOR_TABLES = MappingProxyType({
    (PRE_2012, G1): (
        (55, 0.015), (56, 0.016), (57, 0.017), (58, 0.018), (59, 0.019),
        (60, 0.020), (61, 0.021), (62, 0.022), (63, 0.023), (64, 0.024),
        (65, 0.025),
    ),
    (PRE_2012, G2): (
        (55, 0.020), (56, 0.021), (57, 0.022), (58, 0.023), (59, 0.024),
        (60, 0.025),
    ),
    (PRE_2012, G3): (
        (55, 0.025),
    ),
    (PRE_2012, G4): (
        (50, 0.020), (51, 0.021), (52, 0.022), (53, 0.023), (54, 0.024),
        (55, 0.025),
    ),
    (POST_2012, G1): (
        (60, 0.0145), (61, 0.0160), (62, 0.0175), (63, 0.0190),
        (64, 0.0205), (65, 0.0220), (66, 0.0235), (67, 0.0250),
    ),
    (POST_2012, G2): (
        (55, 0.0145), (56, 0.0160), (57, 0.0175), (58, 0.0190),
        (59, 0.0205), (60, 0.0220), (61, 0.0235), (62, 0.0250),
    ),
    (POST_2012, G3): (
        (55, 0.025),
    ),
    (POST_2012, G4): (
        (50, 0.0145), (51, 0.0160), (52, 0.0175), (53, 0.0190),
        (54, 0.0205), (55, 0.0220), (56, 0.0235), (57, 0.0250),
    ),
    (POST_2012_30_YEARS, G1): (
        (60, 0.01625), (61, 0.01750), (62, 0.01875), (63, 0.02000),
        (64, 0.02125), (65, 0.02250), (66, 0.02375), (67, 0.02500),
    ),
    (POST_2012_30_YEARS, G2): (
        (55, 0.01625), (56, 0.01750), (57, 0.01875), (58, 0.02000),
        (59, 0.02125), (60, 0.02250), (61, 0.02375), (62, 0.02500),
    ),
    (POST_2012_30_YEARS, G3): (
        (55, 0.025),
    ),
    (POST_2012_30_YEARS, G4): (
        (50, 0.01625), (51, 0.01750), (52, 0.01875), (53, 0.02000),
        (54, 0.02125), (55, 0.02250), (56, 0.02375), (57, 0.02500),
    ),
})


def select_schedule(hire_era: HireEra, years_of_service: float = 0.0) -> str:
    """Pick the factor schedule for a hire era and service length."""
    if HireEra(hire_era) is HireEra.BEFORE_2012:
        return PRE_2012
    if years_of_service >= POST_2012_FULL_SCHEDULE_YEARS:
        return POST_2012_30_YEARS
    return POST_2012


def get_factor_table(group, hire_era, years_of_service: float = 0.0) -> tuple:
    group = MembershipGroup.coerce(group)
    return BENEFIT_FACTOR_TABLES[(select_schedule(hire_era, years_of_service), group)]


def minimum_retirement_age(group, hire_era) -> int:
    """First age with a factor in the member's schedule."""
    return get_factor_table(group, hire_era)[0][0]


def get_benefit_factor(
    age: float,
    group,
    hire_era,
    years_of_service: float = 0.0,
) -> Optional[float]:
    """Benefit factor for a retirement age, or None when the age has no factor.

    Age is floored to whole years. Ages past the last row use the last
    factor. Group 3 members with 20+ years earn the full factor at any age.
    """
    group = MembershipGroup.coerce(group)
    if group is MembershipGroup.GROUP_3 and years_of_service >= GROUP_3_ANY_AGE_YEARS:
        return MAX_BENEFIT_FACTOR

    table = get_factor_table(group, hire_era, years_of_service)
    whole_age = math.floor(age)
    first_age, _ = table[0]
    if whole_age < first_age:
        return None

    last_age, last_factor = table[-1]
    if whole_age >= last_age:
        return last_factor
    return table[whole_age - first_age][1]
