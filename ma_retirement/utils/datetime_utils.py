"""Date helpers used for ages, projection horizons and hire-era derivation."""

from datetime import date, datetime, timezone
from typing import Optional

from ma_retirement.schemas.common import HIRE_ERA_CUTOFF, HireEra

DAYS_PER_YEAR = 365.25


def utc_today() -> date:
    """Current UTC calendar date."""
    return datetime.now(timezone.utc).date()


def calculate_age(birthdate: date, as_of_date: Optional[date] = None) -> int:
    """Completed years of age on as_of_date (defaults to today)."""
    as_of = as_of_date or utc_today()
    age = as_of.year - birthdate.year
    if (as_of.month, as_of.day) < (birthdate.month, birthdate.day):
        age -= 1
    return age


def years_between(start: date, end: date) -> float:
    """Fractional years from start to end; negative when end precedes start."""
    return (end - start).days / DAYS_PER_YEAR


def hire_era_from_membership_date(membership_date: date) -> HireEra:
    """Members who joined on or after April 2, 2012 use the reformed tables."""
    if isinstance(membership_date, datetime):
        membership_date = membership_date.date()
    if membership_date < HIRE_ERA_CUTOFF:
        return HireEra.BEFORE_2012
    return HireEra.AFTER_2012
