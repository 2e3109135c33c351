"""Salary and cost-of-living projections.

Compounds an amount forward at a fixed annual rate. The projection horizon
comes from a target date when one is given, otherwise from a target age,
otherwise from a default number of years.
"""

import logging
from datetime import date
from typing import Optional

from ma_retirement.schemas.projection import ProjectionMethod, SalaryProjectionResult
from ma_retirement.utils.datetime_utils import utc_today, years_between
from ma_retirement.utils.input_validation import (
    InputValidationError,
    validate_amount,
    validate_rate,
)

logger = logging.getLogger(__name__)

COLA_RATE_CONSERVATIVE = 0.02
COLA_RATE_TYPICAL = 0.025
COLA_RATE_OPTIMISTIC = 0.03
DEFAULT_COLA_RATE = COLA_RATE_TYPICAL

MIN_COLA_RATE = 0.0
MAX_COLA_RATE = 0.10
DEFAULT_PROJECTION_YEARS = 10


def _validate_years(years: float) -> float:
    years = validate_amount(years, "years", allow_negative=True)
    if years < 0:
        raise InputValidationError(f"Projection years must not be negative, got {years}")
    return years


def project(amount: float, years: float, annual_rate: float) -> float:
    """amount x (1 + annual_rate) ** years"""
    amount = validate_amount(amount, "amount")
    years = _validate_years(years)
    rate = validate_rate(annual_rate, "annual_rate", MIN_COLA_RATE, MAX_COLA_RATE)
    return amount * (1 + rate) ** years


def discount(amount: float, years: float, annual_rate: float) -> float:
    """Inverse of project(): the value today of an amount received in `years`."""
    amount = validate_amount(amount, "amount")
    years = _validate_years(years)
    rate = validate_rate(annual_rate, "annual_rate", MIN_COLA_RATE, MAX_COLA_RATE)
    return amount / (1 + rate) ** years


def resolve_projection_years(
    target_date: Optional[date] = None,
    current_date: Optional[date] = None,
    target_age: Optional[float] = None,
    current_age: Optional[float] = None,
    default_years: float = DEFAULT_PROJECTION_YEARS,
) -> tuple[float, ProjectionMethod]:
    """Years until retirement and which input they came from."""
    if target_date is not None:
        today = current_date or utc_today()
        years = years_between(today, target_date)
        if years < 0:
            raise InputValidationError(
                f"Retirement date {target_date.isoformat()} is in the past"
            )
        return years, ProjectionMethod.DATE_BASED

    if target_age is not None and current_age is not None:
        years = float(target_age) - float(current_age)
        if years < 0:
            raise InputValidationError(
                f"Retirement age {target_age} is before current age {current_age}"
            )
        return years, ProjectionMethod.AGE_BASED

    return _validate_years(default_years), ProjectionMethod.DEFAULT


def calculate_salary_projection(
    current_salary: float,
    annual_rate: float = DEFAULT_COLA_RATE,
    target_date: Optional[date] = None,
    current_date: Optional[date] = None,
    target_age: Optional[float] = None,
    current_age: Optional[float] = None,
    default_years: float = DEFAULT_PROJECTION_YEARS,
) -> SalaryProjectionResult:
    """Project a salary to retirement with annual COLA raises."""
    current_salary = validate_amount(current_salary, "current_salary")
    years, method = resolve_projection_years(
        target_date=target_date,
        current_date=current_date,
        target_age=target_age,
        current_age=current_age,
        default_years=default_years,
    )
    projected = project(current_salary, years, annual_rate)
    growth = projected - current_salary

    return SalaryProjectionResult(
        current_salary=round(current_salary, 2),
        projected_salary=round(projected, 2),
        years_to_retirement=round(years, 4),
        annual_rate=annual_rate,
        total_growth=round(growth, 2),
        total_growth_percent=round(growth / current_salary * 100, 4) if current_salary > 0 else 0.0,
        projection_method=method,
    )
