"""Massachusetts retiree cost-of-living adjustments.

The annual COLA is granted on only the first $13,000 of the allowance, so
at the usual 3% rate the increase is at most $390 a year no matter how
large the pension is.
"""

from ma_retirement.schemas.projection import ColaProjection, ColaYear
from ma_retirement.utils.input_validation import (
    InputValidationError,
    validate_amount,
    validate_rate,
)

MA_COLA_RATE = 0.03
MA_COLA_BASE = 13_000


def calculate_ma_pension_cola(
    annual_pension: float,
    rate: float = MA_COLA_RATE,
    base: float = MA_COLA_BASE,
) -> float:
    """One year's COLA increase in dollars."""
    annual_pension = validate_amount(annual_pension, "annual_pension")
    rate = validate_rate(rate, "cola_rate")
    base = validate_amount(base, "cola_base")
    return min(annual_pension, base) * rate


def ma_pension_after_years(
    initial_pension: float,
    years: int,
    rate: float = MA_COLA_RATE,
    base: float = MA_COLA_BASE,
) -> float:
    """Allowance after `years` annual COLAs."""
    pension = initial_pension
    for _ in range(years):
        pension += calculate_ma_pension_cola(pension, rate, base)
    return pension


def project_ma_pension_cola(
    initial_pension: float,
    years: int,
    rate: float = MA_COLA_RATE,
    base: float = MA_COLA_BASE,
) -> ColaProjection:
    """Year-by-year allowance under the base-capped COLA."""
    initial_pension = validate_amount(initial_pension, "initial_pension")
    if years < 0:
        raise InputValidationError(f"years must not be negative, got {years}")

    rows = []
    pension = initial_pension
    for year in range(1, years + 1):
        increase = calculate_ma_pension_cola(pension, rate, base)
        pension += increase
        rows.append(ColaYear(
            year=year,
            annual_pension=round(pension, 2),
            cola_increase=round(increase, 2),
            cumulative_increase=round(pension - initial_pension, 2),
        ))

    return ColaProjection(
        initial_annual_pension=round(initial_pension, 2),
        final_annual_pension=round(pension, 2),
        total_increase=round(pension - initial_pension, 2),
        years=rows,
    )
