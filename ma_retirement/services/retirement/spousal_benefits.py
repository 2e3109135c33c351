"""Spousal and survivor Social Security benefits.

A spouse receives the larger of their own benefit and half the worker's
PIA. Survivors receive up to 100% of the deceased's benefit at their own
FRA, reduced by as much as 28.5% when claimed at 60.
"""

from pydantic import BaseModel

from ma_retirement.services.retirement.social_security_estimator import (
    EARLY_REDUCTION_BEYOND_36,
    adjust_for_claiming_age,
)
from ma_retirement.utils.input_validation import InputValidationError, validate_amount

SPOUSAL_SHARE = 0.50
# Spousal benefits are reduced 25/36 of 1% per month for the first 36 months early
SPOUSAL_REDUCTION_FIRST_36 = 25 / 36 / 100

SURVIVOR_EARLIEST_AGE = 60
SURVIVOR_MAX_REDUCTION = 0.285


class SpousalBenefit(BaseModel):
    own_benefit: float
    spousal_top_up: float
    total_benefit: float
    uses_spousal_benefit: bool


def spousal_reduction_factor(fra: float, claiming_age: float) -> float:
    months_early = max(round((fra - claiming_age) * 12), 0)
    reduction = min(months_early, 36) * SPOUSAL_REDUCTION_FIRST_36
    reduction += max(months_early - 36, 0) * EARLY_REDUCTION_BEYOND_36
    return 1 - reduction


def calculate_spousal_benefit(
    worker_pia: float,
    spouse_own_pia: float,
    spouse_fra: float,
    spouse_claiming_age: float,
) -> SpousalBenefit:
    """Monthly benefit for the lower-earning spouse.

    The top-up is half the worker's PIA less the spouse's own PIA, reduced for
    early claiming. Delayed credits never apply to the top-up.
    """
    worker_pia = validate_amount(worker_pia, "worker_pia")
    spouse_own_pia = validate_amount(spouse_own_pia, "spouse_own_pia")

    own = adjust_for_claiming_age(spouse_own_pia, spouse_fra, spouse_claiming_age)
    excess = max(worker_pia * SPOUSAL_SHARE - spouse_own_pia, 0.0)
    top_up = round(excess * spousal_reduction_factor(spouse_fra, spouse_claiming_age), 2)

    return SpousalBenefit(
        own_benefit=own,
        spousal_top_up=top_up,
        total_benefit=round(own + top_up, 2),
        uses_spousal_benefit=top_up > 0,
    )


def calculate_survivor_benefit(
    deceased_monthly_benefit: float,
    survivor_age: float,
    survivor_fra: float,
) -> float:
    """Monthly survivor benefit, reduced linearly from FRA down to age 60."""
    benefit = validate_amount(deceased_monthly_benefit, "deceased_monthly_benefit")
    if survivor_age < SURVIVOR_EARLIEST_AGE:
        raise InputValidationError(
            f"Survivor benefits start at age {SURVIVOR_EARLIEST_AGE}, got {survivor_age}"
        )
    if survivor_age >= survivor_fra:
        return round(benefit, 2)

    span = survivor_fra - SURVIVOR_EARLIEST_AGE
    reduction = SURVIVOR_MAX_REDUCTION * (survivor_fra - survivor_age) / span
    return round(benefit * (1 - reduction), 2)
