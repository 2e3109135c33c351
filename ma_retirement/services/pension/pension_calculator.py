"""Massachusetts state employee pension calculator.

Annual allowance = average salary x years of service x benefit factor,
capped at 80% of average salary, then reduced for the chosen option.
Ineligible inputs produce a zero-benefit result with a message rather than
an exception.
"""

import logging
import math
from typing import Optional, Union

from ma_retirement.schemas.common import BenefitOption, HireEra, MembershipGroup
from ma_retirement.schemas.pension import (
    EligibilityResult,
    MemberProfile,
    PensionResult,
    ProjectionRow,
    ProjectionTable,
)
from ma_retirement.services.pension.benefit_factors import (
    GROUP_3_ANY_AGE_YEARS,
    get_benefit_factor,
)
from ma_retirement.services.pension.option_reductions import (
    SURVIVOR_SHARE,
    describe_option,
    lookup_option_c_factor,
    option_b_factor,
)
from ma_retirement.utils.input_validation import InputValidationError, validate_age

logger = logging.getLogger(__name__)

MAX_BENEFIT_PERCENTAGE = 0.80
MINIMUM_SERVICE_YEARS = 10
PRE_2012_ANY_AGE_SERVICE_YEARS = 20
PRE_2012_MINIMUM_AGE = 55

POST_2012_MINIMUM_AGES = {
    MembershipGroup.GROUP_1: 60,
    MembershipGroup.GROUP_2: 55,
    MembershipGroup.GROUP_3: 55,
    MembershipGroup.GROUP_4: 50,
}

# Last age shown in projection tables
PROJECTION_MAX_AGES = {
    MembershipGroup.GROUP_1: 70,
    MembershipGroup.GROUP_2: 68,
    MembershipGroup.GROUP_3: 68,
    MembershipGroup.GROUP_4: 65,
}
MAX_PROJECTION_ROWS = 30


def _money(value: float) -> float:
    return round(value, 2)


def coerce_option(option: Union[BenefitOption, str]) -> BenefitOption:
    if isinstance(option, BenefitOption):
        return option
    try:
        return BenefitOption(str(option).strip().upper())
    except ValueError:
        raise InputValidationError(f"Invalid retirement option {option!r}; expected A, B or C")


def coerce_profile(profile: Union[MemberProfile, dict]) -> MemberProfile:
    if isinstance(profile, MemberProfile):
        return profile
    return MemberProfile.model_validate(profile)


def check_eligibility(
    age: float,
    years_of_service: float,
    group,
    hire_era,
) -> EligibilityResult:
    """Statutory age/service test for a superannuation retirement."""
    group = MembershipGroup.coerce(group)
    hire_era = HireEra(hire_era)

    if group is MembershipGroup.GROUP_3 and years_of_service >= GROUP_3_ANY_AGE_YEARS:
        return EligibilityResult(eligible=True, minimum_age=None)

    if hire_era is HireEra.BEFORE_2012:
        if years_of_service >= PRE_2012_ANY_AGE_SERVICE_YEARS:
            return EligibilityResult(eligible=True, minimum_age=None)
        if age >= PRE_2012_MINIMUM_AGE and years_of_service >= MINIMUM_SERVICE_YEARS:
            return EligibilityResult(eligible=True, minimum_age=PRE_2012_MINIMUM_AGE)
        return EligibilityResult(
            eligible=False,
            minimum_age=PRE_2012_MINIMUM_AGE,
            message=(
                "Members hired before April 2, 2012 need 20 years of service, "
                f"or age {PRE_2012_MINIMUM_AGE} with {MINIMUM_SERVICE_YEARS} years "
                f"(age {age:g}, {years_of_service:g} years)"
            ),
        )

    minimum_age = POST_2012_MINIMUM_AGES[group]
    if years_of_service < MINIMUM_SERVICE_YEARS:
        return EligibilityResult(
            eligible=False,
            minimum_age=minimum_age,
            message=(
                f"Minimum {MINIMUM_SERVICE_YEARS} years of service required "
                f"(have {years_of_service:g})"
            ),
        )
    if age < minimum_age:
        return EligibilityResult(
            eligible=False,
            minimum_age=minimum_age,
            message=(
                f"Group {group.number} members hired on or after April 2, 2012 "
                f"must be at least {minimum_age} (age {age:g})"
            ),
        )
    return EligibilityResult(eligible=True, minimum_age=minimum_age)


def calculate_annual_pension(
    profile: Union[MemberProfile, dict],
    option: Union[BenefitOption, str],
    claiming_age: float,
    beneficiary_age: Optional[float] = None,
) -> PensionResult:
    """Annual and monthly allowance for a claiming age and benefit option.

    Args:
        profile: Member profile; years of service and average salary are
            taken as of the claiming age.
        option: "A", "B" or "C".
        claiming_age: Age at retirement.
        beneficiary_age: Option C beneficiary's age; defaults to the
            claiming age.

    Returns:
        PensionResult. When the member is not eligible, every amount is zero
        and eligibility_message explains why.
    """
    profile = coerce_profile(profile)
    option = coerce_option(option)
    claiming_age = validate_age(claiming_age, "claiming_age")
    if beneficiary_age is not None:
        beneficiary_age = validate_age(beneficiary_age, "beneficiary_age")

    common = dict(
        group=profile.group,
        hire_era=profile.hire_era,
        option=option,
        claiming_age=claiming_age,
        beneficiary_age=beneficiary_age if option is BenefitOption.C else None,
        years_of_service=profile.years_of_service,
        average_salary=profile.average_salary,
        option_description=describe_option(option),
    )

    eligibility = check_eligibility(
        claiming_age, profile.years_of_service, profile.group, profile.hire_era
    )
    if not eligibility.eligible:
        return PensionResult(eligible=False, eligibility_message=eligibility.message, **common)

    factor = get_benefit_factor(
        claiming_age, profile.group, profile.hire_era, profile.years_of_service
    )
    if factor is None:
        return PensionResult(
            eligible=False,
            eligibility_message=(
                f"No benefit factor available for age {math.floor(claiming_age)} "
                f"in Group {profile.group.number}"
            ),
            **common,
        )

    benefit_percentage = profile.years_of_service * factor
    uncapped = profile.average_salary * benefit_percentage
    max_allowed = profile.average_salary * MAX_BENEFIT_PERCENTAGE
    capped_at_maximum = uncapped > max_allowed
    base = min(uncapped, max_allowed)

    reduction_factor = 1.0
    lookup = None
    if option is BenefitOption.B:
        reduction_factor = option_b_factor(claiming_age)
    elif option is BenefitOption.C:
        lookup = lookup_option_c_factor(
            claiming_age, beneficiary_age if beneficiary_age is not None else claiming_age
        )
        reduction_factor = lookup.factor

    annual = base * reduction_factor

    result = PensionResult(
        eligible=True,
        benefit_factor=factor,
        benefit_percentage=round(benefit_percentage, 6),
        uncapped_annual_pension=_money(uncapped),
        max_pension_allowed=_money(max_allowed),
        capped_at_maximum=capped_at_maximum,
        base_annual_pension=_money(base),
        option_reduction_factor=reduction_factor,
        option_reduction_percent=round((1 - reduction_factor) * 100, 4),
        annual_pension=_money(annual),
        monthly_pension=_money(annual / 12),
        **common,
    )

    if lookup is not None:
        survivor_annual = annual * SURVIVOR_SHARE
        warning = None
        if lookup.approximated:
            warning = (
                f"Option C factor approximated ({lookup.match_kind.value} match"
                f"{', limited to the Option B factor' if lookup.capped_to_option_b else ''})"
            )
        result = result.model_copy(update={
            "survivor_annual_pension": _money(survivor_annual),
            "survivor_monthly_pension": _money(survivor_annual / 12),
            "reduction_match_kind": lookup.match_kind.value,
            "approximated": lookup.approximated,
            "warning_message": warning,
        })

    return result


def generate_projection_table(
    profile: Union[MemberProfile, dict],
    start_age: Optional[int] = None,
    option: Union[BenefitOption, str] = BenefitOption.A,
    beneficiary_age: Optional[float] = None,
) -> ProjectionTable:
    """Year-by-year allowance if the member keeps working and retires later.

    Service accrues one year per year of age past the member's current age.
    Ineligible years are skipped and the table ends once the 80% cap binds.
    """
    profile = coerce_profile(profile)
    option = coerce_option(option)
    start = start_age if start_age is not None else math.floor(profile.current_age)
    last_age = PROJECTION_MAX_AGES[profile.group]
    beneficiary_offset = (
        beneficiary_age - start if beneficiary_age is not None else None
    )

    table = ProjectionTable(option=option)
    for age in range(start, min(last_age, start + MAX_PROJECTION_ROWS - 1) + 1):
        service = profile.years_of_service + max(0.0, age - profile.current_age)
        projected = profile.model_copy(update={"years_of_service": service})
        beneficiary = age + beneficiary_offset if beneficiary_offset is not None else None
        pension = calculate_annual_pension(projected, option, age, beneficiary)
        if not pension.eligible:
            continue

        table.rows.append(ProjectionRow(
            age=age,
            years_of_service=round(service, 4),
            benefit_factor=pension.benefit_factor,
            benefit_percentage=pension.benefit_percentage,
            annual_pension=pension.annual_pension,
            monthly_pension=pension.monthly_pension,
            survivor_annual_pension=pension.survivor_annual_pension,
            survivor_monthly_pension=pension.survivor_monthly_pension,
            capped_at_maximum=pension.capped_at_maximum,
        ))
        if pension.capped_at_maximum:
            table.reached_maximum_at_age = age
            break

    logger.debug(f"Projection table for {profile.group.value}: {len(table.rows)} rows from age {start}")
    return table
