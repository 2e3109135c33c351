"""Public entry points of the calculation engine.

Every function is a pure calculation over its arguments. The optimizer
accepts an optional cache; identical requests return identical results
whether or not they are served from it.
"""

import time
from typing import Optional, Union

import numpy as np

from ma_retirement.core.cache import CalculationCache, compute_fingerprint
from ma_retirement.core.logging_config import get_logger, log_calculation
from ma_retirement.schemas.common import BenefitOption, FilingStatus, HireEra, MembershipGroup
from ma_retirement.schemas.optimization import OptimizationRequest, OptimizationResult
from ma_retirement.schemas.pension import MemberProfile, PensionResult
from ma_retirement.schemas.tax import (
    FederalTaxResult,
    RetirementTaxResult,
    SocialSecurityTaxResult,
    StateTaxResult,
)
from ma_retirement.services.pension import benefit_factors, pension_calculator
from ma_retirement.services.retirement.retirement_optimizer import RetirementOptimizer
from ma_retirement.services.tax import tax_calculator

logger = get_logger(__name__)


def calculate_annual_pension(
    profile: Union[MemberProfile, dict],
    option: Union[BenefitOption, str],
    claiming_age: float,
    beneficiary_age: Optional[float] = None,
) -> PensionResult:
    return pension_calculator.calculate_annual_pension(profile, option, claiming_age, beneficiary_age)


def get_benefit_factor(
    age: float,
    group: Union[MembershipGroup, str, int],
    hire_era: Union[HireEra, str],
    years_of_service: float = 0.0,
) -> Optional[float]:
    """Benefit factor, or None when the member has no factor at this age."""
    return benefit_factors.get_benefit_factor(age, group, hire_era, years_of_service)


def calculate_federal_tax(
    taxable_income: float,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
) -> FederalTaxResult:
    return tax_calculator.calculate_federal_tax(taxable_income, filing_status)


def calculate_massachusetts_tax(
    adjusted_gross_income: float,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    is_age_65_plus: bool = False,
) -> StateTaxResult:
    return tax_calculator.calculate_massachusetts_tax(adjusted_gross_income, filing_status, is_age_65_plus)


def calculate_social_security_tax(
    social_security_benefit: float,
    other_income: float,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
) -> SocialSecurityTaxResult:
    return tax_calculator.calculate_social_security_tax(social_security_benefit, other_income, filing_status)


def calculate_retirement_taxes(
    pension_income: float,
    social_security_income: float,
    other_income: float = 0.0,
    filing_status: Union[FilingStatus, str] = FilingStatus.SINGLE,
    is_age_65_plus: bool = False,
) -> RetirementTaxResult:
    return tax_calculator.calculate_retirement_taxes(
        pension_income, social_security_income, other_income, filing_status, is_age_65_plus
    )


def optimize_retirement_strategy(
    request: Union[OptimizationRequest, dict],
    *,
    rng: Optional[np.random.Generator] = None,
    cache: Optional[CalculationCache] = None,
    optimizer: Optional[RetirementOptimizer] = None,
) -> OptimizationResult:
    """Recommend pension and Social Security claiming ages.

    Args:
        request: Member profile, income data and preferences.
        rng: Generator for the Monte Carlo analysis. Results drawn from a
            caller-supplied generator are not cached.
        cache: Optional result cache keyed by the request fingerprint.
        optimizer: Preconfigured optimizer (thread pool size, age bounds).

    Returns:
        OptimizationResult with the recommendation and three alternatives.
    """
    start_time = time.monotonic()
    if not isinstance(request, OptimizationRequest):
        request = OptimizationRequest.model_validate(request)

    use_cache = cache is not None and rng is None
    key = compute_fingerprint(request.model_dump_json(), namespace="optimize") if use_cache else None

    if use_cache:
        cached = cache.get(key)
        if cached is not None:
            result = OptimizationResult.model_validate_json(cached)
            log_calculation(
                logger, "optimize_retirement_strategy",
                (time.monotonic() - start_time) * 1000, cache_hit=True,
            )
            return result

    result = (optimizer or RetirementOptimizer()).optimize(request, rng=rng)

    if use_cache:
        cache.set(key, result.model_dump_json())

    log_calculation(
        logger,
        "optimize_retirement_strategy",
        (time.monotonic() - start_time) * 1000,
        scenarios_evaluated=result.scenarios_evaluated,
        pension_age=result.recommended.pension_claiming_age,
        social_security_age=result.recommended.social_security_claiming_age,
    )
    return result
