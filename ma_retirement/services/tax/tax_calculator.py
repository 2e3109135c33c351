"""Federal and Massachusetts income tax on retirement income.

Amounts are annual dollars. Tax amounts are rounded to cents; rates are
fractions (0.22 for 22%).
"""

from typing import Union

from ma_retirement.schemas.common import FilingStatus
from ma_retirement.schemas.tax import (
    BracketTax,
    FederalTaxResult,
    RetirementTaxResult,
    SocialSecurityTaxResult,
    StateTaxResult,
)
from ma_retirement.services.tax.tax_tables import (
    FEDERAL_AGE_65_ADDITIONAL_DEDUCTION,
    FEDERAL_STANDARD_DEDUCTION,
    FEDERAL_TAX_BRACKETS,
    MA_AGE_65_EXEMPTION,
    MA_PERSONAL_EXEMPTION,
    MA_STANDARD_DEDUCTION,
    MA_TAX_RATE,
    SOCIAL_SECURITY_THRESHOLDS,
    SS_TIER_1_RATE,
    SS_TIER_2_RATE,
    ma_filer_count,
)
from ma_retirement.utils.input_validation import validate_amount, validate_filing_status

FilingStatusLike = Union[FilingStatus, str]


def federal_standard_deduction(filing_status: FilingStatusLike, is_age_65_plus: bool = False) -> float:
    status = validate_filing_status(filing_status)
    deduction = FEDERAL_STANDARD_DEDUCTION[status]
    if is_age_65_plus:
        deduction += FEDERAL_AGE_65_ADDITIONAL_DEDUCTION[status]
    return float(deduction)


def calculate_federal_tax(
    taxable_income: float,
    filing_status: FilingStatusLike = FilingStatus.SINGLE,
    apply_standard_deduction: bool = False,
    is_age_65_plus: bool = False,
) -> FederalTaxResult:
    """Progressive federal income tax.

    Args:
        taxable_income: Income after deductions, unless apply_standard_deduction
            is set, in which case this is income before the standard deduction.
        filing_status: Federal filing status.
        apply_standard_deduction: Subtract the filing-status standard deduction
            (plus the 65+ addition when is_age_65_plus) first.
        is_age_65_plus: Only used with apply_standard_deduction.

    Returns:
        FederalTaxResult with the per-bracket breakdown. Effective rate is
        measured against the income passed in.
    """
    status = validate_filing_status(filing_status)
    income = validate_amount(taxable_income, "taxable_income", allow_negative=True)

    deduction = federal_standard_deduction(status, is_age_65_plus) if apply_standard_deduction else 0.0
    taxable = max(0.0, income - deduction)

    schedule = FEDERAL_TAX_BRACKETS[status]
    brackets = []
    tax = 0.0
    marginal_rate = schedule[0][1]
    remaining = taxable
    lower = 0.0
    for upper, rate in schedule:
        if remaining <= 0:
            break
        width = remaining if upper is None else upper - lower
        portion = min(remaining, width)
        bracket_tax = portion * rate
        tax += bracket_tax
        brackets.append(BracketTax(rate=rate, income=round(portion, 2), tax=round(bracket_tax, 2)))
        marginal_rate = rate
        remaining -= portion
        lower = upper if upper is not None else lower

    return FederalTaxResult(
        filing_status=status,
        taxable_income=round(taxable, 2),
        standard_deduction=deduction,
        tax=round(tax, 2),
        effective_rate=tax / income if income > 0 else 0.0,
        marginal_rate=marginal_rate,
        brackets=brackets,
    )


def calculate_massachusetts_tax(
    adjusted_gross_income: float,
    filing_status: FilingStatusLike = FilingStatus.SINGLE,
    is_age_65_plus: bool = False,
) -> StateTaxResult:
    """Massachusetts flat-rate income tax.

    Social Security is not part of Massachusetts income; callers pass AGI
    without it.
    """
    status = validate_filing_status(filing_status)
    agi = validate_amount(adjusted_gross_income, "adjusted_gross_income", allow_negative=True)
    filers = ma_filer_count(status)

    standard_deduction = MA_STANDARD_DEDUCTION * filers
    personal_exemption = MA_PERSONAL_EXEMPTION * filers
    age_exemption = MA_AGE_65_EXEMPTION * filers if is_age_65_plus else 0

    taxable = max(0.0, agi - standard_deduction - personal_exemption - age_exemption)
    tax = taxable * MA_TAX_RATE

    return StateTaxResult(
        filing_status=status,
        adjusted_gross_income=round(agi, 2),
        standard_deduction=standard_deduction,
        personal_exemption=personal_exemption,
        age_exemption=age_exemption,
        taxable_income=round(taxable, 2),
        tax=round(tax, 2),
        rate=MA_TAX_RATE,
        effective_rate=tax / agi if agi > 0 else 0.0,
    )


def calculate_social_security_tax(
    social_security_benefit: float,
    other_income: float,
    filing_status: FilingStatusLike = FilingStatus.SINGLE,
) -> SocialSecurityTaxResult:
    """Taxable portion of Social Security benefits (IRS Pub. 915 worksheet).

    Provisional income is other income plus half the benefit. Above the base
    amount, half of the excess is taxable up to half the benefit; above the
    adjusted base, 85% of that excess is added. The taxable amount never
    exceeds 85% of the benefit.
    """
    status = validate_filing_status(filing_status)
    benefit = validate_amount(social_security_benefit, "social_security_benefit")
    other = validate_amount(other_income, "other_income", allow_negative=True)

    base, adjusted_base = SOCIAL_SECURITY_THRESHOLDS[status]
    provisional = other + benefit * 0.5

    taxable = 0.0
    if benefit > 0 and provisional > base:
        excess = provisional - base
        band = adjusted_base - base
        tier_1 = min(min(excess, band) * SS_TIER_1_RATE, benefit * SS_TIER_1_RATE)
        tier_2 = max(excess - band, 0.0) * SS_TIER_2_RATE
        taxable = min(tier_1 + tier_2, benefit * SS_TIER_2_RATE)

    return SocialSecurityTaxResult(
        social_security_benefit=round(benefit, 2),
        provisional_income=round(provisional, 2),
        taxable_amount=round(taxable, 2),
        taxable_percentage=round(taxable / benefit * 100, 4) if benefit > 0 else 0.0,
    )


def calculate_retirement_taxes(
    pension_income: float,
    social_security_income: float,
    other_income: float = 0.0,
    filing_status: FilingStatusLike = FilingStatus.SINGLE,
    is_age_65_plus: bool = False,
) -> RetirementTaxResult:
    """Federal, Massachusetts and total tax on a year of retirement income.

    Other income may be negative (net losses); tax never goes below zero and
    net income is reported as computed.
    """
    status = validate_filing_status(filing_status)
    pension = validate_amount(pension_income, "pension_income")
    social_security = validate_amount(social_security_income, "social_security_income")
    other = validate_amount(other_income, "other_income", allow_negative=True)

    ss_tax = calculate_social_security_tax(social_security, pension + other, status)
    federal = calculate_federal_tax(
        pension + other + ss_tax.taxable_amount,
        status,
        apply_standard_deduction=True,
        is_age_65_plus=is_age_65_plus,
    )
    state = calculate_massachusetts_tax(pension + other, status, is_age_65_plus)

    gross = pension + social_security + other
    total = round(federal.tax + state.tax, 2)

    return RetirementTaxResult(
        filing_status=status,
        pension_income=round(pension, 2),
        social_security_income=round(social_security, 2),
        other_income=round(other, 2),
        gross_income=round(gross, 2),
        social_security_taxable_amount=ss_tax.taxable_amount,
        social_security_taxable_percentage=ss_tax.taxable_percentage,
        federal_taxable_income=federal.taxable_income,
        federal_tax=federal.tax,
        state_tax=state.tax,
        total_tax=total,
        effective_rate=total / gross if gross > 0 else 0.0,
        marginal_rate=max(federal.marginal_rate, state.rate),
        net_income=round(round(gross, 2) - total, 2),
        federal=federal,
        state=state,
        social_security=ss_tax,
    )
