"""Tax calculation schemas."""

from typing import List

from pydantic import BaseModel, Field

from ma_retirement.schemas.common import FilingStatus


class BracketTax(BaseModel):
    """Income taxed within one bracket."""

    rate: float
    income: float
    tax: float


class FederalTaxResult(BaseModel):
    filing_status: FilingStatus
    taxable_income: float
    standard_deduction: float = 0.0
    tax: float
    effective_rate: float
    marginal_rate: float
    brackets: List[BracketTax] = Field(default_factory=list)


class StateTaxResult(BaseModel):
    filing_status: FilingStatus
    adjusted_gross_income: float
    standard_deduction: float
    personal_exemption: float
    age_exemption: float
    taxable_income: float
    tax: float
    rate: float
    effective_rate: float


class SocialSecurityTaxResult(BaseModel):
    social_security_benefit: float
    provisional_income: float
    taxable_amount: float
    taxable_percentage: float  # 0-85


class RetirementTaxResult(BaseModel):
    filing_status: FilingStatus
    pension_income: float
    social_security_income: float
    other_income: float
    gross_income: float

    social_security_taxable_amount: float
    social_security_taxable_percentage: float
    federal_taxable_income: float

    federal_tax: float
    state_tax: float
    total_tax: float
    effective_rate: float
    marginal_rate: float
    net_income: float

    federal: FederalTaxResult
    state: StateTaxResult
    social_security: SocialSecurityTaxResult
