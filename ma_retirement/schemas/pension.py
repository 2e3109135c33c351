"""Pension calculation schemas."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ma_retirement.schemas.common import (
    BenefitOption,
    FilingStatus,
    HireEra,
    MembershipGroup,
)
from ma_retirement.utils.datetime_utils import hire_era_from_membership_date
from ma_retirement.utils.input_validation import validate_filing_status


class MemberProfile(BaseModel):
    """A retirement system member as seen by the calculators."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    birth_year: int = Field(ge=1900, le=2100)
    current_age: float = Field(ge=0, le=120)
    group: MembershipGroup
    hire_era: HireEra
    membership_date: Optional[date] = None
    years_of_service: float = Field(ge=0, le=60)
    average_salary: float = Field(ge=0, description="Average of the highest three years")
    filing_status: FilingStatus = FilingStatus.SINGLE

    # Social Security
    social_security_pia: Optional[float] = Field(None, ge=0, description="Monthly PIA at FRA")
    current_salary: Optional[float] = Field(None, ge=0)

    # Spouse (joint filers)
    spouse_birth_year: Optional[int] = Field(None, ge=1900, le=2100)
    spouse_social_security_pia: Optional[float] = Field(None, ge=0)
    spouse_claiming_age: Optional[float] = Field(None, ge=62, le=70)

    @model_validator(mode="before")
    @classmethod
    def derive_hire_era(cls, data):
        """Fill hire_era from membership_date when only the date is supplied."""
        if isinstance(data, dict) and data.get("hire_era") is None and data.get("membership_date"):
            membership_date = data["membership_date"]
            if isinstance(membership_date, str):
                membership_date = date.fromisoformat(membership_date)
            data = {**data, "hire_era": hire_era_from_membership_date(membership_date)}
        return data

    @field_validator("group", mode="before")
    @classmethod
    def coerce_group(cls, v):
        return MembershipGroup.coerce(v)

    @field_validator("filing_status", mode="before")
    @classmethod
    def coerce_filing_status(cls, v):
        return validate_filing_status(v)


class EligibilityResult(BaseModel):
    """Outcome of the statutory age/service eligibility check."""

    eligible: bool
    message: Optional[str] = None
    minimum_age: Optional[int] = None


class PensionResult(BaseModel):
    """Annual pension for one claiming age and benefit option."""

    eligible: bool
    eligibility_message: Optional[str] = None
    group: MembershipGroup
    hire_era: HireEra
    option: BenefitOption
    claiming_age: float
    beneficiary_age: Optional[float] = None
    years_of_service: float
    average_salary: float

    benefit_factor: float = 0.0
    benefit_percentage: float = 0.0  # years x factor, never capped
    uncapped_annual_pension: float = 0.0
    max_pension_allowed: float = 0.0
    capped_at_maximum: bool = False
    base_annual_pension: float = 0.0

    option_reduction_factor: float = 1.0
    option_reduction_percent: float = 0.0
    option_description: str = ""
    annual_pension: float = 0.0
    monthly_pension: float = 0.0

    survivor_annual_pension: Optional[float] = None
    survivor_monthly_pension: Optional[float] = None
    reduction_match_kind: Optional[str] = None
    approximated: bool = False
    warning_message: Optional[str] = None


class ProjectionRow(BaseModel):
    """One row of the year-by-year pension projection table."""

    age: int
    years_of_service: float
    benefit_factor: float
    benefit_percentage: float
    annual_pension: float
    monthly_pension: float
    survivor_annual_pension: Optional[float] = None
    survivor_monthly_pension: Optional[float] = None
    capped_at_maximum: bool = False


class ProjectionTable(BaseModel):
    option: BenefitOption
    rows: List[ProjectionRow] = Field(default_factory=list)
    reached_maximum_at_age: Optional[int] = None
