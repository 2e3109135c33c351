"""
Massachusetts state-employee retirement engine.

Pension benefits for the four MSRB groups and three payment options,
federal and Massachusetts tax on retirement income, and claiming-age
strategy optimization.
"""

from .engine import (
    calculate_annual_pension,
    calculate_federal_tax,
    calculate_massachusetts_tax,
    calculate_retirement_taxes,
    calculate_social_security_tax,
    get_benefit_factor,
    optimize_retirement_strategy,
)
from .schemas.common import BenefitOption, FilingStatus, HireEra, MembershipGroup
from .schemas.optimization import OptimizationPreferences, OptimizationRequest
from .schemas.pension import MemberProfile
from .utils.input_validation import InputValidationError

__version__ = "1.0.0"

__all__ = [
    "calculate_annual_pension",
    "calculate_federal_tax",
    "calculate_massachusetts_tax",
    "calculate_retirement_taxes",
    "calculate_social_security_tax",
    "get_benefit_factor",
    "optimize_retirement_strategy",
    "BenefitOption",
    "FilingStatus",
    "HireEra",
    "MembershipGroup",
    "MemberProfile",
    "OptimizationPreferences",
    "OptimizationRequest",
    "InputValidationError",
]
