"""
Pension benefit services.

- Benefit factor tables by group, hire era and service length
- Option B / Option C reductions
- Annual allowance, eligibility and projection tables
- Retiree COLA on the statutory base
"""

from .benefit_factors import get_benefit_factor, minimum_retirement_age
from .cola_calculator import calculate_ma_pension_cola, project_ma_pension_cola
from .option_reductions import MatchKind, ReductionLookup, lookup_option_c_factor, option_b_reduction
from .pension_calculator import calculate_annual_pension, check_eligibility, generate_projection_table

__all__ = [
    "get_benefit_factor",
    "minimum_retirement_age",
    "calculate_ma_pension_cola",
    "project_ma_pension_cola",
    "MatchKind",
    "ReductionLookup",
    "lookup_option_c_factor",
    "option_b_reduction",
    "calculate_annual_pension",
    "check_eligibility",
    "generate_projection_table",
]
