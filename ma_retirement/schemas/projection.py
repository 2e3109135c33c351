"""Salary and COLA projection schemas."""

import enum
from typing import List

from pydantic import BaseModel, Field


class ProjectionMethod(str, enum.Enum):
    DATE_BASED = "date-based"
    AGE_BASED = "age-based"
    DEFAULT = "default"


class SalaryProjectionResult(BaseModel):
    current_salary: float
    projected_salary: float
    years_to_retirement: float
    annual_rate: float
    total_growth: float
    total_growth_percent: float
    projection_method: ProjectionMethod


class ColaYear(BaseModel):
    """Pension amount for one year after retirement."""

    year: int
    annual_pension: float
    cola_increase: float
    cumulative_increase: float


class ColaProjection(BaseModel):
    initial_annual_pension: float
    final_annual_pension: float
    total_increase: float
    years: List[ColaYear] = Field(default_factory=list)
