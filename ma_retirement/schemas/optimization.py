"""Retirement strategy optimization schemas."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer, model_validator

from ma_retirement.config import settings
from ma_retirement.schemas.common import (
    BenefitOption,
    InflationScenario,
    PensionColaMode,
    RiskTolerance,
)
from ma_retirement.schemas.pension import MemberProfile, PensionResult
from ma_retirement.schemas.tax import RetirementTaxResult


# --- Request ---


class OptimizationPreferences(BaseModel):
    """How the member wants strategies evaluated."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    risk_tolerance: RiskTolerance = RiskTolerance.MODERATE
    inflation_scenario: InflationScenario = InflationScenario.MODERATE
    include_tax_optimization: bool = True
    include_monte_carlo_analysis: bool = False
    retirement_income_goal: float = Field(0.0, ge=0, description="Monthly after-tax income goal")

    monte_carlo_trials: Optional[int] = Field(None, ge=1)
    random_seed: Optional[int] = None

    social_security_cola_rate: float = Field(0.025, ge=0, le=0.10)
    pension_cola_rate: float = Field(0.03, ge=0, le=0.10)
    pension_cola_mode: PensionColaMode = PensionColaMode.COMPOUND
    salary_growth_rate: float = Field(
        default_factory=lambda: settings.DEFAULT_SALARY_COLA_RATE, ge=0, le=0.10
    )


class OptimizationRequest(BaseModel):
    """Everything needed to compare claiming strategies for one member."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    profile: MemberProfile
    retirement_option: BenefitOption = BenefitOption.A
    beneficiary_age: Optional[float] = Field(
        None, ge=0, le=120, description="Option C beneficiary's current age"
    )
    retirement_goal_age: Optional[float] = Field(None, ge=40, le=80)
    life_expectancy: int = Field(default_factory=lambda: settings.DEFAULT_LIFE_EXPECTANCY, ge=60, le=110)
    other_retirement_income: float = Field(0.0, ge=0, description="Annual")
    savings_balance: float = Field(0.0, ge=0)
    preferences: OptimizationPreferences = Field(default_factory=OptimizationPreferences)

    @field_validator("retirement_option", mode="before")
    @classmethod
    def upper_option(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_life_expectancy(self):
        if self.life_expectancy <= self.profile.current_age:
            raise ValueError("life_expectancy must be greater than current_age")
        return self


# --- Result ---


class ScenarioResult(BaseModel):
    """One (pension age, Social Security age) strategy."""

    name: str
    pension_claiming_age: int
    social_security_claiming_age: int
    pension: PensionResult

    monthly_pension: float
    monthly_social_security: float
    monthly_spouse_social_security: float = 0.0
    total_monthly_income: float
    net_monthly_income: float
    steady_state_taxes: RetirementTaxResult

    lifetime_gross_income: float
    lifetime_taxes: float
    lifetime_net_income: float
    survivor_monthly_income: Optional[float] = None

    risk_flexibility_score: float
    score: float
    meets_income_goal: bool
    tradeoffs: List[str] = Field(default_factory=list)


class BreakEvenComparison(BaseModel):
    strategy_a: str
    strategy_b: str
    break_even_age: Optional[float] = None  # None when the curves never cross
    cumulative_a_at_life_expectancy: float
    cumulative_b_at_life_expectancy: float


class BreakEvenAnalysis(BaseModel):
    early_vs_full: BreakEvenComparison
    full_vs_delayed: BreakEvenComparison
    recommended_vs_alternative: Optional[BreakEvenComparison] = None


class TaxOptimization(BaseModel):
    current_annual_tax: float
    current_effective_rate: float
    current_marginal_rate: float
    current_lifetime_taxes: float
    lowest_tax_pension_age: int
    lowest_tax_social_security_age: int
    lowest_lifetime_taxes: float
    potential_lifetime_savings: float
    recommendations: List[str] = Field(default_factory=list)


class MonteCarloYear(BaseModel):
    age: int
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    depletion_pct: float


class MonteCarloResult(BaseModel):
    scenarios: int
    seed: Optional[int] = None
    success_rate: float
    probability_of_shortfall: float
    mean_ending_portfolio: float
    median_ending_portfolio: float
    std_ending_portfolio: float
    ending_percentiles: Dict[str, float] = Field(default_factory=dict)
    median_depletion_age: Optional[int] = None
    projections: List[MonteCarloYear] = Field(default_factory=list)

    market_return_mean: float
    market_volatility: float
    inflation_mean: float
    inflation_volatility: float


class OptimizationResult(BaseModel):
    recommended: ScenarioResult
    alternatives: List[ScenarioResult]
    break_even_analysis: BreakEvenAnalysis
    tax_optimization: Optional[TaxOptimization] = None
    monte_carlo_results: Optional[MonteCarloResult] = None
    scenarios_evaluated: int

    @model_serializer(mode="wrap")
    def drop_unrequested_analyses(self, handler):
        """Leave analyses the caller did not ask for out of the output entirely."""
        data = handler(self)
        for name in ("tax_optimization", "monte_carlo_results"):
            if data.get(name) is None:
                data.pop(name, None)
        return data
