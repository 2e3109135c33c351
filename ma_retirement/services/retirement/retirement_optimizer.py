"""Retirement claiming strategy optimizer.

Evaluates every (pension claiming age, Social Security claiming age) pair,
projects after-tax income year by year to life expectancy and ranks the
pairs. A score blends lifetime net income, steady-state monthly income and
a risk/flexibility measure (income gap after leaving work, income left at
life expectancy).
"""

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

from ma_retirement.config import settings
from ma_retirement.schemas.common import BenefitOption, PensionColaMode
from ma_retirement.schemas.optimization import (
    BreakEvenAnalysis,
    BreakEvenComparison,
    OptimizationRequest,
    OptimizationResult,
    ScenarioResult,
    TaxOptimization,
)
from ma_retirement.schemas.pension import PensionResult
from ma_retirement.services.pension.benefit_factors import minimum_retirement_age
from ma_retirement.services.pension.cola_calculator import MA_COLA_BASE, calculate_ma_pension_cola
from ma_retirement.services.pension.pension_calculator import calculate_annual_pension
from ma_retirement.services.projection.salary_projection import project
from ma_retirement.services.retirement.monte_carlo_service import RetirementMonteCarloService
from ma_retirement.services.retirement.social_security_estimator import (
    EARLIEST_CLAIMING_AGE,
    LATEST_CLAIMING_AGE,
    adjust_for_claiming_age,
    full_retirement_claiming_age,
    get_fra,
    resolve_pia,
)
from ma_retirement.services.retirement.spousal_benefits import (
    calculate_spousal_benefit,
    calculate_survivor_benefit,
)
from ma_retirement.services.tax.tax_calculator import calculate_retirement_taxes

logger = logging.getLogger(__name__)

ALTERNATIVE_COUNT = 3
BREAK_EVEN_HORIZON_AGE = 100

# Composite score weights
LIFETIME_WEIGHT = 60
STEADY_INCOME_WEIGHT = 25
FLEXIBILITY_WEIGHT = 15
GOAL_BONUS = 5
MAX_PENALIZED_GAP_YEARS = 10

# Lowest-tax alternatives must keep this share of the recommendation's lifetime net income
TAX_ALTERNATIVE_MIN_NET_RATIO = 0.95
QCD_AGE = 70.5


@dataclass
class _Household:
    """Per-request values shared by every grid cell."""

    request: OptimizationRequest
    fra: float
    pia: float
    start_age: int
    spouse_age_offset: float = 0.0
    spouse_own_monthly: float = 0.0
    spouse_top_up_monthly: float = 0.0
    spouse_start_age: Optional[float] = None
    spouse_fra: Optional[float] = None


@dataclass
class _Evaluation:
    pension_age: int
    ss_age: int
    pension: PensionResult
    monthly_ss: float
    monthly_spouse_ss: float
    lifetime_gross: float
    lifetime_taxes: float
    lifetime_net: float
    steady_gross: float
    steady_net: float
    final_year_net: float
    income_start_age: int
    score: float = 0.0
    flexibility: float = 0.0
    yearly_net: list = field(default_factory=list)

    @property
    def key(self) -> tuple:
        return self.pension_age, self.ss_age


class RetirementOptimizer:
    """Grid search over pension and Social Security claiming ages."""

    def __init__(
        self,
        max_workers: Optional[int] = None,
        min_pension_age: Optional[int] = None,
        max_pension_age: Optional[int] = None,
    ):
        self.max_workers = max_workers or settings.OPTIMIZER_MAX_WORKERS
        self.min_pension_age = min_pension_age or settings.OPTIMIZER_MIN_PENSION_AGE
        self.max_pension_age = max_pension_age or settings.OPTIMIZER_MAX_PENSION_AGE

    # ── Public API ─────────────────────────────────────────────────────────────

    def optimize(
        self,
        request: Union[OptimizationRequest, dict],
        rng: Optional[np.random.Generator] = None,
    ) -> OptimizationResult:
        """Rank claiming strategies and return the best with three alternatives."""
        start_time = time.monotonic()
        if not isinstance(request, OptimizationRequest):
            request = OptimizationRequest.model_validate(request)
        prefs = request.preferences

        household = self._build_household(request)
        pension_ages = self.pension_age_grid(request)
        pensions = {age: self._pension_at(request, age) for age in pension_ages}

        cells = [(p, s) for p in pension_ages for s in social_security_age_grid(request)]
        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                evaluations = list(executor.map(
                    lambda cell: self._evaluate(household, pensions[cell[0]], *cell), cells
                ))
        else:
            evaluations = [self._evaluate(household, pensions[p], p, s) for p, s in cells]

        self._score(household, evaluations)
        ranked = sorted(evaluations, key=lambda e: (-e.score, e.pension_age, e.ss_age))
        best, alternatives = ranked[0], ranked[1:1 + ALTERNATIVE_COUNT]

        recommended = self._to_scenario(household, best)
        alternative_results = [self._to_scenario(household, alt, reference=best) for alt in alternatives]

        break_even = self._break_even_analysis(household, best, alternatives[0] if alternatives else None)

        tax_optimization = None
        if prefs.include_tax_optimization:
            tax_optimization = self._tax_optimization(household, best, recommended, evaluations)

        monte_carlo = None
        if prefs.include_monte_carlo_analysis:
            monte_carlo = self._monte_carlo(household, best, rng)

        logger.info(
            f"Optimized {len(evaluations)} strategies in "
            f"{(time.monotonic() - start_time) * 1000:.1f}ms: pension {best.pension_age}, "
            f"Social Security {best.ss_age}"
        )

        return OptimizationResult(
            recommended=recommended,
            alternatives=alternative_results,
            break_even_analysis=break_even,
            tax_optimization=tax_optimization,
            monte_carlo_results=monte_carlo,
            scenarios_evaluated=len(evaluations),
        )

    def pension_age_grid(self, request: OptimizationRequest) -> list[int]:
        """Whole pension claiming ages still ahead of the member, through the maximum.

        Starts at the later of the statutory floor and the member's current
        age. Near or past the maximum the grid runs on beyond it, so there are
        always enough strategies for a recommendation and its alternatives.
        """
        floor_age = max(self.statutory_floor(request), _whole_current_age(request))
        last_age = self.max_pension_age
        ss_count = len(social_security_age_grid(request))
        if (last_age - floor_age + 1) * ss_count < ALTERNATIVE_COUNT + 1:
            last_age = floor_age + ALTERNATIVE_COUNT
        return list(range(floor_age, last_age + 1))

    def statutory_floor(self, request: OptimizationRequest) -> int:
        """Earliest pension age the grid allows, ignoring the member's current age."""
        profile = request.profile
        floor_age = max(self.min_pension_age, minimum_retirement_age(profile.group, profile.hire_era))
        return min(floor_age, self.max_pension_age)

    # ── Grid evaluation ───────────────────────────────────────────────────────

    def _build_household(self, request: OptimizationRequest) -> _Household:
        profile = request.profile
        fra = get_fra(profile.birth_year)
        pia = resolve_pia(
            profile.birth_year,
            profile.current_age,
            manual_pia=profile.social_security_pia,
            current_salary=profile.current_salary,
        )
        household = _Household(
            request=request,
            fra=fra,
            pia=pia,
            start_age=max(
                min(self.pension_age_grid(request)[0], social_security_age_grid(request)[0]),
                _whole_current_age(request),
            ),
        )

        if profile.spouse_social_security_pia is not None or profile.spouse_birth_year is not None:
            spouse_birth_year = profile.spouse_birth_year or profile.birth_year
            spouse_fra = get_fra(spouse_birth_year)
            spouse_claim = profile.spouse_claiming_age or full_retirement_claiming_age(spouse_fra)
            spousal = calculate_spousal_benefit(
                pia, profile.spouse_social_security_pia or 0.0, spouse_fra, spouse_claim
            )
            household.spouse_age_offset = spouse_birth_year - profile.birth_year
            household.spouse_own_monthly = spousal.own_benefit
            household.spouse_top_up_monthly = spousal.spousal_top_up
            household.spouse_start_age = spouse_claim + household.spouse_age_offset
            household.spouse_fra = spouse_fra
        return household

    @staticmethod
    def _pension_at(request: OptimizationRequest, pension_age: int) -> PensionResult:
        """Pension if the member works until pension_age, accruing service and raises."""
        profile = request.profile
        years_worked = max(0.0, pension_age - profile.current_age)
        projected = profile.model_copy(update={
            "years_of_service": profile.years_of_service + years_worked,
            "average_salary": project(
                profile.average_salary, years_worked, request.preferences.salary_growth_rate
            ),
        })
        beneficiary_age = None
        if request.retirement_option is BenefitOption.C:
            current = request.beneficiary_age if request.beneficiary_age is not None else profile.current_age
            beneficiary_age = current + (pension_age - profile.current_age)
        return calculate_annual_pension(projected, request.retirement_option, pension_age, beneficiary_age)

    @staticmethod
    def _pension_series(household: _Household, pension: PensionResult, years: int) -> list[float]:
        """Annual pension for each year after the claiming age, COLA included."""
        prefs = household.request.preferences
        series = []
        amount = pension.annual_pension
        for _ in range(max(years, 0)):
            series.append(amount)
            if prefs.pension_cola_mode is PensionColaMode.MA_BASE:
                amount += calculate_ma_pension_cola(amount, prefs.pension_cola_rate, MA_COLA_BASE)
            else:
                amount *= 1 + prefs.pension_cola_rate
        return series

    def _yearly_incomes(
        self,
        household: _Household,
        pension: PensionResult,
        pension_age: int,
        ss_age: int,
        end_age: int,
    ) -> list[tuple[int, float, float, float]]:
        """(age, pension, member SS, spouse SS) per year from the household start age.

        The start age is never before the member's current age, so income for
        years already lived is not counted.
        """
        prefs = household.request.preferences
        cola = prefs.social_security_cola_rate
        monthly_ss = adjust_for_claiming_age(household.pia, household.fra, ss_age)
        pension_series = self._pension_series(household, pension, end_age - pension_age)

        rows = []
        for age in range(household.start_age, end_age):
            pension_income = pension_series[age - pension_age] if age >= pension_age else 0.0
            ss_income = monthly_ss * 12 * (1 + cola) ** (age - ss_age) if age >= ss_age else 0.0

            spouse_income = 0.0
            if household.spouse_start_age is not None and age >= household.spouse_start_age:
                spouse_monthly = household.spouse_own_monthly
                if age >= ss_age:
                    spouse_monthly += household.spouse_top_up_monthly
                spouse_income = spouse_monthly * 12 * (1 + cola) ** (age - household.spouse_start_age)
            rows.append((age, pension_income, ss_income, spouse_income))
        return rows

    def _yearly_taxes(
        self,
        household: _Household,
        pension: PensionResult,
        pension_age: int,
        ss_age: int,
        end_age: int,
    ):
        """Yield each year's RetirementTaxResult, or None for a year with no income."""
        request = household.request
        other = request.other_retirement_income
        for age, pension_income, ss_income, spouse_income in self._yearly_incomes(
            household, pension, pension_age, ss_age, end_age
        ):
            if pension_income + ss_income + spouse_income + other <= 0:
                yield None
                continue
            yield calculate_retirement_taxes(
                pension_income, ss_income + spouse_income, other,
                request.profile.filing_status, age >= 65,
            )

    def _evaluate(
        self,
        household: _Household,
        pension: PensionResult,
        pension_age: int,
        ss_age: int,
    ) -> _Evaluation:
        request = household.request
        monthly_ss = adjust_for_claiming_age(household.pia, household.fra, ss_age)

        lifetime_gross = lifetime_taxes = 0.0
        yearly_net = []
        for taxes in self._yearly_taxes(household, pension, pension_age, ss_age, request.life_expectancy):
            if taxes is None:
                yearly_net.append(0.0)
                continue
            lifetime_gross += taxes.gross_income
            lifetime_taxes += taxes.total_tax
            yearly_net.append(taxes.net_income)

        steady = self._steady_state_taxes(household, pension, pension_age, ss_age)
        income_start = max(min(pension_age if pension.eligible else ss_age, ss_age), household.start_age)

        return _Evaluation(
            pension_age=pension_age,
            ss_age=ss_age,
            pension=pension,
            monthly_ss=monthly_ss,
            monthly_spouse_ss=round(household.spouse_own_monthly + household.spouse_top_up_monthly, 2),
            lifetime_gross=round(lifetime_gross, 2),
            lifetime_taxes=round(lifetime_taxes, 2),
            lifetime_net=round(lifetime_gross - lifetime_taxes, 2),
            steady_gross=steady.gross_income,
            steady_net=steady.net_income,
            final_year_net=yearly_net[-1] if yearly_net else 0.0,
            income_start_age=income_start,
            yearly_net=yearly_net,
        )

    @staticmethod
    def _steady_state_taxes(household: _Household, pension: PensionResult, pension_age: int, ss_age: int):
        """Taxes on the first year in which every income source has started."""
        request = household.request
        spouse_annual = 0.0
        if household.spouse_start_age is not None:
            spouse_annual = (household.spouse_own_monthly + household.spouse_top_up_monthly) * 12
        return calculate_retirement_taxes(
            pension.annual_pension,
            adjust_for_claiming_age(household.pia, household.fra, ss_age) * 12 + spouse_annual,
            request.other_retirement_income,
            request.profile.filing_status,
            max(pension_age, ss_age) >= 65,
        )

    def _score(self, household: _Household, evaluations: list[_Evaluation]) -> None:
        request = household.request
        goal_age = request.retirement_goal_age or self.pension_age_grid(request)[0]
        goal_age = max(goal_age, household.start_age)
        goal_monthly = request.preferences.retirement_income_goal

        best_lifetime = max(e.lifetime_net for e in evaluations)
        best_steady = max(e.steady_net for e in evaluations)
        best_final = max(e.final_year_net for e in evaluations)

        def ratio(value: float, best: float) -> float:
            return value / best if best > 0 else 0.0

        for e in evaluations:
            gap_years = min(max(0.0, e.income_start_age - goal_age), MAX_PENALIZED_GAP_YEARS)
            e.flexibility = 100 * (
                0.5 * (1 - gap_years / MAX_PENALIZED_GAP_YEARS)
                + 0.5 * ratio(e.final_year_net, best_final)
            )
            meets_goal = goal_monthly > 0 and e.steady_net / 12 >= goal_monthly
            e.score = (
                LIFETIME_WEIGHT * ratio(e.lifetime_net, best_lifetime)
                + STEADY_INCOME_WEIGHT * ratio(e.steady_net, best_steady)
                + FLEXIBILITY_WEIGHT * e.flexibility / 100
                + (GOAL_BONUS if meets_goal else 0)
            )

    # ── Presentation ──────────────────────────────────────────────────────────

    def _scenario_name(self, household: _Household, pension_age: int, ss_age: int) -> str:
        grid_floor = self.statutory_floor(household.request)
        if pension_age == grid_floor:
            pension_label = "Early Pension"
        elif pension_age < 65:
            pension_label = "Standard Pension"
        else:
            pension_label = "Delayed Pension"

        full_age = full_retirement_claiming_age(household.fra)
        if ss_age < full_age:
            ss_label = "Early Social Security"
        elif ss_age < LATEST_CLAIMING_AGE:
            ss_label = "Full-Age Social Security"
        else:
            ss_label = "Delayed Social Security"
        return f"{pension_label} at {pension_age} + {ss_label} at {ss_age}"

    def _tradeoffs(
        self,
        household: _Household,
        evaluation: _Evaluation,
        reference: Optional[_Evaluation],
    ) -> list[str]:
        tradeoffs = []
        if reference is not None:
            monthly_diff = (evaluation.steady_net - reference.steady_net) / 12
            lifetime_diff = evaluation.lifetime_net - reference.lifetime_net
            tradeoffs.append(
                f"Steady monthly net income ${abs(monthly_diff):,.0f} "
                f"{'higher' if monthly_diff >= 0 else 'lower'} than the recommended strategy"
            )
            tradeoffs.append(
                f"Lifetime net income ${abs(lifetime_diff):,.0f} "
                f"{'higher' if lifetime_diff >= 0 else 'lower'} through age {household.request.life_expectancy}"
            )
            start_diff = evaluation.income_start_age - reference.income_start_age
            if start_diff:
                tradeoffs.append(
                    f"Income starts {abs(start_diff)} year{'s' if abs(start_diff) != 1 else ''} "
                    f"{'later' if start_diff > 0 else 'earlier'}"
                )

        if not evaluation.pension.eligible:
            tradeoffs.append(f"Not eligible for a pension at {evaluation.pension_age}")
        elif evaluation.pension_age == self.statutory_floor(household.request):
            tradeoffs.append("Smaller pension from fewer years of service and a lower age factor")
        if evaluation.pension.capped_at_maximum:
            tradeoffs.append("Pension reaches the 80% maximum; further service adds nothing")
        if evaluation.ss_age == EARLIEST_CLAIMING_AGE:
            tradeoffs.append("Social Security permanently reduced for claiming at 62")
        elif evaluation.ss_age == LATEST_CLAIMING_AGE:
            tradeoffs.append("Largest Social Security benefit, but nothing until 70")
        return tradeoffs

    def _to_scenario(
        self,
        household: _Household,
        evaluation: _Evaluation,
        reference: Optional[_Evaluation] = None,
    ) -> ScenarioResult:
        steady = self._steady_state_taxes(
            household, evaluation.pension, evaluation.pension_age, evaluation.ss_age
        )
        goal_monthly = household.request.preferences.retirement_income_goal

        survivor = None
        if household.spouse_fra is not None:
            survivor_ss = calculate_survivor_benefit(
                evaluation.monthly_ss, household.spouse_fra, household.spouse_fra
            )
            survivor = round(
                (evaluation.pension.survivor_monthly_pension or 0.0)
                + max(survivor_ss, household.spouse_own_monthly),
                2,
            )

        return ScenarioResult(
            name=self._scenario_name(household, evaluation.pension_age, evaluation.ss_age),
            pension_claiming_age=evaluation.pension_age,
            social_security_claiming_age=evaluation.ss_age,
            pension=evaluation.pension,
            monthly_pension=evaluation.pension.monthly_pension,
            monthly_social_security=evaluation.monthly_ss,
            monthly_spouse_social_security=evaluation.monthly_spouse_ss,
            total_monthly_income=round(steady.gross_income / 12, 2),
            net_monthly_income=round(steady.net_income / 12, 2),
            steady_state_taxes=steady,
            lifetime_gross_income=evaluation.lifetime_gross,
            lifetime_taxes=evaluation.lifetime_taxes,
            lifetime_net_income=evaluation.lifetime_net,
            survivor_monthly_income=survivor,
            risk_flexibility_score=round(evaluation.flexibility, 2),
            score=round(evaluation.score, 4),
            meets_income_goal=goal_monthly > 0 and steady.net_income / 12 >= goal_monthly,
            tradeoffs=self._tradeoffs(household, evaluation, reference),
        )

    # ── Break-even ────────────────────────────────────────────────────────────

    def _break_even_analysis(
        self,
        household: _Household,
        best: _Evaluation,
        alternative: Optional[_Evaluation],
    ) -> BreakEvenAnalysis:
        request = household.request
        cola = request.preferences.social_security_cola_rate
        full_age = min(full_retirement_claiming_age(household.fra), LATEST_CLAIMING_AGE)

        def ss_stream(claim_age: int) -> list[float]:
            monthly = adjust_for_claiming_age(household.pia, household.fra, claim_age)
            return [
                monthly * 12 * (1 + cola) ** (age - claim_age) if age >= claim_age else 0.0
                for age in range(EARLIEST_CLAIMING_AGE, BREAK_EVEN_HORIZON_AGE)
            ]

        def compare(label_a, stream_a, label_b, stream_b, start_age) -> BreakEvenComparison:
            years = request.life_expectancy - start_age
            return BreakEvenComparison(
                strategy_a=label_a,
                strategy_b=label_b,
                break_even_age=find_break_even_age(start_age, stream_a, stream_b),
                cumulative_a_at_life_expectancy=round(sum(stream_a[:max(years, 0)]), 2),
                cumulative_b_at_life_expectancy=round(sum(stream_b[:max(years, 0)]), 2),
            )

        early, full, delayed = (
            ss_stream(EARLIEST_CLAIMING_AGE), ss_stream(full_age), ss_stream(LATEST_CLAIMING_AGE)
        )
        analysis = BreakEvenAnalysis(
            early_vs_full=compare(
                f"Social Security at {EARLIEST_CLAIMING_AGE}", early,
                f"Social Security at {full_age}", full, EARLIEST_CLAIMING_AGE,
            ),
            full_vs_delayed=compare(
                f"Social Security at {full_age}", full,
                f"Social Security at {LATEST_CLAIMING_AGE}", delayed, EARLIEST_CLAIMING_AGE,
            ),
        )

        if alternative is not None:
            analysis.recommended_vs_alternative = compare(
                self._scenario_name(household, alternative.pension_age, alternative.ss_age),
                self._net_stream(household, alternative, BREAK_EVEN_HORIZON_AGE),
                self._scenario_name(household, best.pension_age, best.ss_age),
                self._net_stream(household, best, BREAK_EVEN_HORIZON_AGE),
                household.start_age,
            )
        return analysis

    def _net_stream(self, household: _Household, evaluation: _Evaluation, end_age: int) -> list[float]:
        """After-tax income per year from the household start age to end_age."""
        return [
            taxes.net_income if taxes is not None else 0.0
            for taxes in self._yearly_taxes(
                household, evaluation.pension, evaluation.pension_age, evaluation.ss_age, end_age
            )
        ]

    # ── Tax optimization ──────────────────────────────────────────────────────

    def _tax_optimization(
        self,
        household: _Household,
        best: _Evaluation,
        recommended: ScenarioResult,
        evaluations: list[_Evaluation],
    ) -> TaxOptimization:
        request = household.request
        threshold = best.lifetime_net * TAX_ALTERNATIVE_MIN_NET_RATIO
        candidates = [e for e in evaluations if e.lifetime_net >= threshold]
        lowest = min(candidates, key=lambda e: (e.lifetime_taxes, e.pension_age, e.ss_age))
        savings = round(max(best.lifetime_taxes - lowest.lifetime_taxes, 0.0), 2)

        steady = recommended.steady_state_taxes
        recommendations = []
        if steady.social_security_taxable_percentage >= 50:
            recommendations.append(
                f"{steady.social_security_taxable_percentage:.0f}% of Social Security benefits are "
                "federally taxable at this income; lowering other taxable income reduces that share"
            )
        if steady.social_security_income > 0:
            recommendations.append("Massachusetts does not tax Social Security benefits")
        if steady.marginal_rate >= 0.22:
            recommendations.append(
                f"Marginal rate is {steady.marginal_rate:.0%}; spreading withdrawals across years "
                "can keep more income in lower brackets"
            )
        if best.ss_age > best.pension_age:
            recommendations.append(
                f"Ages {best.pension_age} to {best.ss_age - 1} have pension income only, "
                "a window for Roth conversions at lower brackets"
            )
        if request.savings_balance > 0 and request.life_expectancy > QCD_AGE:
            recommendations.append(
                "Qualified charitable distributions after age 70½ can satisfy required "
                "distributions without raising taxable income"
            )
        if savings > 0:
            recommendations.append(
                f"Claiming the pension at {lowest.pension_age} and Social Security at "
                f"{lowest.ss_age} lowers lifetime taxes by ${savings:,.0f} while keeping lifetime "
                f"net income within {100 - TAX_ALTERNATIVE_MIN_NET_RATIO * 100:.0f}%"
            )

        return TaxOptimization(
            current_annual_tax=steady.total_tax,
            current_effective_rate=round(steady.effective_rate, 6),
            current_marginal_rate=steady.marginal_rate,
            current_lifetime_taxes=best.lifetime_taxes,
            lowest_tax_pension_age=lowest.pension_age,
            lowest_tax_social_security_age=lowest.ss_age,
            lowest_lifetime_taxes=lowest.lifetime_taxes,
            potential_lifetime_savings=savings,
            recommendations=recommendations,
        )

    # ── Monte Carlo ───────────────────────────────────────────────────────────

    def _monte_carlo(self, household: _Household, best: _Evaluation, rng: Optional[np.random.Generator]):
        request = household.request
        prefs = request.preferences
        start_age = int(math.floor(request.retirement_goal_age or best.income_start_age))
        start_age = max(min(start_age, best.income_start_age), household.start_age)
        guaranteed = best.yearly_net[start_age - household.start_age:]

        return RetirementMonteCarloService.run_income_simulation(
            start_age=start_age,
            life_expectancy=request.life_expectancy,
            annual_income_goal=prefs.retirement_income_goal * 12,
            guaranteed_income=guaranteed,
            starting_portfolio=request.savings_balance,
            risk_tolerance=prefs.risk_tolerance,
            inflation_scenario=prefs.inflation_scenario,
            num_trials=prefs.monte_carlo_trials,
            rng=rng,
            seed=prefs.random_seed,
        )


def _whole_current_age(request: OptimizationRequest) -> int:
    return math.ceil(request.profile.current_age)


def social_security_age_grid(request: OptimizationRequest) -> list[int]:
    """Social Security claiming ages still ahead of the member.

    Past 70 there is nothing left to gain by waiting, so the only candidate
    is the age-70 benefit starting now.
    """
    first_age = max(EARLIEST_CLAIMING_AGE, _whole_current_age(request))
    if first_age > LATEST_CLAIMING_AGE:
        return [LATEST_CLAIMING_AGE]
    return list(range(first_age, LATEST_CLAIMING_AGE + 1))


def find_break_even_age(start_age: float, stream_a, stream_b) -> Optional[float]:
    """Age at which cumulative income from stream_b catches up with stream_a.

    Streams are yearly amounts beginning at start_age; income is assumed to
    arrive evenly through each year, so the crossing is interpolated
    linearly within the year. Returns None if the curves never cross.
    """
    cumulative_a = cumulative_b = 0.0
    leader = 0
    for year, (amount_a, amount_b) in enumerate(zip(stream_a, stream_b)):
        previous = cumulative_a - cumulative_b
        cumulative_a += amount_a
        cumulative_b += amount_b
        diff = cumulative_a - cumulative_b
        if leader == 0:
            leader = (diff > 0) - (diff < 0)
            continue
        if diff * leader <= 0:
            fraction = previous / (previous - diff) if previous != diff else 1.0
            return round(start_age + year + fraction, 1)
    return None


def optimize_retirement_strategy(
    request: Union[OptimizationRequest, dict],
    rng: Optional[np.random.Generator] = None,
    optimizer: Optional[RetirementOptimizer] = None,
) -> OptimizationResult:
    return (optimizer or RetirementOptimizer()).optimize(request, rng=rng)
