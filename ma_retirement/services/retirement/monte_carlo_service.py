"""Monte Carlo simulation of retirement income sustainability.

Each trial draws yearly market returns and inflation from normal
distributions. Savings fund whatever part of the (inflating) income goal
the guaranteed pension and Social Security income does not cover; a trial
fails in the first year savings cannot cover the gap.

All trials advance together as numpy arrays. Randomness comes only from the
generator passed in (or one seeded from configuration), so equal inputs give
equal outputs.
"""

import logging
import time
from typing import Optional, Sequence

import numpy as np

from ma_retirement.config import settings
from ma_retirement.schemas.common import InflationScenario, RiskTolerance
from ma_retirement.schemas.optimization import MonteCarloResult, MonteCarloYear

logger = logging.getLogger(__name__)

# (mean, standard deviation) of annual portfolio returns
MARKET_ASSUMPTIONS = {
    RiskTolerance.CONSERVATIVE: (0.05, 0.08),
    RiskTolerance.MODERATE: (0.07, 0.12),
    RiskTolerance.AGGRESSIVE: (0.09, 0.16),
}

# (mean, standard deviation) of annual inflation
INFLATION_ASSUMPTIONS = {
    InflationScenario.CONSERVATIVE: (0.035, 0.015),
    InflationScenario.MODERATE: (0.025, 0.012),
    InflationScenario.OPTIMISTIC: (0.02, 0.01),
}

PERCENTILES = (10, 25, 50, 75, 90)
# Tolerance for treating a fully-spent portfolio as still solvent
SHORTFALL_TOLERANCE = 0.01


def resolve_trial_count(requested: Optional[int] = None) -> int:
    trials = requested or settings.MONTE_CARLO_DEFAULT_TRIALS
    return max(1, min(trials, settings.MONTE_CARLO_MAX_TRIALS))


def build_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(settings.MONTE_CARLO_DEFAULT_SEED if seed is None else seed)


class RetirementMonteCarloService:
    """Vectorized Monte Carlo engine for retirement income plans."""

    @staticmethod
    def run_income_simulation(
        start_age: int,
        life_expectancy: int,
        annual_income_goal: float,
        guaranteed_income: Sequence[float],
        starting_portfolio: float = 0.0,
        risk_tolerance: RiskTolerance = RiskTolerance.MODERATE,
        inflation_scenario: InflationScenario = InflationScenario.MODERATE,
        num_trials: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> MonteCarloResult:
        """Simulate drawing down savings to meet an income goal.

        Args:
            start_age: First simulated year of retirement.
            life_expectancy: Simulation ends the year before this age.
            annual_income_goal: After-tax income wanted in the first year;
                later years grow with simulated inflation.
            guaranteed_income: After-tax pension and Social Security income
                for each simulated year, starting at start_age.
            starting_portfolio: Savings available at start_age.
            num_trials: Capped at MONTE_CARLO_MAX_TRIALS.
            rng: Generator to draw from; built from `seed` when omitted.

        Returns:
            MonteCarloResult with success rate, ending-portfolio statistics and
            yearly percentile bands.
        """
        start_time = time.monotonic()
        trials = resolve_trial_count(num_trials)
        if rng is None:
            seed = settings.MONTE_CARLO_DEFAULT_SEED if seed is None else seed
            rng = build_rng(seed)

        market_mean, market_vol = MARKET_ASSUMPTIONS[RiskTolerance(risk_tolerance)]
        inflation_mean, inflation_vol = INFLATION_ASSUMPTIONS[InflationScenario(inflation_scenario)]
        assumptions = dict(
            market_return_mean=market_mean,
            market_volatility=market_vol,
            inflation_mean=inflation_mean,
            inflation_volatility=inflation_vol,
        )

        total_years = int(life_expectancy - start_age)
        if total_years <= 0:
            return MonteCarloResult(
                scenarios=trials,
                seed=seed,
                success_rate=100.0,
                probability_of_shortfall=0.0,
                mean_ending_portfolio=round(starting_portfolio, 2),
                median_ending_portfolio=round(starting_portfolio, 2),
                std_ending_portfolio=0.0,
                **assumptions,
            )

        income = np.zeros(total_years)
        provided = np.asarray(list(guaranteed_income)[:total_years], dtype=float)
        income[: len(provided)] = provided

        returns = rng.normal(market_mean, market_vol, size=(trials, total_years))
        inflation = rng.normal(inflation_mean, inflation_vol, size=(trials, total_years))
        # Goal for year t carries inflation realized in years before t
        price_index = np.cumprod(np.hstack([np.ones((trials, 1)), 1 + inflation[:, :-1]]), axis=1)
        withdrawals = np.maximum(annual_income_goal * price_index - income, 0.0)

        paths = np.empty((trials, total_years + 1))
        paths[:, 0] = starting_portfolio
        depletion_year = np.full(trials, total_years + 1)
        portfolio = np.full(trials, float(starting_portfolio))

        for year in range(total_years):
            portfolio = portfolio * (1 + returns[:, year]) - withdrawals[:, year]
            newly_depleted = (portfolio < -SHORTFALL_TOLERANCE) & (depletion_year > total_years)
            depletion_year[newly_depleted] = year + 1
            portfolio = np.maximum(portfolio, 0.0)
            paths[:, year + 1] = portfolio

        bands = np.percentile(paths, PERCENTILES, axis=0)
        projections = []
        for year in range(total_years + 1):
            depletion_pct = float(np.mean(depletion_year <= year)) * 100
            projections.append(MonteCarloYear(
                age=start_age + year,
                p10=round(float(bands[0, year]), 2),
                p25=round(float(bands[1, year]), 2),
                p50=round(float(bands[2, year]), 2),
                p75=round(float(bands[3, year]), 2),
                p90=round(float(bands[4, year]), 2),
                depletion_pct=round(depletion_pct, 1),
            ))

        depleted = depletion_year <= total_years
        success_rate = float(np.mean(~depleted)) * 100

        median_depletion_age = None
        if depleted.sum() > trials / 2:
            median_depletion_age = start_age + int(np.sort(depletion_year[depleted])[depleted.sum() // 2])

        ending = paths[:, -1]
        ending_bands = np.percentile(ending, PERCENTILES)

        logger.debug(
            f"Monte Carlo: {trials} trials over {total_years} years, "
            f"success {success_rate:.1f}% in {(time.monotonic() - start_time) * 1000:.1f}ms"
        )

        return MonteCarloResult(
            scenarios=trials,
            seed=seed,
            success_rate=round(success_rate, 2),
            probability_of_shortfall=round(100 - success_rate, 2),
            mean_ending_portfolio=round(float(ending.mean()), 2),
            median_ending_portfolio=round(float(np.median(ending)), 2),
            std_ending_portfolio=round(float(ending.std()), 2),
            ending_percentiles={
                f"p{p}": round(float(v), 2) for p, v in zip(PERCENTILES, ending_bands)
            },
            median_depletion_age=median_depletion_age,
            projections=projections,
            **assumptions,
        )
