#!/usr/bin/env python3
"""
CybRisk - FAIR Monte Carlo Simulation
Runs independent trial years through the FAIR decomposition and reduces
them to the full SimulationResults.

Per trial:
    TEF   = PERT(industry range) x employee multiplier
    Vuln  = PERT around the control-adjusted base rate
    LEF   = TEF x Vuln
    Loss  = LEF x (primary + secondary loss)

The call is synchronous and CPU bound. The RNG is the only mutable state and
must not be shared with another simulation running at the same time.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import config
from .derived_metrics import compute_percentile_rank, compute_risk_rating, optimal_spend
from .drivers import generate_recommendations, identify_key_drivers
from .logger import get_logger
from .lookup_tables import INDUSTRY_AVG_COST, REVENUE_MIDPOINTS
from .loss_statistics import (
    build_distribution_buckets,
    build_exceedance_curve,
    percentile,
)
from .models import AleSummary, AssessmentInputs, IndustryBenchmark, SimulationResults
from .rng import RNG, claim, default_rng
from .samplers import (
    sample_primary_loss,
    sample_secondary_loss,
    sample_tef,
    sample_vulnerability,
)

logger = get_logger('simulation')


@dataclass
class TrialOutcome:
    """Raw aggregator output: ascending annual losses and mean sampled vulnerability."""
    losses: List[float] = field(default_factory=list)
    mean_vulnerability: float = 0.0


def _check_iterations(iterations) -> int:
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        logger.error(f"Rejected iteration count {iterations!r}: not an integer")
        raise ValueError(f"iterations must be an integer, got {iterations!r}")
    if iterations < 0:
        logger.error(f"Rejected negative iteration count {iterations}")
        raise ValueError(f"iterations must be non-negative, got {iterations}")
    return iterations


def run_trials(inputs: AssessmentInputs, iterations: int, rng: RNG) -> TrialOutcome:
    """Simulate ``iterations`` trial years. Zero iterations gives an empty outcome."""
    _check_iterations(iterations)

    losses: List[float] = []
    vuln_sum = 0.0

    for _ in range(iterations):
        tef = sample_tef(inputs, rng)
        vuln = sample_vulnerability(inputs, rng)
        lef = tef * vuln

        primary = sample_primary_loss(inputs, rng)
        secondary = sample_secondary_loss(inputs, primary, rng)

        losses.append(lef * (primary + secondary))
        vuln_sum += vuln

    # Every downstream statistic relies on ascending order
    losses.sort()

    mean_vulnerability = vuln_sum / iterations if iterations else 0.0
    return TrialOutcome(losses=losses, mean_vulnerability=mean_vulnerability)


def simulate(inputs: AssessmentInputs, iterations: Optional[int] = None,
             rng: Optional[RNG] = None) -> SimulationResults:
    """
    Run the full assessment.

    Args:
        inputs:     Validated assessment inputs.
        iterations: Trial count; defaults to ``simulation.default_iterations``.
        rng:        Uniform source owned by this call; a fresh default source
                    is created when omitted.

    Raises:
        ValueError:    negative or non-integer iteration count.
        RngInUseError: ``rng`` is driving another simulation concurrently.
    """
    if iterations is None:
        iterations = config.get_default_iterations()
    _check_iterations(iterations)
    if rng is None:
        rng = default_rng()

    company = inputs.company
    logger.debug(
        f"Simulating {iterations:,} trials: industry={company.industry.value}, "
        f"revenue_band={company.revenue_band.value}, geography={company.geography.value}"
    )

    with claim(rng):
        outcome = run_trials(inputs, iterations, rng)

    losses = outcome.losses
    mean = sum(losses) / len(losses) if losses else 0.0
    ale = AleSummary(
        mean=mean,
        median=percentile(losses, 0.5),
        p10=percentile(losses, 0.1),
        p90=percentile(losses, 0.9),
        p95=percentile(losses, 0.95),
    )

    revenue = REVENUE_MIDPOINTS[company.revenue_band]
    gordon_loeb_spend = optimal_spend(outcome.mean_vulnerability, mean, revenue)
    risk_rating = compute_risk_rating(mean, revenue)

    industry_median = INDUSTRY_AVG_COST[company.industry] * 1_000_000
    benchmark = IndustryBenchmark(
        your_ale=mean,
        industry_median=industry_median,
        percentile_rank=compute_percentile_rank(mean, industry_median),
    )

    results = SimulationResults(
        ale=ale,
        gordon_loeb_spend=gordon_loeb_spend,
        risk_rating=risk_rating,
        industry_benchmark=benchmark,
        distribution_buckets=build_distribution_buckets(losses),
        exceedance_curve=build_exceedance_curve(losses),
        key_drivers=identify_key_drivers(inputs),
        recommendations=generate_recommendations(inputs, mean, gordon_loeb_spend),
        raw_losses=losses,
    )

    logger.info(
        f"Simulation complete: iterations={iterations:,}, ale_mean=${mean:,.0f}, "
        f"pml95=${ale.p95:,.0f}, rating={risk_rating.value}"
    )
    return results


# --------------------------------------------------------------------------
# Self-test
# --------------------------------------------------------------------------

if __name__ == '__main__':
    from .models import build_inputs
    from .rng import LcgRng

    sample = build_inputs(
        company={'industry': 'technology', 'revenue_band': '50m_250m',
                 'employees': '1000_5000', 'geography': 'eu'},
        data={'data_types': ('customer_pii', 'ip'), 'record_count': 250_000},
        controls={'mfa': True, 'ir_plan': True},
        concerns=('ransomware',),
    )
    result = simulate(sample, 10_000, LcgRng(42))
    print("FAIR Simulation:")
    print(f"  ALE mean:   ${result.ale.mean:,.0f}")
    print(f"  ALE median: ${result.ale.median:,.0f}")
    print(f"  ALE p90:    ${result.ale.p90:,.0f}")
    print(f"  PML (p95):  ${result.ale.p95:,.0f}")
    print(f"  Rating:     {result.risk_rating.value}")
    print(f"  Gordon-Loeb spend: ${result.gordon_loeb_spend:,.0f}")
    print("\nKey drivers:")
    for driver in result.key_drivers:
        print(f"  [{driver.impact.value}] {driver.factor}: {driver.description}")
