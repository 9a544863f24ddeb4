#!/usr/bin/env python3
"""
CybRisk - Simulation Test Suite

FAIR risk-factor samplers, the trial aggregator, simulate() and scenario
comparison.

Usage:
    python -m pytest tests/test_simulation.py -v
    python tests/test_simulation.py
"""

import threading
import unittest

from support import (
    ALL_CONTROLS,
    exposed_inputs,
    minimal_inputs,
    reference_inputs,
    unprotected_financial_inputs,
)

from cybrisk.config import config
from cybrisk.drivers import identify_key_drivers
from cybrisk.lookup_tables import (
    EMPLOYEE_MULTIPLIERS,
    INDUSTRY_AVG_COST,
    PER_RECORD_COST,
    REVENUE_MIDPOINTS,
    TEF_BY_INDUSTRY,
)
from cybrisk.models import RiskRating
from cybrisk.rng import LcgRng, RngInUseError, claim
from cybrisk.samplers import (
    control_adjusted_vulnerability,
    sample_primary_loss,
    sample_secondary_loss,
    sample_tef,
    sample_vulnerability,
)
from cybrisk.scenarios import (
    apply_cloud_override,
    apply_controls,
    compare_scenarios,
)
from cybrisk.simulation import run_trials, simulate


# ===================================================================
# 1. TestRiskFactorSamplers
# ===================================================================
class TestRiskFactorSamplers(unittest.TestCase):
    """Per-trial TEF, vulnerability, primary and secondary loss draws."""

    def test_tef_within_scaled_range(self):
        inputs = exposed_inputs()
        tef = TEF_BY_INDUSTRY[inputs.company.industry]
        multiplier = EMPLOYEE_MULTIPLIERS[inputs.company.employees]
        rng = LcgRng(1)
        for _ in range(500):
            value = sample_tef(inputs, rng)
            self.assertGreaterEqual(value, tef.min * multiplier - 1e-12)
            self.assertLessEqual(value, tef.max * multiplier + 1e-12)

    def test_base_vulnerability_without_controls(self):
        self.assertAlmostEqual(control_adjusted_vulnerability(exposed_inputs()), 0.30)

    def test_controls_stack_multiplicatively(self):
        inputs = exposed_inputs(controls=ALL_CONTROLS)
        expected = 0.30 * 0.77 * 0.70 * 0.80 * 0.85 * 0.90
        self.assertAlmostEqual(control_adjusted_vulnerability(inputs), expected)

    def test_insurance_does_not_change_vulnerability(self):
        insured = exposed_inputs(controls={'cyber_insurance': True})
        self.assertAlmostEqual(control_adjusted_vulnerability(insured), 0.30)

    def test_vulnerability_within_pert_range(self):
        inputs = reference_inputs()
        adjusted = control_adjusted_vulnerability(inputs)
        rng = LcgRng(2)
        for _ in range(500):
            v = sample_vulnerability(inputs, rng)
            self.assertGreaterEqual(v, adjusted * 0.5 - 1e-12)
            self.assertLessEqual(v, min(adjusted * 2.0, 0.99) + 1e-12)
            self.assertGreaterEqual(v, 0.0)
            self.assertLessEqual(v, 1.0)

    def test_primary_loss_without_data_types(self):
        self.assertEqual(sample_primary_loss(minimal_inputs(), LcgRng(3)), 0.0)

    def test_primary_loss_without_records(self):
        inputs = reference_inputs(data={'data_types': ('customer_pii',), 'record_count': 0})
        self.assertEqual(sample_primary_loss(inputs, LcgRng(3)), 0.0)

    def test_primary_loss_caps(self):
        inputs = reference_inputs(
            company={'industry': 'retail', 'revenue_band': 'under_50m',
                     'employees': 'under_250', 'geography': 'us'},
            data={'data_types': ('customer_pii',), 'record_count': 100_000_000},
        )
        revenue_cap = REVENUE_MIDPOINTS[inputs.company.revenue_band] * 0.10
        record_cap = PER_RECORD_COST[inputs.data.data_types[0]] * inputs.data.record_count
        rng = LcgRng(4)
        for _ in range(300):
            loss = sample_primary_loss(inputs, rng)
            self.assertGreaterEqual(loss, 0.0)
            self.assertLessEqual(loss, revenue_cap)
            self.assertLessEqual(loss, record_cap)

    def test_secondary_loss_non_negative(self):
        inputs = exposed_inputs()
        rng = LcgRng(5)
        for _ in range(300):
            self.assertGreaterEqual(sample_secondary_loss(inputs, 2_000_000, rng), 0.0)

    def test_insurance_halves_secondary_loss(self):
        uninsured = reference_inputs()
        insured = reference_inputs(controls={'cyber_insurance': True})
        plain = sample_secondary_loss(uninsured, 1_000_000, LcgRng(6))
        halved = sample_secondary_loss(insured, 1_000_000, LcgRng(6))
        self.assertAlmostEqual(halved, plain * 0.5)


# ===================================================================
# 2. TestAggregator
# ===================================================================
class TestAggregator(unittest.TestCase):

    def test_losses_sorted_and_non_negative(self):
        outcome = run_trials(reference_inputs(), 1000, LcgRng(7))
        self.assertEqual(len(outcome.losses), 1000)
        self.assertEqual(outcome.losses, sorted(outcome.losses))
        self.assertGreaterEqual(outcome.losses[0], 0.0)

    def test_mean_vulnerability_in_unit_interval(self):
        outcome = run_trials(exposed_inputs(), 500, LcgRng(8))
        self.assertGreater(outcome.mean_vulnerability, 0.0)
        self.assertLessEqual(outcome.mean_vulnerability, 1.0)

    def test_zero_trials(self):
        outcome = run_trials(reference_inputs(), 0, LcgRng(9))
        self.assertEqual(outcome.losses, [])
        self.assertEqual(outcome.mean_vulnerability, 0.0)


# ===================================================================
# 3. TestSimulate - full results
# ===================================================================
class TestSimulate(unittest.TestCase):

    def test_zero_iterations(self):
        results = simulate(reference_inputs(), 0, LcgRng(1))
        self.assertEqual(results.raw_losses, [])
        self.assertEqual(results.ale.mean, 0.0)
        self.assertEqual(results.ale.p95, 0.0)
        self.assertEqual(results.gordon_loeb_spend, 0.0)
        self.assertEqual(results.risk_rating, RiskRating.LOW)
        self.assertEqual(results.industry_benchmark.percentile_rank, 0)
        self.assertEqual(results.distribution_buckets, [])
        self.assertEqual(results.exceedance_curve, [])

    def test_single_iteration_collapses_percentiles(self):
        results = simulate(reference_inputs(), 1, LcgRng(2))
        self.assertEqual(len(results.raw_losses), 1)
        self.assertEqual(results.ale.p10, results.ale.median)
        self.assertEqual(results.ale.median, results.ale.p90)
        self.assertEqual(results.exceedance_curve[0].probability, 0.0)

    def test_invalid_iterations(self):
        for bad in (-1, 2.5, '100', True):
            with self.assertRaises(ValueError):
                simulate(reference_inputs(), bad, LcgRng(3))

    def test_result_invariants(self):
        results = simulate(exposed_inputs(), 2000, LcgRng(4))
        losses = results.raw_losses
        self.assertEqual(losses, sorted(losses))
        self.assertTrue(all(loss >= 0 for loss in losses))
        self.assertEqual(len(results.distribution_buckets), 10)
        self.assertEqual(len(results.exceedance_curve), 50)
        self.assertAlmostEqual(sum(b.probability for b in results.distribution_buckets), 1.0)
        probs = [p.probability for p in results.exceedance_curve]
        self.assertEqual(probs, sorted(probs, reverse=True))
        self.assertLessEqual(results.ale.p10, results.ale.median)
        self.assertLessEqual(results.ale.median, results.ale.p90)
        self.assertLessEqual(results.ale.p90, results.ale.p95)

    def test_benchmark_uses_industry_median(self):
        inputs = reference_inputs()
        results = simulate(inputs, 500, LcgRng(5))
        benchmark = results.industry_benchmark
        self.assertEqual(benchmark.your_ale, results.ale.mean)
        self.assertEqual(benchmark.industry_median,
                         INDUSTRY_AVG_COST[inputs.company.industry] * 1_000_000)
        self.assertGreaterEqual(benchmark.percentile_rank, 0)
        self.assertLessEqual(benchmark.percentile_rank, 100)

    def test_reproducible_with_seed(self):
        inputs = unprotected_financial_inputs()
        first = simulate(inputs, 10_000, LcgRng(42))
        second = simulate(inputs, 10_000, LcgRng(42))
        self.assertEqual(first.risk_rating, second.risk_rating)
        self.assertEqual(first.ale.mean, second.ale.mean)
        self.assertEqual(first.raw_losses, second.raw_losses)

        revenue = REVENUE_MIDPOINTS[inputs.company.revenue_band]
        self.assertLessEqual(first.gordon_loeb_spend, 0.05 * revenue)

    def test_drivers_and_recommendations_attached(self):
        results = simulate(exposed_inputs(), 200, LcgRng(6))
        self.assertTrue(results.key_drivers)
        self.assertTrue(any('Gordon-Loeb' in rec for rec in results.recommendations))

    def test_drivers_depend_on_inputs_only(self):
        inputs = exposed_inputs()
        results = simulate(inputs, 200, LcgRng(6))
        self.assertEqual(results.key_drivers, identify_key_drivers(inputs))

    def test_default_iterations_from_config(self):
        original = config.get('simulation.default_iterations')
        config.set('simulation.default_iterations', 25)
        try:
            results = simulate(reference_inputs(), rng=LcgRng(7))
        finally:
            config.set('simulation.default_iterations', original)
        self.assertEqual(len(results.raw_losses), 25)

    def test_default_rng(self):
        results = simulate(reference_inputs(), 50)
        self.assertEqual(len(results.raw_losses), 50)

    def test_to_dict_payload(self):
        results = simulate(reference_inputs(), 20, LcgRng(8))
        payload = results.to_dict()
        self.assertEqual(len(payload['rawLosses']), 20)
        self.assertIn(payload['riskRating'], [r.value for r in RiskRating])
        self.assertEqual(set(payload['ale']), {'mean', 'median', 'p10', 'p90', 'p95'})
        self.assertNotIn('rawLosses', results.to_dict(include_raw_losses=False))


# ===================================================================
# 4. TestRngOwnership - one RNG per running simulation
# ===================================================================
class TestRngOwnership(unittest.TestCase):

    def test_claimed_rng_is_rejected(self):
        rng = LcgRng(1)
        with claim(rng):
            with self.assertRaises(RngInUseError):
                simulate(reference_inputs(), 10, rng)

    def test_rng_released_after_run(self):
        rng = LcgRng(2)
        simulate(reference_inputs(), 10, rng)
        simulate(reference_inputs(), 10, rng)

    def test_rng_released_after_failure(self):
        rng = LcgRng(3)
        with self.assertRaises(RngInUseError):
            with claim(rng):
                with claim(rng):
                    pass
        with claim(rng):
            pass

    def test_parallel_simulations_with_separate_rngs(self):
        results = {}

        def run(key):
            results[key] = simulate(reference_inputs(), 300, LcgRng(11))

        threads = [threading.Thread(target=run, args=(key,)) for key in ('a', 'b')]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(results['a'].raw_losses, results['b'].raw_losses)


# ===================================================================
# 5. TestScenarios - base vs modified
# ===================================================================
class TestScenarios(unittest.TestCase):

    def test_controls_reduce_expected_loss(self):
        base = unprotected_financial_inputs()
        hardened = apply_controls(base, **ALL_CONTROLS)
        comparison = compare_scenarios(base, hardened, 5000, LcgRng(42))
        self.assertLess(comparison.delta.ale_mean, 0.0)
        self.assertGreater(comparison.savings.ale_mean, 0.0)

    def test_delta_and_savings_are_opposite(self):
        base = reference_inputs()
        modified = apply_controls(base, ai_automation=True, cyber_insurance=True)
        comparison = compare_scenarios(base, modified, 500, LcgRng(7))
        delta, savings = comparison.delta, comparison.savings
        self.assertAlmostEqual(delta.ale_mean,
                               comparison.modified.ale.mean - comparison.base.ale.mean)
        self.assertAlmostEqual(delta.ale_pml95,
                               comparison.modified.ale.p95 - comparison.base.ale.p95)
        self.assertAlmostEqual(delta.gordon_loeb,
                               comparison.modified.gordon_loeb_spend
                               - comparison.base.gordon_loeb_spend)
        self.assertEqual(savings.ale_mean, -delta.ale_mean)
        self.assertEqual(savings.ale_pml95, -delta.ale_pml95)
        self.assertEqual(savings.gordon_loeb, -delta.gordon_loeb)
        self.assertEqual(delta.risk_rating_changed,
                         comparison.base.risk_rating != comparison.modified.risk_rating)

    def test_shared_rng_runs_base_first(self):
        base = reference_inputs()
        comparison = compare_scenarios(base, base, 300, LcgRng(9))
        solo = simulate(base, 300, LcgRng(9))
        self.assertEqual(comparison.base.raw_losses, solo.raw_losses)

    def test_default_iterations_from_config(self):
        original = config.get('simulation.comparison_iterations')
        config.set('simulation.comparison_iterations', 30)
        try:
            comparison = compare_scenarios(reference_inputs(), minimal_inputs(), rng=LcgRng(1))
        finally:
            config.set('simulation.comparison_iterations', original)
        self.assertEqual(len(comparison.base.raw_losses), 30)
        self.assertEqual(len(comparison.modified.raw_losses), 30)

    def test_to_dict(self):
        comparison = compare_scenarios(reference_inputs(), minimal_inputs(), 20, LcgRng(2))
        payload = comparison.to_dict()
        self.assertEqual(set(payload), {'base', 'modified', 'delta', 'savings'})
        self.assertIn('riskRatingChanged', payload['delta'])
        self.assertNotIn('rawLosses', payload['base'])

    def test_cloud_override_clamps(self):
        inputs = reference_inputs()
        self.assertEqual(apply_cloud_override(inputs, 150).data.cloud_percentage, 100.0)
        self.assertEqual(apply_cloud_override(inputs, -5).data.cloud_percentage, 0.0)
        self.assertEqual(apply_cloud_override(inputs, 35).data.cloud_percentage, 35.0)
        self.assertEqual(inputs.data.cloud_percentage, 70)

    def test_apply_controls_leaves_original(self):
        inputs = reference_inputs()
        modified = apply_controls(inputs, ai_automation=True)
        self.assertTrue(modified.controls.ai_automation)
        self.assertFalse(inputs.controls.ai_automation)
        self.assertEqual(modified.company, inputs.company)

    def test_apply_controls_unknown_name(self):
        with self.assertRaises(TypeError):
            apply_controls(reference_inputs(), firewall=True)


# ===================================================================
# Entry point
# ===================================================================
if __name__ == '__main__':
    unittest.main(verbosity=2)
