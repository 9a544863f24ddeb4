#!/usr/bin/env python3
"""
CybRisk - FAIR Risk-Factor Samplers

One draw of each FAIR factor for a single trial year:

  Risk = Loss Event Frequency (LEF) x Loss Magnitude (LM)
  LEF  = Threat Event Frequency (TEF) x Vulnerability
  LM   = Primary Loss + Secondary Loss

Each sampler is a pure function of (inputs, lookup tables, rng).
"""

import math

from .distributions import sample_log_normal, sample_pert
from .lookup_tables import (
    BASE_VULNERABILITY,
    COST_MODIFIERS,
    EMPLOYEE_MULTIPLIERS,
    PER_RECORD_COST,
    REVENUE_MIDPOINTS,
    TEF_BY_INDUSTRY,
    get_regulatory_coverage,
)
from .models import AssessmentInputs
from .rng import RNG

VULNERABILITY_FLOOR = 0.01
VULNERABILITY_CEILING = 0.99

# Share of held records expected to be exposed in a typical breach
RECORD_EXPOSURE_FRACTION = 0.1
RECORD_SIGMA = 1.0

# Single-trial primary loss ceiling as a share of revenue
PRIMARY_LOSS_REVENUE_CAP = 0.10

# Secondary loss component ranges
REGULATORY_FINE_SHARE = (0.01, 0.10, 0.50)
LITIGATION_SHARE = (0.15, 0.22, 0.30)
REPUTATION_SHARE = (0.20, 0.30, 0.40)
NOTIFICATION_COST_PER_RECORD = (2.0, 3.5, 5.0)

# Cyber insurance absorbs half of secondary loss
INSURANCE_SECONDARY_FACTOR = 0.5


def sample_tef(inputs: AssessmentInputs, rng: RNG) -> float:
    """Threat events per year, scaled by the headcount attack surface."""
    tef = TEF_BY_INDUSTRY[inputs.company.industry]
    base_tef = sample_pert(tef.min, tef.mode, tef.max, rng)
    return base_tef * EMPLOYEE_MULTIPLIERS[inputs.company.employees]


def control_adjusted_vulnerability(inputs: AssessmentInputs) -> float:
    """Base vulnerability with each active control applied, clamped to [0.01, 0.99]."""
    controls = inputs.controls
    active = {
        'ir_plan': controls.ir_plan,
        'ai_automation': controls.ai_automation,
        'security_team': controls.security_team,
        'mfa': controls.mfa,
        'pentest': controls.pentest,
    }

    adjusted = BASE_VULNERABILITY
    for name, enabled in active.items():
        if enabled:
            adjusted *= 1.0 + COST_MODIFIERS[name]

    return max(VULNERABILITY_FLOOR, min(VULNERABILITY_CEILING, adjusted))


def sample_vulnerability(inputs: AssessmentInputs, rng: RNG) -> float:
    """Probability a threat event becomes a loss event, varied around the control-adjusted rate."""
    adjusted = control_adjusted_vulnerability(inputs)
    pert_min = adjusted * 0.5
    pert_max = min(adjusted * 2.0, VULNERABILITY_CEILING)
    return sample_pert(pert_min, adjusted, pert_max, rng)


def sample_primary_loss(inputs: AssessmentInputs, rng: RNG) -> float:
    """Per-record cost times a log-normal count of exposed records, capped at 10% of revenue."""
    data_types = inputs.data.data_types
    record_count = inputs.data.record_count
    if not data_types or record_count <= 0:
        return 0.0

    avg_cost = sum(PER_RECORD_COST[dt] for dt in data_types) / len(data_types)

    mu_records = math.log(record_count * RECORD_EXPOSURE_FRACTION)
    sampled_records = min(sample_log_normal(mu_records, RECORD_SIGMA, rng), record_count)

    primary_loss = avg_cost * sampled_records
    revenue = REVENUE_MIDPOINTS[inputs.company.revenue_band]
    return min(primary_loss, revenue * PRIMARY_LOSS_REVENUE_CAP)


def sample_secondary_loss(inputs: AssessmentInputs, primary_loss: float, rng: RNG) -> float:
    """Regulatory fines, litigation, reputation and notification costs for one loss event."""
    revenue = REVENUE_MIDPOINTS[inputs.company.revenue_band]
    coverage = get_regulatory_coverage(inputs.company.geography, inputs.company.industry)

    regulatory = coverage.max_pct_revenue * revenue * sample_pert(*REGULATORY_FINE_SHARE, rng)
    litigation = primary_loss * sample_pert(*LITIGATION_SHARE, rng)
    reputation = primary_loss * sample_pert(*REPUTATION_SHARE, rng)
    notification = inputs.data.record_count * sample_pert(*NOTIFICATION_COST_PER_RECORD, rng)

    total = regulatory + litigation + reputation + notification

    # Insurance transfers secondary loss only
    if inputs.controls.cyber_insurance:
        total *= INSURANCE_SECONDARY_FACTOR

    return total
