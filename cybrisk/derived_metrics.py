#!/usr/bin/env python3
"""
CybRisk - Derived Metrics
Risk tier, Gordon-Loeb optimal security spend and the industry benchmark rank.

Gordon & Loeb (2002), "The Economics of Information Security Investment":
a firm's optimal security investment never exceeds (1/e) x v x L, where v is
the vulnerability probability and L the expected annual loss.
"""

import math

from .models import RiskRating

# 1/e ~= 0.3679, rounded to the customary 0.37
GL_COEFFICIENT = 0.37

# Board-level budget ceiling, independent of the model
REVENUE_CAP_PCT = 0.05

# ALE / revenue upper bounds (exclusive) for each tier below CRITICAL
RISK_RATING_THRESHOLDS = (
    (0.01, RiskRating.LOW),
    (0.03, RiskRating.MODERATE),
    (0.07, RiskRating.HIGH),
)


def compute_risk_rating(ale: float, revenue: float) -> RiskRating:
    """Tier ALE as a share of revenue: <1% LOW, <3% MODERATE, <7% HIGH, else CRITICAL."""
    if not revenue > 0:
        raise ValueError(f"revenue must be positive, got {revenue!r}")

    pct = ale / revenue
    for upper, rating in RISK_RATING_THRESHOLDS:
        if pct < upper:
            return rating
    return RiskRating.CRITICAL


def optimal_spend(vulnerability: float, ale: float, revenue: float) -> float:
    """min(0.37 x v x ALE, 5% of revenue)."""
    gl_spend = GL_COEFFICIENT * vulnerability * ale
    revenue_cap = REVENUE_CAP_PCT * revenue
    return min(gl_spend, revenue_cap)


def compute_percentile_rank(ale: float, industry_median: float) -> int:
    """
    Linear heuristic placing ALE against the industry median on a 0-100 scale.

    ALE equal to the median ranks 50, twice the median ranks 100. This is an
    approximation, not an empirical percentile. A zero median carries no
    signal and ranks 50.
    """
    if industry_median == 0:
        return 50
    rank = min(100.0, max(0.0, ale / industry_median * 50.0))
    # Round half up
    return int(math.floor(rank + 0.5))
