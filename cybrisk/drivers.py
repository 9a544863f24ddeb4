#!/usr/bin/env python3
"""
CybRisk - Key Drivers & Recommendations Engine

Deterministic rules over the assessment inputs and the aggregate results.
Each rule inspects its context and emits at most one record; rules run in
the fixed order of DRIVER_RULES / RECOMMENDATION_RULES, and that order (not
magnitude) is the order of the output.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .lookup_tables import (
    ATTACK_PATTERN_FREQ,
    COST_MODIFIERS,
    EMPLOYEE_MULTIPLIERS,
    INDUSTRY_AVG_COST,
    get_regulatory_coverage,
)
from .loss_statistics import format_currency
from .models import (
    AssessmentInputs,
    DataType,
    Impact,
    IncidentHistory,
    KeyDriver,
    ThreatType,
)

# Industry average breach cost tiers ($M)
INDUSTRY_COST_HIGH = 6.0
INDUSTRY_COST_MEDIUM = 4.0

RECORDS_HIGH = 1_000_000
RECORDS_MEDIUM = 100_000

MISSING_CONTROLS_HIGH = 3
REGULATORY_PCT_HIGH = 0.04
ATTACK_SURFACE_HIGH = 1.6

SENSITIVE_DATA_TYPES = (DataType.HEALTH_RECORDS, DataType.PAYMENT_CARD, DataType.FINANCIAL)
REPEAT_INCIDENT_HISTORY = (IncidentHistory.TWO_TO_FIVE, IncidentHistory.FIVE_PLUS)


@dataclass(frozen=True)
class RuleContext:
    """What a rule may look at: the inputs plus aggregate simulation output."""
    inputs: AssessmentInputs
    ale: float = 0.0
    gordon_loeb_spend: float = 0.0


DriverRule = Callable[[RuleContext], Optional[KeyDriver]]
RecommendationRule = Callable[[RuleContext], Optional[str]]


def _label(value: str) -> str:
    return value[:1].upper() + value[1:]


def missing_controls(inputs: AssessmentInputs) -> List[str]:
    """Vulnerability-reducing controls not in place (insurance is risk transfer, not counted)."""
    controls = inputs.controls
    checks = (
        (controls.ir_plan, 'incident response plan'),
        (controls.ai_automation, 'AI/automation'),
        (controls.security_team, 'dedicated security team'),
        (controls.mfa, 'MFA'),
        (controls.pentest, 'penetration testing'),
    )
    return [name for enabled, name in checks if not enabled]


# ---------------------------------------------------------------------------
# Driver rules
# ---------------------------------------------------------------------------

def industry_risk(ctx: RuleContext) -> Optional[KeyDriver]:
    industry = ctx.inputs.company.industry
    cost = INDUSTRY_AVG_COST[industry]
    sector = _label(industry.value)
    if cost > INDUSTRY_COST_HIGH:
        return KeyDriver('Industry Risk', Impact.HIGH,
                         f"{sector} sector has an average breach cost of ${cost:.1f}M, "
                         "among the highest across industries.")
    if cost > INDUSTRY_COST_MEDIUM:
        return KeyDriver('Industry Risk', Impact.MEDIUM,
                         f"{sector} sector has an above-average breach cost of ${cost:.1f}M.")
    return KeyDriver('Industry Risk', Impact.LOW,
                     f"{sector} sector has a below-average breach cost of ${cost:.1f}M.")


def data_volume(ctx: RuleContext) -> Optional[KeyDriver]:
    records = ctx.inputs.data.record_count
    if records > RECORDS_HIGH:
        return KeyDriver('Data Volume', Impact.HIGH,
                         f"{records / 1_000_000:.1f}M records at risk significantly "
                         "increases potential loss magnitude.")
    if records > RECORDS_MEDIUM:
        return KeyDriver('Data Volume', Impact.MEDIUM,
                         f"{records / 1_000:.0f}K records at risk contributes to "
                         "moderate loss potential.")
    return None


def data_sensitivity(ctx: RuleContext) -> Optional[KeyDriver]:
    if any(dt in SENSITIVE_DATA_TYPES for dt in ctx.inputs.data.data_types):
        return KeyDriver('Data Sensitivity', Impact.HIGH,
                         "Regulated data types (health, payment, financial) increase "
                         "per-record breach costs and regulatory exposure.")
    return None


def controls_gap(ctx: RuleContext) -> Optional[KeyDriver]:
    missing = missing_controls(ctx.inputs)
    if len(missing) >= MISSING_CONTROLS_HIGH:
        return KeyDriver('Security Controls Gap', Impact.HIGH,
                         f"Missing key controls: {', '.join(missing)}. "
                         "This significantly increases vulnerability.")
    if missing:
        return KeyDriver('Security Controls Gap', Impact.MEDIUM,
                         f"Missing controls: {', '.join(missing)}. "
                         "Addressing these would reduce exposure.")
    return None


def regulatory_exposure(ctx: RuleContext) -> Optional[KeyDriver]:
    company = ctx.inputs.company
    coverage = get_regulatory_coverage(company.geography, company.industry)
    if coverage.max_pct_revenue >= REGULATORY_PCT_HIGH:
        return KeyDriver('Regulatory Exposure', Impact.HIGH,
                         f"Applicable regimes ({', '.join(coverage.frameworks)}) carry "
                         f"combined fines of up to {coverage.max_pct_revenue * 100:.1f}% "
                         "of revenue.")
    return None


def attack_surface(ctx: RuleContext) -> Optional[KeyDriver]:
    employees = ctx.inputs.company.employees
    multiplier = EMPLOYEE_MULTIPLIERS[employees]
    if multiplier >= ATTACK_SURFACE_HIGH:
        return KeyDriver('Attack Surface', Impact.HIGH,
                         f"Large employee count ({employees.value.replace('_', '-', 1)}) "
                         f"expands the attack surface with a {multiplier}x threat "
                         "frequency multiplier.")
    return None


def ransomware_concern(ctx: RuleContext) -> Optional[KeyDriver]:
    if ThreatType.RANSOMWARE in ctx.inputs.threats.top_concerns:
        share = ATTACK_PATTERN_FREQ[ThreatType.RANSOMWARE]
        return KeyDriver('Ransomware Risk', Impact.HIGH,
                         f"Ransomware is a top concern and accounts for {share:.0%} "
                         "of confirmed breaches (DBIR 2025).")
    return None


def incident_history(ctx: RuleContext) -> Optional[KeyDriver]:
    if ctx.inputs.threats.previous_incidents in REPEAT_INCIDENT_HISTORY:
        return KeyDriver('Incident History', Impact.HIGH,
                         "Prior incidents indicate elevated risk: organisations with a "
                         "breach history are statistically more likely to be breached again.")
    return None


DRIVER_RULES: Tuple[DriverRule, ...] = (
    industry_risk,
    data_volume,
    data_sensitivity,
    controls_gap,
    regulatory_exposure,
    attack_surface,
    ransomware_concern,
    incident_history,
)


# ---------------------------------------------------------------------------
# Recommendation rules
# ---------------------------------------------------------------------------

def recommend_ir_plan(ctx: RuleContext) -> Optional[str]:
    if ctx.inputs.controls.ir_plan:
        return None
    reduction = -COST_MODIFIERS['ir_plan']
    return (f"Implement a formal Incident Response plan. IBM data shows this reduces "
            f"breach costs by ~{reduction:.0%} ({format_currency(ctx.ale * reduction)} "
            "potential savings).")


def recommend_ai_automation(ctx: RuleContext) -> Optional[str]:
    if ctx.inputs.controls.ai_automation:
        return None
    return ("Deploy AI-powered security automation. Organisations using AI/ML detect "
            "breaches 30% faster and save ~$1.88M on average.")


def recommend_security_team(ctx: RuleContext) -> Optional[str]:
    if ctx.inputs.controls.security_team:
        return None
    return ("Establish a dedicated security team or vCISO. This reduces breach "
            "probability by ~20% and signals governance maturity to regulators.")


def recommend_mfa(ctx: RuleContext) -> Optional[str]:
    if ctx.inputs.controls.mfa:
        return None
    return ("Enable MFA on all critical systems. Phishing and credential theft account "
            "for 25%+ of breaches (DBIR 2025); MFA reduces this vector by ~15%.")


def recommend_pentest(ctx: RuleContext) -> Optional[str]:
    if ctx.inputs.controls.pentest:
        return None
    return ("Conduct regular penetration testing. Proactive vulnerability discovery "
            "reduces exploit probability by ~10%.")


def recommend_insurance(ctx: RuleContext) -> Optional[str]:
    if ctx.inputs.controls.cyber_insurance:
        return None
    return (f"Consider cyber insurance. Your estimated ALE of {format_currency(ctx.ale)} "
            "suggests coverage would provide meaningful risk transfer, capping "
            "secondary losses.")


def recommend_investment(ctx: RuleContext) -> Optional[str]:
    return (f"Optimal security investment: {format_currency(ctx.gordon_loeb_spend)}/year "
            "(Gordon-Loeb model). Spending beyond this point yields diminishing returns.")


def recommend_pci(ctx: RuleContext) -> Optional[str]:
    if DataType.PAYMENT_CARD not in ctx.inputs.data.data_types:
        return None
    return ("Ensure PCI DSS compliance for payment card data. Tokenisation and network "
            "segmentation are critical controls.")


def recommend_health_encryption(ctx: RuleContext) -> Optional[str]:
    if DataType.HEALTH_RECORDS not in ctx.inputs.data.data_types:
        return None
    return ("Health records carry the highest per-record cost ($200+). Prioritise "
            "encryption at rest and in transit, and conduct regular HIPAA risk assessments.")


def recommend_data_minimisation(ctx: RuleContext) -> Optional[str]:
    records = ctx.inputs.data.record_count
    if records <= RECORDS_HIGH:
        return None
    return (f"With {records / 1_000_000:.1f}M records, data minimisation should be a "
            "priority. Reduce what you store to reduce what can be breached.")


RECOMMENDATION_RULES: Tuple[RecommendationRule, ...] = (
    recommend_ir_plan,
    recommend_ai_automation,
    recommend_security_team,
    recommend_mfa,
    recommend_pentest,
    recommend_insurance,
    recommend_investment,
    recommend_pci,
    recommend_health_encryption,
    recommend_data_minimisation,
)


def identify_key_drivers(inputs: AssessmentInputs) -> List[KeyDriver]:
    """Run every driver rule in order, keeping the ones that fire.

    Drivers read the inputs only; aggregate results feed the recommendations.
    """
    ctx = RuleContext(inputs)
    return [driver for driver in (rule(ctx) for rule in DRIVER_RULES) if driver is not None]


def generate_recommendations(inputs: AssessmentInputs, ale: float,
                             gordon_loeb_spend: float) -> List[str]:
    """Run every recommendation rule in order, keeping the ones that fire."""
    ctx = RuleContext(inputs, ale, gordon_loeb_spend)
    return [rec for rec in (rule(ctx) for rule in RECOMMENDATION_RULES) if rec is not None]
