#!/usr/bin/env python3
"""
CybRisk - Actuarial Lookup Tables

Static, read-only tables loaded once at import. Report and UI collaborators
may import them directly; nothing in the engine mutates them.

Sources:
  IBM Cost of a Data Breach Report 2025  (per-record and industry costs)
  Verizon DBIR 2025                      (attack patterns, incident rates)
  GDPR, UK GDPR, PDPO, PDPA, US state law, sector regimes (fine ceilings)
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Tuple

from .models import (
    DataType,
    EmployeeCount,
    Geography,
    Industry,
    RevenueBand,
    ThreatType,
)


@dataclass(frozen=True)
class PertRange:
    """(min, mode, max) triple for a PERT draw."""
    min: float
    mode: float
    max: float


@dataclass(frozen=True)
class RegulatoryRegime:
    max_pct_revenue: float
    framework: str


@dataclass(frozen=True)
class RegulatoryProfile:
    """Geography base regime compounded with any sector overlays."""
    max_pct_revenue: float
    frameworks: Tuple[str, ...]


# ---------------------------------------------------------------------------
# IBM 2025 - per-record breach cost by data type (USD)
# ---------------------------------------------------------------------------
PER_RECORD_COST: Mapping[DataType, float] = MappingProxyType({
    DataType.CUSTOMER_PII:   175,
    DataType.EMPLOYEE_PII:   189,
    DataType.IP:             178,
    DataType.PAYMENT_CARD:   172,
    DataType.HEALTH_RECORDS: 200,
    DataType.FINANCIAL:      180,
})

# ---------------------------------------------------------------------------
# IBM 2025 - average total breach cost by industry (USD millions)
# ---------------------------------------------------------------------------
INDUSTRY_AVG_COST: Mapping[Industry, float] = MappingProxyType({
    Industry.HEALTHCARE:      10.93,
    Industry.FINANCIAL:        6.08,
    Industry.PHARMACEUTICALS:  5.10,
    Industry.TECHNOLOGY:       5.45,
    Industry.ENERGY:           4.56,
    Industry.INDUSTRIAL:       5.56,
    Industry.SERVICES:         4.55,
    Industry.RETAIL:           3.48,
    Industry.EDUCATION:        3.50,
    Industry.ENTERTAINMENT:    3.46,
    Industry.COMMUNICATIONS:   3.44,
    Industry.CONSUMER:         3.40,
    Industry.MEDIA:            3.39,
    Industry.RESEARCH:         3.28,
    Industry.TRANSPORTATION:   4.30,
    Industry.HOSPITALITY:      3.22,
    Industry.PUBLIC_SECTOR:    2.60,
})

# ---------------------------------------------------------------------------
# Security control modifiers, applied multiplicatively as (1 + modifier)
# ---------------------------------------------------------------------------
COST_MODIFIERS: Mapping[str, float] = MappingProxyType({
    'ir_plan':       -0.23,
    'ai_automation': -0.30,
    'security_team': -0.20,
    'mfa':           -0.15,
    'pentest':       -0.10,
})

# ---------------------------------------------------------------------------
# DBIR 2025 - share of confirmed breaches involving each attack pattern
# ---------------------------------------------------------------------------
ATTACK_PATTERN_FREQ: Mapping[ThreatType, float] = MappingProxyType({
    ThreatType.RANSOMWARE:       0.39,
    ThreatType.BEC_PHISHING:     0.25,
    ThreatType.WEB_APP_ATTACK:   0.15,
    ThreatType.SYSTEM_INTRUSION: 0.30,
    ThreatType.INSIDER_THREAT:   0.10,
    ThreatType.THIRD_PARTY:      0.30,
    ThreatType.LOST_STOLEN:      0.05,
})

# ---------------------------------------------------------------------------
# Regulatory fine ceiling by geography (fraction of revenue)
# ---------------------------------------------------------------------------
REGULATORY_EXPOSURE: Mapping[Geography, RegulatoryRegime] = MappingProxyType({
    Geography.EU:    RegulatoryRegime(0.04,  'GDPR'),
    Geography.UK:    RegulatoryRegime(0.04,  'UK GDPR'),
    Geography.US:    RegulatoryRegime(0.01,  'State breach notification'),
    Geography.HK:    RegulatoryRegime(0.005, 'PDPO'),
    Geography.SG:    RegulatoryRegime(0.01,  'PDPA'),
    Geography.OTHER: RegulatoryRegime(0.01,  'Various'),
})

# ---------------------------------------------------------------------------
# Sector overlays, additive on top of the geography base
#   HIPAA, DORA, NIS2, GLBA/SOX, FCA/PRA, MAS TRM, NERC CIP, FERPA, FISMA...
# ---------------------------------------------------------------------------
SECTOR_OVERLAYS: Mapping[Industry, Mapping[Geography, Tuple[RegulatoryRegime, ...]]] = \
    MappingProxyType({
        Industry.HEALTHCARE: MappingProxyType({
            Geography.US: (RegulatoryRegime(0.015, 'HIPAA'),),
            Geography.EU: (RegulatoryRegime(0.01, 'NIS2 (essential entity)'),),
            Geography.UK: (RegulatoryRegime(0.005, 'NHS DSPT / CQC'),),
            Geography.SG: (RegulatoryRegime(0.005, 'MOH HCSA'),),
        }),
        Industry.FINANCIAL: MappingProxyType({
            Geography.EU: (RegulatoryRegime(0.015, 'DORA'), RegulatoryRegime(0.005, 'NIS2')),
            Geography.UK: (RegulatoryRegime(0.015, 'FCA / PRA'),),
            Geography.US: (RegulatoryRegime(0.01, 'GLBA / SOX'),),
            Geography.SG: (RegulatoryRegime(0.01, 'MAS TRM'),),
            Geography.HK: (RegulatoryRegime(0.005, 'HKMA CFI'),),
        }),
        Industry.ENERGY: MappingProxyType({
            Geography.EU: (RegulatoryRegime(0.01, 'NIS2 (essential entity)'),),
            Geography.UK: (RegulatoryRegime(0.005, 'NIS Regulations'),),
            Geography.US: (RegulatoryRegime(0.005, 'NERC CIP'),),
        }),
        Industry.TECHNOLOGY: MappingProxyType({
            Geography.EU: (RegulatoryRegime(0.005, 'NIS2'),
                           RegulatoryRegime(0.005, 'EU Cyber Resilience Act')),
            Geography.US: (RegulatoryRegime(0.005, 'FTC Act / CCPA'),),
        }),
        Industry.EDUCATION: MappingProxyType({
            Geography.US: (RegulatoryRegime(0.005, 'FERPA'),),
        }),
        Industry.COMMUNICATIONS: MappingProxyType({
            Geography.EU: (RegulatoryRegime(0.005, 'NIS2 / ePrivacy'),),
            Geography.US: (RegulatoryRegime(0.005, 'FCC Rules'),),
        }),
        Industry.PUBLIC_SECTOR: MappingProxyType({
            Geography.US: (RegulatoryRegime(0.005, 'FISMA / FedRAMP'),),
            Geography.EU: (RegulatoryRegime(0.005, 'NIS2'),),
        }),
        Industry.TRANSPORTATION: MappingProxyType({
            Geography.EU: (RegulatoryRegime(0.005, 'NIS2 (essential entity)'),),
        }),
        Industry.RETAIL: MappingProxyType({
            Geography.US: (RegulatoryRegime(0.005, 'CCPA / CPRA'),),
        }),
        Industry.CONSUMER: MappingProxyType({
            Geography.US: (RegulatoryRegime(0.005, 'CCPA / CPRA'),),
        }),
        Industry.PHARMACEUTICALS: MappingProxyType({
            Geography.EU: (RegulatoryRegime(0.005, 'NIS2'),),
        }),
        Industry.INDUSTRIAL: MappingProxyType({
            Geography.EU: (RegulatoryRegime(0.005, 'NIS2'),),
        }),
    })

# ---------------------------------------------------------------------------
# Threat event frequency by industry, PERT events/year (DBIR incident rates)
# ---------------------------------------------------------------------------
TEF_BY_INDUSTRY: Mapping[Industry, PertRange] = MappingProxyType({
    Industry.HEALTHCARE:      PertRange(0.10, 0.50, 3.0),
    Industry.FINANCIAL:       PertRange(0.15, 0.60, 4.0),
    Industry.PHARMACEUTICALS: PertRange(0.05, 0.30, 2.0),
    Industry.TECHNOLOGY:      PertRange(0.20, 0.70, 5.0),
    Industry.ENERGY:          PertRange(0.10, 0.40, 3.0),
    Industry.INDUSTRIAL:      PertRange(0.10, 0.40, 2.5),
    Industry.SERVICES:        PertRange(0.10, 0.35, 2.0),
    Industry.RETAIL:          PertRange(0.15, 0.50, 3.5),
    Industry.EDUCATION:       PertRange(0.10, 0.40, 2.5),
    Industry.ENTERTAINMENT:   PertRange(0.05, 0.30, 2.0),
    Industry.COMMUNICATIONS:  PertRange(0.10, 0.35, 2.0),
    Industry.CONSUMER:        PertRange(0.05, 0.25, 1.5),
    Industry.MEDIA:           PertRange(0.05, 0.25, 1.5),
    Industry.RESEARCH:        PertRange(0.05, 0.20, 1.5),
    Industry.TRANSPORTATION:  PertRange(0.10, 0.40, 2.5),
    Industry.HOSPITALITY:     PertRange(0.10, 0.35, 2.5),
    Industry.PUBLIC_SECTOR:   PertRange(0.15, 0.50, 3.0),
})

# Share of threat events that become breaches (DBIR)
BASE_VULNERABILITY = 0.30

# ---------------------------------------------------------------------------
# Revenue band midpoints (USD)
# ---------------------------------------------------------------------------
REVENUE_MIDPOINTS: Mapping[RevenueBand, float] = MappingProxyType({
    RevenueBand.UNDER_50M:        25_000_000,
    RevenueBand.FROM_50M_TO_250M: 150_000_000,
    RevenueBand.FROM_250M_TO_1B:  625_000_000,
    RevenueBand.FROM_1B_TO_5B:    3_000_000_000,
    RevenueBand.OVER_5B:          10_000_000_000,
})

# ---------------------------------------------------------------------------
# Attack surface multiplier on TEF by headcount
# ---------------------------------------------------------------------------
EMPLOYEE_MULTIPLIERS: Mapping[EmployeeCount, float] = MappingProxyType({
    EmployeeCount.UNDER_250:          0.7,
    EmployeeCount.FROM_250_TO_1000:   1.0,
    EmployeeCount.FROM_1000_TO_5000:  1.3,
    EmployeeCount.FROM_5000_TO_25000: 1.6,
    EmployeeCount.OVER_25000:         2.0,
})


def get_regulatory_coverage(geography: Geography, industry: Industry) -> RegulatoryProfile:
    """Compound the geography base rate with the sector overlays that apply."""
    base = REGULATORY_EXPOSURE[geography]
    frameworks: List[str] = [base.framework]
    total_pct = base.max_pct_revenue

    for overlay in SECTOR_OVERLAYS.get(industry, {}).get(geography, ()):
        total_pct += overlay.max_pct_revenue
        frameworks.append(overlay.framework)

    return RegulatoryProfile(max_pct_revenue=total_pct, frameworks=tuple(frameworks))


def rank_industries() -> List[Tuple[Industry, float]]:
    """All industries by descending average breach cost ($M)."""
    return sorted(INDUSTRY_AVG_COST.items(), key=lambda item: item[1], reverse=True)


def scale_bar(cost: float, max_cost: float) -> float:
    """Scale a cost to a 0..100 bar width against the largest cost."""
    if max_cost == 0:
        return 0.0
    return cost / max_cost * 100.0
