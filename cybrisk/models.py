#!/usr/bin/env python3
"""
CybRisk - Data Model
Assessment inputs collected by the wizard/API and the result objects the
engine hands back. Inputs are immutable and validated on construction;
``from_dict``/``to_dict`` speak the camelCase wire layout used by the
front end.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

MAX_TOP_CONCERNS = 3


class InvalidAssessmentError(ValueError):
    """Raised when assessment inputs violate the engine's preconditions."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Industry(str, Enum):
    """IBM Cost of a Data Breach sectors."""
    HEALTHCARE = 'healthcare'
    FINANCIAL = 'financial'
    PHARMACEUTICALS = 'pharmaceuticals'
    TECHNOLOGY = 'technology'
    ENERGY = 'energy'
    INDUSTRIAL = 'industrial'
    SERVICES = 'services'
    RETAIL = 'retail'
    EDUCATION = 'education'
    ENTERTAINMENT = 'entertainment'
    COMMUNICATIONS = 'communications'
    CONSUMER = 'consumer'
    MEDIA = 'media'
    RESEARCH = 'research'
    TRANSPORTATION = 'transportation'
    HOSPITALITY = 'hospitality'
    PUBLIC_SECTOR = 'public_sector'


class RevenueBand(str, Enum):
    UNDER_50M = 'under_50m'
    FROM_50M_TO_250M = '50m_250m'
    FROM_250M_TO_1B = '250m_1b'
    FROM_1B_TO_5B = '1b_5b'
    OVER_5B = 'over_5b'


class EmployeeCount(str, Enum):
    UNDER_250 = 'under_250'
    FROM_250_TO_1000 = '250_1000'
    FROM_1000_TO_5000 = '1000_5000'
    FROM_5000_TO_25000 = '5000_25000'
    OVER_25000 = 'over_25000'


class Geography(str, Enum):
    US = 'us'
    UK = 'uk'
    EU = 'eu'
    HK = 'hk'
    SG = 'sg'
    OTHER = 'other'


class DataType(str, Enum):
    CUSTOMER_PII = 'customer_pii'
    EMPLOYEE_PII = 'employee_pii'
    PAYMENT_CARD = 'payment_card'
    HEALTH_RECORDS = 'health_records'
    IP = 'ip'
    FINANCIAL = 'financial'


class ThreatType(str, Enum):
    RANSOMWARE = 'ransomware'
    BEC_PHISHING = 'bec_phishing'
    INSIDER_THREAT = 'insider_threat'
    THIRD_PARTY = 'third_party'
    WEB_APP_ATTACK = 'web_app_attack'
    SYSTEM_INTRUSION = 'system_intrusion'
    LOST_STOLEN = 'lost_stolen'


class IncidentHistory(str, Enum):
    NONE = '0'
    ONE = '1'
    TWO_TO_FIVE = '2_5'
    FIVE_PLUS = '5_plus'


class RiskRating(str, Enum):
    LOW = 'LOW'
    MODERATE = 'MODERATE'
    HIGH = 'HIGH'
    CRITICAL = 'CRITICAL'


class Impact(str, Enum):
    HIGH = 'HIGH'
    MEDIUM = 'MEDIUM'
    LOW = 'LOW'


def _coerce(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise InvalidAssessmentError(
            f"Invalid {field_name}: {value!r} (expected one of: {allowed})"
        ) from None


def _require_bool(value, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidAssessmentError(f"{field_name} must be a boolean, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CompanyProfile:
    industry: Industry
    revenue_band: RevenueBand
    employees: EmployeeCount
    geography: Geography
    organization_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'industry', _coerce(Industry, self.industry, 'industry'))
        object.__setattr__(self, 'revenue_band',
                           _coerce(RevenueBand, self.revenue_band, 'revenueBand'))
        object.__setattr__(self, 'employees',
                           _coerce(EmployeeCount, self.employees, 'employees'))
        object.__setattr__(self, 'geography', _coerce(Geography, self.geography, 'geography'))


@dataclass(frozen=True)
class DataProfile:
    data_types: Tuple[DataType, ...]
    record_count: int
    cloud_percentage: float = 0.0

    def __post_init__(self):
        if isinstance(self.data_types, (str, bytes)):
            raise InvalidAssessmentError("dataTypes must be a list of data type names")
        coerced: List[DataType] = []
        for value in self.data_types:
            data_type = _coerce(DataType, value, 'dataType')
            if data_type not in coerced:
                coerced.append(data_type)
        object.__setattr__(self, 'data_types', tuple(coerced))

        if isinstance(self.record_count, bool) or not isinstance(self.record_count, int):
            raise InvalidAssessmentError(
                f"recordCount must be an integer, got {self.record_count!r}"
            )
        if self.record_count < 0:
            raise InvalidAssessmentError(
                f"recordCount must be non-negative, got {self.record_count}"
            )
        if isinstance(self.cloud_percentage, bool) or \
                not isinstance(self.cloud_percentage, (int, float)):
            raise InvalidAssessmentError(
                f"cloudPercentage must be a number, got {self.cloud_percentage!r}"
            )
        if not 0 <= self.cloud_percentage <= 100:
            raise InvalidAssessmentError(
                f"cloudPercentage must be within 0..100, got {self.cloud_percentage}"
            )


@dataclass(frozen=True)
class SecurityControls:
    security_team: bool = False
    ir_plan: bool = False
    ai_automation: bool = False
    mfa: bool = False
    pentest: bool = False
    cyber_insurance: bool = False

    def __post_init__(self):
        for name in ('security_team', 'ir_plan', 'ai_automation',
                     'mfa', 'pentest', 'cyber_insurance'):
            _require_bool(getattr(self, name), name)


@dataclass(frozen=True)
class ThreatLandscape:
    top_concerns: Tuple[ThreatType, ...] = ()
    previous_incidents: IncidentHistory = IncidentHistory.NONE

    def __post_init__(self):
        if isinstance(self.top_concerns, (str, bytes)):
            raise InvalidAssessmentError("topConcerns must be a list of threat names")
        concerns = tuple(_coerce(ThreatType, value, 'threat') for value in self.top_concerns)
        if len(concerns) > MAX_TOP_CONCERNS:
            raise InvalidAssessmentError(
                f"At most {MAX_TOP_CONCERNS} top concerns may be selected, got {len(concerns)}"
            )
        object.__setattr__(self, 'top_concerns', concerns)
        object.__setattr__(self, 'previous_incidents',
                           _coerce(IncidentHistory, self.previous_incidents,
                                   'previousIncidents'))


@dataclass(frozen=True)
class AssessmentInputs:
    """Everything the engine needs about one organization."""
    company: CompanyProfile
    data: DataProfile
    controls: SecurityControls
    threats: ThreatLandscape

    def __post_init__(self):
        expected = (('company', CompanyProfile), ('data', DataProfile),
                    ('controls', SecurityControls), ('threats', ThreatLandscape))
        for name, cls in expected:
            if not isinstance(getattr(self, name), cls):
                raise InvalidAssessmentError(f"{name} must be a {cls.__name__}")

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> 'AssessmentInputs':
        """Build inputs from the camelCase wizard/API payload."""
        try:
            company = payload['company']
            data = payload['data']
            controls = payload['controls']
            threats = payload['threats']
            return cls(
                company=CompanyProfile(
                    industry=company['industry'],
                    revenue_band=company['revenueBand'],
                    employees=company['employees'],
                    geography=company['geography'],
                    organization_name=company.get('organizationName'),
                ),
                data=DataProfile(
                    data_types=tuple(data['dataTypes']),
                    record_count=data['recordCount'],
                    cloud_percentage=data.get('cloudPercentage', 0),
                ),
                controls=SecurityControls(
                    security_team=controls.get('securityTeam', False),
                    ir_plan=controls.get('irPlan', False),
                    ai_automation=controls.get('aiAutomation', False),
                    mfa=controls.get('mfa', False),
                    pentest=controls.get('pentest', False),
                    cyber_insurance=controls.get('cyberInsurance', False),
                ),
                threats=ThreatLandscape(
                    top_concerns=tuple(threats.get('topConcerns', ())),
                    previous_incidents=str(threats.get('previousIncidents', '0')),
                ),
            )
        except KeyError as e:
            raise InvalidAssessmentError(f"Missing required field: {e.args[0]}") from None
        except (TypeError, AttributeError) as e:
            raise InvalidAssessmentError(f"Malformed assessment payload: {e}") from None

    def to_dict(self) -> Dict[str, Any]:
        company: Dict[str, Any] = {
            'industry': self.company.industry.value,
            'revenueBand': self.company.revenue_band.value,
            'employees': self.company.employees.value,
            'geography': self.company.geography.value,
        }
        if self.company.organization_name:
            company['organizationName'] = self.company.organization_name
        return {
            'company': company,
            'data': {
                'dataTypes': [dt.value for dt in self.data.data_types],
                'recordCount': self.data.record_count,
                'cloudPercentage': self.data.cloud_percentage,
            },
            'controls': {
                'securityTeam': self.controls.security_team,
                'irPlan': self.controls.ir_plan,
                'aiAutomation': self.controls.ai_automation,
                'mfa': self.controls.mfa,
                'pentest': self.controls.pentest,
                'cyberInsurance': self.controls.cyber_insurance,
            },
            'threats': {
                'topConcerns': [t.value for t in self.threats.top_concerns],
                'previousIncidents': self.threats.previous_incidents.value,
            },
        }


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DistributionBucket:
    range_label: str
    min_value: float
    max_value: float
    probability: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rangeLabel': self.range_label,
            'minValue': self.min_value,
            'maxValue': self.max_value,
            'probability': self.probability,
        }


@dataclass(frozen=True)
class ExceedancePoint:
    loss: float
    probability: float

    def to_dict(self) -> Dict[str, Any]:
        return {'loss': self.loss, 'probability': self.probability}


@dataclass(frozen=True)
class KeyDriver:
    factor: str
    impact: Impact
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {'factor': self.factor, 'impact': self.impact.value,
                'description': self.description}


@dataclass(frozen=True)
class AleSummary:
    """Annualized loss expectancy: mean plus distribution percentiles."""
    mean: float
    median: float
    p10: float
    p90: float
    p95: float

    def to_dict(self) -> Dict[str, float]:
        return {'mean': self.mean, 'median': self.median,
                'p10': self.p10, 'p90': self.p90, 'p95': self.p95}


@dataclass(frozen=True)
class IndustryBenchmark:
    your_ale: float
    industry_median: float
    percentile_rank: int

    def to_dict(self) -> Dict[str, Any]:
        return {'yourAle': self.your_ale, 'industryMedian': self.industry_median,
                'percentileRank': self.percentile_rank}


@dataclass
class SimulationResults:
    """Output of one simulate() call. The caller owns it outright."""
    ale: AleSummary
    gordon_loeb_spend: float
    risk_rating: RiskRating
    industry_benchmark: IndustryBenchmark
    distribution_buckets: List[DistributionBucket] = field(default_factory=list)
    exceedance_curve: List[ExceedancePoint] = field(default_factory=list)
    key_drivers: List[KeyDriver] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    raw_losses: List[float] = field(default_factory=list)

    def to_dict(self, include_raw_losses: bool = True) -> Dict[str, Any]:
        """camelCase payload; API responses leave out the raw loss vector."""
        payload: Dict[str, Any] = {
            'ale': self.ale.to_dict(),
            'gordonLoebSpend': self.gordon_loeb_spend,
            'riskRating': self.risk_rating.value,
            'industryBenchmark': self.industry_benchmark.to_dict(),
            'distributionBuckets': [b.to_dict() for b in self.distribution_buckets],
            'exceedanceCurve': [p.to_dict() for p in self.exceedance_curve],
            'keyDrivers': [d.to_dict() for d in self.key_drivers],
            'recommendations': list(self.recommendations),
        }
        if include_raw_losses:
            payload['rawLosses'] = list(self.raw_losses)
        return payload


def build_inputs(company: Mapping[str, Any], data: Mapping[str, Any],
                 controls: Optional[Mapping[str, bool]] = None,
                 concerns: Sequence[str] = (),
                 previous_incidents: str = '0') -> AssessmentInputs:
    """Keyword-friendly constructor using snake_case field names."""
    return AssessmentInputs(
        company=CompanyProfile(**company),
        data=DataProfile(**data),
        controls=SecurityControls(**(controls or {})),
        threats=ThreatLandscape(top_concerns=tuple(concerns),
                                previous_incidents=previous_incidents),
    )
