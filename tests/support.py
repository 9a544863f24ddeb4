"""
Shared test fixtures for the CybRisk suite.

Importing this module points CYBRISK_HOME at a throwaway directory and puts
the project root on sys.path, so it must be imported before ``cybrisk``.
"""

import os
import sys
import tempfile
from pathlib import Path

# ---------------------------------------------------------------------------
# Path bootstrap - run from a checkout without installing
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_HOME = tempfile.mkdtemp(prefix='cybrisk-test-')
os.environ['CYBRISK_HOME'] = TEST_HOME
os.environ.pop('CYBRISK_CONFIG', None)

from cybrisk.models import build_inputs  # noqa: E402
from cybrisk.rng import LcgRng  # noqa: E402

ALL_CONTROLS = {
    'security_team': True,
    'ir_plan': True,
    'ai_automation': True,
    'mfa': True,
    'pentest': True,
    'cyber_insurance': True,
}


class ScriptedRng:
    """Replays fixed draws (exact zeros included), then continues from an LCG."""

    def __init__(self, values=(), seed=7):
        self._values = list(values)
        self._fallback = LcgRng(seed)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return self._fallback()


def reference_inputs(**overrides):
    """Mid-market Hong Kong bank with most controls in place."""
    params = dict(
        company={'industry': 'financial', 'revenue_band': '50m_250m',
                 'employees': '250_1000', 'geography': 'hk'},
        data={'data_types': ('customer_pii', 'payment_card'),
              'record_count': 500_000, 'cloud_percentage': 70},
        controls={'security_team': True, 'ir_plan': True, 'mfa': True, 'pentest': True},
        concerns=('ransomware', 'bec_phishing', 'third_party'),
        previous_incidents='0',
    )
    params.update(overrides)
    return build_inputs(**params)


def exposed_inputs(**overrides):
    """Large EU hospital group with no controls and a breach history."""
    params = dict(
        company={'industry': 'healthcare', 'revenue_band': '1b_5b',
                 'employees': 'over_25000', 'geography': 'eu'},
        data={'data_types': ('health_records', 'employee_pii'), 'record_count': 5_000_000},
        controls={},
        concerns=('ransomware',),
        previous_incidents='5_plus',
    )
    params.update(overrides)
    return build_inputs(**params)


def unprotected_financial_inputs():
    """Financial firm, $50-250M revenue, no controls, ransomware concern."""
    return build_inputs(
        company={'industry': 'financial', 'revenue_band': '50m_250m',
                 'employees': '250_1000', 'geography': 'us'},
        data={'data_types': ('customer_pii', 'financial'), 'record_count': 200_000},
        controls={},
        concerns=('ransomware',),
    )


def minimal_inputs():
    """Small public-sector body holding no data, every control enabled."""
    return build_inputs(
        company={'industry': 'public_sector', 'revenue_band': 'under_50m',
                 'employees': 'under_250', 'geography': 'other'},
        data={'data_types': (), 'record_count': 0},
        controls=ALL_CONTROLS,
    )


def reference_payload():
    """camelCase wire form of reference_inputs()."""
    return {
        'company': {'industry': 'financial', 'revenueBand': '50m_250m',
                    'employees': '250_1000', 'geography': 'hk'},
        'data': {'dataTypes': ['customer_pii', 'payment_card'],
                 'recordCount': 500_000, 'cloudPercentage': 70},
        'controls': {'securityTeam': True, 'irPlan': True, 'aiAutomation': False,
                     'mfa': True, 'pentest': True, 'cyberInsurance': False},
        'threats': {'topConcerns': ['ransomware', 'bec_phishing', 'third_party'],
                    'previousIncidents': '0'},
    }
