"""
CybRisk - FAIR Cyber Loss Monte Carlo Engine
"""

__version__ = '1.0.0'

from .paths import paths, get_paths
from .config import config, get_config, load_config
from .models import (
    AssessmentInputs,
    CompanyProfile,
    DataProfile,
    InvalidAssessmentError,
    SecurityControls,
    SimulationResults,
    ThreatLandscape,
)
from .rng import DefaultRng, LcgRng, RngInUseError
from .simulation import simulate
from .scenarios import apply_cloud_override, apply_controls, compare_scenarios

__all__ = [
    'paths', 'get_paths',
    'config', 'get_config', 'load_config',
    'AssessmentInputs', 'CompanyProfile', 'DataProfile', 'SecurityControls',
    'ThreatLandscape', 'SimulationResults', 'InvalidAssessmentError',
    'DefaultRng', 'LcgRng', 'RngInUseError',
    'simulate', 'compare_scenarios', 'apply_cloud_override', 'apply_controls',
]
