#!/usr/bin/env python3
"""
CybRisk - Configuration Manager
Loads simulation, logging and output settings from YAML with built-in defaults.
"""

import copy
import logging
from typing import Any, Dict, Optional

import yaml

from .paths import paths


class Config:
    """Configuration manager with engine defaults."""

    _instance: Optional['Config'] = None

    DEFAULTS = {
        'version': '1.0.0',
        'simulation': {
            'default_iterations': 10_000,
            'comparison_iterations': 100_000,
            'max_iterations': 1_000_000,
        },
        'logging': {
            'level': 'INFO',
            'console_level': 'WARNING',
            'file_enabled': False,
            'max_bytes': 10 * 1024 * 1024,
            'backup_count': 30,
        },
        'output': {
            'include_raw_losses': False,
        },
    }

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._config: Dict[str, Any] = {}
        self._load()

    def _load(self):
        """Load configuration from file, or use defaults when none exists."""
        config_file = paths.config_active

        if config_file.exists():
            try:
                with open(config_file, 'r') as f:
                    loaded = yaml.safe_load(f) or {}
                if not isinstance(loaded, dict):
                    raise ValueError(f"expected a mapping, got {type(loaded).__name__}")
                self._config = self._deep_merge(copy.deepcopy(self.DEFAULTS), loaded)
            except (OSError, yaml.YAMLError, ValueError) as e:
                # logger.py depends on this module, so use stdlib logging directly
                logging.getLogger('cybrisk.config').warning(
                    "Failed to load config %s, using defaults: %s", config_file, e
                )
                self._config = copy.deepcopy(self.DEFAULTS)
        else:
            self._config = copy.deepcopy(self.DEFAULTS)

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge override into base."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def save(self):
        """Save configuration to file."""
        config_file = paths.config_active
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w') as f:
            yaml.dump(self._config, f, default_flow_style=False, sort_keys=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value using dot notation (e.g., 'simulation.default_iterations')."""
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any):
        """Set a config value using dot notation."""
        keys = key.split('.')
        config = self._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    def get_default_iterations(self) -> int:
        """Trial count used when simulate() is called without one."""
        return int(self.get('simulation.default_iterations', 10_000))

    def get_comparison_iterations(self) -> int:
        """Trial count used per scenario by compare_scenarios()."""
        return int(self.get('simulation.comparison_iterations', 100_000))

    def get_max_iterations(self) -> int:
        """Upper bound on trial counts accepted from the command line."""
        return int(self.get('simulation.max_iterations', 1_000_000))

    def to_dict(self) -> Dict[str, Any]:
        """Return full config as dictionary."""
        return copy.deepcopy(self._config)

    def reload(self):
        """Reload configuration from file."""
        self._initialized = False
        self.__init__()


# Singleton instance
config = Config()


def get_config() -> Config:
    """Get the singleton config instance."""
    return config


def load_config() -> Dict[str, Any]:
    """Load and return config as dictionary."""
    return config.to_dict()
