#!/usr/bin/env python3
"""
CybRisk - Path Resolver
Resolves the per-user home used for configuration and optional log files.
All paths are relative to CYBRISK_HOME (env var, or ~/.cybrisk).
"""

import os
from pathlib import Path
from typing import Optional


class CybRiskPaths:
    """Path resolver for configuration and log locations."""

    _instance: Optional['CybRiskPaths'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._resolve_home()

    def _resolve_home(self):
        """Resolve CYBRISK_HOME from environment or fall back to ~/.cybrisk."""
        if os.environ.get('CYBRISK_HOME'):
            self.home = Path(os.environ['CYBRISK_HOME']).expanduser().resolve()
        else:
            self.home = Path.home() / '.cybrisk'

    @property
    def config(self) -> Path:
        """Configuration directory."""
        return self.home / 'config'

    @property
    def config_active(self) -> Path:
        """Active configuration file (CYBRISK_CONFIG overrides)."""
        override = os.environ.get('CYBRISK_CONFIG')
        if override:
            return Path(override).expanduser()
        return self.config / 'config.yaml'

    @property
    def data(self) -> Path:
        """Data directory."""
        return self.home / 'data'

    @property
    def logs(self) -> Path:
        """Execution logs."""
        return self.data / 'logs'

    def log_file(self, name: str) -> Path:
        """Get path for a log file."""
        self.logs.mkdir(parents=True, exist_ok=True)
        return self.logs / f"{name}.log"

    def __str__(self) -> str:
        return f"CybRiskPaths(home={self.home})"

    def __repr__(self) -> str:
        return self.__str__()


# Singleton instance for easy import
paths = CybRiskPaths()


def get_paths() -> CybRiskPaths:
    """Get the singleton paths instance."""
    return paths
