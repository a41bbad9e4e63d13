"""Resolver configuration package.

Configuration Precedence (highest to lowest):
1. Explicit overrides
2. Environment variables (RECURSICA_*)
3. Project config (.recursica/config.json)
4. Defaults
"""

from .loader import ConfigLoader, load_config
from .models import DEFAULT_CONFIG, LoggingSettings, ResolverConfig

__all__ = [
    "ConfigLoader",
    "load_config",
    "DEFAULT_CONFIG",
    "LoggingSettings",
    "ResolverConfig",
]
