"""Configuration module for lnbdist.

This module provides YAML configuration parsing and validation for lnbdist.yaml.
"""

from lnbdist.config.parser import (
    CONFIG_FILENAME,
    FormulaConfig,
    ReleaseConfig,
    LnbDistConfig,
    parse_config,
    load_config,
)
from lnbdist.core.exceptions import ConfigError

__all__ = [
    "CONFIG_FILENAME",
    "FormulaConfig",
    "ReleaseConfig",
    "LnbDistConfig",
    "ConfigError",
    "parse_config",
    "load_config",
]
