"""YAML configuration parser for lnbdist.

This module provides parsing and validation for lnbdist.yaml configuration
files. Every section is optional; a missing file yields the defaults used to
publish lnb.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from lnbdist.core.exceptions import ConfigError, UnsupportedPlatformError
from lnbdist.core.platform import ReleaseArch, ReleaseOS, ReleaseTarget

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "lnbdist.yaml"

DEFAULT_DESCRIPTION = (
    "A cross-platform utility that makes command-line tools accessible from "
    "anywhere by creating symbolic links or wrapper scripts in your system's PATH"
)
DEFAULT_REPOSITORY = "https://github.com/muthuishere/lnb"


@dataclass
class FormulaConfig:
    """Homebrew formula descriptor settings."""

    name: str = "lnb"
    description: str = DEFAULT_DESCRIPTION
    homepage: str = DEFAULT_REPOSITORY
    repository: str = DEFAULT_REPOSITORY
    archive_template: str = "{binary}-{os}-{arch}.zip"
    targets: List[ReleaseTarget] = field(
        default_factory=lambda: [
            ReleaseTarget(ReleaseOS.DARWIN, ReleaseArch.ARM64),
            ReleaseTarget(ReleaseOS.DARWIN, ReleaseArch.AMD64),
        ]
    )


@dataclass
class ReleaseConfig:
    """Git release settings."""

    remote: str = "origin"
    tag_prefix: str = "v"


@dataclass
class LnbDistConfig:
    """Complete lnbdist configuration."""

    binary_name: str = "lnb"
    version_file: str = "versions.txt"
    formula: FormulaConfig = field(default_factory=FormulaConfig)
    release: ReleaseConfig = field(default_factory=ReleaseConfig)


def parse_config(config_path: Path) -> LnbDistConfig:
    """
    Parse lnbdist.yaml configuration file.

    Args:
        config_path: Path to lnbdist.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If the file is missing or the configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}")

    if data is None:
        return LnbDistConfig()

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    return _parse_and_validate(data)


def load_config(project_root: Path, config_path: Optional[Path] = None) -> LnbDistConfig:
    """
    Load configuration for a project.

    An explicit config_path must exist; otherwise <project_root>/lnbdist.yaml
    is used when present, and the defaults when not.

    Raises:
        ConfigError: If the configuration is invalid
    """
    if config_path is not None:
        return parse_config(Path(config_path))

    default_path = Path(project_root) / CONFIG_FILENAME
    if default_path.exists():
        logger.debug(f"Loading configuration from {default_path}")
        return parse_config(default_path)

    logger.debug("No configuration file found, using defaults")
    return LnbDistConfig()


def _parse_and_validate(data: dict) -> LnbDistConfig:
    """Parse and validate configuration data."""
    binary_name = _get_str(data, "binary_name", "lnb")
    if not binary_name or "/" in binary_name or "\\" in binary_name:
        raise ConfigError(f"Invalid binary_name: {binary_name!r}")

    return LnbDistConfig(
        binary_name=binary_name,
        version_file=_get_str(data, "version_file", "versions.txt"),
        formula=_parse_formula_config(_get_section(data, "formula"), binary_name),
        release=_parse_release_config(_get_section(data, "release")),
    )


def _parse_formula_config(data: dict, binary_name: str) -> FormulaConfig:
    """Parse formula configuration."""
    defaults = FormulaConfig()
    repository = _get_str(data, "repository", defaults.repository).rstrip("/")

    template = _get_str(data, "archive_template", defaults.archive_template)
    try:
        template.format(binary=binary_name, os="darwin", arch="arm64", version="0.0.0")
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"Invalid formula.archive_template {template!r}: {e}")

    targets = defaults.targets
    if "targets" in data:
        targets = _parse_targets(data["targets"])

    return FormulaConfig(
        name=_get_str(data, "name", binary_name),
        description=_get_str(data, "description", defaults.description),
        homepage=_get_str(data, "homepage", repository),
        repository=repository,
        archive_template=template,
        targets=targets,
    )


def _parse_targets(data) -> List[ReleaseTarget]:
    """Parse the formula target list (e.g. ['darwin-arm64', 'linux-amd64'])."""
    if not isinstance(data, list) or not data:
        raise ConfigError("formula.targets must be a non-empty list")

    targets = []
    for item in data:
        if not isinstance(item, str):
            raise ConfigError(f"formula.targets entries must be strings, got {item!r}")
        try:
            target = ReleaseTarget.parse(item)
        except UnsupportedPlatformError as e:
            raise ConfigError(f"Invalid formula target {item!r}: {e}")
        if target in targets:
            raise ConfigError(f"Duplicate formula target: {item}")
        targets.append(target)

    return targets


def _parse_release_config(data: dict) -> ReleaseConfig:
    """Parse release configuration."""
    return ReleaseConfig(
        remote=_get_str(data, "remote", "origin"),
        tag_prefix=_get_str(data, "tag_prefix", "v"),
    )


def _get_section(data: dict, key: str) -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return value


def _get_str(data: dict, key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string, got {type(value).__name__}")
    return value
