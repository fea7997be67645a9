"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
ensure consistent behavior.
"""

import logging
from pathlib import Path

from lnbdist.config.parser import LnbDistConfig, load_config
from lnbdist.core.platform import PlatformInfo, detect_platform
from lnbdist.release.versioning import read_version_file

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def resolve_project_root(args) -> Path:
    """Resolve the project root from parsed arguments (default: cwd)."""
    root = getattr(args, "project_root", None) or Path.cwd()
    return Path(root).resolve()


def load_project_config(args) -> LnbDistConfig:
    """
    Load lnbdist.yaml for the project named by the parsed arguments.

    Raises:
        ConfigError: If the configuration is invalid
    """
    return load_config(resolve_project_root(args), getattr(args, "config", None))


def resolve_release_version(args, config: LnbDistConfig) -> str:
    """
    Release version from --version, falling back to versions.txt.

    Raises:
        OSError: If versions.txt is needed and cannot be read
    """
    explicit = getattr(args, "release_version", None)
    if explicit:
        return explicit.removeprefix(config.release.tag_prefix)

    version_file = resolve_project_root(args) / config.version_file
    logger.debug(f"Reading release version from {version_file}")
    return read_version_file(version_file)


def resolve_host(args) -> PlatformInfo:
    """Host identifier pair, with --os/--arch overriding detection."""
    os_name = getattr(args, "os_name", None)
    arch = getattr(args, "arch", None)

    if os_name and arch:
        return PlatformInfo(os=os_name, arch=arch)

    detected = detect_platform()
    return PlatformInfo(os=os_name or detected.os, arch=arch or detected.arch)


# ============================================================================
# User Interaction
# ============================================================================


def ask_yes_no(question: str, assume_yes: bool = False) -> bool:
    """
    Ask a y/N question on stdin.

    Returns:
        True for 'y'/'yes'; False otherwise, including on EOF
    """
    if assume_yes:
        return True

    try:
        response = input(f"{question} (y/N) ")
    except EOFError:
        return False

    return response.strip().lower() in ("y", "yes")
