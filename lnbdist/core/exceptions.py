"""
Centralized exception hierarchy for lnbdist.

This module defines the custom exceptions raised across the codebase.
Library code raises these; CLI commands catch them and map them to exit codes.
"""

from pathlib import Path
from typing import List


# ============================================================================
# Base Exceptions
# ============================================================================


class LnbDistError(Exception):
    """Base exception for all lnbdist errors."""

    pass


# ============================================================================
# Platform Exceptions
# ============================================================================


class PlatformError(LnbDistError):
    """Base exception for platform mapping errors."""

    pass


class UnsupportedPlatformError(PlatformError):
    """Raised when an OS/architecture pair has no release mapping."""

    def __init__(self, os_name: str, arch: str, reason: str = ""):
        self.os_name = os_name
        self.arch = arch
        msg = f"Unsupported platform: {os_name} {arch}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ============================================================================
# Install Exceptions
# ============================================================================


class InstallError(LnbDistError):
    """Base exception for binary installation errors."""

    pass


class BinaryNotFoundError(InstallError):
    """Raised when none of the candidate paths holds the binary."""

    def __init__(self, binary_name: str, searched: List[Path]):
        self.binary_name = binary_name
        self.searched = list(searched)
        lines = [f"Could not find {binary_name} binary for your platform", "Searched in:"]
        lines.extend(f"  {path}" for path in self.searched)
        super().__init__("\n".join(lines))


class BinaryCopyError(InstallError):
    """Raised when the located binary cannot be copied into place."""

    pass


# ============================================================================
# Formula Exceptions
# ============================================================================


class FormulaError(LnbDistError):
    """Base exception for formula descriptor errors."""

    pass


class FormulaInstallError(FormulaError):
    """Raised when the formula install step or its self-check fails."""

    pass


class PlaceholderChecksumError(FormulaError):
    """Raised when a strict formula still carries placeholder checksums."""

    pass


# ============================================================================
# Release Exceptions
# ============================================================================


class ReleaseError(LnbDistError):
    """Base exception for release workflow errors."""

    pass


class VersionFormatError(ReleaseError):
    """Invalid version string or bump kind."""

    pass


class GitError(ReleaseError):
    """Raised when a git command fails."""

    def __init__(self, command: List[str], message: str):
        self.command = list(command)
        super().__init__(f"git {' '.join(command)} failed: {message}")


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(LnbDistError):
    """Configuration parsing or validation error."""

    pass
