"""
Core functionality for lnbdist.

This package contains the foundational modules the installers and release
helpers depend on.
"""

from .platform import (
    ReleaseOS,
    ReleaseArch,
    PlatformInfo,
    ReleaseTarget,
    resolve_release_target,
    detect_platform,
    detect_release_target,
    supported_targets,
    clear_platform_cache,
)

from .binary_check import (
    VersionCheckResult,
    run_version_check,
)

from .exceptions import (
    LnbDistError,
    PlatformError,
    UnsupportedPlatformError,
    InstallError,
    BinaryNotFoundError,
    BinaryCopyError,
    FormulaError,
    FormulaInstallError,
    PlaceholderChecksumError,
    ReleaseError,
    VersionFormatError,
    GitError,
    ConfigError,
)

__all__ = [
    "ReleaseOS",
    "ReleaseArch",
    "PlatformInfo",
    "ReleaseTarget",
    "resolve_release_target",
    "detect_platform",
    "detect_release_target",
    "supported_targets",
    "clear_platform_cache",
    "VersionCheckResult",
    "run_version_check",
    "LnbDistError",
    "PlatformError",
    "UnsupportedPlatformError",
    "InstallError",
    "BinaryNotFoundError",
    "BinaryCopyError",
    "FormulaError",
    "FormulaInstallError",
    "PlaceholderChecksumError",
    "ReleaseError",
    "VersionFormatError",
    "GitError",
    "ConfigError",
]
