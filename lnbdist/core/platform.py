"""
Platform detection and release naming for lnbdist.

This module reads the host identifier pair (operating system, CPU architecture)
and translates it into the naming convention used by the lnb release pipeline
(Go-style GOOS/GOARCH names such as 'darwin-arm64' or 'windows-amd64').

Both translations go through explicit finite tables keyed by host name. A name
missing from either table is an unsupported platform; there is no fallback.

Usage:
    from lnbdist.core.platform import detect_platform, resolve_release_target

    info = detect_platform()
    target = resolve_release_target(info.os, info.arch)
    print(target.platform_string())        # e.g. 'linux-amd64'
    print(target.binary_name("lnb"))       # 'lnb' or 'lnb.exe'
"""

import functools
import platform
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from lnbdist.core.exceptions import UnsupportedPlatformError


class ReleaseOS(Enum):
    """Operating systems the release pipeline publishes binaries for."""

    DARWIN = "darwin"
    LINUX = "linux"
    WINDOWS = "windows"


class ReleaseArch(Enum):
    """CPU architectures the release pipeline publishes binaries for."""

    AMD64 = "amd64"
    ARM64 = "arm64"


# Host OS name -> release OS. Keys are the normalized names produced by
# _detect_os() plus the aliases used by other package managers.
OS_TABLE: Dict[str, ReleaseOS] = {
    "macos": ReleaseOS.DARWIN,
    "darwin": ReleaseOS.DARWIN,
    "linux": ReleaseOS.LINUX,
    "windows": ReleaseOS.WINDOWS,
    "win32": ReleaseOS.WINDOWS,
}

# Host architecture name -> release architecture.
ARCH_TABLE: Dict[str, ReleaseArch] = {
    "x64": ReleaseArch.AMD64,
    "amd64": ReleaseArch.AMD64,
    "arm64": ReleaseArch.ARM64,
}


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host identifier pair.

    Attributes:
        os: Normalized OS name ('macos', 'linux', 'windows') or the raw
            lower-cased system name when unknown
        arch: Normalized architecture ('x64', 'arm64', 'x86', 'arm') or the
            raw lower-cased machine name when unknown
    """

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os} {self.arch}"


@dataclass(frozen=True)
class ReleaseTarget:
    """A platform the release pipeline builds for."""

    os: ReleaseOS
    arch: ReleaseArch

    @property
    def is_windows(self) -> bool:
        return self.os is ReleaseOS.WINDOWS

    @property
    def executable_suffix(self) -> str:
        """Suffix appended to executable names ('.exe' on Windows only)."""
        return ".exe" if self.is_windows else ""

    @property
    def supports_permissions(self) -> bool:
        """Whether POSIX permission bits apply to installed files."""
        return not self.is_windows

    def binary_name(self, base: str) -> str:
        """
        Get the executable filename for this target.

        Example:
            >>> ReleaseTarget(ReleaseOS.WINDOWS, ReleaseArch.AMD64).binary_name("lnb")
            'lnb.exe'
        """
        return f"{base}{self.executable_suffix}"

    def platform_string(self) -> str:
        """
        Get the canonical release platform string.

        Example:
            >>> ReleaseTarget(ReleaseOS.DARWIN, ReleaseArch.ARM64).platform_string()
            'darwin-arm64'
        """
        return f"{self.os.value}-{self.arch.value}"

    @classmethod
    def parse(cls, value: str) -> "ReleaseTarget":
        """
        Parse a release platform string such as 'linux-amd64'.

        Raises:
            UnsupportedPlatformError: If either half is not a release name
        """
        os_name, _, arch = value.strip().lower().partition("-")
        try:
            return cls(ReleaseOS(os_name), ReleaseArch(arch))
        except ValueError:
            raise UnsupportedPlatformError(os_name, arch or "<missing>")

    def __str__(self) -> str:
        return self.platform_string()


def resolve_release_target(os_name: str, arch: str) -> ReleaseTarget:
    """
    Translate a host OS name and architecture into a release target.

    The two names are looked up independently; a miss in either table is fatal.

    Args:
        os_name: Host OS name (e.g. 'linux', 'macos', 'win32')
        arch: Host architecture name (e.g. 'x64', 'arm64')

    Returns:
        ReleaseTarget for the pair

    Raises:
        UnsupportedPlatformError: If the OS or the architecture is unmapped;
            the message names both values
    """
    release_os = OS_TABLE.get(os_name.lower())
    release_arch = ARCH_TABLE.get(arch.lower())

    if release_os is None or release_arch is None:
        raise UnsupportedPlatformError(os_name, arch)

    return ReleaseTarget(release_os, release_arch)


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect the host identifier pair.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo with normalized OS and architecture names
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        'windows', 'linux', 'macos', or the lower-cased system name
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "linux":
        return "linux"
    elif system == "darwin":
        return "macos"
    else:
        return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm', or the raw name
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def detect_release_target(info: Optional[PlatformInfo] = None) -> ReleaseTarget:
    """
    Resolve the release target for the host (or a given identifier pair).

    Raises:
        UnsupportedPlatformError: If the host has no release mapping
    """
    if info is None:
        info = detect_platform()
    return resolve_release_target(info.os, info.arch)


def supported_targets() -> List[ReleaseTarget]:
    """
    Get every release target the pipeline can publish.

    Example:
        >>> [t.platform_string() for t in supported_targets()][:2]
        ['darwin-amd64', 'darwin-arm64']
    """
    return [ReleaseTarget(os_, arch) for os_ in ReleaseOS for arch in ReleaseArch]


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "ReleaseOS",
    "ReleaseArch",
    "OS_TABLE",
    "ARCH_TABLE",
    "PlatformInfo",
    "ReleaseTarget",
    "resolve_release_target",
    "detect_platform",
    "detect_release_target",
    "supported_targets",
    "clear_platform_cache",
]
