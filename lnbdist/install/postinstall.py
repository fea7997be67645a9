"""
Post-install locator/copier.

Runs after a package manager unpacks a platform-specific lnb package. It maps
the host OS and architecture to the release naming convention, finds the
binary among a fixed list of candidate paths, copies it into the package's
local bin directory, marks it executable, and smoke-tests it.

The sequence is strictly linear. Every step before the smoke test is fatal on
failure; a failing smoke test is only reported as a warning.

Usage:
    from lnbdist.install.postinstall import PostInstaller

    result = PostInstaller(Path("node_modules/lnb-darwin-arm64")).run()
    print(result.installed_path)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from lnbdist.core.binary_check import VersionCheckResult, run_version_check
from lnbdist.core.exceptions import BinaryCopyError, BinaryNotFoundError
from lnbdist.core.filesystem import (
    FileCopyError,
    copy_file,
    ensure_directory,
    is_same_file,
    make_executable,
)
from lnbdist.core.platform import (
    PlatformInfo,
    ReleaseTarget,
    detect_platform,
    resolve_release_target,
)

logger = logging.getLogger(__name__)

DEFAULT_BINARY_NAME = "lnb"


@dataclass
class PostInstallResult:
    """Outcome of a successful post-install run."""

    target: ReleaseTarget
    source_path: Path
    installed_path: Path
    verification: VersionCheckResult


def candidate_paths(package_dir: Path, binary_name: str) -> List[Path]:
    """
    Build the ordered list of places the binary may have been published to.

    The package root comes first; the bin subdirectory is the fallback.
    """
    return [package_dir / binary_name, package_dir / "bin" / binary_name]


def locate_binary(candidates: List[Path], binary_name: str) -> Path:
    """
    Return the first existing candidate.

    Raises:
        BinaryNotFoundError: If none exist; lists every searched path
    """
    for path in candidates:
        if path.exists():
            logger.info(f"Found binary at: {path}")
            return path

    raise BinaryNotFoundError(binary_name, candidates)


class PostInstaller:
    """
    Install the published binary into the package's local bin directory.

    Args:
        package_dir: Root of the unpacked platform package
        bin_dir: Destination directory (default: <package_dir>/bin)
        binary_name: Base executable name, without platform suffix
        host: Host identifier pair (default: detected)
    """

    def __init__(
        self,
        package_dir: Path,
        bin_dir: Optional[Path] = None,
        binary_name: str = DEFAULT_BINARY_NAME,
        host: Optional[PlatformInfo] = None,
    ):
        self.package_dir = Path(package_dir)
        self.bin_dir = Path(bin_dir) if bin_dir else self.package_dir / "bin"
        self.binary_name = binary_name
        self.host = host or detect_platform()

    def run(self) -> PostInstallResult:
        """
        Execute the install sequence.

        Returns:
            PostInstallResult describing what was installed

        Raises:
            UnsupportedPlatformError: Host OS or architecture is unmapped
            BinaryNotFoundError: No candidate path exists
            BinaryCopyError: The copy failed
        """
        logger.info(f"Installing {self.binary_name} for {self.host}...")

        target = resolve_release_target(self.host.os, self.host.arch)
        filename = target.binary_name(self.binary_name)

        source = locate_binary(candidate_paths(self.package_dir, filename), filename)

        ensure_directory(self.bin_dir)
        installed = self.bin_dir / filename

        self._copy(source, installed)

        if target.supports_permissions:
            try:
                make_executable(installed)
            except OSError as e:
                raise BinaryCopyError(f"Failed to install {self.binary_name}: {e}") from e

        logger.info(f"{self.binary_name} installed successfully to {installed}")

        verification = run_version_check(installed)
        if verification.passed:
            logger.info(f"Binary verification: {verification.output}")
        else:
            logger.warning(f"Binary verification failed: {verification.message}")

        return PostInstallResult(
            target=target,
            source_path=source,
            installed_path=installed,
            verification=verification,
        )

    def _copy(self, source: Path, destination: Path) -> None:
        if is_same_file(source, destination):
            logger.debug(f"Binary already in place at {destination}")
            return

        try:
            copy_file(source, destination)
        except FileCopyError as e:
            raise BinaryCopyError(f"Failed to install {self.binary_name}: {e}") from e


__all__ = [
    "DEFAULT_BINARY_NAME",
    "PostInstallResult",
    "PostInstaller",
    "candidate_paths",
    "locate_binary",
]
