"""Semantic version handling for versions.txt."""

import logging
from dataclasses import dataclass
from pathlib import Path

from lnbdist.core.exceptions import VersionFormatError
from lnbdist.core.filesystem import atomic_write

logger = logging.getLogger(__name__)

BUMP_KINDS = ("major", "minor", "patch")


@dataclass(frozen=True, order=True)
class Version:
    """A major.minor.patch version."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "Version":
        """
        Parse 'major.minor.patch'.

        Raises:
            VersionFormatError: If there are not exactly three integer parts
        """
        text = text.strip()
        parts = text.split(".")
        if len(parts) != 3:
            raise VersionFormatError(
                f"Invalid version format '{text}'. Expected format: major.minor.patch"
            )

        numbers = []
        for name, part in zip(("major", "minor", "patch"), parts):
            if not part.isdigit():
                raise VersionFormatError(f"Error parsing {name} version '{part}'")
            numbers.append(int(part))

        return cls(*numbers)

    def bump(self, kind: str) -> "Version":
        """
        Return the next version for a bump kind.

        Example:
            >>> Version(0, 2, 7).bump("minor")
            Version(major=0, minor=3, patch=0)
        """
        kind = kind.lower()
        if kind == "major":
            return Version(self.major + 1, 0, 0)
        elif kind == "minor":
            return Version(self.major, self.minor + 1, 0)
        elif kind == "patch":
            return Version(self.major, self.minor, self.patch + 1)

        raise VersionFormatError(
            f"Invalid bump type '{kind}'. Use major, minor, or patch."
        )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def read_version_file(path: Path) -> str:
    """Read the raw version string from versions.txt (whitespace stripped)."""
    return Path(path).read_text(encoding="utf-8").strip()


def write_version_file(path: Path, version: Version) -> None:
    """Write a version to versions.txt (no trailing newline)."""
    atomic_write(path, str(version))
    logger.debug(f"Wrote version {version} to {path}")
