"""Release helpers: versions.txt bumps and git tagging."""

from lnbdist.release.git import GitRepository
from lnbdist.release.manager import BumpResult, ReleaseResult, bump_version, release
from lnbdist.release.versioning import Version, read_version_file, write_version_file

__all__ = [
    "GitRepository",
    "BumpResult",
    "ReleaseResult",
    "bump_version",
    "release",
    "Version",
    "read_version_file",
    "write_version_file",
]
