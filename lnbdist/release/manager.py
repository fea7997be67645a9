"""
Version bump and release tagging.

bump_version() advances versions.txt, commits it and creates a local tag.
release() tags the current version (committing pending work if allowed) and
pushes the tag so the CI release workflow builds and publishes the binaries.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from lnbdist.config.parser import LnbDistConfig
from lnbdist.core.exceptions import ReleaseError
from lnbdist.release.git import GitRepository
from lnbdist.release.versioning import (
    Version,
    read_version_file,
    write_version_file,
)

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


@dataclass
class BumpResult:
    """Outcome of a version bump."""

    old_version: str
    new_version: str
    tag: str


@dataclass
class ReleaseResult:
    """Outcome of a release."""

    version: str
    tag: str
    pushed: bool
    actions_url: Optional[str] = None


def bump_version(
    project_root: Path, kind: str, git: GitRepository, config: LnbDistConfig
) -> BumpResult:
    """
    Bump versions.txt, commit it and create an annotated tag.

    Only versions.txt may have uncommitted changes beforehand.

    Raises:
        VersionFormatError: Invalid bump kind or current version
        ReleaseError: Working tree has other uncommitted changes
        GitError: A git command failed
        OSError: versions.txt cannot be read or written
    """
    version_file = Path(project_root) / config.version_file

    current = read_version_file(version_file)
    new_version = Version.parse(current).bump(kind)
    logger.info(f"Bumping version from {current} to {new_version}")

    others = git.dirty_files(ignore=[config.version_file])
    if others:
        raise ReleaseError(
            "Git working directory is not clean. Uncommitted changes in: "
            + ", ".join(others)
        )

    write_version_file(version_file, new_version)
    logger.info(f"Updated {config.version_file} to {new_version}")

    git.add(config.version_file)
    git.commit(f"Bump version to {new_version}")
    logger.info(f"Committed version bump to {new_version}")

    tag = f"{config.release.tag_prefix}{new_version}"
    git.create_tag(tag, f"Release {new_version}")
    logger.info(f"Created git tag {tag}")

    return BumpResult(old_version=current, new_version=str(new_version), tag=tag)


def release(
    project_root: Path,
    git: GitRepository,
    config: LnbDistConfig,
    confirm: Confirm,
    local: bool = False,
) -> ReleaseResult:
    """
    Tag the version in versions.txt and, unless local, push the tag.

    Args:
        project_root: Repository root
        git: Repository wrapper
        config: Project configuration
        confirm: Asked before committing pending changes and before tagging
        local: Create the tag without pushing it

    Raises:
        ReleaseError: Not a repository, declined prompt, or version unchanged
        GitError: A git command failed
    """
    if not git.is_repo():
        raise ReleaseError("Not in a git repository")

    version_file = Path(project_root) / config.version_file

    if git.is_dirty():
        logger.warning("Git working directory is dirty (uncommitted changes)")
        if not confirm("Do you want to commit all changes first?"):
            raise ReleaseError("Please commit your changes before releasing")

        version = read_version_file(version_file)
        git.add(".")
        git.commit(
            f"Prepare release {config.release.tag_prefix}{version}\n\n"
            f"- Update version to {version}"
        )
        logger.info("Changes committed")

    version = read_version_file(version_file)
    logger.info(f"Current version: {version}")

    last_tagged = git.last_tag(config.release.tag_prefix)
    if last_tagged is None:
        logger.info("No previous tag found; this might be the first release")
    else:
        logger.info(f"Last tagged version: {last_tagged}")
        if last_tagged == version:
            raise ReleaseError(
                f"Version {version} is the same as the last tagged version. "
                "Run 'lnbdist bump patch|minor|major' first."
            )

    question = "Create local git tag (no push)?" if local else "Create git tag and trigger release?"
    if not confirm(question):
        raise ReleaseError("Release cancelled")

    tag = f"{config.release.tag_prefix}{version}"
    git.create_tag(tag, f"Release {tag}")
    logger.info(f"Created git tag: {tag}")

    if local:
        return ReleaseResult(version=version, tag=tag, pushed=False)

    git.push_tag(tag)
    logger.info(f"Pushed git tag: {tag}")

    repo_url = git.remote_url()
    actions_url = f"{repo_url}/actions" if repo_url else None
    return ReleaseResult(version=version, tag=tag, pushed=True, actions_url=actions_url)
