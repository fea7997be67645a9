"""Git operations used by the release workflow.

Every call shells out to the `git` executable in the repository root. Query
helpers return None/False when git cannot answer; mutating helpers raise
GitError.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from lnbdist.core.exceptions import GitError

logger = logging.getLogger(__name__)

GITHUB_SSH_PREFIX = "git@github.com:"
GITHUB_HTTPS_PREFIX = "https://github.com/"


class GitRepository:
    """A git working tree rooted at `root`."""

    def __init__(self, root: Path, remote: str = "origin"):
        self.root = Path(root)
        self.remote = remote

    def _run(self, *args: str) -> str:
        cmd = ["git", *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd, cwd=self.root, capture_output=True, text=True
            )
        except (FileNotFoundError, OSError) as e:
            raise GitError(list(args), str(e)) from e

        if result.returncode != 0:
            raise GitError(list(args), result.stderr.strip() or f"exit code {result.returncode}")

        return result.stdout

    def is_repo(self) -> bool:
        """Check whether root is inside a git repository."""
        try:
            self._run("rev-parse", "--git-dir")
            return True
        except GitError:
            return False

    def status_entries(self) -> List[str]:
        """
        Paths with uncommitted changes, from `git status --porcelain`.

        Raises:
            GitError: If status cannot be read
        """
        output = self._run("status", "--porcelain")
        paths = []
        for line in output.splitlines():
            # Porcelain v1: two status columns, a space, then the path.
            path = line[3:].strip()
            if " -> " in path:
                path = path.split(" -> ", 1)[1]
            if path:
                paths.append(path.strip('"'))
        return paths

    def is_dirty(self) -> bool:
        """Check for uncommitted changes; treated as dirty if git fails."""
        try:
            return bool(self.status_entries())
        except GitError as e:
            logger.warning(f"Failed to check git status: {e}")
            return True

    def dirty_files(self, ignore: Optional[List[str]] = None) -> List[str]:
        """Uncommitted paths, excluding those listed in ignore."""
        ignored = set(ignore or [])
        return [path for path in self.status_entries() if path not in ignored]

    def add(self, *paths: str) -> None:
        self._run("add", *paths)

    def commit(self, message: str) -> None:
        self._run("commit", "-m", message)

    def create_tag(self, tag: str, message: str) -> None:
        """Create an annotated tag."""
        self._run("tag", "-a", tag, "-m", message)

    def push_tag(self, tag: str) -> None:
        self._run("push", self.remote, tag)

    def last_tag(self, prefix: str = "v") -> Optional[str]:
        """
        Most recent tag reachable from HEAD, with prefix stripped.

        Returns:
            Tag version string, or None if there are no tags
        """
        try:
            tag = self._run("describe", "--tags", "--abbrev=0").strip()
        except GitError as e:
            logger.debug(f"No tag found: {e}")
            return None

        if prefix and tag.startswith(prefix):
            return tag[len(prefix):]
        return tag

    def remote_url(self) -> Optional[str]:
        """
        Browser URL of the remote; GitHub SSH URLs are converted to HTTPS.

        Example:
            git@github.com:muthuishere/lnb.git -> https://github.com/muthuishere/lnb
        """
        try:
            url = self._run("remote", "get-url", self.remote).strip()
        except GitError:
            return None

        return normalize_remote_url(url)


def normalize_remote_url(url: str) -> str:
    """Convert a GitHub SSH remote to its HTTPS form."""
    if url.startswith(GITHUB_SSH_PREFIX):
        url = GITHUB_HTTPS_PREFIX + url[len(GITHUB_SSH_PREFIX):]
        url = url.removesuffix(".git")
    return url
