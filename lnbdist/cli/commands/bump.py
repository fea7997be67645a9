"""
Bump command implementation.

Increments versions.txt, commits it and creates a local tag.
"""

import logging

from lnbdist.cli.utils import load_project_config, resolve_project_root
from lnbdist.core.exceptions import ReleaseError
from lnbdist.release.git import GitRepository
from lnbdist.release.manager import bump_version

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the bump command.

    Args:
        args: Parsed command-line arguments (kind)

    Returns:
        Exit code (0 for success)
    """
    config = load_project_config(args)
    root = resolve_project_root(args)
    git = GitRepository(root, remote=config.release.remote)

    try:
        result = bump_version(root, args.kind, git, config)
    except (ReleaseError, OSError) as e:
        logger.error(str(e))
        return 1

    print()
    print("Version bump complete!")
    print(f"  Version: {result.old_version} -> {result.new_version}")
    print(f"  Tag:     {result.tag} (local)")
    print()
    print("Next steps:")
    print("  lnbdist release           # push the tag and trigger the release workflow")
    print("  lnbdist release --local   # keep everything local")

    return 0
