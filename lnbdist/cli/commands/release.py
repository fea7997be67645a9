"""
Release command implementation.

Tags the version in versions.txt and pushes the tag unless --local is given.
"""

import logging

from lnbdist.cli.utils import ask_yes_no, load_project_config, resolve_project_root
from lnbdist.core.exceptions import ReleaseError
from lnbdist.release.git import GitRepository
from lnbdist.release.manager import release

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the release command.

    Args:
        args: Parsed command-line arguments (local, yes)

    Returns:
        Exit code (0 for success)
    """
    config = load_project_config(args)
    root = resolve_project_root(args)
    git = GitRepository(root, remote=config.release.remote)

    if args.local:
        logger.info("Local mode: will not push to remote")

    try:
        result = release(
            root,
            git,
            config,
            confirm=lambda question: ask_yes_no(question, assume_yes=args.yes),
            local=args.local,
        )
    except (ReleaseError, OSError) as e:
        logger.error(str(e))
        return 1

    print()
    if not result.pushed:
        print("Local release complete!")
        print(f"  Git tag {result.tag} created locally")
        print("  To trigger the release workflow later, push the tag:")
        print(f"    git push {config.release.remote} {result.tag}")
    else:
        print("Release triggered!")
        if result.actions_url:
            print(f"  Check the release build: {result.actions_url}")

    return 0
