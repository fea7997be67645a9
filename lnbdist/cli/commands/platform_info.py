"""
Platform command implementation.

Shows the host identifier pair and the release target it maps to.
"""

import logging

from lnbdist.cli.utils import load_project_config, resolve_host
from lnbdist.core.exceptions import UnsupportedPlatformError
from lnbdist.core.platform import resolve_release_target, supported_targets

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the platform command.

    Returns:
        Exit code (0 when the host maps to a release target, 1 otherwise)
    """
    config = load_project_config(args)
    host = resolve_host(args)

    print(f"Host OS:           {host.os}")
    print(f"Host architecture: {host.arch}")

    try:
        target = resolve_release_target(host.os, host.arch)
    except UnsupportedPlatformError as e:
        logger.error(str(e))
        print("Supported targets: " + ", ".join(str(t) for t in supported_targets()))
        return 1

    print(f"Release target:    {target}")
    print(f"Binary name:       {target.binary_name(config.binary_name)}")
    return 0
