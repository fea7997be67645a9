"""
Postinstall command implementation.

Installs the binary shipped inside an unpacked platform package. Exit code 1
on unsupported platform, missing binary, or copy failure; a failing smoke
test is a warning and still exits 0.
"""

import logging
from pathlib import Path

from lnbdist.cli.utils import load_project_config, resolve_host, resolve_project_root
from lnbdist.core.exceptions import InstallError, UnsupportedPlatformError
from lnbdist.install.postinstall import PostInstaller

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the postinstall command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for a fatal install failure)
    """
    config = load_project_config(args)
    package_dir = Path(args.package_dir) if args.package_dir else resolve_project_root(args)

    installer = PostInstaller(
        package_dir=package_dir,
        bin_dir=args.bin_dir,
        binary_name=config.binary_name,
        host=resolve_host(args),
    )

    try:
        installer.run()
    except (UnsupportedPlatformError, InstallError) as e:
        logger.error(str(e))
        return 1

    return 0
