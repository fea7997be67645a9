"""
Formula command implementation.

Sub-commands:
    render   Render the Homebrew formula to stdout or a file
    install  Perform the formula install step on this host
"""

import logging
from pathlib import Path

from lnbdist.cli.utils import (
    load_project_config,
    resolve_host,
    resolve_release_version,
)
from lnbdist.core.exceptions import FormulaError, UnsupportedPlatformError
from lnbdist.core.platform import resolve_release_target
from lnbdist.core.verification import parse_hash_file
from lnbdist.install.formula import (
    FormulaInstaller,
    archive_checksums,
    build_formula,
    render_formula,
    write_formula,
)

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the formula command.

    Args:
        args: Parsed command-line arguments with formula_command field

    Returns:
        Exit code (0 for success)
    """
    handlers = {"render": run_render, "install": run_install}
    handler = handlers.get(args.formula_command)
    if handler is None:
        logger.error(f"Unknown formula command: {args.formula_command}")
        return 1

    return handler(args)


def _load_formula(args):
    config = load_project_config(args)
    version = resolve_release_version(args, config)

    checksums = {}
    if args.checksums:
        checksums = parse_hash_file(Path(args.checksums))
        logger.debug(f"Loaded {len(checksums)} checksum(s) from {args.checksums}")

    archives = getattr(args, "archives", None)
    if archives:
        checksums.update(archive_checksums(config, version, Path(archives), checksums))

    return build_formula(config, version, checksums)


def run_render(args) -> int:
    """Render the formula."""
    try:
        formula = _load_formula(args)
        if args.output:
            write_formula(formula, Path(args.output), strict=args.strict)
        else:
            print(render_formula(formula, strict=args.strict), end="")
    except (FormulaError, OSError) as e:
        logger.error(str(e))
        return 1

    return 0


def run_install(args) -> int:
    """Install the binary for this host from the formula table."""
    host = resolve_host(args)

    try:
        formula = _load_formula(args)
        target = resolve_release_target(host.os, host.arch)
        installed = FormulaInstaller(formula).install(Path(args.prefix), target)
    except UnsupportedPlatformError as e:
        logger.error(str(e))
        return 1
    except (FormulaError, OSError) as e:
        logger.error(f"Install failed: {e}")
        return 1

    print(f"{formula.binary_name} {formula.version} installed to {installed}")
    return 0
