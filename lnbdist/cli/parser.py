"""
lnbdist CLI argument parser.

This module implements the command-line interface for lnbdist using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from lnbdist.install.postinstall import DEFAULT_BINARY_NAME
from lnbdist.release.versioning import BUMP_KINDS

try:
    from importlib.metadata import version

    __version__ = version("lnbdist")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """lnbdist command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="lnbdist",
            description=f"lnbdist - install, package and release the {DEFAULT_BINARY_NAME} binary",
            epilog='Use "lnbdist COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"lnbdist {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./lnbdist.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_postinstall_command(subparsers)
        self._add_formula_command(subparsers)
        self._add_bump_command(subparsers)
        self._add_release_command(subparsers)
        self._add_platform_command(subparsers)

        return parser

    @staticmethod
    def _add_host_overrides(parser):
        parser.add_argument(
            "--os",
            dest="os_name",
            metavar="NAME",
            help="Host operating system name (default: detected)",
        )
        parser.add_argument(
            "--arch",
            metavar="NAME",
            help="Host CPU architecture name (default: detected)",
        )

    def _add_postinstall_command(self, subparsers):
        """Add 'postinstall' subcommand."""
        parser = subparsers.add_parser(
            "postinstall",
            help="Install the binary from an unpacked platform package",
            description=(
                "Locate the platform binary inside a published package, copy it "
                "into the package's bin directory and verify it runs"
            ),
        )
        parser.add_argument(
            "--package-dir",
            type=Path,
            metavar="DIR",
            help="Root of the unpacked package (default: project root)",
        )
        parser.add_argument(
            "--bin-dir",
            type=Path,
            metavar="DIR",
            help="Destination directory (default: <package-dir>/bin)",
        )
        self._add_host_overrides(parser)

    def _add_formula_command(self, subparsers):
        """Add 'formula' subcommand with render/install sub-commands."""
        parser = subparsers.add_parser(
            "formula",
            help="Render or apply the Homebrew formula",
            description="Work with the per-platform formula descriptor",
        )
        formula_sub = parser.add_subparsers(
            dest="formula_command", help="Formula commands", metavar="SUBCOMMAND"
        )

        render = formula_sub.add_parser(
            "render",
            help="Render the Ruby formula",
            description="Render the Homebrew formula from the configured platform table",
        )
        render.add_argument(
            "--version",
            dest="release_version",
            metavar="VERSION",
            help="Release version (default: contents of versions.txt)",
        )
        render.add_argument(
            "--checksums",
            type=Path,
            metavar="FILE",
            help="Release checksum file (SHA256SUMS format) used to fill digests",
        )
        render.add_argument(
            "--archives",
            type=Path,
            metavar="DIR",
            help="Directory of built release archives to hash (verified against --checksums)",
        )
        render.add_argument(
            "--output",
            "-o",
            type=Path,
            metavar="FILE",
            help="Write the formula to FILE instead of stdout",
        )
        render.add_argument(
            "--strict",
            action="store_true",
            help="Fail if any platform still has a placeholder checksum",
        )

        install = formula_sub.add_parser(
            "install",
            help="Download and install the binary for this host",
            description="Perform the formula install step and its version self-check",
        )
        install.add_argument(
            "--prefix",
            type=Path,
            required=True,
            metavar="DIR",
            help="Installation prefix; the binary is placed in DIR/bin",
        )
        install.add_argument(
            "--version",
            dest="release_version",
            metavar="VERSION",
            help="Release version (default: contents of versions.txt)",
        )
        install.add_argument(
            "--checksums",
            type=Path,
            metavar="FILE",
            help="Release checksum file used to verify the download",
        )
        self._add_host_overrides(install)

    def _add_bump_command(self, subparsers):
        """Add 'bump' subcommand."""
        parser = subparsers.add_parser(
            "bump",
            help="Bump the version in versions.txt",
            description="Update versions.txt, commit the change and create a local tag",
        )
        parser.add_argument(
            "kind",
            choices=BUMP_KINDS,
            help="Which part of the version to increment",
        )

    def _add_release_command(self, subparsers):
        """Add 'release' subcommand."""
        parser = subparsers.add_parser(
            "release",
            help="Tag the current version and trigger the release workflow",
            description=(
                "Create a git tag for the version in versions.txt and push it "
                "to trigger the release workflow"
            ),
        )
        parser.add_argument(
            "--local",
            action="store_true",
            help="Create git tag locally without pushing to remote",
        )
        parser.add_argument(
            "--yes",
            "-y",
            action="store_true",
            help="Answer yes to all prompts",
        )

    def _add_platform_command(self, subparsers):
        """Add 'platform' subcommand."""
        parser = subparsers.add_parser(
            "platform",
            help="Show host platform and release target",
            description="Show the detected host platform and its release naming",
        )
        self._add_host_overrides(parser)

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        if args.command == "formula" and not getattr(args, "formula_command", None):
            logger.error("No formula sub-command specified (render, install)")
            return 1

        command_map = {
            "postinstall": "lnbdist.cli.commands.postinstall",
            "formula": "lnbdist.cli.commands.formula",
            "bump": "lnbdist.cli.commands.bump",
            "release": "lnbdist.cli.commands.release",
            "platform": "lnbdist.cli.commands.platform_info",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
