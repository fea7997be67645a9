"""
Tests for CLI argument parsing and dispatch.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from lnbdist.cli.parser import CLI


class TestArgumentParsing:
    """Tests for argument parsing."""

    def test_postinstall_arguments(self, tmp_path):
        args = CLI().parse_args(
            [
                "postinstall",
                "--package-dir",
                str(tmp_path),
                "--bin-dir",
                str(tmp_path / "bin"),
                "--os",
                "linux",
                "--arch",
                "x64",
            ]
        )

        assert args.command == "postinstall"
        assert args.package_dir == tmp_path
        assert args.bin_dir == tmp_path / "bin"
        assert args.os_name == "linux"
        assert args.arch == "x64"

    def test_formula_render_arguments(self):
        args = CLI().parse_args(
            ["formula", "render", "--version", "1.2.3", "-o", "lnb.rb", "--strict"]
        )

        assert args.formula_command == "render"
        assert args.release_version == "1.2.3"
        assert args.output == Path("lnb.rb")
        assert args.strict

    def test_formula_install_requires_prefix(self):
        with pytest.raises(SystemExit):
            CLI().parse_args(["formula", "install"])

    def test_bump_kind_choices(self):
        assert CLI().parse_args(["bump", "minor"]).kind == "minor"

        with pytest.raises(SystemExit):
            CLI().parse_args(["bump", "huge"])

    def test_release_flags(self):
        args = CLI().parse_args(["release", "--local", "-y"])
        assert args.local
        assert args.yes

    def test_global_flags(self, tmp_path):
        args = CLI().parse_args(["-v", "--project-root", str(tmp_path), "platform"])
        assert args.verbose
        assert args.project_root == tmp_path

    def test_version_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert capsys.readouterr().out.startswith("lnbdist ")


class TestRun:
    """Tests for CLI.run dispatch and error handling."""

    def test_no_command_prints_help(self, capsys):
        assert CLI().run([]) == 1
        assert "usage: lnbdist" in capsys.readouterr().out

    def test_formula_without_subcommand(self, tmp_path, capsys):
        assert CLI().run(["--project-root", str(tmp_path), "formula"]) == 1
        assert "No formula sub-command" in capsys.readouterr().err

    def test_dispatches_to_command_module(self, tmp_path):
        with patch("lnbdist.cli.commands.platform_info.run", return_value=0) as mock_run:
            assert CLI().run(["--project-root", str(tmp_path), "platform"]) == 0

        assert mock_run.call_args[0][0].command == "platform"

    def test_unexpected_error_returns_1(self, tmp_path, capsys):
        with patch(
            "lnbdist.cli.commands.platform_info.run",
            side_effect=RuntimeError("kaboom"),
        ):
            assert CLI().run(["--project-root", str(tmp_path), "platform"]) == 1

        assert "Error: kaboom" in capsys.readouterr().err

    def test_keyboard_interrupt_returns_130(self, tmp_path):
        with patch(
            "lnbdist.cli.commands.platform_info.run", side_effect=KeyboardInterrupt
        ):
            assert CLI().run(["--project-root", str(tmp_path), "platform"]) == 130

    @pytest.mark.parametrize(
        "flags, level", [([], logging.INFO), (["-v"], logging.DEBUG), (["-q"], logging.ERROR)]
    )
    def test_logging_levels(self, tmp_path, flags, level):
        with patch("lnbdist.cli.commands.platform_info.run", return_value=0):
            CLI().run([*flags, "--project-root", str(tmp_path), "platform"])

        assert logging.getLogger().level == level
