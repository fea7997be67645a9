"""
Pytest configuration and shared fixtures for lnbdist tests.
"""

import logging
import os
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from lnbdist.core.platform import PlatformInfo


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "posix: test executes shell scripts and needs a POSIX host"
    )


def pytest_collection_modifyitems(config, items):
    """Skip tests that run shell-script binaries on Windows."""
    if os.name != "nt":
        return
    skip_posix = pytest.mark.skip(reason="requires a POSIX shell")
    for item in items:
        if "posix" in item.keywords:
            item.add_marker(skip_posix)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset the cached platform detection between tests."""
    from lnbdist.core import platform

    platform.clear_platform_cache()
    yield
    platform.clear_platform_cache()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo basicConfig(force=True) calls made by CLI runs."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def linux_host() -> PlatformInfo:
    """Host identifier pair for a 64-bit Linux machine."""
    return PlatformInfo(os="linux", arch="x64")


@pytest.fixture
def make_binary() -> Callable[..., Path]:
    """
    Factory writing a fake lnb executable (a POSIX shell script).

    Usage:
        path = make_binary(tmp_path / "lnb", output="lnb version 1.0.0")
        path = make_binary(tmp_path / "lnb", exit_code=2)
    """

    def _make(
        path: Path,
        output: str = "lnb version 0.1.0",
        exit_code: int = 0,
        mode: int = 0o644,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        script = textwrap.dedent(
            f"""\
            #!/bin/sh
            echo "{output}"
            exit {exit_code}
            """
        )
        path.write_text(script)
        path.chmod(mode)
        return path

    return _make


@pytest.fixture
def package_dir(tmp_path: Path) -> Path:
    """Empty unpacked package directory."""
    pkg = tmp_path / "lnb-linux-amd64"
    pkg.mkdir()
    return pkg


@pytest.fixture
def sample_config_yaml(tmp_path: Path) -> Path:
    """Create a sample lnbdist.yaml configuration."""
    config_file = tmp_path / "lnbdist.yaml"
    config_file.write_text(
        textwrap.dedent(
            """\
            binary_name: lnb
            version_file: versions.txt
            formula:
              name: lnb
              description: Link binaries onto your PATH
              repository: https://github.com/example/lnb
              targets:
                - darwin-arm64
                - darwin-amd64
                - linux-amd64
            release:
              remote: upstream
              tag_prefix: v
            """
        )
    )
    return config_file
