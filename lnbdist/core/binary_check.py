"""
Smoke test for installed binaries.

Runs an installed executable with a version flag and reports whether it
started and exited cleanly. The check never raises; callers decide whether a
failure is fatal.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

VERSION_FLAG = "--version"


@dataclass
class VersionCheckResult:
    """Result of running a binary with its version flag."""

    passed: bool
    output: str
    message: str

    def __bool__(self) -> bool:
        return self.passed


def run_version_check(
    binary: Path, flag: str = VERSION_FLAG, timeout: Optional[float] = None
) -> VersionCheckResult:
    """
    Run `binary flag` and capture its output.

    Args:
        binary: Executable to run
        flag: Version flag to pass
        timeout: Seconds to wait; None blocks until the process exits

    Returns:
        VersionCheckResult; passed is False on non-zero exit, timeout, or when
        the process could not be started
    """
    cmd = [str(binary), flag]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        return VersionCheckResult(
            passed=False, output="", message=f"{binary.name} {flag} timed out"
        )
    except OSError as e:
        return VersionCheckResult(passed=False, output="", message=str(e))

    output = result.stdout.strip()

    if result.returncode != 0:
        detail = result.stderr.strip() or output
        message = f"Command failed with exit code {result.returncode}"
        if detail:
            message += f": {detail}"
        return VersionCheckResult(passed=False, output=output, message=message)

    return VersionCheckResult(passed=True, output=output, message=output)


__all__ = ["VERSION_FLAG", "VersionCheckResult", "run_version_check"]
