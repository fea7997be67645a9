"""
Install-time adapters for the lnb binary.

- postinstall: locate, copy and verify the binary inside a published package
- formula: the per-platform download table, its install step and rendering
"""

from lnbdist.install.postinstall import PostInstaller, PostInstallResult
from lnbdist.install.formula import (
    Formula,
    FormulaEntry,
    FormulaInstaller,
    archive_checksums,
    build_formula,
    render_formula,
    write_formula,
)

__all__ = [
    "PostInstaller",
    "PostInstallResult",
    "Formula",
    "FormulaEntry",
    "FormulaInstaller",
    "archive_checksums",
    "build_formula",
    "render_formula",
    "write_formula",
]
