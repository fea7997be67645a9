"""
Homebrew formula descriptor for lnb.

A formula is a static table keyed by release target ({os, arch}) holding the
download URL and SHA256 of the prebuilt archive for that platform. This module
builds that table from configuration, selects the entry for a host, performs
the install step (download, extract, place the binary, self-check), and
renders the Ruby formula text with Jinja2.

Checksum fields may still hold PLACEHOLDER_CHECKSUM when the release pipeline
has not computed digests yet. Placeholders are never compared as digests: the
install step warns and skips integrity verification for them.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from lnbdist.config.parser import LnbDistConfig
from lnbdist.core.binary_check import run_version_check
from lnbdist.core.download import ChecksumError, DownloadError, download_file
from lnbdist.core.exceptions import (
    FormulaError,
    FormulaInstallError,
    PlaceholderChecksumError,
    UnsupportedPlatformError,
)
from lnbdist.core.filesystem import (
    FilesystemError,
    atomic_write,
    ensure_directory,
    extract_archive,
    find_file,
    make_executable,
    move_file,
    temporary_directory,
)
from lnbdist.core.platform import (
    ReleaseArch,
    ReleaseOS,
    ReleaseTarget,
    detect_release_target,
)
from lnbdist.core.verification import (
    PLACEHOLDER_CHECKSUM,
    HashFormatError,
    compute_file_hash,
    is_placeholder_checksum,
    verify_file_hash,
)

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
FORMULA_TEMPLATE = "formula.rb.j2"

# Homebrew host predicates per release name. Windows has no Homebrew.
_OS_CONDITIONS = {
    ReleaseOS.DARWIN: "OS.mac?",
    ReleaseOS.LINUX: "OS.linux?",
}
_ARCH_CONDITIONS = {
    ReleaseArch.ARM64: "Hardware::CPU.arm?",
    ReleaseArch.AMD64: "Hardware::CPU.intel?",
}


@dataclass(frozen=True)
class FormulaEntry:
    """Download location and checksum for one release target."""

    target: ReleaseTarget
    url: str
    sha256: str = PLACEHOLDER_CHECKSUM

    @property
    def archive_name(self) -> str:
        return self.url.rsplit("/", 1)[-1]

    @property
    def has_checksum(self) -> bool:
        return not is_placeholder_checksum(self.sha256)

    @property
    def condition(self) -> str:
        """Ruby expression selecting this entry on the installing host."""
        return (
            f"{_OS_CONDITIONS[self.target.os]} && "
            f"{_ARCH_CONDITIONS[self.target.arch]}"
        )


@dataclass
class Formula:
    """A complete formula descriptor."""

    name: str
    description: str
    homepage: str
    version: str
    binary_name: str
    entries: List[FormulaEntry] = field(default_factory=list)

    @property
    def class_name(self) -> str:
        """
        Ruby class name for the formula.

        Example:
            >>> Formula("lnb-tools", "", "", "1.0.0", "lnb").class_name
            'LnbTools'
        """
        parts = self.name.replace("_", "-").split("-")
        return "".join(part[:1].upper() + part[1:] for part in parts if part)

    @property
    def placeholder_targets(self) -> List[ReleaseTarget]:
        return [entry.target for entry in self.entries if not entry.has_checksum]

    def select(self, target: ReleaseTarget) -> FormulaEntry:
        """
        Select the single entry for a release target.

        Raises:
            UnsupportedPlatformError: If the table has no entry for the target
        """
        for entry in self.entries:
            if entry.target == target:
                return entry

        raise UnsupportedPlatformError(
            target.os.value, target.arch.value, f"no {self.name} formula entry"
        )


def archive_name(config: LnbDistConfig, target: ReleaseTarget, version: str) -> str:
    """Release archive file name for a target, from formula.archive_template."""
    return config.formula.archive_template.format(
        binary=config.binary_name,
        os=target.os.value,
        arch=target.arch.value,
        version=version,
    )


def archive_checksums(
    config: LnbDistConfig,
    version: str,
    archive_dir: Path,
    expected: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """
    Compute SHA256 digests of locally built release archives.

    Archives missing from archive_dir are skipped. When `expected` (a parsed
    checksum file) lists an archive, the local file must match it.

    Args:
        config: Project configuration
        version: Release version (without tag prefix)
        archive_dir: Directory holding the built archives
        expected: Optional archive name -> SHA256 mapping to verify against

    Returns:
        Mapping of archive name -> SHA256 for every archive found

    Raises:
        FormulaError: If a local archive does not match its expected digest
    """
    expected = expected or {}
    digests = {}

    for target in config.formula.targets:
        name = archive_name(config, target, version)
        path = Path(archive_dir) / name
        if not path.is_file():
            logger.debug(f"Archive not built: {path}")
            continue

        if name in expected:
            try:
                matches = verify_file_hash(path, expected[name])
            except HashFormatError as e:
                raise FormulaError(f"Bad checksum entry for {name}: {e}") from e
            if not matches:
                raise FormulaError(f"{name} does not match the digest in the checksum file")

        digests[name] = compute_file_hash(path)
        logger.info(f"{name}: {digests[name]}")

    return digests


def build_formula(
    config: LnbDistConfig, version: str, checksums: Optional[Dict[str, str]] = None
) -> Formula:
    """
    Build the formula table from configuration.

    Args:
        config: Project configuration
        version: Release version (without tag prefix)
        checksums: Optional mapping of archive name -> SHA256, as parsed from a
            release checksum file

    Returns:
        Formula with one entry per configured target

    Raises:
        FormulaError: If a configured target cannot be expressed in a formula
    """
    formula_config = config.formula
    checksums = checksums or {}
    tag = f"{config.release.tag_prefix}{version}"
    base_url = f"{formula_config.repository}/releases/download/{tag}"

    entries = []
    for target in formula_config.targets:
        if target.os not in _OS_CONDITIONS:
            raise FormulaError(f"Formula cannot target {target}: no Homebrew support")

        archive = archive_name(config, target, version)
        sha256 = checksums.get(archive)
        if sha256 is None:
            logger.warning(f"No checksum for {archive}; using placeholder")
            sha256 = PLACEHOLDER_CHECKSUM

        entries.append(FormulaEntry(target=target, url=f"{base_url}/{archive}", sha256=sha256))

    return Formula(
        name=formula_config.name,
        description=formula_config.description,
        homepage=formula_config.homepage,
        version=version,
        binary_name=config.binary_name,
        entries=entries,
    )


# ============================================================================
# Rendering
# ============================================================================


def _init_jinja2(template_dir: Path = TEMPLATE_DIR) -> Environment:
    if not template_dir.exists():
        raise FormulaError(f"Template directory not found: {template_dir}")

    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render_formula(formula: Formula, strict: bool = False) -> str:
    """
    Render the Homebrew Ruby formula.

    Args:
        formula: Formula to render
        strict: Refuse to render placeholder checksums

    Returns:
        Formula source text

    Raises:
        PlaceholderChecksumError: If strict and any entry lacks a digest
        FormulaError: If the formula has no entries or rendering fails
    """
    if not formula.entries:
        raise FormulaError(f"Formula {formula.name} has no platform entries")

    missing = formula.placeholder_targets
    if strict and missing:
        raise PlaceholderChecksumError(
            "Missing checksums for: " + ", ".join(str(t) for t in missing)
        )

    try:
        template = _init_jinja2().get_template(FORMULA_TEMPLATE)
        return template.render(
            class_name=formula.class_name,
            description=_ruby_escape(formula.description),
            homepage=formula.homepage,
            version=formula.version,
            binary_name=formula.binary_name,
            entries=formula.entries,
        )
    except FormulaError:
        raise
    except Exception as e:
        raise FormulaError(f"Failed to render template {FORMULA_TEMPLATE}: {e}") from e


def write_formula(formula: Formula, path: Path, strict: bool = False) -> Path:
    """Render the formula and write it atomically to path."""
    atomic_write(path, render_formula(formula, strict=strict))
    logger.info(f"Wrote {path} (version {formula.version})")
    return path


def _ruby_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("#{", "\\#{")


# ============================================================================
# Install step
# ============================================================================


class FormulaInstaller:
    """
    Perform the formula's install step on the current host.

    The archive is downloaded once (no retries), verified when the entry has a
    real digest, extracted, and the binary is moved into <prefix>/bin. The
    trailing self-check runs the installed binary with --version; a failure
    there fails the install.
    """

    def __init__(self, formula: Formula, timeout: int = 30):
        self.formula = formula
        self.timeout = timeout

    def install(self, prefix: Path, target: Optional[ReleaseTarget] = None) -> Path:
        """
        Install the binary under prefix.

        Args:
            prefix: Installation prefix; the binary lands in <prefix>/bin
            target: Release target (default: detected from the host)

        Returns:
            Path to the installed binary

        Raises:
            UnsupportedPlatformError: No table entry for the target
            FormulaInstallError: Download, checksum, extraction, placement or
                self-check failed
        """
        target = target or detect_release_target()
        entry = self.formula.select(target)
        binary_filename = target.binary_name(self.formula.binary_name)

        expected_sha256 = entry.sha256 if entry.has_checksum else None
        if expected_sha256 is None:
            logger.warning(
                f"Checksum for {entry.archive_name} is not a real digest; "
                "skipping integrity verification"
            )

        bin_dir = ensure_directory(Path(prefix) / "bin")
        installed = bin_dir / binary_filename

        with temporary_directory() as tmp:
            archive = tmp / entry.archive_name
            try:
                download_file(
                    entry.url,
                    archive,
                    expected_sha256=expected_sha256,
                    timeout=self.timeout,
                    max_retries=1,
                )
                extract_archive(archive, tmp / "extracted")
            except (DownloadError, ChecksumError, FilesystemError) as e:
                raise FormulaInstallError(str(e)) from e

            source = find_file(tmp / "extracted", binary_filename)
            if source is None:
                raise FormulaInstallError(
                    f"{entry.archive_name} does not contain {binary_filename}"
                )

            try:
                move_file(source, installed)
                if target.supports_permissions:
                    make_executable(installed)
            except (FilesystemError, OSError) as e:
                raise FormulaInstallError(f"Failed to install {binary_filename}: {e}") from e

        logger.info(f"Installed {binary_filename} to {installed}")

        check = run_version_check(installed)
        if not check.passed:
            raise FormulaInstallError(f"Self-check failed: {check.message}")

        logger.info(f"Self-check: {check.output}")
        return installed


__all__ = [
    "FormulaEntry",
    "Formula",
    "FormulaInstaller",
    "archive_name",
    "archive_checksums",
    "build_formula",
    "render_formula",
    "write_formula",
]
