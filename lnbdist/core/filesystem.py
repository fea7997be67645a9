"""
File system utilities for lnbdist.

This module provides the file operations the installers need:
- Directory creation (idempotent)
- Binary copy with permission handling
- Archive extraction (zip, tar.gz) with directory traversal protection
- Safe file operations (atomic writes, guarded deletion, temp directories)
"""

import os
import shutil
import sys
import tarfile
import tempfile
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

# rwxr-xr-x
EXECUTABLE_MODE = 0o755


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class FileCopyError(FilesystemError):
    """Failed to copy a file."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Directories and Files
# ============================================================================


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating missing parents (idempotent).

    Args:
        path: Directory path

    Returns:
        Path object (resolved)

    Example:
        >>> ensure_directory('/tmp/lnb/bin')
        PosixPath('/tmp/lnb/bin')
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path.resolve()


def copy_file(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Copy a single file, replacing the destination if present.

    Args:
        source: File to copy
        destination: Destination file path

    Returns:
        Destination path

    Raises:
        FileCopyError: If the copy fails for any reason (missing source,
            permissions, disk full); the underlying message is preserved
    """
    source = Path(source)
    destination = Path(destination)

    try:
        shutil.copyfile(source, destination)
    except (OSError, shutil.Error) as e:
        raise FileCopyError(str(e)) from e

    return destination


def move_file(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Move a single file, replacing the destination if present.

    Raises:
        FileCopyError: If the move fails
    """
    destination = Path(destination)

    try:
        if destination.exists():
            destination.unlink()
        shutil.move(str(source), str(destination))
    except (OSError, shutil.Error) as e:
        raise FileCopyError(str(e)) from e

    return destination


def make_executable(path: Union[str, Path], mode: int = EXECUTABLE_MODE) -> None:
    """
    Set permission bits on a file (owner rwx, group/other rx by default).

    Args:
        path: File to update
        mode: Permission bits to set
    """
    os.chmod(path, mode)


def is_same_file(a: Union[str, Path], b: Union[str, Path]) -> bool:
    """Check whether two paths refer to the same existing file."""
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def find_file(root: Union[str, Path], name: str) -> Optional[Path]:
    """
    Find the first regular file called `name` under `root`.

    The root itself is checked before descending, so a file at the top of an
    extracted archive wins over nested copies.

    Args:
        root: Directory to search
        name: Exact file name

    Returns:
        Path to the file, or None if not found
    """
    root = Path(root)

    direct = root / name
    if direct.is_file():
        return direct

    for candidate in sorted(root.rglob(name)):
        if candidate.is_file():
            return candidate

    return None


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "Extraction has been blocked."
        )


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Extract an archive to a destination directory.

    Supported formats: .zip, .tar.gz, .tgz

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('lnb-darwin-arm64.zip', '/tmp/lnb')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    archive_name = archive_path.name.lower()

    try:
        if archive_name.endswith(".zip"):
            _extract_zip(archive_path, destination)
        elif archive_name.endswith((".tar.gz", ".tgz")):
            _extract_tar(archive_path, destination, "r:gz")
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_path.name}. "
                "Supported: .zip, .tar.gz, .tgz"
            )
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}")


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.namelist()

        for member in members:
            _validate_archive_path(member, destination)

        zf.extractall(destination)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a directory tree, optionally requiring it to live under a prefix.

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not path.is_relative_to(require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}")


@contextmanager
def temporary_directory(prefix: str = "lnbdist_", cleanup: bool = True):
    """
    Context manager for temporary directory with automatic cleanup.

    Yields:
        Path to temporary directory
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        if cleanup and temp_dir.exists():
            safe_rmtree(temp_dir)


__all__ = [
    "EXECUTABLE_MODE",
    "FilesystemError",
    "FileCopyError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "ensure_directory",
    "copy_file",
    "move_file",
    "make_executable",
    "is_same_file",
    "find_file",
    "extract_archive",
    "atomic_write",
    "safe_rmtree",
    "temporary_directory",
]
