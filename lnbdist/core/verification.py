"""
Checksum verification for release archives.

This module provides:
- SHA256/SHA512 file hashing and verification
- Checksum file parsing (SHA256SUMS / checksums.txt format)
- Detection of placeholder checksums that are not real digests
"""

import hashlib
import logging
import secrets
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Written into formulas before the release pipeline has computed real digests.
PLACEHOLDER_CHECKSUM = "SHA256 hash will be added during release"

_HASH_LENGTHS = {"sha256": 64, "sha512": 128}


class HashFormatError(Exception):
    """Exception raised when hash format is invalid."""

    pass


def compute_file_hash(file_path: Path, algorithm: str = "sha256") -> str:
    """
    Compute cryptographic hash of file.

    Args:
        file_path: Path to file
        algorithm: Hash algorithm ('sha256', 'sha512')

    Returns:
        Hex string of hash

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If algorithm is not supported
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    algorithm = algorithm.lower()
    if algorithm not in _HASH_LENGTHS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")

    hasher = hashlib.new(algorithm)
    with open(file_path, "rb") as f:
        while chunk := f.read(8192):
            hasher.update(chunk)

    return hasher.hexdigest()


def verify_file_hash(
    file_path: Path, expected_hash: str, algorithm: str = "sha256"
) -> bool:
    """
    Verify file matches expected hash using constant-time comparison.

    Raises:
        HashFormatError: If expected_hash is not a well-formed digest
        FileNotFoundError: If file doesn't exist
    """
    expected_hash = expected_hash.lower().strip()
    if not _is_valid_hash_format(expected_hash, algorithm):
        raise HashFormatError(f"Invalid hash format for {algorithm}: {expected_hash}")

    actual_hash = compute_file_hash(file_path, algorithm)
    return secrets.compare_digest(actual_hash.encode("utf-8"), expected_hash.encode("utf-8"))


def is_placeholder_checksum(value: Optional[str]) -> bool:
    """
    Check whether a checksum field carries no usable SHA256 digest.

    True for the release placeholder text, empty values, and anything that is
    not 64 hex digits.

    Example:
        >>> is_placeholder_checksum(PLACEHOLDER_CHECKSUM)
        True
        >>> is_placeholder_checksum("a" * 64)
        False
    """
    if not value:
        return True
    return not _is_valid_hash_format(value.strip().lower(), "sha256")


def parse_hash_file(hash_file_path: Path) -> dict[str, str]:
    """
    Parse a checksum file (e.g., SHA256SUMS or goreleaser checksums.txt).

    Supports formats:
    - hash  filename
    - hash *filename

    Args:
        hash_file_path: Path to hash file

    Returns:
        Dict of filename -> hash

    Raises:
        FileNotFoundError: If hash file doesn't exist

    Example:
        >>> hashes = parse_hash_file(Path('checksums.txt'))
        >>> hashes['lnb-darwin-arm64.zip']
        '9f86d08...'
    """
    if not hash_file_path.exists():
        raise FileNotFoundError(f"Hash file not found: {hash_file_path}")

    hashes = {}

    with open(hash_file_path, "r", encoding="utf-8") as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            parts = line.split(maxsplit=1)
            if len(parts) != 2:
                logger.warning(
                    f"Skipping invalid line {line_num} in {hash_file_path.name}: {line}"
                )
                continue

            hash_value = parts[0].strip().lower()
            filename = parts[1].strip().lstrip("*").strip()

            is_suspicious = (
                ".." in filename
                or filename.startswith("/")
                or filename.startswith("\\")
                or (len(filename) > 1 and filename[1] == ":")
            )
            if is_suspicious:
                logger.warning(
                    f"Skipping suspicious filename at line {line_num}: {filename}"
                )
                continue

            hashes[filename] = hash_value

    return hashes


def _is_valid_hash_format(hash_str: str, algorithm: str) -> bool:
    """
    Validate hash string format (hex digits of the algorithm's length).
    """
    if not hash_str:
        return False

    if not all(c in "0123456789abcdef" for c in hash_str):
        return False

    expected_len = _HASH_LENGTHS.get(algorithm.lower())
    return expected_len is None or len(hash_str) == expected_len


__all__ = [
    "PLACEHOLDER_CHECKSUM",
    "HashFormatError",
    "compute_file_hash",
    "verify_file_hash",
    "is_placeholder_checksum",
    "parse_hash_file",
]
