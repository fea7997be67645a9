"""
Network download of release archives.

Downloads are streamed to disk with `requests`, hashed while writing, and
verified against an expected SHA256 when one is given. Failed attempts are
retried with exponential backoff up to `max_retries` times.
"""

import hashlib
import logging
import time
from pathlib import Path
from typing import Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


class DownloadError(Exception):
    """Exception raised when download fails."""

    pass


class ChecksumError(Exception):
    """Exception raised when checksum verification fails."""

    pass


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination with optional checksum verification.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified after download)
        timeout: Request timeout in seconds
        max_retries: Total number of attempts (1 disables retrying)

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If every attempt fails
        ChecksumError: If checksum doesn't match expected value
        ValueError: If URL is empty or max_retries < 1

    Example:
        >>> download_file(
        ...     "https://github.com/muthuishere/lnb/releases/download/v0.1.0/lnb-darwin-arm64.zip",
        ...     Path("/tmp/lnb.zip"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    for attempt in range(max_retries):
        try:
            return _stream_to_file(url, destination, expected_sha256, timeout)
        except RequestException as e:
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download of {url} failed after {max_retries} attempt(s): {e}"
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError("Download failed for unknown reason")


def _stream_to_file(
    url: str, destination: Path, expected_sha256: Optional[str], timeout: int
) -> Path:
    """
    Perform a single streamed download attempt.

    Raises:
        ChecksumError: If checksum doesn't match
        RequestException: If HTTP request fails
    """
    logger.info(f"Downloading from {url}")

    hasher = hashlib.sha256()

    with requests.get(url, stream=True, timeout=timeout, allow_redirects=True) as response:
        response.raise_for_status()
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
                    hasher.update(chunk)

    if expected_sha256:
        actual = hasher.hexdigest()
        if actual.lower() != expected_sha256.strip().lower():
            destination.unlink()
            raise ChecksumError(
                f"Checksum mismatch for {destination.name}: "
                f"expected {expected_sha256}, got {actual}"
            )
        logger.info("Checksum verified successfully")

    logger.debug(f"Download complete: {destination}")
    return destination


__all__ = ["DownloadError", "ChecksumError", "download_file"]
