"""
Tests for streamed downloads with retry and checksum verification.
"""

import hashlib
from unittest.mock import patch

import pytest
import requests
import responses

from lnbdist.core.download import ChecksumError, DownloadError, download_file

URL = "https://github.com/example/lnb/releases/download/v0.1.0/lnb-linux-amd64.zip"
BODY = b"zip archive bytes" * 1000


class TestDownloadFile:
    """Tests for download_file."""

    @responses.activate
    def test_downloads_to_destination(self, tmp_path):
        responses.add(responses.GET, URL, body=BODY, status=200)
        dest = tmp_path / "nested" / "lnb.zip"

        result = download_file(URL, dest)

        assert result == dest
        assert dest.read_bytes() == BODY

    @responses.activate
    def test_checksum_verified(self, tmp_path):
        responses.add(responses.GET, URL, body=BODY, status=200)
        digest = hashlib.sha256(BODY).hexdigest()

        download_file(URL, tmp_path / "lnb.zip", expected_sha256=digest.upper())

        assert (tmp_path / "lnb.zip").exists()

    @responses.activate
    def test_checksum_mismatch_removes_file(self, tmp_path):
        responses.add(responses.GET, URL, body=BODY, status=200)
        dest = tmp_path / "lnb.zip"

        with pytest.raises(ChecksumError) as exc_info:
            download_file(URL, dest, expected_sha256="0" * 64)

        assert "Checksum mismatch for lnb.zip" in str(exc_info.value)
        assert not dest.exists()

    @responses.activate
    def test_retries_then_succeeds(self, tmp_path):
        responses.add(responses.GET, URL, status=503)
        responses.add(responses.GET, URL, body=BODY, status=200)

        with patch("lnbdist.core.download.time.sleep") as mock_sleep:
            download_file(URL, tmp_path / "lnb.zip", max_retries=3)

        assert len(responses.calls) == 2
        mock_sleep.assert_called_once_with(1)

    @responses.activate
    def test_gives_up_after_max_retries(self, tmp_path):
        responses.add(responses.GET, URL, status=404)

        with patch("lnbdist.core.download.time.sleep"):
            with pytest.raises(DownloadError) as exc_info:
                download_file(URL, tmp_path / "lnb.zip", max_retries=2)

        assert "after 2 attempt(s)" in str(exc_info.value)
        assert len(responses.calls) == 2

    @responses.activate
    def test_single_attempt_does_not_sleep(self, tmp_path):
        responses.add(
            responses.GET, URL, body=requests.exceptions.ConnectionError("offline")
        )

        with patch("lnbdist.core.download.time.sleep") as mock_sleep:
            with pytest.raises(DownloadError):
                download_file(URL, tmp_path / "lnb.zip", max_retries=1)

        mock_sleep.assert_not_called()

    def test_rejects_empty_url(self, tmp_path):
        with pytest.raises(ValueError):
            download_file("", tmp_path / "lnb.zip")

    def test_rejects_zero_retries(self, tmp_path):
        with pytest.raises(ValueError):
            download_file(URL, tmp_path / "lnb.zip", max_retries=0)
