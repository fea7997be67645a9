"""
Tests for filesystem utilities.
"""

import io
import os
import stat
import tarfile
import zipfile

import pytest

from lnbdist.core.filesystem import (
    EXECUTABLE_MODE,
    ArchiveExtractionError,
    FileCopyError,
    FilesystemError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
    atomic_write,
    copy_file,
    ensure_directory,
    extract_archive,
    find_file,
    is_same_file,
    make_executable,
    move_file,
    safe_rmtree,
    temporary_directory,
)


class TestEnsureDirectory:
    """Tests for ensure_directory."""

    def test_creates_nested_directories(self, tmp_path):
        target = tmp_path / "a" / "b" / "bin"
        result = ensure_directory(target)

        assert target.is_dir()
        assert result == target.resolve()

    def test_is_idempotent(self, tmp_path):
        target = tmp_path / "bin"
        ensure_directory(target)
        (target / "keep").write_text("x")

        ensure_directory(target)

        assert (target / "keep").read_text() == "x"


class TestCopyFile:
    """Tests for copy_file."""

    def test_copies_bytes(self, tmp_path):
        src = tmp_path / "src"
        src.write_bytes(b"\x7fELF binary")
        dst = tmp_path / "dst"

        assert copy_file(src, dst) == dst
        assert dst.read_bytes() == b"\x7fELF binary"

    def test_replaces_existing_destination(self, tmp_path):
        src = tmp_path / "src"
        src.write_text("new")
        dst = tmp_path / "dst"
        dst.write_text("old contents that are longer")

        copy_file(src, dst)

        assert dst.read_text() == "new"

    def test_missing_source_raises_with_message(self, tmp_path):
        with pytest.raises(FileCopyError) as exc_info:
            copy_file(tmp_path / "missing", tmp_path / "dst")

        assert "missing" in str(exc_info.value)
        assert isinstance(exc_info.value, FilesystemError)

    def test_missing_destination_directory_raises(self, tmp_path):
        src = tmp_path / "src"
        src.write_text("x")

        with pytest.raises(FileCopyError):
            copy_file(src, tmp_path / "nope" / "dst")


class TestMoveFile:
    """Tests for move_file."""

    def test_moves_and_replaces(self, tmp_path):
        src = tmp_path / "src"
        src.write_text("new")
        dst = tmp_path / "dst"
        dst.write_text("old")

        move_file(src, dst)

        assert not src.exists()
        assert dst.read_text() == "new"


@pytest.mark.posix
class TestMakeExecutable:
    """Tests for make_executable."""

    def test_default_mode_is_755(self, tmp_path):
        path = tmp_path / "tool"
        path.write_text("x")
        path.chmod(0o600)

        make_executable(path)

        assert stat.S_IMODE(path.stat().st_mode) == EXECUTABLE_MODE == 0o755

    def test_missing_file_raises_oserror(self, tmp_path):
        with pytest.raises(OSError):
            make_executable(tmp_path / "missing")


class TestIsSameFile:
    """Tests for is_same_file."""

    def test_same_path(self, tmp_path):
        path = tmp_path / "f"
        path.write_text("x")
        assert is_same_file(path, tmp_path / "." / "f")

    def test_different_files(self, tmp_path):
        (tmp_path / "a").write_text("x")
        (tmp_path / "b").write_text("x")
        assert not is_same_file(tmp_path / "a", tmp_path / "b")

    def test_missing_file_is_not_same(self, tmp_path):
        (tmp_path / "a").write_text("x")
        assert not is_same_file(tmp_path / "a", tmp_path / "missing")


class TestFindFile:
    """Tests for find_file."""

    def test_prefers_top_level(self, tmp_path):
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "lnb").write_text("nested")
        (tmp_path / "lnb").write_text("top")

        assert find_file(tmp_path, "lnb") == tmp_path / "lnb"

    def test_finds_nested(self, tmp_path):
        (tmp_path / "lnb-linux-amd64" / "bin").mkdir(parents=True)
        nested = tmp_path / "lnb-linux-amd64" / "bin" / "lnb"
        nested.write_text("x")

        assert find_file(tmp_path, "lnb") == nested

    def test_ignores_directories_with_the_name(self, tmp_path):
        (tmp_path / "lnb").mkdir()
        assert find_file(tmp_path, "lnb") is None


class TestExtractArchive:
    """Tests for archive extraction."""

    def test_extracts_zip(self, tmp_path):
        archive = tmp_path / "lnb-darwin-arm64.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("lnb", "binary")

        extract_archive(archive, tmp_path / "out")

        assert (tmp_path / "out" / "lnb").read_text() == "binary"

    def test_extracts_tar_gz(self, tmp_path):
        archive = tmp_path / "lnb-linux-amd64.tar.gz"
        data = b"binary"
        with tarfile.open(archive, "w:gz") as tar:
            info = tarfile.TarInfo("lnb")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))

        extract_archive(archive, tmp_path / "out")

        assert (tmp_path / "out" / "lnb").read_bytes() == data

    def test_blocks_traversal(self, tmp_path):
        archive = tmp_path / "evil.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("../escape", "x")

        with pytest.raises(InsecureArchiveError):
            extract_archive(archive, tmp_path / "out")

        assert not (tmp_path / "escape").exists()

    def test_unsupported_format(self, tmp_path):
        archive = tmp_path / "lnb.rar"
        archive.write_text("x")

        with pytest.raises(UnsupportedArchiveFormat):
            extract_archive(archive, tmp_path / "out")

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveExtractionError):
            extract_archive(tmp_path / "missing.zip", tmp_path / "out")

    def test_corrupt_zip(self, tmp_path):
        archive = tmp_path / "broken.zip"
        archive.write_bytes(b"not a zip")

        with pytest.raises(ArchiveExtractionError):
            extract_archive(archive, tmp_path / "out")


class TestSafeOperations:
    """Tests for atomic_write, safe_rmtree and temporary_directory."""

    def test_atomic_write_text_and_bytes(self, tmp_path):
        target = tmp_path / "sub" / "file.txt"

        atomic_write(target, "hello")
        assert target.read_text() == "hello"

        atomic_write(target, b"bytes")
        assert target.read_bytes() == b"bytes"
        assert [p.name for p in target.parent.iterdir()] == ["file.txt"]

    def test_safe_rmtree_enforces_prefix(self, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()

        with pytest.raises(ValueError):
            safe_rmtree(outside, require_prefix=tmp_path / "inside")

        assert outside.exists()

    def test_safe_rmtree_missing_is_noop(self, tmp_path):
        safe_rmtree(tmp_path / "missing")

    def test_safe_rmtree_rejects_files(self, tmp_path):
        path = tmp_path / "file"
        path.write_text("x")

        with pytest.raises(FilesystemError):
            safe_rmtree(path)

    def test_temporary_directory_cleans_up(self):
        with temporary_directory() as temp:
            assert temp.is_dir()
            assert temp.name.startswith("lnbdist_")
            (temp / "file").write_text("x")

        assert not os.path.exists(temp)
