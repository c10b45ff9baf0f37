"""Tests for archive extraction and member lookup."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from binsmith.sourcing.archive import (
    extract_archive,
    locate_member,
    unwrap_single_directory,
)
from binsmith.sourcing.errors import ArchiveContentsError, ArchiveError


def _write(path: Path, data: bytes) -> Path:
    path.write_bytes(data)
    return path


class TestExtractArchive:
    def test_tarball(self, tmp_dir: Path, make_tarball):
        archive = _write(tmp_dir / "a.tar.gz", make_tarball({"polkadot": b"bin"}))
        out = extract_archive(archive, tmp_dir / "out")
        assert (out / "polkadot").read_bytes() == b"bin"

    def test_tarball_keeps_mode(self, tmp_dir: Path, make_tarball):
        archive = _write(tmp_dir / "a.tar.gz", make_tarball({"polkadot": b"bin"}))
        out = extract_archive(archive, tmp_dir / "out")
        assert os.access(out / "polkadot", os.X_OK)

    def test_zip(self, tmp_dir: Path, make_zipball):
        archive = _write(tmp_dir / "a.zip", make_zipball({"dir/tool": b"zip"}))
        out = extract_archive(archive, tmp_dir / "out")
        assert (out / "dir" / "tool").read_bytes() == b"zip"

    def test_unsupported_format(self, tmp_dir: Path):
        archive = _write(tmp_dir / "a.bin", b"definitely not an archive")
        with pytest.raises(ArchiveError, match="Unsupported archive format"):
            extract_archive(archive, tmp_dir / "out")

    def test_truncated_tarball(self, tmp_dir: Path, make_tarball):
        data = make_tarball({"polkadot": b"x" * 4096})
        archive = _write(tmp_dir / "a.tar.gz", data[: len(data) // 2])
        with pytest.raises(ArchiveError):
            extract_archive(archive, tmp_dir / "out")


class TestUnwrapSingleDirectory:
    def test_single_directory(self, tmp_dir: Path):
        (tmp_dir / "polkadot-sdk-abc").mkdir()
        assert unwrap_single_directory(tmp_dir) == tmp_dir / "polkadot-sdk-abc"

    def test_multiple_entries(self, tmp_dir: Path):
        (tmp_dir / "a").mkdir()
        (tmp_dir / "b").touch()
        assert unwrap_single_directory(tmp_dir) == tmp_dir

    def test_single_file(self, tmp_dir: Path):
        (tmp_dir / "only").touch()
        assert unwrap_single_directory(tmp_dir) == tmp_dir


class TestLocateMember:
    def test_at_root(self, tmp_dir: Path):
        (tmp_dir / "polkadot").touch()
        assert locate_member(tmp_dir, Path("polkadot")) == tmp_dir / "polkadot"

    def test_one_level_down(self, tmp_dir: Path):
        (tmp_dir / "release").mkdir()
        (tmp_dir / "release" / "polkadot").touch()
        assert locate_member(tmp_dir, Path("polkadot")) == tmp_dir / "release" / "polkadot"

    def test_nested_relative_path(self, tmp_dir: Path):
        (tmp_dir / "bin").mkdir()
        (tmp_dir / "bin" / "polkadot").touch()
        assert locate_member(tmp_dir, Path("bin/polkadot")) == tmp_dir / "bin" / "polkadot"

    def test_missing(self, tmp_dir: Path):
        with pytest.raises(ArchiveContentsError, match="polkadot was not found"):
            locate_member(tmp_dir, Path("polkadot"))

    def test_directory_is_not_a_member(self, tmp_dir: Path):
        (tmp_dir / "polkadot").mkdir()
        with pytest.raises(ArchiveContentsError):
            locate_member(tmp_dir, Path("polkadot"))
