"""Tests for binary identities."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import TypeAdapter

from binsmith.models.binary import Binary, LocalBinary, SourcedBinary
from binsmith.models.origins import (
    ArchiveOrigin,
    GitOrigin,
    SourceCodeArchiveOrigin,
    UrlOrigin,
)
from binsmith.sourcing.errors import MissingBinaryError
from binsmith.sourcing.process import CommandResult
from binsmith.sourcing.status import RecordingStatus


class TestLocalBinary:
    def test_queries(self, tmp_dir: Path):
        binary = LocalBinary(name="pop", path=tmp_dir / "pop")
        assert binary.local is True
        assert binary.version is None
        assert binary.latest is None
        assert binary.stale is False
        assert binary.path == tmp_dir / "pop"

    def test_exists(self, tmp_dir: Path):
        binary = LocalBinary(name="pop", path=tmp_dir / "pop")
        assert not binary.exists()
        (tmp_dir / "pop").touch()
        assert binary.exists()

    def test_use_latest_is_noop(self, tmp_dir: Path):
        binary = LocalBinary(name="pop", path=tmp_dir / "pop")
        binary.use_latest()
        assert binary.version is None

    async def test_source_without_manifest(self, tmp_dir: Path):
        path = tmp_dir / "pop"
        binary = LocalBinary(name="pop", path=path)
        with pytest.raises(MissingBinaryError) as exc_info:
            await binary.source()
        assert str(exc_info.value) == (
            f"The '{path}' binary cannot be sourced automatically."
        )

    async def test_source_with_manifest_builds(self, tmp_dir: Path, monkeypatch):
        calls: list[list[str]] = []

        async def fake_run(args, *, cwd=None, status=None, verbose=False):
            calls.append(list(args))
            return CommandResult(args=list(args), returncode=0)

        monkeypatch.setattr("binsmith.sourcing.builder.run_command", fake_run)
        manifest = tmp_dir / "Cargo.toml"
        binary = LocalBinary(name="pop", path=tmp_dir / "pop", manifest=manifest)

        await binary.source(release=False)

        assert calls[0][:4] == ["cargo", "build", "--package", "pop"]
        assert "--release" not in calls[0]


class TestSourcedBinaryReleaseArchive:
    def test_path_versioned(self, cache: Path, make_release_origin):
        binary = SourcedBinary(
            name="polkadot", origin=make_release_origin(tag="v1.12.0"), cache=cache
        )
        assert binary.path == cache / "polkadot-v1.12.0"
        assert binary.version == "v1.12.0"
        assert binary.local is False

    def test_path_unversioned(self, cache: Path, make_release_origin):
        binary = SourcedBinary(name="polkadot", origin=make_release_origin(), cache=cache)
        assert binary.path == cache / "polkadot"

    def test_path_is_pure(self, tmp_dir: Path, make_release_origin):
        missing = tmp_dir / "nowhere"
        binary = SourcedBinary(
            name="polkadot", origin=make_release_origin(tag="v1.0.0"), cache=missing
        )
        assert binary.path == missing / "polkadot-v1.0.0"
        assert not missing.exists()

    def test_exists(self, cache: Path, make_release_origin):
        binary = SourcedBinary(
            name="polkadot", origin=make_release_origin(tag="v1.12.0"), cache=cache
        )
        assert not binary.exists()
        (cache / "polkadot-v1.12.0").touch()
        assert binary.exists()

    def test_stale_when_newer_known(self, cache: Path, make_release_origin):
        origin = make_release_origin(tag="v1.12.0", latest="v1.13.0")
        binary = SourcedBinary(name="polkadot", origin=origin, cache=cache)
        assert binary.latest == "v1.13.0"
        assert binary.stale is True

    def test_not_stale_when_current(self, cache: Path, make_release_origin):
        origin = make_release_origin(tag="v1.13.0", latest="v1.13.0")
        assert not SourcedBinary(name="polkadot", origin=origin, cache=cache).stale

    def test_not_stale_without_latest(self, cache: Path, make_release_origin):
        origin = make_release_origin(tag="v1.12.0")
        assert not SourcedBinary(name="polkadot", origin=origin, cache=cache).stale

    def test_not_stale_without_tag(self, cache: Path, make_release_origin):
        origin = make_release_origin(latest="v1.13.0")
        assert not SourcedBinary(name="polkadot", origin=origin, cache=cache).stale

    def test_use_latest(self, cache: Path, make_release_origin):
        origin = make_release_origin(tag="v1.12.0", latest="v1.13.0")
        binary = SourcedBinary(name="polkadot", origin=origin, cache=cache)

        binary.use_latest()

        assert binary.version == "v1.13.0"
        assert binary.path == cache / "polkadot-v1.13.0"
        assert binary.stale is False
        # The original descriptor is untouched.
        assert origin.tag == "v1.12.0"

    def test_use_latest_without_latest_is_noop(self, cache: Path, make_release_origin):
        binary = SourcedBinary(
            name="polkadot", origin=make_release_origin(tag="v1.12.0"), cache=cache
        )
        binary.use_latest()
        assert binary.version == "v1.12.0"


class TestSourcedBinaryOtherOrigins:
    def test_git(self, cache: Path):
        origin = GitOrigin(
            url="https://github.com/r0gue-io/pop-node", package="pop-node", reference="v0.1.0"
        )
        binary = SourcedBinary(name="pop-node", origin=origin, cache=cache)
        assert binary.version == "v0.1.0"
        assert binary.path == cache / "pop-node-v0.1.0"
        assert binary.latest is None
        assert binary.stale is False

    def test_source_code_archive(self, cache: Path):
        origin = SourceCodeArchiveOrigin(
            owner="paritytech", repository="polkadot-sdk", package="polkadot"
        )
        binary = SourcedBinary(name="polkadot", origin=origin, cache=cache)
        assert binary.version is None
        assert binary.path == cache / "polkadot"

    def test_archive(self, cache: Path):
        origin = ArchiveOrigin(url="https://example.com/tools.tar.gz", contents=["tool"])
        binary = SourcedBinary(name="tool", origin=origin, cache=cache)
        assert binary.path == cache / "tool"
        assert binary.stale is False

    def test_url(self, cache: Path):
        origin = UrlOrigin(url="https://example.com/chain-spec-generator", name="csg")
        binary = SourcedBinary(name="csg", origin=origin, cache=cache)
        assert binary.path == cache / "csg"

    def test_use_latest_is_noop(self, cache: Path):
        origin = UrlOrigin(url="https://example.com/x", name="x")
        binary = SourcedBinary(name="x", origin=origin, cache=cache)
        binary.use_latest()
        assert binary.origin == origin


class TestSourcedBinarySource:
    async def test_delegates_to_fetcher(self, cache: Path, make_client):
        client = make_client({"https://example.com/x": b"#!/bin/sh\n"})
        origin = UrlOrigin(url="https://example.com/x", name="x")
        binary = SourcedBinary(name="x", origin=origin, cache=cache)
        status = RecordingStatus()

        from binsmith.sourcing.fetchers import FetchOptions

        await binary.source(status=status, options=FetchOptions(client=client))

        assert binary.exists()
        assert status.messages[-1] == "Sourced x"


class TestBinaryUnion:
    def test_discriminates(self, tmp_dir: Path):
        adapter = TypeAdapter(Binary)
        local = adapter.validate_python(
            {"kind": "local", "name": "pop", "path": str(tmp_dir / "pop")}
        )
        sourced = adapter.validate_python(
            {
                "kind": "sourced",
                "name": "x",
                "cache": str(tmp_dir),
                "origin": {"kind": "url", "url": "https://example.com/x", "name": "x"},
            }
        )
        assert isinstance(local, LocalBinary)
        assert isinstance(sourced, SourcedBinary)
