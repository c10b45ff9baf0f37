"""Shared test fixtures for Binsmith."""

from __future__ import annotations

import io
import logging
import tarfile
import zipfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from binsmith.models.origins import ArchiveEntry, ReleaseArchiveOrigin

AVAILABLE = [
    "polkadot-stable2409",
    "v1.13.0",
    "polkadot-stable2407",
    "v1.12.0",
    "v1.11.0",
]


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def cache(tmp_dir: Path) -> Path:
    """Provide an empty cache directory."""
    path = tmp_dir / "cache"
    path.mkdir()
    return path


@pytest.fixture
def available() -> list[str]:
    """Release tags whose highest-ranked entry comes first."""
    return list(AVAILABLE)


# ---------------------------------------------------------------------------
# Archive builders
# ---------------------------------------------------------------------------


def tarball(members: dict[str, bytes], mode: int = 0o755) -> bytes:
    """Build a gzipped tarball in memory from ``{member path: content}``."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = mode
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def zipball(members: dict[str, bytes]) -> bytes:
    """Build a zip archive in memory from ``{member path: content}``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def make_tarball() -> Callable[..., bytes]:
    return tarball


@pytest.fixture
def make_zipball() -> Callable[..., bytes]:
    return zipball


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """Serves canned responses by URL and records every request."""

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?", 1)[0]
        body = self.routes.get(url)
        if body is None:
            return httpx.Response(404, text="not found")
        if isinstance(body, httpx.Response):
            return body
        if isinstance(body, (list, dict)):
            return httpx.Response(200, json=body)
        return httpx.Response(200, content=body)


@pytest.fixture
def make_client() -> Callable[[dict[str, Any]], httpx.AsyncClient]:
    """Factory fixture: an ``AsyncClient`` serving ``{url: body}`` routes.

    Bodies may be bytes, JSON-able lists/dicts or ready ``httpx.Response``
    objects.  Unknown URLs return 404.
    """

    def _factory(routes: dict[str, Any]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=RecordingTransport(routes))

    return _factory


# ---------------------------------------------------------------------------
# Origin factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_release_origin() -> Callable[..., ReleaseArchiveOrigin]:
    """Factory fixture: a polkadot release archive origin with overrides."""

    def _factory(**overrides: Any) -> ReleaseArchiveOrigin:
        defaults: dict[str, Any] = {
            "owner": "r0gue-io",
            "repository": "polkadot",
            "tag": None,
            "tag_format": "polkadot-{tag}",
            "archive": "polkadot-x86_64-unknown-linux-gnu.tar.gz",
            "contents": [
                ArchiveEntry(name="polkadot"),
                ArchiveEntry(name="polkadot-execute-worker"),
                ArchiveEntry(name="polkadot-prepare-worker"),
            ],
            "latest": None,
        }
        defaults.update(overrides)
        return ReleaseArchiveOrigin(**defaults)

    return _factory


@pytest.fixture
def make_transport() -> Callable[[dict[str, Any]], RecordingTransport]:
    """Factory fixture: a transport whose ``requests`` can be inspected."""
    return RecordingTransport


@pytest.fixture(autouse=True)
def _reset_binsmith_logger():
    """Undo handlers installed by ``configure_logging`` during a test."""
    log = logging.getLogger("binsmith")
    handlers, level, propagate = list(log.handlers), log.level, log.propagate
    yield
    log.handlers[:] = handlers
    log.setLevel(level)
    log.propagate = propagate
