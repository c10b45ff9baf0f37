"""Fetchers: one materialization strategy per origin kind.

Every fetcher turns an origin descriptor into files in the cache, named by
:func:`binsmith.models.origins.versioned_name`, which is exactly the name a
``SourcedBinary`` derives for its ``path``.  ``FETCHERS`` is the dispatch
table consulted by :func:`materialize`.

Each fetcher holds the cache entry lock of the binary being sourced, works
inside a staging directory in the cache and only renames finished files
into place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, ConfigDict

from binsmith.models.origins import (
    ArchiveOrigin,
    GitOrigin,
    OriginKind,
    ReleaseArchiveOrigin,
    SourceCodeArchiveOrigin,
    UrlOrigin,
    versioned_name,
)
from binsmith.sourcing.archive import extract_archive, locate_member, unwrap_single_directory
from binsmith.sourcing.builder import DEFAULT_BUILD_TOOL, build_package
from binsmith.sourcing.errors import BuildError, SourcingError
from binsmith.sourcing.git import clone_repository
from binsmith.sourcing.http import DEFAULT_TIMEOUT, download_file
from binsmith.sourcing.locking import (
    cache_entry_lock,
    dereference,
    install_file,
    staging_dir,
)
from binsmith.sourcing.status import Status, default_status

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST = Path("Cargo.toml")


class FetchOptions(BaseModel):
    """Tunables passed through to the fetchers.

    The defaults match :class:`binsmith.config.BinsmithConfig`; the CLI
    builds an instance from the loaded config via :meth:`from_config`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    http_timeout: float = DEFAULT_TIMEOUT
    lock_timeout: float = 600.0
    build_tool: str = DEFAULT_BUILD_TOOL
    git_executable: str = "git"
    client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(cls, settings: Any, **overrides: Any) -> FetchOptions:
        values: dict[str, Any] = {
            "http_timeout": settings.http_timeout_seconds,
            "lock_timeout": settings.lock_timeout_seconds,
            "build_tool": settings.build_tool,
            "git_executable": settings.git_executable,
        }
        values.update(overrides)
        return cls(**values)


class Fetcher(Protocol):
    """Signature shared by every entry in ``FETCHERS``."""

    async def __call__(
        self,
        origin: Any,
        name: str,
        cache: Path,
        *,
        release: bool,
        status: Status,
        verbose: bool,
        options: FetchOptions,
    ) -> None: ...


def _archive_filename(url: str) -> str:
    return Path(urlparse(url).path).name or "download"


async def _download(
    url: str, destination: Path, status: Status, options: FetchOptions
) -> Path:
    status.update(f"Downloading {url}...")
    return await download_file(
        url, destination, client=options.client, timeout=options.http_timeout
    )


async def _build_and_install(
    root: Path,
    *,
    manifest: Path | None,
    package: str,
    artifacts: list[str],
    reference: str | None,
    cache: Path,
    staging: Path,
    release: bool,
    status: Status,
    verbose: bool,
    options: FetchOptions,
) -> None:
    output = await build_package(
        root / (manifest or DEFAULT_MANIFEST),
        package,
        release=release,
        status=status,
        verbose=verbose,
        target_dir=staging / "target",
        tool=options.build_tool,
    )
    built = {artifact: output / artifact for artifact in artifacts}
    missing = [a for a, path in built.items() if not path.is_file()]
    if missing:
        raise BuildError(
            f"Building {package} did not produce: {', '.join(missing)}"
        )
    for artifact, path in built.items():
        install_file(path, cache / versioned_name(artifact, reference))
    status.update(f"Sourced {', '.join(artifacts)}")


# ---------------------------------------------------------------------------
# Per-kind fetchers
# ---------------------------------------------------------------------------


async def fetch_url(
    origin: UrlOrigin,
    name: str,
    cache: Path,
    *,
    release: bool,
    status: Status,
    verbose: bool,
    options: FetchOptions,
) -> None:
    """Download a single file to ``{cache}/{origin.name}``."""
    async with cache_entry_lock(cache, name, timeout=options.lock_timeout):
        with staging_dir(cache) as staging:
            downloaded = await _download(
                origin.url, staging / origin.name, status, options
            )
            install_file(downloaded, cache / versioned_name(origin.name, None))
    status.update(f"Sourced {origin.name}")


async def fetch_archive(
    origin: ArchiveOrigin,
    name: str,
    cache: Path,
    *,
    release: bool,
    status: Status,
    verbose: bool,
    options: FetchOptions,
) -> None:
    """Download an archive and install each listed binary as ``{cache}/{binary}``."""
    async with cache_entry_lock(cache, name, timeout=options.lock_timeout):
        with staging_dir(cache) as staging:
            archive = await _download(
                origin.url, staging / _archive_filename(origin.url), status, options
            )
            status.update("Extracting...")
            extracted = extract_archive(archive, staging / "extracted")
            located = {
                binary: locate_member(extracted, Path(binary))
                for binary in origin.contents
            }
            # Links may point at other listed files; copy them before any move.
            for path in located.values():
                dereference(path)
            for binary, path in located.items():
                install_file(path, cache / versioned_name(binary, None))
    status.update(f"Sourced {', '.join(origin.contents)}")


async def fetch_release_archive(
    origin: ReleaseArchiveOrigin,
    name: str,
    cache: Path,
    *,
    release: bool,
    status: Status,
    verbose: bool,
    options: FetchOptions,
) -> None:
    """Download a GitHub release asset and install its contents.

    Each entry is installed as ``{cache}/{entry.name}-{tag}``, or
    ``{cache}/{entry.name}`` when no tag is selected.
    """
    entry = versioned_name(name, origin.tag)
    async with cache_entry_lock(cache, entry, timeout=options.lock_timeout):
        with staging_dir(cache) as staging:
            archive = await _download(
                origin.download_url(), staging / origin.archive, status, options
            )
            status.update("Extracting...")
            extracted = extract_archive(archive, staging / "extracted")
            located = {
                item.name: locate_member(extracted, item.source_path)
                for item in origin.contents
            }
            for path in located.values():
                dereference(path)
            for binary, path in located.items():
                install_file(path, cache / versioned_name(binary, origin.tag))
    status.update(f"Sourced {', '.join(located)}")


async def fetch_source_code_archive(
    origin: SourceCodeArchiveOrigin,
    name: str,
    cache: Path,
    *,
    release: bool,
    status: Status,
    verbose: bool,
    options: FetchOptions,
) -> None:
    """Download a GitHub source code archive, build it and install its artifacts."""
    entry = versioned_name(name, origin.reference)
    async with cache_entry_lock(cache, entry, timeout=options.lock_timeout):
        with staging_dir(cache) as staging:
            archive = await _download(
                origin.download_url(), staging / "source.tar.gz", status, options
            )
            status.update("Extracting...")
            root = unwrap_single_directory(
                extract_archive(archive, staging / "source")
            )
            await _build_and_install(
                root,
                manifest=origin.manifest,
                package=origin.package,
                artifacts=origin.artifacts,
                reference=origin.reference,
                cache=cache,
                staging=staging,
                release=release,
                status=status,
                verbose=verbose,
                options=options,
            )


async def fetch_git(
    origin: GitOrigin,
    name: str,
    cache: Path,
    *,
    release: bool,
    status: Status,
    verbose: bool,
    options: FetchOptions,
) -> None:
    """Check out a repository, build it and install its artifacts."""
    entry = versioned_name(name, origin.reference)
    async with cache_entry_lock(cache, entry, timeout=options.lock_timeout):
        with staging_dir(cache) as staging:
            root = await clone_repository(
                origin.url,
                staging / "checkout",
                origin.reference,
                git=options.git_executable,
                status=status,
                verbose=verbose,
            )
            await _build_and_install(
                root,
                manifest=origin.manifest,
                package=origin.package,
                artifacts=origin.artifacts,
                reference=origin.reference,
                cache=cache,
                staging=staging,
                release=release,
                status=status,
                verbose=verbose,
                options=options,
            )


FETCHERS: dict[OriginKind, Fetcher] = {
    OriginKind.GIT: fetch_git,
    OriginKind.RELEASE_ARCHIVE: fetch_release_archive,
    OriginKind.SOURCE_CODE_ARCHIVE: fetch_source_code_archive,
    OriginKind.ARCHIVE: fetch_archive,
    OriginKind.URL: fetch_url,
}


async def materialize(
    origin: Any,
    name: str,
    cache: Path,
    release: bool = True,
    status: Status | None = None,
    verbose: bool = False,
    *,
    options: FetchOptions | None = None,
) -> None:
    """Source ``name`` from ``origin`` into ``cache``.

    Errors raised by the fetcher propagate unchanged.

    Raises
    ------
    SourcingError
        If no fetcher is registered for the origin's kind.
    """
    fetcher = FETCHERS.get(getattr(origin, "kind", None))
    if fetcher is None:
        raise SourcingError(f"No fetcher for origin {origin!r}")
    logger.debug("Sourcing %s from %s into %s", name, origin.kind.value, cache)
    await fetcher(
        origin,
        name,
        Path(cache),
        release=release,
        status=status or default_status(),
        verbose=verbose,
        options=options or FetchOptions(),
    )
