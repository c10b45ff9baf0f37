"""Inspection and cleanup of the binary cache directory.

The cache is flat: every binary is a file named ``{name}`` or
``{name}-{version}``.  Hidden entries (lock files, staging directories)
belong to in-flight sourcing and are never listed or removed here.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from binsmith.core.versions import parse_version

logger = logging.getLogger(__name__)


class CachedBinary(BaseModel):
    """A binary file present in the cache."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: Path
    size_bytes: int = 0


def list_cached(cache: Path) -> list[CachedBinary]:
    """List cached binaries, sorted by file name."""
    if not cache.is_dir():
        return []
    return [
        CachedBinary(name=p.name, path=p, size_bytes=p.stat().st_size)
        for p in sorted(cache.iterdir())
        if p.is_file() and not p.name.startswith(".")
    ]


_COMMIT_HASH = re.compile(r"[0-9a-f]{7,40}")


def looks_like_version(suffix: str) -> bool:
    """Whether ``suffix`` reads as a version reference rather than a name part.

    Release tags (``v1.12.0``, ``polkadot-stable2409``), numeric references
    and abbreviated or full commit hashes qualify.  Branch names do not, so
    ``polkadot-parachain`` is never taken for a version of ``polkadot``.
    """
    major, _ = parse_version(suffix)
    return (
        major is not None
        or suffix[:1].isdigit()
        or _COMMIT_HASH.fullmatch(suffix) is not None
    )


def _matches(entry: str, names: Iterable[str]) -> bool:
    for name in names:
        if entry == name:
            return True
        prefix = f"{name}-"
        if entry.startswith(prefix) and looks_like_version(entry[len(prefix):]):
            return True
    return False


def remove_cached(cache: Path, names: Iterable[str] | None = None) -> list[Path]:
    """Delete cached binaries and return the removed paths.

    Parameters
    ----------
    cache:
        The cache root.
    names:
        Binary names to remove, with every cached version of each.  An entry
        counts as a version of ``name`` when it is ``name`` itself or
        ``{name}-{suffix}`` with a version-like suffix (see
        :func:`looks_like_version`).  ``None`` removes
        everything listed by :func:`list_cached`.
    """
    wanted = None if names is None else list(names)
    removed: list[Path] = []
    for cached in list_cached(cache):
        if wanted is not None and not _matches(cached.name, wanted):
            continue
        cached.path.unlink()
        logger.info("Removed %s", cached.path)
        removed.append(cached.path)
    return removed
