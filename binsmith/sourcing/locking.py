"""Cache entry locking and staged installation.

Two processes sourcing the same ``{name}`` / ``{name}-{version}`` entry are
serialized with an advisory lock file next to the entry
(``{cache}/.{entry}.lock``).  Work happens in a staging directory inside the
cache and finished files are moved into place with ``os.replace``, so a
partially written binary never appears at its final path.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import stat
import tempfile
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path

from filelock import FileLock, Timeout

from binsmith.sourcing.errors import CacheLockError

logger = logging.getLogger(__name__)

LOCK_SUFFIX = ".lock"
STAGING_PREFIX = ".staging-"

_EXECUTABLE = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def lock_path(cache: Path, entry: str) -> Path:
    """Return the lock file guarding ``entry`` within ``cache``."""
    return cache / f".{entry}{LOCK_SUFFIX}"


@asynccontextmanager
async def cache_entry_lock(
    cache: Path, entry: str, *, timeout: float = 600.0
) -> AsyncIterator[None]:
    """Hold the advisory lock for a cache entry.

    Raises
    ------
    CacheLockError
        If the lock is still held elsewhere after ``timeout`` seconds.
    """
    cache.mkdir(parents=True, exist_ok=True)
    # Acquired on a worker thread, released on the event loop thread.
    lock = FileLock(str(lock_path(cache, entry)), thread_local=False)
    try:
        lock.acquire(timeout=0)
    except Timeout:
        logger.info("Waiting for %s, which is being sourced elsewhere", entry)
        try:
            await asyncio.to_thread(lock.acquire, timeout=timeout)
        except Timeout as exc:
            raise CacheLockError(
                f"Timed out after {timeout}s waiting for the lock on {entry!r}"
            ) from exc
    try:
        yield
    finally:
        lock.release()


@contextmanager
def staging_dir(cache: Path) -> Iterator[Path]:
    """Create a scratch directory inside ``cache``, removed on exit."""
    cache.mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=cache))
    logger.debug("Staging in %s", path)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


def make_executable(path: Path) -> None:
    path.chmod(path.stat().st_mode | _EXECUTABLE)


def dereference(path: Path) -> Path:
    """Replace a symlink at ``path`` with a copy of the file it points to."""
    if path.is_symlink():
        target = path.resolve(strict=True)
        path.unlink()
        shutil.copy2(target, path)
    return path


def install_file(source: Path, destination: Path) -> Path:
    """Move ``source`` to ``destination`` atomically and mark it executable.

    ``source`` must live on the same filesystem as ``destination``; staging
    directories created by :func:`staging_dir` always do.  A symlinked
    ``source`` is installed as a regular copy of its target, never as the
    link itself.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    dereference(source)
    make_executable(source)
    os.replace(source, destination)
    logger.info("Installed %s", destination)
    return destination
