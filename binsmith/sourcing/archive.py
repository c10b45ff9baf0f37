"""Archive extraction for downloaded binaries and source trees.

Supported formats: gzip/bzip2/xz tarballs, plain tarballs and zip files.
Members that would land outside the destination directory are rejected.
"""

from __future__ import annotations

import logging
import tarfile
import zipfile
from pathlib import Path

from binsmith.sourcing.errors import ArchiveContentsError, ArchiveError

logger = logging.getLogger(__name__)


def _is_within(root: Path, candidate: Path) -> bool:
    try:
        candidate.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def _extract_tar(archive: Path, destination: Path) -> None:
    with tarfile.open(archive, "r:*") as tar:
        for member in tar.getmembers():
            if not _is_within(destination, destination / member.name):
                raise ArchiveError(
                    f"Refusing to extract {member.name!r} outside {destination}"
                )
        tar.extractall(destination, filter="data")


def _extract_zip(archive: Path, destination: Path) -> None:
    with zipfile.ZipFile(archive) as zf:
        for name in zf.namelist():
            if not _is_within(destination, destination / name):
                raise ArchiveError(
                    f"Refusing to extract {name!r} outside {destination}"
                )
        zf.extractall(destination)
        # zipfile drops permission bits; restore them from the external attributes.
        for info in zf.infolist():
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir():
                (destination / info.filename).chmod(mode)


def extract_archive(archive: Path, destination: Path) -> Path:
    """Extract ``archive`` into ``destination`` and return ``destination``.

    Raises
    ------
    ArchiveError
        If the archive is corrupt, of an unsupported format, or contains
        members escaping ``destination``.
    """
    destination.mkdir(parents=True, exist_ok=True)
    try:
        if zipfile.is_zipfile(archive):
            _extract_zip(archive, destination)
        elif tarfile.is_tarfile(archive):
            _extract_tar(archive, destination)
        else:
            raise ArchiveError(f"Unsupported archive format: {archive.name}")
    except (tarfile.TarError, zipfile.BadZipFile, EOFError, OSError) as exc:
        raise ArchiveError(f"Failed to extract {archive.name}: {exc}") from exc
    logger.debug("Extracted %s into %s", archive.name, destination)
    return destination


def unwrap_single_directory(root: Path) -> Path:
    """Return the sole top-level directory of ``root``, or ``root`` itself.

    Source code archives from GitHub wrap everything in ``{repo}-{ref}/``.
    """
    children = list(root.iterdir())
    if len(children) == 1 and children[0].is_dir():
        return children[0]
    return root


def locate_member(root: Path, relative: Path) -> Path:
    """Find ``relative`` in an extracted archive.

    The path is looked up at the archive root first, then one directory
    down, since release tarballs commonly nest their files in a folder.

    Raises
    ------
    ArchiveContentsError
        If the file is not present.
    """
    direct = root / relative
    if direct.is_file():
        return direct
    for child in sorted(root.iterdir()):
        if child.is_dir() and (child / relative).is_file():
            return child / relative
    raise ArchiveContentsError(f"{relative} was not found in the archive")
