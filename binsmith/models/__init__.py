"""Binsmith data models: origin descriptors and binary identities, all Pydantic v2."""

from binsmith.models.origins import (
    ArchiveEntry,
    ArchiveOrigin,
    GitOrigin,
    Origin,
    OriginKind,
    ReleaseArchiveOrigin,
    SourceCodeArchiveOrigin,
    UrlOrigin,
    versioned_name,
)
from binsmith.models.binary import Binary, LocalBinary, SourcedBinary

__all__ = [
    # origins
    "OriginKind",
    "Origin",
    "GitOrigin",
    "ArchiveEntry",
    "ReleaseArchiveOrigin",
    "SourceCodeArchiveOrigin",
    "ArchiveOrigin",
    "UrlOrigin",
    "versioned_name",
    # binaries
    "Binary",
    "LocalBinary",
    "SourcedBinary",
]
