"""Errors raised while sourcing binaries.

``MissingBinaryError`` is the only error raised by the resolution core
itself.  Everything else originates in a fetcher or builder and reaches
the caller unchanged.
"""

from __future__ import annotations


class SourcingError(RuntimeError):
    """Base class for all errors raised while sourcing a binary."""


class MissingBinaryError(SourcingError):
    """Raised when a local binary is absent and has no manifest to build it from."""


class DownloadError(SourcingError):
    """Raised when a download fails with a transport error or HTTP status."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class ArchiveError(SourcingError):
    """Raised when an archive is unreadable, unsupported or unsafe to extract."""


class ArchiveContentsError(ArchiveError):
    """Raised when a binary declared in an origin is not present in its archive."""


class GitError(SourcingError):
    """Raised when cloning or checking out a repository fails."""


class BuildError(SourcingError):
    """Raised when the build tool exits unsuccessfully."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class CacheLockError(SourcingError):
    """Raised when a cache entry stays locked by another process for too long."""


class UnsupportedPlatformError(SourcingError):
    """Raised when the host has no corresponding release target."""
