"""Binsmith: resolve, version, cache and source the binaries a tool depends on.

A binary is either present locally or sourced from one of five origins
(git checkout, GitHub release archive, GitHub source code archive, archive
URL or plain URL) into a flat, version-keyed cache.
"""

__version__ = "0.1.0"

from binsmith.core.versions import compare_versions, resolve_version, sort_versions
from binsmith.models.binary import Binary, LocalBinary, SourcedBinary
from binsmith.sourcing.errors import MissingBinaryError, SourcingError

__all__ = [
    "Binary",
    "LocalBinary",
    "SourcedBinary",
    "compare_versions",
    "resolve_version",
    "sort_versions",
    "MissingBinaryError",
    "SourcingError",
    "__version__",
]
