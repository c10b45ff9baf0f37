"""Resolve a binary name and version inputs into a ``SourcedBinary``.

This is the control flow callers run once per invocation: pick a version
with :func:`resolve_version`, build the origin for that version and wrap it
in a ``SourcedBinary`` rooted at the cache.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from binsmith.core.versions import resolve_version, sort_versions
from binsmith.models.binary import SourcedBinary
from binsmith.models.origins import Origin, ReleaseArchiveOrigin

logger = logging.getLogger(__name__)

OriginFactory = Callable[[str | None], Origin]


def resolve_binary(
    name: str,
    origin_for: OriginFactory,
    cache: Path,
    *,
    version: str | None = None,
    available: Sequence[str] = (),
) -> SourcedBinary:
    """Build the ``SourcedBinary`` for ``name``.

    Parameters
    ----------
    name:
        The binary name.
    origin_for:
        Builds the origin for a resolved version (``None`` when nothing
        could be resolved).
    cache:
        The cache root.
    version:
        An explicitly requested version, used verbatim.
    available:
        Versions known to be available upstream.

    When the origin is a release archive without a ``latest`` already set,
    the highest-ranked available version is recorded as ``latest`` so that
    ``stale`` and ``use_latest()`` have something to act on.
    """
    resolved = resolve_version(name, version, available, cache)
    origin = origin_for(resolved)
    if isinstance(origin, ReleaseArchiveOrigin) and origin.latest is None:
        ranked = sort_versions(available)
        if ranked:
            origin = origin.model_copy(update={"latest": ranked[0]})
    logger.debug("Resolved %s to %s", name, resolved or "an unversioned origin")
    return SourcedBinary(name=name, origin=origin, cache=cache)
