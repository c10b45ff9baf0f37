"""Version ordering and resolution for cached binaries.

Two tag families are recognised when ranking versions:

- semantic tags such as ``v1.13.0`` (major ``1``, minor ``13``)
- calendar-style tags such as ``polkadot-stable2409`` (major ``24``, minor ``9``)

The ordering is a heuristic used to pick a preferred version, not an
implementation of semantic versioning.  Majors from different families are
compared as raw numbers, so ``polkadot-stable2409`` ranks above ``v1.13.0``.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable
from pathlib import Path

SEMVER_MARKER = "v"
STABLE_PREFIX = "polkadot-stable"
U32_MAX = 2**32 - 1


def _parse_int(value: str | None) -> int | None:
    """Parse an unsigned 32-bit integer: ASCII digits with an optional ``+``."""
    if value is None:
        return None
    digits = value[1:] if value.startswith("+") else value
    if not digits.isascii() or not digits.isdigit():
        return None
    number = int(digits)
    return number if number <= U32_MAX else None


def parse_version(version: str) -> tuple[int | None, int | None]:
    """Split a version reference into an optional ``(major, minor)`` pair."""
    if version.startswith(SEMVER_MARKER):
        parts = version[len(SEMVER_MARKER):].split(".")
        major = _parse_int(parts[0]) if len(parts) > 0 else None
        minor = _parse_int(parts[1]) if len(parts) > 1 else None
        return major, minor
    if version.startswith(STABLE_PREFIX):
        number = _parse_int(version[len(STABLE_PREFIX):])
        if number is None:
            return None, None
        return number // 100, number % 100
    return None, None


def _cmp(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def _cmp_optional(a: int | None, b: int | None) -> int:
    # An absent component ranks below any present one.
    if a is None or b is None:
        return _cmp(a is not None, b is not None)
    return _cmp(a, b)


def compare_versions(a: str, b: str) -> int:
    """Compare two version references.

    Returns ``1`` if ``a`` ranks above ``b``, ``-1`` if below and ``0``
    when they rank equally.

    Examples
    --------
    >>> compare_versions("v1.13.0", "v1.12.0")
    1
    >>> compare_versions("polkadot-stable2407", "polkadot-stable2409")
    -1
    >>> compare_versions("v1.13.0", "v1.13.0")
    0
    """
    a_major, a_minor = parse_version(a)
    b_major, b_minor = parse_version(b)

    if a_major is not None and b_major is not None:
        if a_major != b_major:
            return _cmp(a_major, b_major)
        return _cmp_optional(a_minor, b_minor)
    if a_major is not None:
        return 1
    if b_major is not None:
        return -1
    return _cmp(a, b)


def sort_versions(versions: Iterable[str], *, descending: bool = True) -> list[str]:
    """Sort version references by :func:`compare_versions`.

    The sort is stable, so references ranking equally keep their input order.
    """
    return sorted(
        versions, key=functools.cmp_to_key(compare_versions), reverse=descending
    )


def resolve_version(
    name: str,
    specified: str | None,
    available: Iterable[str],
    cache: Path,
) -> str | None:
    """Pick the version of ``name`` to use.

    An explicitly specified version always wins, verbatim.  Otherwise the
    available versions are ranked highest first and the first one already
    present in ``cache`` (as ``{name}-{version}``) is chosen, falling back
    to the highest-ranked version.  Returns ``None`` when nothing is
    specified and nothing is available.

    Parameters
    ----------
    name:
        The binary name used to build cache paths.
    specified:
        A version explicitly requested by the caller, if any.
    available:
        Versions known to be available upstream.
    cache:
        The directory binaries are cached in.
    """
    if specified is not None:
        return specified

    versions = sort_versions(available)
    for version in versions:
        if (Path(cache) / f"{name}-{version}").exists():
            return version
    return versions[0] if versions else None
