"""Host target triple, as used in release archive names.

Release assets are commonly named ``{name}-{target}.tar.gz``, e.g.
``polkadot-aarch64-apple-darwin.tar.gz``.
"""

from __future__ import annotations

import platform
import sys

from binsmith.sourcing.errors import UnsupportedPlatformError

_ARCHES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "arm64": "aarch64",
    "aarch64": "aarch64",
}

_SYSTEMS: dict[str, str] = {
    "darwin": "apple-darwin",
    "linux": "unknown-linux-gnu",
}


def target(machine: str | None = None, system: str | None = None) -> str:
    """Return the target triple for the host, or for ``machine``/``system``.

    >>> target("arm64", "darwin")
    'aarch64-apple-darwin'

    Raises
    ------
    UnsupportedPlatformError
        For architectures or operating systems without release binaries.
    """
    machine = (machine or platform.machine()).lower()
    system = (system or sys.platform).lower()
    arch = _ARCHES.get(machine)
    os_part = next(
        (triple for prefix, triple in _SYSTEMS.items() if system.startswith(prefix)),
        None,
    )
    if arch is None or os_part is None:
        raise UnsupportedPlatformError(
            f"No release binaries for {machine} on {system}"
        )
    return f"{arch}-{os_part}"
