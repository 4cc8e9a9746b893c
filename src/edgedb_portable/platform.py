"""
Platform identity used in package index URLs.
"""

from __future__ import annotations

import platform as _platform

from edgedb_portable.exceptions import UnsupportedPlatformError

_ARCH_ALIASES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}

_PLATFORMS = {
    ("Linux", "x86_64"): "x86_64-unknown-linux-gnu",
    ("Linux", "aarch64"): "aarch64-unknown-linux-gnu",
    ("Darwin", "x86_64"): "x86_64-apple-darwin",
    ("Darwin", "aarch64"): "aarch64-apple-darwin",
    ("Windows", "x86_64"): "x86_64-pc-windows-msvc",
}


def get_name(system: str | None = None, machine: str | None = None) -> str:
    """
    Target triple of the current (or given) OS and architecture.

    Raises:
        UnsupportedPlatformError: If no packages are built for the platform.
    """
    system = system or _platform.system()
    machine = machine or _platform.machine()
    arch = _ARCH_ALIASES.get(machine.lower())
    name = _PLATFORMS.get((system, arch)) if arch else None
    if name is None:
        raise UnsupportedPlatformError(system, machine)
    return name


__all__ = ["get_name"]
