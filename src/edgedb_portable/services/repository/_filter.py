"""
Selection of a usable install reference from raw index entries.
"""

from __future__ import annotations

import httpx

from edgedb_portable.exceptions import InvalidHashError, VersionParseError
from edgedb_portable.logging import get_logger
from edgedb_portable.models.package import (
    InstallRef,
    PackageData,
    PackageHash,
    PackageInfo,
    PackageType,
    valid_hash,
)
from edgedb_portable.models.version import Build

logger = get_logger(__name__)

TAR_CONTENT_TYPE = "application/x-tar"
ZSTD_ENCODING = "zstd"


def is_usable_ref(ref: InstallRef) -> bool:
    """zstd-compressed tarball with a well-formed Blake2b hash."""
    return (
        ref.kind == TAR_CONTENT_TYPE
        and ref.encoding == ZSTD_ENCODING
        and ref.verification.blake2b is not None
        and valid_hash(ref.verification.blake2b)
    )


def _filter_package(pkg_root: httpx.URL, pkg: PackageData) -> PackageInfo | None:
    ref = next((r for r in pkg.installrefs if is_usable_ref(r)), None)
    if ref is None:
        return None
    try:
        version = Build.parse(pkg.version)
        url = pkg_root.join(ref.path)
        package_hash = PackageHash.blake2b(ref.verification.blake2b or "")
    except (VersionParseError, InvalidHashError, httpx.InvalidURL):
        return None
    return PackageInfo(
        version=version,
        url=str(url),
        size=ref.verification.size,
        hash=package_hash,
        kind=PackageType.TAR_ZST,
    )


def filter_package(pkg_root: httpx.URL, pkg: PackageData) -> PackageInfo | None:
    """
    Convert index entry to PackageInfo, or None (logged) if unusable.

    Args:
        pkg_root: Base URL install reference paths are relative to.
        pkg: Raw index entry.
    """
    result = _filter_package(pkg_root, pkg)
    if result is None:
        logger.info(f"Skipping package {pkg.basename} {pkg.version!r}")
    return result


__all__ = ["filter_package", "is_usable_ref", "TAR_CONTENT_TYPE", "ZSTD_ENCODING"]
