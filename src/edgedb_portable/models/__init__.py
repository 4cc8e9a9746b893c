"""
Models for edgedb-portable.
"""

from edgedb_portable.models.channel import Channel, Query
from edgedb_portable.models.package import (
    PACKAGE_BASENAME,
    InstallRef,
    PackageData,
    PackageHash,
    PackageInfo,
    PackageType,
    RepositoryData,
    Verification,
    valid_hash,
)
from edgedb_portable.models.version import (
    Build,
    Filter,
    FilterMinor,
    MinorKind,
    MinorVersion,
    Specific,
)

__all__ = [
    # Channel / query
    "Channel",
    "Query",
    # Versions
    "Build",
    "Filter",
    "FilterMinor",
    "MinorKind",
    "MinorVersion",
    "Specific",
    # Packages
    "PACKAGE_BASENAME",
    "InstallRef",
    "PackageData",
    "PackageHash",
    "PackageInfo",
    "PackageType",
    "RepositoryData",
    "Verification",
    "valid_hash",
]
