"""
Package index selector.

Fetches the per-platform JSON index for a channel, keeps verifiable
edgedb-server tarballs and picks the newest one matching a query.
"""

from edgedb_portable.services.repository._aio import INDEX_PATHS, AsyncPackageRepository
from edgedb_portable.services.repository._filter import filter_package, is_usable_ref
from edgedb_portable.services.repository._sync import PackageRepository

__all__ = [
    "AsyncPackageRepository",
    "PackageRepository",
    "INDEX_PATHS",
    "filter_package",
    "is_usable_ref",
]
