"""
Services for edgedb-portable.

Each service is written async; the sync variant is generated from it.
"""

from edgedb_portable.services.download import (
    AsyncDownloadService,
    DownloadResult,
    DownloadService,
    verify_download,
)
from edgedb_portable.services.fetch import AsyncFetcher
from edgedb_portable.services.repository import AsyncPackageRepository, PackageRepository

__all__ = [
    "AsyncFetcher",
    "AsyncPackageRepository",
    "PackageRepository",
    "AsyncDownloadService",
    "DownloadService",
    "DownloadResult",
    "verify_download",
]
