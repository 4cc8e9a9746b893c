"""
edgedb-portable: resolve and fetch portable EdgeDB server packages.

Usage:
    >>> from edgedb_portable import DownloadService, PackageRepository, Query, verify_download
    >>>
    >>> pkg = PackageRepository().get_server_package(Query.from_options(False, "3"))
    >>> result = DownloadService().download(pkg.cache_file_name(), pkg.url)
    >>> verify_download(result, pkg)
"""

from edgedb_portable.exceptions import (
    ErrorKind,
    HashMismatchError,
    HttpError,
    HttpFailureError,
    NotFoundError,
    PortableError,
    TooManyAttemptsError,
)
from edgedb_portable.models import Build, Channel, Filter, PackageHash, PackageInfo, Query
from edgedb_portable.services import (
    AsyncDownloadService,
    AsyncFetcher,
    AsyncPackageRepository,
    DownloadResult,
    DownloadService,
    PackageRepository,
    verify_download,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Services
    "AsyncFetcher",
    "AsyncPackageRepository",
    "PackageRepository",
    "AsyncDownloadService",
    "DownloadService",
    "DownloadResult",
    "verify_download",
    # Models
    "Build",
    "Channel",
    "Filter",
    "PackageHash",
    "PackageInfo",
    "Query",
    # Errors
    "ErrorKind",
    "PortableError",
    "NotFoundError",
    "HttpError",
    "HttpFailureError",
    "TooManyAttemptsError",
    "HashMismatchError",
]
