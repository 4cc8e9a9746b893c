"""
Download service for edgedb-portable.

Features:
- Resilient fetch of the artifact (redirects, backoff retry)
- Streaming write in 16KiB chunks
- Incremental Blake2b-512 digest
- Progress bar (or spinner when the size is unknown)
"""

from edgedb_portable.services.download._aio import AsyncDownloadService
from edgedb_portable.services.download._models import DownloadResult
from edgedb_portable.services.download._sync import DownloadService
from edgedb_portable.services.download._verify import verify_download

__all__ = [
    "AsyncDownloadService",
    "DownloadService",
    "DownloadResult",
    "verify_download",
]
