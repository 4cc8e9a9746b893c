"""
Synchronous download service.

Generated from AsyncDownloadService; each call runs one event loop.
"""

from __future__ import annotations

from edgedb_portable.services._sync_wrapper import create_sync_service
from edgedb_portable.services.download._aio import AsyncDownloadService

DownloadService = create_sync_service(AsyncDownloadService)

__all__ = ["DownloadService"]
