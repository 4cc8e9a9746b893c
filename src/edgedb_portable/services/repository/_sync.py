"""
Synchronous package index selector.

Generated from AsyncPackageRepository; each call runs one event loop.
"""

from __future__ import annotations

from edgedb_portable.services._sync_wrapper import create_sync_service
from edgedb_portable.services.repository._aio import AsyncPackageRepository

PackageRepository = create_sync_service(AsyncPackageRepository)

__all__ = ["PackageRepository"]
