"""
Integrity check of a finished download against the package index.
"""

from __future__ import annotations

from edgedb_portable.exceptions import HashMismatchError
from edgedb_portable.logging import get_logger
from edgedb_portable.models.package import PackageInfo
from edgedb_portable.services.download._models import DownloadResult

logger = get_logger(__name__)


def verify_download(result: DownloadResult, package: PackageInfo) -> None:
    """
    Reject a download whose digest differs from package.hash.

    The file is deleted before HashMismatchError is raised.
    """
    if result.matches(package.hash):
        return
    logger.error(f"Hash mismatch for {result.local_path}, removing it")
    result.local_path.unlink(missing_ok=True)
    raise HashMismatchError(
        str(result.local_path),
        expected=str(package.hash),
        actual=str(result.hash),
    )


__all__ = ["verify_download"]
