"""
Models for download service.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from edgedb_portable.models.package import PackageHash


class DownloadResult(BaseModel):
    """Result of a download: where the bytes went and their Blake2b digest."""

    local_path: Path
    url: str
    size: int = 0
    blake2b: str
    elapsed: float = 0.0

    @property
    def speed_mbps(self) -> float:
        """Average speed in MB/s."""
        if self.elapsed <= 0:
            return 0.0
        return (self.size / 1024 / 1024) / self.elapsed

    @property
    def hash(self) -> PackageHash:
        return PackageHash.blake2b(self.blake2b)

    def matches(self, expected: PackageHash) -> bool:
        """Compare digest with the hash recorded in the index."""
        return expected.kind == "blake2b" and expected.value.lower() == self.blake2b

    def __str__(self) -> str:
        size_mb = self.size / 1024 / 1024
        return (
            f"{self.local_path} ({size_mb:.1f} MB, {self.elapsed:.1f}s "
            f"@ {self.speed_mbps:.1f} MB/s)"
        )
