"""
Asynchronous package index selector.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import httpx

from edgedb_portable.config import get_settings
from edgedb_portable.exceptions import ConfigError, NotFoundError
from edgedb_portable.logging import get_logger
from edgedb_portable.models.channel import Channel, Query
from edgedb_portable.models.package import PACKAGE_BASENAME, PackageInfo, RepositoryData
from edgedb_portable.platform import get_name
from edgedb_portable.services.fetch import AsyncFetcher
from edgedb_portable.services.repository._filter import filter_package

logger = get_logger(__name__)

INDEX_PATHS = {
    Channel.STABLE: "/archive/.jsonindexes/{platform}.json",
    Channel.NIGHTLY: "/archive/.jsonindexes/{platform}.nightly.json",
}


class AsyncPackageRepository:
    """
    Package index client for server builds.

    The index is fetched anew on every call.

    Example:
        >>> repo = AsyncPackageRepository()
        >>> pkg = await repo.get_server_package(Query.from_options(False, "3"))
        >>> print(pkg.url if pkg else "no match")
    """

    def __init__(
        self,
        pkg_root: str | None = None,
        platform: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        """
        Initialize repository.

        Args:
            pkg_root: Package server base URL (default: pkg_root setting).
            platform: Platform name used in index paths (default: detected).
            timeout: Per-request timeout in seconds.
            transport: Custom httpx transport.
            sleep: Backoff sleep override.

        Raises:
            ConfigError: If pkg_root is not a valid http(s) URL.
        """
        root = pkg_root or get_settings().pkg_root
        try:
            self._pkg_root = httpx.URL(root)
        except httpx.InvalidURL as e:
            raise ConfigError(f"package root is not a valid URL: {root!r}", cause=e) from e
        if self._pkg_root.scheme not in ("http", "https"):
            raise ConfigError(f"package root is not a valid URL: {root!r}")
        self._platform = platform
        self._timeout = timeout
        self._transport = transport
        self._sleep = sleep

    @property
    def pkg_root(self) -> str:
        return str(self._pkg_root)

    @property
    def platform(self) -> str:
        """Platform name, detected on first use."""
        if self._platform is None:
            self._platform = get_name()
        return self._platform

    def index_url(self, channel: Channel) -> str:
        """URL of the JSON index for channel on this platform."""
        path = INDEX_PATHS[channel].format(platform=self.platform)
        return str(self._pkg_root.join(path))

    def _fetcher(self) -> AsyncFetcher:
        return AsyncFetcher(
            timeout=self._timeout,
            transport=self._transport,
            sleep=self._sleep,
        )

    async def get_server_packages(self, channel: Channel) -> list[PackageInfo]:
        """
        All usable server packages published in channel.

        A missing index (404) yields an empty list; malformed entries are
        skipped.

        Raises:
            PortableError: On any other fetch or parse failure.
        """
        url = self.index_url(channel)
        async with self._fetcher() as fetcher:
            try:
                data = await fetcher.get_json(url, RepositoryData)
            except NotFoundError:
                logger.info(f"No {channel.as_str()} index at {url}")
                data = RepositoryData(packages=[])

        packages = []
        for pkg in data.packages:
            if pkg.basename != PACKAGE_BASENAME:
                continue
            info = filter_package(self._pkg_root, pkg)
            if info is not None:
                packages.append(info)
        return packages

    async def get_server_package(self, query: Query) -> PackageInfo | None:
        """
        Newest package matching query, or None.

        Raises:
            PortableError: If the index cannot be fetched.
        """
        candidates = [
            pkg
            for pkg in await self.get_server_packages(query.channel)
            if query.matches(pkg.version)
        ]
        if not candidates:
            return None
        # ties resolve to the entry listed last in the index
        return max(reversed(candidates), key=lambda pkg: pkg.version.specific())


__all__ = ["AsyncPackageRepository", "INDEX_PATHS"]
