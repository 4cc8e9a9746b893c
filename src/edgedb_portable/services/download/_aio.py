"""
Asynchronous download service.

Streams an artifact to disk while hashing it with Blake2b-512.
Only the request phase is retried; failures while streaming abort.
"""

from __future__ import annotations

import hashlib
import time
from pathlib import Path
from typing import Any, Awaitable, Callable

import httpx
from rich.console import Console

from edgedb_portable.exceptions import DownloadIOError, HttpError, PortableError
from edgedb_portable.logging import get_logger
from edgedb_portable.services.download._config import (
    DEFAULT_CHUNK_SIZE,
    DIGEST_SIZE,
    IDENTITY_ENCODING,
)
from edgedb_portable.services.download._models import DownloadResult
from edgedb_portable.services.download._progress import create_progress
from edgedb_portable.services.fetch import AsyncFetcher

logger = get_logger(__name__)


def _content_length(response: httpx.Response) -> int | None:
    value = response.headers.get("Content-Length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class AsyncDownloadService:
    """
    Asynchronous download service.

    The returned digest is NOT checked here; compare it with
    PackageInfo.hash (see verify_download()).

    Example:
        >>> service = AsyncDownloadService()
        >>> result = await service.download(Path("./server.tar.zst"), pkg.url)
        >>> verify_download(result, pkg)
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
        console: Console | None = None,
        show_progress: bool = True,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._sleep = sleep
        self._console = console
        self._show_progress = show_progress
        self._chunk_size = DEFAULT_CHUNK_SIZE

    def configure(
        self,
        chunk_size: int | None = None,
        show_progress: bool | None = None,
    ) -> None:
        """
        Configure download settings.

        Args:
            chunk_size: Read size for the response body (bytes).
            show_progress: Render a progress bar on the console.
        """
        if chunk_size is not None:
            self._chunk_size = chunk_size
        if show_progress is not None:
            self._show_progress = show_progress

    async def download(
        self,
        dest: str | Path,
        url: str,
        on_progress: Callable[[int, int | None], None] | None = None,
    ) -> DownloadResult:
        """
        Download url into dest, hashing the bytes on the way.

        Args:
            dest: Local file path (created or truncated).
            url: Artifact URL.
            on_progress: Callback(transferred, total) after every chunk.

        Returns:
            DownloadResult with size and hex Blake2b-512 digest.

        Raises:
            PortableError: Fetch failure (see AsyncFetcher.get_header).
            HttpError: Connection failure while streaming the body.
            DownloadIOError: Local write failure.
        """
        dest = Path(dest)
        context = f"failed to download file at URL: {url}"
        logger.info(f"Downloading {url} -> {dest}")
        started = time.monotonic()

        async with AsyncFetcher(
            timeout=self._timeout,
            transport=self._transport,
            sleep=self._sleep,
        ) as fetcher:
            try:
                response = await fetcher.get_header(
                    url, stream=True, headers={"Accept-Encoding": IDENTITY_ENCODING}
                )
            except PortableError as e:
                raise e.with_context(context)

            try:
                total = _content_length(response)
                try:
                    out = open(dest, "wb")
                except OSError as e:
                    raise DownloadIOError(str(dest), e).with_context(context) from e

                hasher = hashlib.blake2b(digest_size=DIGEST_SIZE)
                transferred = 0
                progress = create_progress(
                    total, console=self._console, disable=not self._show_progress
                )
                with out, progress:
                    task = progress.add_task("download", total=total)
                    try:
                        # raw bytes: the digest covers the artifact as published
                        async for chunk in response.aiter_raw(self._chunk_size):
                            out.write(chunk)
                            hasher.update(chunk)
                            transferred += len(chunk)
                            progress.advance(task, len(chunk))
                            if on_progress:
                                on_progress(transferred, total)
                    except httpx.HTTPError as e:
                        raise HttpError(url, e).with_context(context) from e
                    except OSError as e:
                        raise DownloadIOError(str(dest), e).with_context(context) from e
                    progress.update(task, total=transferred, completed=transferred)
            finally:
                await response.aclose()

        result = DownloadResult(
            local_path=dest,
            url=url,
            size=transferred,
            blake2b=hasher.hexdigest(),
            elapsed=time.monotonic() - started,
        )
        logger.info(f"Downloaded {result}")
        return result


__all__ = ["AsyncDownloadService"]
