"""
Asynchronous resilient fetcher.

GET with redirect following and backoff retry, bounded by MAX_ATTEMPTS.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Iterator, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from edgedb_portable.config import get_settings
from edgedb_portable.exceptions import (
    HttpError,
    IndexParseError,
    PortableError,
    TooManyAttemptsError,
)
from edgedb_portable.logging import get_logger
from edgedb_portable.services.fetch._config import MAX_ATTEMPTS, USER_AGENT
from edgedb_portable.services.fetch._state import (
    Backoff,
    Done,
    Failed,
    Fetching,
    FetchState,
    Redirected,
    classify,
    retry_seconds,
)

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class AsyncFetcher:
    """
    Resilient HTTP GET client.

    Owns one httpx.AsyncClient; use as an async context manager.

    Example:
        >>> async with AsyncFetcher() as fetcher:
        ...     response = await fetcher.get_header("https://packages.edgedb.com/")
    """

    def __init__(
        self,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
        max_attempts: int = MAX_ATTEMPTS,
    ) -> None:
        """
        Initialize fetcher.

        Args:
            timeout: Per-request timeout in seconds (default from settings).
            transport: Custom httpx transport (tests use httpx.MockTransport).
            sleep: Awaitable used for backoff waits (default asyncio.sleep).
            max_attempts: Requests allowed per call, redirect hops included.
        """
        self._timeout = timeout if timeout is not None else get_settings().request_timeout
        self._transport = transport
        self._sleep = sleep or asyncio.sleep
        self._max_attempts = max_attempts
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazily created HTTP client (redirects handled here, not by httpx)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT},
                timeout=self._timeout,
                follow_redirects=False,
                transport=self._transport,
            )
        return self._client

    async def __aenter__(self) -> AsyncFetcher:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_header(
        self,
        url: str | httpx.URL,
        *,
        stream: bool = False,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        GET url and return the first successful response.

        Args:
            url: Target URL.
            stream: Leave the body unread (caller must close the response).
            headers: Extra request headers, sent on every attempt.

        Returns:
            2xx response.

        Raises:
            NotFoundError: On HTTP 404.
            HttpFailureError: On any other non-retryable status.
            HttpError: On transport failure.
            MalformedRedirectError: On 3xx without usable Location.
            TooManyAttemptsError: When the attempt budget is used up.
        """
        schedule = retry_seconds()
        attempt = 0
        state: FetchState = Fetching(httpx.URL(str(url)))

        while True:
            if isinstance(state, Fetching):
                if attempt >= self._max_attempts:
                    state = Failed(TooManyAttemptsError(str(state.url), attempt))
                    continue
                attempt += 1
                state = await self._fetch(state.url, schedule, stream, headers)

            elif isinstance(state, Redirected):
                logger.debug(
                    f"Redirecting on {state.status_code} to {state.url}"
                )
                if state.permanent:
                    logger.warning(
                        f"Location {state.previous} permanently moved to {state.url}."
                    )
                state = Fetching(state.url)

            elif isinstance(state, Backoff):
                if attempt >= self._max_attempts:
                    state = Failed(TooManyAttemptsError(str(state.url), attempt))
                    continue
                logger.warning(
                    f"Error fetching {state.url}: {state.status_code}. "
                    f"Will retry in {state.delay} seconds."
                )
                await self._sleep(state.delay)
                state = Fetching(state.url)

            elif isinstance(state, Failed):
                raise state.error

            else:
                return state.response

    async def _fetch(
        self,
        url: httpx.URL,
        schedule: Iterator[int],
        stream: bool,
        headers: dict[str, str] | None = None,
    ) -> FetchState:
        """Issue one GET and classify the outcome."""
        logger.info(f"Fetching {url}")
        try:
            request = self.client.build_request("GET", url, headers=headers)
            response = await self.client.send(request, stream=stream)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return Failed(HttpError(str(url), e))

        state = classify(url, response, schedule)
        if not isinstance(state, Done):
            await response.aclose()
        return state

    async def get_json(self, url: str | httpx.URL, model: type[M]) -> M:
        """
        Fetch url and validate the JSON body against model.

        Raises:
            IndexParseError: If the body does not match model (with field paths).
            PortableError: Any get_header() failure, with URL context added.
        """
        context = f"failed to fetch JSON at URL: {url}"
        try:
            response = await self.get_header(url)
        except PortableError as e:
            raise e.with_context(context)

        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            error = IndexParseError(str(url), e.errors(include_url=False), cause=e)
            raise error.with_context(context) from e


__all__ = ["AsyncFetcher"]
