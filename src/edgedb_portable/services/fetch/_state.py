"""
Fetch state machine.

One get_header() call moves through these states:

    Fetching(url) -> Done(response)
                  -> Redirected(url') -> Fetching(url')
                  -> Backoff(url, delay) -> Fetching(url)
                  -> Failed(error)

classify() is the pure transition taken after a response arrives.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Iterator, Union

import httpx

from edgedb_portable.exceptions import (
    HttpFailureError,
    MalformedRedirectError,
    NotFoundError,
    PortableError,
)
from edgedb_portable.services.fetch._config import (
    NOT_FOUND,
    PERMANENT_REDIRECTS,
    RETRY_SECONDS,
    TOO_MANY_REQUESTS,
)


@dataclass(frozen=True)
class Fetching:
    url: httpx.URL


@dataclass(frozen=True)
class Redirected:
    url: httpx.URL
    previous: httpx.URL
    status_code: int

    @property
    def permanent(self) -> bool:
        return self.status_code in PERMANENT_REDIRECTS


@dataclass(frozen=True)
class Backoff:
    url: httpx.URL
    delay: int
    status_code: int


@dataclass(frozen=True)
class Failed:
    error: PortableError


@dataclass(frozen=True)
class Done:
    response: httpx.Response


FetchState = Union[Fetching, Redirected, Backoff, Failed, Done]


def retry_seconds() -> Iterator[int]:
    """Backoff schedule: 5, 15, 30, 60, 60, ..."""
    return itertools.chain(RETRY_SECONDS, itertools.repeat(RETRY_SECONDS[-1]))


def resolve_location(url: httpx.URL, location: str) -> httpx.URL:
    """Absolute locations are used as-is, relative ones joined to url."""
    return url.join(location)


def classify(
    url: httpx.URL,
    response: httpx.Response,
    schedule: Iterator[int],
) -> FetchState:
    """
    Next state after receiving response for url.

    Consumes one value of schedule only when backing off.
    """
    status = response.status_code

    if response.is_success:
        return Done(response)

    if 300 <= status < 400:
        locations = response.headers.get_list("Location")
        if not locations:
            return Failed(MalformedRedirectError(str(url), status))
        location = locations[-1]
        try:
            new_url = resolve_location(url, location)
        except httpx.InvalidURL:
            return Failed(MalformedRedirectError(str(url), status, location))
        return Redirected(new_url, url, status)

    if response.is_server_error or status == TOO_MANY_REQUESTS:
        return Backoff(url, next(schedule), status)

    if status == NOT_FOUND:
        return Failed(NotFoundError(str(url)))

    return Failed(HttpFailureError(str(url), response))


__all__ = [
    "Fetching",
    "Redirected",
    "Backoff",
    "Failed",
    "Done",
    "FetchState",
    "classify",
    "resolve_location",
    "retry_seconds",
]
