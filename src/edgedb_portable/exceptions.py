"""
Exceptions for edgedb-portable.

All errors derive from PortableError and carry an ErrorKind tag, so callers
can branch on the kind (e.g. NOT_FOUND -> empty index) with a single check.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


class ErrorKind(str, Enum):
    """Failure origin of a PortableError."""

    NOT_FOUND = "not_found"
    HTTP_FAILURE = "http_failure"
    HTTP_ERROR = "http_error"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    MALFORMED_REDIRECT = "malformed_redirect"
    VERSION_PARSE = "version_parse"
    FILTER_PARSE = "filter_parse"
    UNSUPPORTED_PRERELEASE = "unsupported_prerelease"
    INVALID_HASH = "invalid_hash"
    INDEX_PARSE = "index_parse"
    HASH_MISMATCH = "hash_mismatch"
    DOWNLOAD_IO = "download_io"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    CONFIG = "config"


class PortableError(Exception):
    """Base exception for all edgedb-portable errors."""

    kind: ErrorKind = ErrorKind.CONFIG

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: list[str] = []
        self._original_cause = cause

    def with_context(self, context: str) -> PortableError:
        """Prefix the message with another layer of context, keeping the type."""
        self.context.append(context)
        return self

    def __str__(self) -> str:
        return ": ".join([*reversed(self.context), self.message])


# =============================================================================
# HTTP / fetch errors
# =============================================================================


class NotFoundError(PortableError):
    """Resource answered with HTTP 404."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"page not found: {url}")


class HttpFailureError(PortableError):
    """Non-retryable, non-success HTTP status."""

    kind = ErrorKind.HTTP_FAILURE

    def __init__(self, url: str, response: httpx.Response) -> None:
        self.url = url
        self.response = response
        self.status_code = response.status_code
        reason = response.reason_phrase or ""
        super().__init__(f"HTTP failure: {self.status_code} {reason}".rstrip())


class HttpError(PortableError):
    """Transport-level failure (connection, TLS, read error)."""

    kind = ErrorKind.HTTP_ERROR

    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        super().__init__(f"HTTP error: {cause}", cause=cause)


class TooManyAttemptsError(PortableError):
    """Attempt budget of the resilient fetcher exhausted."""

    kind = ErrorKind.TOO_MANY_ATTEMPTS

    def __init__(self, url: str, attempts: int) -> None:
        self.url = url
        self.attempts = attempts
        super().__init__(f"too many attempts ({attempts}) fetching {url}")


class MalformedRedirectError(PortableError):
    """Redirect response without a usable Location header."""

    kind = ErrorKind.MALFORMED_REDIRECT

    def __init__(self, url: str, status_code: int, location: str | None = None) -> None:
        self.url = url
        self.status_code = status_code
        self.location = location
        if location is None:
            message = f"unexpected redirect kind {status_code}"
        else:
            message = f"invalid redirect location {location!r} ({status_code})"
        super().__init__(message)


class IndexParseError(PortableError):
    """Fetched JSON does not match the expected structure."""

    kind = ErrorKind.INDEX_PARSE

    def __init__(self, url: str, errors: list[dict[str, Any]], cause: BaseException | None = None) -> None:
        self.url = url
        self.errors = errors
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ())) or '<root>'}: {err.get('msg', '')}"
            for err in errors
        )
        super().__init__(f"invalid JSON structure: {details}", cause=cause)


# =============================================================================
# Version errors
# =============================================================================


class VersionParseError(PortableError, ValueError):
    """Malformed specific or build version text."""

    kind = ErrorKind.VERSION_PARSE

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"invalid version {text!r}")


class FilterParseError(PortableError, ValueError):
    """Malformed version filter text."""

    kind = ErrorKind.FILTER_PARSE

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"invalid version filter {text!r}")


class UnsupportedPrereleaseError(PortableError, ValueError):
    """Prerelease channels are only supported for major version 1."""

    kind = ErrorKind.UNSUPPORTED_PRERELEASE

    def __init__(self, version: str, reason: str = "unsupported prerelease channel") -> None:
        self.version = version
        self.reason = reason
        super().__init__(f"{reason}: {version}")


# =============================================================================
# Integrity / download errors
# =============================================================================


class InvalidHashError(PortableError, ValueError):
    """Hash text is not a 128-character hex Blake2b digest."""

    kind = ErrorKind.INVALID_HASH

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"invalid blake2b hash (length {len(value)})")


class HashMismatchError(PortableError):
    """Downloaded file digest differs from the index."""

    kind = ErrorKind.HASH_MISMATCH

    def __init__(self, path: str, expected: str, actual: str) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"hash mismatch for {path}: expected {expected}, got {actual}"
        )


class DownloadIOError(PortableError):
    """Local file could not be written during download."""

    kind = ErrorKind.DOWNLOAD_IO

    def __init__(self, path: str, cause: OSError) -> None:
        self.path = path
        super().__init__(f"writing {path}: {cause}", cause=cause)


# =============================================================================
# Environment errors
# =============================================================================


class UnsupportedPlatformError(PortableError):
    """No portable packages are published for this OS/architecture."""

    kind = ErrorKind.UNSUPPORTED_PLATFORM

    def __init__(self, system: str, machine: str) -> None:
        self.system = system
        self.machine = machine
        super().__init__(f"unsupported platform: {system} {machine}")


class ConfigError(PortableError):
    """Invalid configuration value."""

    kind = ErrorKind.CONFIG


__all__ = [
    "ErrorKind",
    "PortableError",
    "NotFoundError",
    "HttpFailureError",
    "HttpError",
    "TooManyAttemptsError",
    "MalformedRedirectError",
    "IndexParseError",
    "VersionParseError",
    "FilterParseError",
    "UnsupportedPrereleaseError",
    "InvalidHashError",
    "HashMismatchError",
    "DownloadIOError",
    "UnsupportedPlatformError",
    "ConfigError",
]
