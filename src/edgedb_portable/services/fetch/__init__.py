"""
Resilient fetcher.

Features:
- Redirect following (relative locations joined to the current URL)
- Backoff retry on 5xx / 429 (5s, 15s, 30s, 60s, then 60s)
- Bounded attempts per call, redirect hops included
- Distinct errors for 404, other statuses and transport failures
"""

from edgedb_portable.services.fetch._aio import AsyncFetcher
from edgedb_portable.services.fetch._config import MAX_ATTEMPTS, RETRY_SECONDS, USER_AGENT
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

__all__ = [
    "AsyncFetcher",
    "MAX_ATTEMPTS",
    "RETRY_SECONDS",
    "USER_AGENT",
    "Backoff",
    "Done",
    "Failed",
    "Fetching",
    "FetchState",
    "Redirected",
    "classify",
    "retry_seconds",
]
