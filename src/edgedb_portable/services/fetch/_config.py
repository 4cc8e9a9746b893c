"""
Configuration constants for the resilient fetcher.
"""

# Identifies the client to the package server
USER_AGENT = "edgedb"

# Requests (redirect hops included) per get_header() call
MAX_ATTEMPTS = 10

# Backoff schedule in seconds; the last value repeats
RETRY_SECONDS = (5, 15, 30, 60)

# Redirects that should be fixed at the source
PERMANENT_REDIRECTS = frozenset({301, 308})

TOO_MANY_REQUESTS = 429
NOT_FOUND = 404
