"""
Configuration constants for download service.
"""

# Read size for streaming the response body
DEFAULT_CHUNK_SIZE = 16 * 1024  # 16KiB

# Blake2b-512 digest size in bytes
DIGEST_SIZE = 64

# Artifacts are fetched as published, without transfer compression
IDENTITY_ENCODING = "identity"
