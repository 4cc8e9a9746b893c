"""
edgedb-portable CLI entry point.

Usage:
    python -m edgedb_portable resolve --version 3
    python -m edgedb_portable download --nightly
"""

from edgedb_portable.cli import main

if __name__ == "__main__":
    main()
