"""
Pytest configuration and fixtures for edgedb-portable tests.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import pytest

from edgedb_portable.config import reset_settings

PLATFORM = "x86_64-unknown-linux-gnu"
PKG_ROOT = "https://packages.test"
VALID_HASH = "ab" * 64


def make_ref(
    version: str,
    *,
    blake2b: str | None = VALID_HASH,
    kind: str = "application/x-tar",
    encoding: str | None = "zstd",
    size: int = 1024,
) -> dict[str, Any]:
    """Install reference as published in the JSON index."""
    return {
        "ref": f"/archive/{PLATFORM}/edgedb-server-{version}.tar.zst",
        "type": kind,
        "encoding": encoding,
        "verification": {"size": size, "blake2b": blake2b},
    }


def make_package(
    version: str,
    *,
    basename: str = "edgedb-server",
    installrefs: list[dict[str, Any]] | None = None,
    **ref_options: Any,
) -> dict[str, Any]:
    """Package entry as published in the JSON index."""
    return {
        "basename": basename,
        "version": version,
        "installrefs": installrefs if installrefs is not None else [make_ref(version, **ref_options)],
    }


class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Each test reads settings from a clean environment."""
    monkeypatch.delenv("EDGEDB_PKG_ROOT", raising=False)
    monkeypatch.delenv("EDGEDB_REQUEST_TIMEOUT", raising=False)
    monkeypatch.delenv("EDGEDB_LOG_LEVEL", raising=False)
    monkeypatch.delenv("EDGEDB_LOG_JSON", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Undo setup_logging() so caplog keeps seeing package records."""
    yield
    logger = logging.getLogger("edgedb_portable")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sleep() -> SleepRecorder:
    """Provide recording sleep."""
    return SleepRecorder()


@pytest.fixture
def package_factory() -> Callable[..., dict[str, Any]]:
    """Provide index entry builder."""
    return make_package


@pytest.fixture
def ref_factory() -> Callable[..., dict[str, Any]]:
    """Provide install reference builder."""
    return make_ref


@pytest.fixture
def valid_blake2b() -> str:
    """Provide well-formed Blake2b hex digest."""
    return VALID_HASH
