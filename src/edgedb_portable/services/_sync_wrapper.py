"""
Sync wrapper generator for async services.

Automatically generates sync methods from async methods.
Write only async code, sync is generated at class definition time.

Usage:
    class AsyncPackageRepository:
        async def get_server_package(self, query: Query) -> PackageInfo | None:
            ...

    # Sync service is generated automatically
    PackageRepository = create_sync_service(AsyncPackageRepository)
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import functools
import inspect
from typing import Any, Callable, Coroutine, TypeVar

T = TypeVar("T")


def _run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Run coroutine to completion, blocking only the calling thread."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        # Already in async context - run on a fresh loop in a worker thread
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()
    return asyncio.run(coro)


def _make_sync_method(async_method: Callable) -> Callable:
    """Convert async method to sync method."""

    @functools.wraps(async_method)
    def sync_method(self, *args, **kwargs):
        async_service = getattr(self, "_async_service", None)
        if async_service is None:
            raise RuntimeError("Sync service not properly initialized")
        return _run_sync(async_method(async_service, *args, **kwargs))

    return sync_method


def _make_forwarder(method_name: str) -> Callable:
    """Forward an already-sync method to the async service instance."""

    def forwarder(self, *args, **kwargs):
        return getattr(self._async_service, method_name)(*args, **kwargs)

    forwarder.__name__ = method_name
    return forwarder


def _make_property_forwarder(prop_name: str) -> property:
    @property
    def forwarder(self):
        return getattr(self._async_service, prop_name)

    return forwarder


def create_sync_service(async_class: type) -> type:
    """
    Create sync service class from async service class.

    Coroutine methods become blocking methods, plain methods and properties
    are forwarded. Constructor arguments are passed to the async class.

    Args:
        async_class: Async service class with async methods

    Returns:
        New sync service class wrapping async methods

    Example:
        >>> DownloadService = create_sync_service(AsyncDownloadService)
        >>> result = DownloadService().download(Path("server.tar.zst"), url)
    """
    sync_name = async_class.__name__
    if sync_name.startswith("Async"):
        sync_name = sync_name[5:]

    class_dict: dict[str, Any] = {}

    for name in dir(async_class):
        if name.startswith("_"):
            continue
        attr = inspect.getattr_static(async_class, name)
        if isinstance(attr, property):
            class_dict[name] = _make_property_forwarder(name)
        elif inspect.iscoroutinefunction(attr):
            class_dict[name] = _make_sync_method(attr)
        elif inspect.isfunction(attr):
            class_dict[name] = _make_forwarder(name)

    def sync_init(self, *args, **kwargs):
        self._async_service = async_class(*args, **kwargs)

    class_dict.update(
        {
            "__init__": sync_init,
            "__doc__": async_class.__doc__,
            "__module__": async_class.__module__,
        }
    )

    return type(sync_name, (), class_dict)


__all__ = ["create_sync_service"]
