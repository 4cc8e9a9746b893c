"""
Progress display for downloads.
"""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


def create_progress(
    total: int | None,
    console: Console | None = None,
    disable: bool = False,
) -> Progress:
    """
    Bounded bar when total is known, indeterminate spinner otherwise.

    Args:
        total: Expected byte count, or None.
        console: Output console (default: stderr).
        disable: Track progress without rendering anything.
    """
    console = console or Console(stderr=True)
    if total is not None:
        columns = (
            TimeElapsedColumn(),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TextColumn("| ETA:"),
            TimeRemainingColumn(),
        )
    else:
        columns = (
            SpinnerColumn(),
            TimeElapsedColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
        )
    return Progress(*columns, console=console, transient=False, disable=disable)
