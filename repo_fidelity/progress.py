"""Time-throttled progress display for content comparison."""

from __future__ import annotations

import time
from typing import Callable

from .reporting import format_size


def format_duration(seconds: float) -> str:
    """Render a duration as ``45s``, ``3m 20s`` or ``2h 5m``."""
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


class ComparisonProgress:
    """
    Prints file and byte counts while digests are being compared.

    The status line is rewritten in place at most once per
    ``update_interval`` seconds. The line for the last file is always shown.
    """

    def __init__(
        self,
        total_files: int,
        enabled: bool = True,
        update_interval: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.total_files = total_files
        self.enabled = enabled
        self.update_interval = update_interval
        self.clock = clock
        self.started_at = clock()
        self.last_shown_at = self.started_at
        self.printed = False

    def remaining_estimate(self, compared: int, elapsed: float) -> str:
        """Project the time left for the outstanding files from the average so far."""
        if compared >= self.total_files:
            return "complete"
        if compared == 0 or elapsed <= 0:
            return "calculating..."
        seconds_per_file = elapsed / compared
        return format_duration(seconds_per_file * (self.total_files - compared))

    def update(self, compared: int, bytes_compared: int) -> None:
        """Print a progress line if enabled and the interval has elapsed."""
        if not self.enabled:
            return
        now = self.clock()
        last_file = compared >= self.total_files
        if not last_file and now - self.last_shown_at < self.update_interval:
            return
        self.last_shown_at = now
        share = compared / self.total_files * 100 if self.total_files else 0.0
        eta = self.remaining_estimate(compared, now - self.started_at)
        status = (
            f"Compared: {compared:,}/{self.total_files:,} files ({share:.1f}%), "
            f"{format_size(bytes_compared)}, ETA: {eta}  "
        )
        print(f"\r  {status}", end="", flush=True)
        self.printed = True

    def finish(self) -> None:
        """Terminate the progress line."""
        if self.printed:
            print()


__all__ = ["ComparisonProgress", "format_duration"]
