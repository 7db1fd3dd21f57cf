"""Elapsed editing time shown in the title bar and written on save."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Callable, List, Optional

from .constants import EditorConstants
from .events import Command, ScheduleTick, TickEvent


def format_duration(elapsed: timedelta) -> str:
    """Format whole seconds as e.g. '0s', '45s', '1m30s' or '2h0m5s'."""
    total = max(0, int(elapsed.total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{minutes}m{seconds}s"
    return f"{seconds}s"


class Stopwatch:
    """Measures wall-clock time since ``start()``.

    The reading only advances when a tick is processed, so rendering the
    same state twice shows the same time. It never goes backwards, even if
    the clock does.
    """

    def __init__(self, interval: float = EditorConstants.TICK_INTERVAL,
                 clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self._clock = clock
        self._started_at: Optional[float] = None
        self._elapsed = 0.0

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self):
        if self._started_at is None:
            self._started_at = self._clock()

    def init(self) -> List[Command]:
        """Commands that get the first tick scheduled."""
        return [ScheduleTick(self.interval)]

    def update(self, event) -> List[Command]:
        if not isinstance(event, TickEvent) or self._started_at is None:
            return []
        self._elapsed = max(self._elapsed, self._clock() - self._started_at)
        return [ScheduleTick(self.interval)]

    def elapsed(self) -> timedelta:
        return timedelta(seconds=self._elapsed)

    def view(self) -> str:
        return format_duration(self.elapsed())
