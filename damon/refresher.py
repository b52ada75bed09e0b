"""Run a refresh function periodically until a newer refresh takes over."""

from __future__ import annotations

import threading
from collections.abc import Callable

from damon.activity import Activities, ActivityPool

DEFAULT_REFRESH_INTERVAL = 2.0


class Refresher:
    """Calls a refresh function at a fixed interval in seconds."""

    def __init__(self, interval: float = 0) -> None:
        self.refresh_interval = interval or DEFAULT_REFRESH_INTERVAL
        self._activities: Activities = ActivityPool()

    def with_custom_activity_pool(self, activities: Activities) -> Refresher:
        """Use another activity pool and return this refresher."""
        self._activities = activities
        return self

    def refresh(self, refresh: Callable[[], None]) -> None:
        """Stop earlier refresh loops, then call ``refresh`` until stopped.

        Blocks; run it in a thread.
        """
        stop = threading.Event()
        self._activities.deactivate_all()
        self._activities.add(stop)

        refresh()

        while not stop.wait(self.refresh_interval):
            refresh()