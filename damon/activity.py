"""A pool of running background activities that can be stopped together."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Protocol


class Activities(Protocol):
    """Anything that tracks stop signals for running activities."""

    def add(self, stop: threading.Event) -> None: ...

    def deactivate_all(self) -> None: ...


@dataclass
class ActivityPool:
    """Holds the stop signals of running activities."""

    activities: list[threading.Event] = field(default_factory=list)

    def add(self, stop: threading.Event) -> None:
        """Register the stop signal of a running activity."""
        self.activities.append(stop)

    def deactivate_all(self) -> None:
        """Signal every registered activity to stop and forget it."""
        while self.activities:
            self.activities.pop(0).set()