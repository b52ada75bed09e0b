"""Navigation history of the views."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

HISTORY_SIZE = 10


@dataclass
class History:
    """A bounded stack of callbacks that restore earlier views."""

    history_size: int = HISTORY_SIZE
    _stack: list[Callable[[], None]] = field(default_factory=list, repr=False)

    def __len__(self) -> int:
        return len(self._stack)

    def push(self, back: Callable[[], None]) -> None:
        """Record a callback, dropping the oldest when the stack is full."""
        self._stack.append(back)
        if len(self._stack) > self.history_size:
            del self._stack[0]

    def pop(self) -> None:
        """Go back to the previous view.

        Calls the second newest callback, then drops the two newest entries.
        Does nothing when there is no previous view.
        """
        if len(self._stack) > 1:
            self._stack[-2]()
            del self._stack[-2:]