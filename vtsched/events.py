"""Pending events and the min-heap that orders them.

- `Event`: an immutable (callback, at) pair. Events compare by `at` only, so
  the heap never has to compare two callbacks.
- `EventHeap`: a binary min-heap over a list, maintained with `heapq`. The
  earliest event is always at index 0.

Events with equal timestamps come out in whatever order the heap yields them;
no FIFO promise is made for ties.
"""

import heapq
from dataclasses import dataclass, field
from typing import Iterator, List

from .protocols import Callback, Instant


@dataclass(frozen=True, order=True)
class Event:
    """A callback waiting to be dispatched at virtual time `at`."""

    at: Instant
    callback: Callback = field(compare=False)

    def describe(self) -> str:
        """Return a short label for the callback, for logs and state dumps."""
        name = getattr(self.callback, "__name__", None)
        return name if isinstance(name, str) else repr(self.callback)


class EventHeap:
    """Ordered store of not-yet-dispatched events."""

    def __init__(self) -> None:
        self._events: List[Event] = []

    def __len__(self) -> int:
        return len(self._events)

    def __bool__(self) -> bool:
        return bool(self._events)

    def __iter__(self) -> Iterator[Event]:
        """Iterate pending events in heap (not dispatch) order."""
        return iter(self._events)

    def push(self, event: Event) -> None:
        heapq.heappush(self._events, event)

    def peek(self) -> Event:
        """Return the earliest event without removing it.

        Raises `IndexError` if the heap is empty.
        """
        return self._events[0]

    def pop(self) -> Event:
        """Remove and return the earliest event.

        Raises `IndexError` if the heap is empty.
        """
        return heapq.heappop(self._events)

    def latest(self) -> Event:
        """Return the event with the largest timestamp (linear scan)."""
        return max(self._events)

    def smallest(self, n: int) -> List[Event]:
        """Return up to `n` earliest events in dispatch order, leaving the heap as is."""
        return heapq.nsmallest(n, self._events)

    def clear(self) -> None:
        self._events = []
