"""Deterministic virtual-time scheduler for simulations.

The scheduler keeps its own clock, unrelated to wall-clock time. Each call to
`call_next()` fast-forwards the clock to the earliest pending event and runs
its callback, so a simulation advances exactly as far as its events say and
no further.

Typical loop:

    scheduler.schedule_offset(on_arrival, 5)
    while not scheduler.empty():
        scheduler.call_next()

or simply `scheduler.run()`.

The scheduler is NOT thread-safe. It is meant to be driven sequentially, which
is what lets a callback safely call back into the scheduler (for example to
schedule more events) while it is being dispatched.
"""

from typing import Any, List, Optional

from loguru import logger

from .errors import EmptyError, PastError
from .events import Event, EventHeap
from .protocols import Callback, Instant

logger = logger.bind(module="vtsched.scheduler")


class Scheduler:
    """Time- and offset-based scheduling of callbacks in virtual time.

    Parameters:
    - origin: initial value of the clock (default: 0). Any totally ordered
      value supporting `+ offset` works, e.g. `datetime` with `timedelta`
      offsets.

    The clock never moves backwards: it only changes when an event is
    dispatched (`call_next`, `run`) or discarded with one of the `*_update`
    removals, and every accepted event is at or after the clock.
    """

    def __init__(self, origin: Instant = 0) -> None:
        self._heap = EventHeap()
        self._now = origin

    def __repr__(self) -> str:
        return f"Scheduler(now={self._now!r}, pending={len(self._heap)})"

    def now(self) -> Instant:
        """Return the current value of the virtual clock."""
        return self._now

    def empty(self) -> bool:
        """Return whether no events are scheduled."""
        return not self._heap

    def pending(self) -> int:
        """Return the number of scheduled events."""
        return len(self._heap)

    def schedule(self, callback: Callback, at: Instant) -> None:
        """Schedule `callback` to be called when the clock reaches `at`.

        Raises `PastError` if `at` is before `now()`; nothing is scheduled in
        that case.
        """
        if at < self._now:
            logger.warning(f"Rejected event at {at!r}: clock is already at {self._now!r}")
            raise PastError(at, self._now)
        event = Event(at, callback)
        self._heap.push(event)
        logger.debug(f"Scheduled {event.describe()} at {at!r} ({len(self._heap)} pending)")

    def schedule_offset(self, callback: Callback, offset: Any) -> None:
        """Schedule `callback` to be called once `offset` has elapsed.

        Raises `PastError` if `offset` is negative.
        """
        self.schedule(callback, self._now + offset)

    def peek_next(self) -> Instant:
        """Return the timestamp of the next scheduled event.

        Raises `EmptyError` if no events are scheduled.
        """
        if not self._heap:
            raise EmptyError()
        return self._heap.peek().at

    def call_next(self) -> Any:
        """Dispatch the next event and return its callback's result.

        The event is removed and the clock fast-forwarded to its timestamp
        before the callback runs; the callback is passed that timestamp. The
        scheduler is not touched after the callback returns, so the callback
        may freely call methods on this scheduler.

        Raises `EmptyError` if no events are scheduled. An exception raised by
        the callback propagates as is; the event stays consumed.
        """
        if not self._heap:
            raise EmptyError()
        event = self._heap.pop()
        self._now = event.at
        logger.debug(f"Dispatching {event.describe()} at {event.at!r}")
        return event.callback(event.at)

    def run(self, until: Optional[Instant] = None) -> List[Any]:
        """Dispatch events in order and return their results.

        Without `until`, runs until no events remain, including events that
        callbacks schedule along the way. With `until`, stops before the first
        event later than `until`; the clock stays at the last dispatched event.
        """
        results = []
        while self._heap:
            if until is not None and until < self._heap.peek().at:
                break
            results.append(self.call_next())
        logger.debug(f"Run finished at {self._now!r}: {len(results)} dispatched, {len(self._heap)} pending")
        return results

    def remove_next(self) -> None:
        """Discard the next event without calling it or moving the clock."""
        if self._heap:
            event = self._heap.pop()
            logger.debug(f"Removed {event.describe()} at {event.at!r}")

    def remove_next_update(self) -> None:
        """Discard the next event and fast-forward the clock to its timestamp.

        Does nothing if no events are scheduled.
        """
        if self._heap:
            event = self._heap.pop()
            self._now = event.at
            logger.debug(f"Removed {event.describe()}; clock now {self._now!r}")

    def remove_all(self) -> None:
        """Discard every scheduled event without moving the clock."""
        dropped = len(self._heap)
        self._heap.clear()
        logger.debug(f"Removed all {dropped} events")

    def remove_all_update(self) -> None:
        """Discard every scheduled event, moving the clock to the latest one.

        The clock ends at the largest discarded timestamp, not the earliest.
        Does nothing to the clock if no events are scheduled.
        """
        dropped = len(self._heap)
        if self._heap:
            self._now = self._heap.latest().at
        self._heap.clear()
        logger.debug(f"Removed all {dropped} events; clock now {self._now!r}")

    def dump_state(self, n: int = 5) -> str:
        """Return a human-readable snapshot of the clock and queued events.

        Args:
            n: Maximum number of queued events to include (default: 5).

        The snapshot lists the first `n` events in dispatch order without
        changing the underlying heap.
        """
        events = self._heap.smallest(n)
        lines = [
            f"Scheduler @ t = {self._now!r}",
            f"queued = {len(self._heap)} (showing first {len(events)})",
        ]
        for i, event in enumerate(events):
            lines.append(f"#{i:02d} due @ {event.at!r} cb={event.describe()}")
        return "\n".join(lines)
