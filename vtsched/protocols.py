"""Interfaces (Protocols) for the values the scheduler works with.

The scheduler never looks inside a timestamp or a callback; it only needs
these minimal abstractions, so plain ints, floats or `datetime` objects can
all serve as virtual time.
"""

from typing import Any, Protocol


class Instant(Protocol):
    """A point in virtual time.

    Instants must be totally ordered and support adding an offset (a duration
    in the same time domain) to produce another instant. `int` + `int` and
    `datetime` + `timedelta` both qualify.
    """

    def __lt__(self, other: Any) -> bool:
        raise NotImplementedError

    def __add__(self, offset: Any) -> Any:
        raise NotImplementedError


class Callback(Protocol):
    """Deferred work invoked by `Scheduler.call_next`.

    The callback receives the instant it was scheduled for (which is also the
    scheduler's clock at that moment) and returns a single value that the
    scheduler hands back to the caller untouched.
    """

    def __call__(self, at: Any) -> Any:
        raise NotImplementedError
