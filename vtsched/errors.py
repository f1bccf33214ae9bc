"""Errors raised by the scheduler.

Both errors are recoverable: the scheduler's state is left exactly as it was
before the failed call.
"""

from typing import Any


class SchedulerError(Exception):
    """Base class for every error raised by `vtsched`."""


class PastError(SchedulerError):
    """An event was scheduled before the scheduler's current time."""

    def __init__(self, at: Any, now: Any) -> None:
        super().__init__(f"event scheduled in the past: {at!r} < now {now!r}")
        self.at = at
        self.now = now


class EmptyError(SchedulerError):
    """No events are pending."""

    def __init__(self, message: str = "no events scheduled") -> None:
        super().__init__(message)
