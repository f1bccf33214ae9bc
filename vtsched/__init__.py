"""Single-threaded virtual-time event scheduler."""

from loguru import logger

from .errors import EmptyError, PastError, SchedulerError
from .events import Event, EventHeap
from .scheduler import Scheduler

# Library logging is opt-in: call logger.enable("vtsched") to see it.
logger.disable("vtsched")

__all__ = [
    "EmptyError",
    "Event",
    "EventHeap",
    "PastError",
    "Scheduler",
    "SchedulerError",
]
