"""Event domain logic: status classification and data access."""

from .errors import EventNotFoundError, InvalidInputError
from .status import (
    COMPLETED,
    YET_TO_START,
    EventSnapshot,
    EventStatus,
    RoundSnapshot,
    classify_event_status,
    classify_event_statuses,
)

__all__ = [
    "COMPLETED",
    "YET_TO_START",
    "EventNotFoundError",
    "EventSnapshot",
    "EventStatus",
    "InvalidInputError",
    "RoundSnapshot",
    "classify_event_status",
    "classify_event_statuses",
]
