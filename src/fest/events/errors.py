"""Exceptions raised by the event domain."""


class InvalidInputError(ValueError):
    """Raised when an event snapshot violates the ordering precondition on rounds."""

    pass


class EventNotFoundError(LookupError):
    """Raised when an event lookup by identifier matches no row."""

    def __init__(self, event_id: int):
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id
