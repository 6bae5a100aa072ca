"""
Event status classification.

Derives a display status for an event from its rounds and whether any winner
has been recorded. The reference time is always passed in by the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from .errors import InvalidInputError

COMPLETED = "COMPLETED"
YET_TO_START = "YET_TO_START"
ROUND_ONGOING = "ROUND {round_no} ONGOING"


@dataclass(frozen=True)
class RoundSnapshot:
    """The parts of a round the classifier looks at."""

    round_no: int
    date: datetime | None
    completed: bool = False


@dataclass(frozen=True)
class EventSnapshot:
    """An event with its rounds in ascending round_no order and its winner count."""

    name: str
    rounds: tuple[RoundSnapshot, ...] = ()
    winner_count: int = 0

    @property
    def has_winners(self) -> bool:
        return self.winner_count > 0


@dataclass(frozen=True)
class EventStatus:
    """Status label computed for one event."""

    event_name: str
    status: str


def _as_utc(value: datetime) -> datetime:
    # naive timestamps are stored and compared as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _check_round_order(event: EventSnapshot) -> None:
    previous: int | None = None
    for round_ in event.rounds:
        if round_.round_no < 0:
            raise InvalidInputError(
                f"Event {event.name!r} has a negative round number {round_.round_no}"
            )
        if previous is not None and round_.round_no <= previous:
            raise InvalidInputError(
                f"Rounds of event {event.name!r} are not strictly ordered by round number"
            )
        previous = round_.round_no


def classify_event_status(event: EventSnapshot, now: datetime) -> EventStatus:
    """
    Classify a single event.

    Checks run in priority order and the first match wins:
    1. any winner recorded -> COMPLETED
    2. earliest round that has started and is not completed -> ROUND n ONGOING
    3. earliest round scheduled after ``now`` -> YET_TO_START
    4. anything else (no rounds, undated rounds, all rounds done) -> COMPLETED

    Raises:
        InvalidInputError: If rounds are not strictly increasing by round number.
    """
    _check_round_order(event)

    if event.has_winners:
        return EventStatus(event.name, COMPLETED)

    now = _as_utc(now)

    ongoing = next(
        (
            r
            for r in event.rounds
            if r.date is not None and _as_utc(r.date) <= now and not r.completed
        ),
        None,
    )
    if ongoing is not None:
        return EventStatus(event.name, ROUND_ONGOING.format(round_no=ongoing.round_no))

    upcoming = next(
        (r for r in event.rounds if r.date is not None and _as_utc(r.date) > now),
        None,
    )
    if upcoming is not None:
        return EventStatus(event.name, YET_TO_START)

    return EventStatus(event.name, COMPLETED)


def classify_event_statuses(events: Iterable[EventSnapshot], now: datetime) -> list[EventStatus]:
    """Classify every event against the same reference time, keeping input order."""
    return [classify_event_status(event, now) for event in events]
