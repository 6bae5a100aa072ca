"""
Event GraphQL type definitions
"""

from datetime import datetime
from enum import Enum

import strawberry


@strawberry.enum
class EventCategory(Enum):
    """Event category enumeration."""

    CORE = "CORE"
    TECHNICAL = "TECHNICAL"
    NON_TECHNICAL = "NON_TECHNICAL"
    SPECIAL = "SPECIAL"


@strawberry.enum
class EventType(Enum):
    """How participants enter an event."""

    INDIVIDUAL = "INDIVIDUAL"
    TEAM = "TEAM"
    INDIVIDUAL_MULTIPLE_ENTRY = "INDIVIDUAL_MULTIPLE_ENTRY"
    TEAM_MULTIPLE_ENTRY = "TEAM_MULTIPLE_ENTRY"


@strawberry.enum
class WinnerType(Enum):
    """Placement of a winning team."""

    WINNER = "WINNER"
    RUNNER_UP = "RUNNER_UP"
    SECOND_RUNNER_UP = "SECOND_RUNNER_UP"


@strawberry.type
class Round:
    """Round type for GraphQL API."""

    event_id: strawberry.ID
    round_no: int
    date: datetime | None
    completed: bool


@strawberry.type
class Team:
    """Team type for GraphQL API."""

    id: strawberry.ID
    event_id: strawberry.ID
    name: str
    confirmed: bool


@strawberry.type
class Winner:
    """Winner type for GraphQL API."""

    id: strawberry.ID
    event_id: strawberry.ID
    team_id: strawberry.ID
    type: WinnerType


@strawberry.type
class Event:
    """Event type for GraphQL API."""

    id: strawberry.ID
    name: str
    description: str | None
    category: EventCategory
    event_type: EventType
    venue: str | None
    image: str | None
    published: bool
    teams: list[Team] = strawberry.field(
        default_factory=list,
        description="Teams of the current user in this event (filled by registeredEvents).",
    )

    @strawberry.field
    async def rounds(self, info: strawberry.Info) -> list[Round]:
        """Get the rounds of this event in round order."""
        from ..resolvers.event import resolve_event_rounds

        return await resolve_event_rounds(self, info)

    @strawberry.field
    async def winners(self, info: strawberry.Info) -> list[Winner]:
        """Get the recorded winners of this event."""
        from ..resolvers.event import resolve_event_winners

        return await resolve_event_winners(self, info)


@strawberry.type
class EventStatus:
    """Derived status of a published event."""

    event_name: str
    status: str


@strawberry.type
class PageInfo:
    """Pagination state of a connection."""

    has_next_page: bool
    has_previous_page: bool
    start_cursor: str | None
    end_cursor: str | None


@strawberry.type
class EventEdge:
    cursor: str
    node: Event


@strawberry.type
class EventConnection:
    """A page of events."""

    edges: list[EventEdge]
    page_info: PageInfo
