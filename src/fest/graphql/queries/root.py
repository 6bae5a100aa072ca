"""
Root GraphQL query definitions
"""

from datetime import UTC, datetime

import strawberry

from ..types.event import Event, EventConnection, EventStatus


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def events(
        self,
        info: strawberry.Info,
        contains: str | None = None,
        first: int | None = None,
        after: str | None = None,
    ) -> EventConnection:
        """Search events by name or description, one page at a time."""
        from ..resolvers.event import resolve_events

        return await resolve_events(info, contains, first, after)

    @strawberry.field
    async def event_by_id(self, info: strawberry.Info, id: strawberry.ID) -> Event:
        """Get an event by ID."""
        from ..resolvers.event import resolve_event_by_id

        return await resolve_event_by_id(info, id)

    @strawberry.field
    async def registered_events(self, info: strawberry.Info) -> list[Event]:
        """Get the events the current user is registered for."""
        from ..resolvers.event import resolve_registered_events

        return await resolve_registered_events(info)

    @strawberry.field
    async def published_events(self, info: strawberry.Info) -> list[Event]:
        """Get published events, CORE events first."""
        from ..resolvers.event import resolve_published_events

        return await resolve_published_events(info)

    @strawberry.field
    async def completed_events(self, info: strawberry.Info) -> list[Event]:
        """Get events that have recorded winners."""
        from ..resolvers.event import resolve_completed_events

        return await resolve_completed_events(info)

    @strawberry.field
    async def get_event_status(self, info: strawberry.Info) -> list[EventStatus]:
        """Get the current status of every published event."""
        from ..resolvers.event import resolve_event_statuses

        return await resolve_event_statuses(info, datetime.now(UTC))
