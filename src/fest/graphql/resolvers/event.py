from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import strawberry
from sqlalchemy import and_, or_, select
from sqlalchemy.orm import selectinload

from ...auth.tokens import AuthenticationError
from ...config import settings
from ...database.connection import get_async_session
from ...dbmodels import Events, TeamMembers, Teams, Winners
from ...events.errors import EventNotFoundError
from ...events.repository import fetch_published_events_with_rounds_and_winners
from ...events.status import classify_event_statuses
from ...logging import get_logger
from ..access_control import ensure_preloaded, get_auth_context_from_info
from ..pagination import decode_cursor, encode_cursor

if TYPE_CHECKING:
    from ..types.event import Event, EventConnection, EventStatus, Round, Winner

logger = get_logger(__name__)

CORE_CATEGORY = "CORE"


def _to_event_type(event: Events, teams: list[Teams] | None = None) -> Event:
    """Convert an ORM event (and optionally some of its teams) into the GraphQL type."""
    from ..types import event as event_types

    return event_types.Event(
        id=strawberry.ID(str(event.id)),
        name=event.name,
        description=event.description,
        category=event_types.EventCategory(event.category),
        event_type=event_types.EventType(event.event_type),
        venue=event.venue,
        image=event.image,
        published=bool(event.published),
        teams=[
            event_types.Team(
                id=strawberry.ID(str(team.id)),
                event_id=strawberry.ID(str(team.event_id)),
                name=team.name,
                confirmed=bool(team.confirmed),
            )
            for team in teams or []
        ],
    )


def _parse_event_id(id: str) -> int:
    try:
        return int(id)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid event id: {id!r}") from e


# Query resolvers
async def resolve_events(
    info: strawberry.Info,
    contains: str | None,
    first: int | None,
    after: str | None,
) -> EventConnection:
    """
    Resolve a page of events whose name or description contains a substring.

    The match is case-sensitive; a missing filter matches every event. Pages are
    ordered by event id and continue after the event encoded in ``after``.
    """
    from ..types.event import EventConnection as EventConnectionType
    from ..types.event import EventEdge, PageInfo

    page_size = settings.events_page_size if first is None else first
    if page_size < 1:
        raise ValueError("Argument 'first' must be a positive integer")
    page_size = min(page_size, settings.events_max_page_size)

    search = contains or ""
    search_condition = or_(
        Events.name.contains(search, autoescape=True),
        Events.description.contains(search, autoescape=True),
    )

    conditions = [search_condition]
    if after is not None:
        conditions.append(Events.id > decode_cursor(after))

    async with get_async_session() as session:
        stmt = select(Events).where(and_(*conditions)).order_by(Events.id).limit(page_size + 1)
        result = await session.execute(stmt)
        events = list(result.scalars().all())

    has_next_page = len(events) > page_size
    events = events[:page_size]

    edges = [
        EventEdge(cursor=encode_cursor(event.id), node=_to_event_type(event)) for event in events
    ]
    return EventConnectionType(
        edges=edges,
        page_info=PageInfo(
            has_next_page=has_next_page,
            has_previous_page=after is not None,
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
        ),
    )


async def resolve_event_by_id(info: strawberry.Info, id: str) -> Event:
    """
    Resolve an event by its ID.

    Raises:
        ValueError: If the ID is not numeric
        EventNotFoundError: If no event has this ID
    """
    event_id = _parse_event_id(id)

    async with get_async_session() as session:
        result = await session.execute(select(Events).where(Events.id == event_id))
        event = result.scalar_one_or_none()

    if event is None:
        logger.info("Event not found", event_id=event_id)
        raise EventNotFoundError(event_id)

    return _to_event_type(event)


async def resolve_registered_events(info: strawberry.Info) -> list[Event]:
    """
    Resolve events the authenticated user takes part in through a team.

    Only the user's own teams are attached to each returned event.

    Raises:
        AuthenticationError: If the request is not authenticated
    """
    auth_context = await get_auth_context_from_info(info)
    if not auth_context.is_authenticated:
        logger.info("Unauthenticated access to registered_events")
        raise AuthenticationError("Not authenticated")

    user_team_ids = select(TeamMembers.team_id).where(
        TeamMembers.user_id == auth_context.user_id
    )

    async with get_async_session() as session:
        stmt = (
            select(Events)
            .where(Events.teams.any(Teams.id.in_(user_team_ids)))
            .options(selectinload(Events.teams.and_(Teams.id.in_(user_team_ids))))
            .order_by(Events.id)
        )
        result = await session.execute(stmt)
        events = result.scalars().all()

        registered = []
        for event in events:
            ensure_preloaded(event, "teams")
            registered.append(_to_event_type(event, teams=list(event.teams)))

    return registered


async def resolve_published_events(info: strawberry.Info) -> list[Event]:
    """
    Resolve published events, CORE events first.

    Each group is sorted by name.
    """
    async with get_async_session() as session:
        core_stmt = (
            select(Events)
            .where(and_(Events.published.is_(True), Events.category == CORE_CATEGORY))
            .order_by(Events.name.asc())
        )
        core_events = (await session.execute(core_stmt)).scalars().all()

        other_stmt = (
            select(Events)
            .where(and_(Events.published.is_(True), Events.category != CORE_CATEGORY))
            .order_by(Events.name.asc())
        )
        other_events = (await session.execute(other_stmt)).scalars().all()

    return [_to_event_type(event) for event in [*core_events, *other_events]]


async def resolve_completed_events(info: strawberry.Info) -> list[Event]:
    """Resolve events that have at least one recorded winner."""
    async with get_async_session() as session:
        stmt = (
            select(Events)
            .where(Events.id.in_(select(Winners.event_id)))
            .order_by(Events.id)
        )
        result = await session.execute(stmt)
        events = result.scalars().all()

    return [_to_event_type(event) for event in events]


async def resolve_event_statuses(info: strawberry.Info, now: datetime) -> list[EventStatus]:
    """
    Resolve the status of every published event as of ``now``.

    Raises:
        InvalidInputError: If stored rounds of an event are not strictly ordered
    """
    from ..types.event import EventStatus as EventStatusType

    async with get_async_session() as session:
        snapshots = await fetch_published_events_with_rounds_and_winners(session)

    statuses = classify_event_statuses(snapshots, now)
    logger.debug("Classified event statuses", count=len(statuses), now=now.isoformat())

    return [
        EventStatusType(event_name=status.event_name, status=status.status)
        for status in statuses
    ]


# Event field resolvers
async def resolve_event_rounds(event: Event, info: strawberry.Info) -> list[Round]:
    """Resolve the rounds of an event through the per-request loader."""
    from ..types.event import Round as RoundType

    rounds = await info.context["loaders"].round_loader.load(int(event.id))
    return [
        RoundType(
            event_id=strawberry.ID(str(round_.event_id)),
            round_no=round_.round_no,
            date=round_.date,
            completed=bool(round_.completed),
        )
        for round_ in rounds
    ]


async def resolve_event_winners(event: Event, info: strawberry.Info) -> list[Winner]:
    """Resolve the winners of an event through the per-request loader."""
    from ..types.event import Winner as WinnerType
    from ..types.event import WinnerType as WinnerPlacement

    winners = await info.context["loaders"].winner_loader.load(int(event.id))
    return [
        WinnerType(
            id=strawberry.ID(str(winner.id)),
            event_id=strawberry.ID(str(winner.event_id)),
            team_id=strawberry.ID(str(winner.team_id)),
            type=WinnerPlacement(winner.type),
        )
        for winner in winners
    ]
