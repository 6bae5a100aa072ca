"""
Reusable seed data functions for local development.

Seeds a handful of events in every status the event status query can report:
one with a winner, one with a round in progress, one scheduled in the future
and one draft that stays unpublished.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Events, Rounds, TeamMembers, Teams, Users, Winners
from ..logging import get_logger

logger = get_logger(__name__)


async def ensure_event(
    db: AsyncSession,
    *,
    name: str,
    description: str | None = None,
    category: str = "TECHNICAL",
    event_type: str = "INDIVIDUAL",
    venue: str | None = None,
    published: bool = True,
    round_offsets: list[tuple[timedelta | None, bool]] | None = None,
) -> Events:
    """
    Ensure an event with the given name exists.

    Args:
        db: Database session
        name: Event name (used as the idempotency key)
        round_offsets: (offset from now, completed) per round, in round order;
            an offset of None leaves the round undated

    Returns:
        The existing or newly created event
    """
    stmt = select(Events).where(Events.name == name)
    result = await db.execute(stmt)
    existing = result.scalar_one_or_none()
    if existing:
        logger.debug("Event already exists", event_id=existing.id, name=name)
        return existing

    event = Events(
        name=name,
        description=description,
        category=category,
        event_type=event_type,
        venue=venue,
        published=published,
    )
    db.add(event)
    await db.flush()

    now = datetime.now(UTC)
    for round_no, (offset, completed) in enumerate(round_offsets or [], start=1):
        db.add(
            Rounds(
                event_id=event.id,
                round_no=round_no,
                date=None if offset is None else now + offset,
                completed=completed,
            )
        )

    await db.flush()
    logger.info("Created event", event_id=event.id, name=name, category=category)
    return event


async def seed_sample_events(db: AsyncSession) -> list[Events]:
    """Create the sample events used in local development."""
    events = [
        await ensure_event(
            db,
            name="Battle of Bands",
            description="Live music competition on the main stage",
            category="CORE",
            event_type="TEAM",
            venue="Main Stage",
            round_offsets=[(timedelta(days=-3), True), (timedelta(days=-1), True)],
        ),
        await ensure_event(
            db,
            name="Hack Day",
            description="Twenty-four hour hackathon",
            category="TECHNICAL",
            event_type="TEAM",
            venue="Lab Complex",
            round_offsets=[(timedelta(days=-1), True), (timedelta(hours=-2), False)],
        ),
        await ensure_event(
            db,
            name="Quiz Night",
            description="General quiz for all students",
            category="NON_TECHNICAL",
            venue="Auditorium",
            round_offsets=[(timedelta(days=2), False)],
        ),
        await ensure_event(
            db,
            name="Treasure Hunt",
            description="Campus-wide treasure hunt (draft)",
            category="SPECIAL",
            published=False,
            round_offsets=[(None, False)],
        ),
    ]

    band_event = events[0]
    result = await db.execute(select(Winners).where(Winners.event_id == band_event.id))
    if result.first() is None:
        user_result = await db.execute(
            select(Users).where(Users.auth_provider == "none", Users.auth_subject == "dev-user")
        )
        user = user_result.scalar_one_or_none()
        if user is None:
            user = Users(auth_provider="none", auth_subject="dev-user", name="Development User")
            db.add(user)
        team = Teams(event_id=band_event.id, name="The Resistors", confirmed=True)
        db.add(team)
        await db.flush()
        db.add_all(
            [
                TeamMembers(team_id=team.id, user_id=user.id),
                Winners(event_id=band_event.id, team_id=team.id, type="WINNER"),
            ]
        )
        await db.flush()
        logger.info("Recorded sample winner", event_id=band_event.id, team_id=team.id)

    await db.commit()
    return events
