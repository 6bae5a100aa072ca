"""Repository helpers that feed the event status classifier."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..dbmodels import Events, Winners
from .status import EventSnapshot, RoundSnapshot


async def fetch_published_events_with_rounds_and_winners(
    session: AsyncSession,
) -> list[EventSnapshot]:
    """
    Load every published event with its rounds and winner count.

    Rounds come back ascending by round_no through the relationship ordering,
    which is the order the classifier requires.
    """
    winner_count = (
        select(func.count(Winners.id))
        .where(Winners.event_id == Events.id)
        .correlate(Events)
        .scalar_subquery()
        .label("winner_count")
    )
    stmt = (
        select(Events, winner_count)
        .where(Events.published.is_(True))
        .options(selectinload(Events.rounds))
        .order_by(Events.id)
    )
    result = await session.execute(stmt)

    return [
        EventSnapshot(
            name=event.name,
            rounds=tuple(
                RoundSnapshot(
                    round_no=round_.round_no,
                    date=round_.date,
                    completed=bool(round_.completed),
                )
                for round_ in event.rounds
            ),
            winner_count=count or 0,
        )
        for event, count in result.all()
    ]
