from collections import defaultdict

from sqlalchemy import select
from strawberry.dataloader import DataLoader

from ..database.connection import get_async_session
from ..dbmodels import Rounds, Winners


async def load_rounds(keys: list[int]) -> list[list[Rounds]]:
    """Batch load rounds by event ID, each list ordered by round number."""
    async with get_async_session() as session:
        stmt = (
            select(Rounds)
            .where(Rounds.event_id.in_(keys))
            .order_by(Rounds.event_id, Rounds.round_no)
        )
        result = await session.execute(stmt)
        rounds_by_event: dict[int, list[Rounds]] = defaultdict(list)
        for round_ in result.scalars().all():
            rounds_by_event[round_.event_id].append(round_)
        return [rounds_by_event.get(key, []) for key in keys]


async def load_winners(keys: list[int]) -> list[list[Winners]]:
    """Batch load winners by event ID."""
    async with get_async_session() as session:
        stmt = select(Winners).where(Winners.event_id.in_(keys)).order_by(Winners.id)
        result = await session.execute(stmt)
        winners_by_event: dict[int, list[Winners]] = defaultdict(list)
        for winner in result.scalars().all():
            winners_by_event[winner.event_id].append(winner)
        return [winners_by_event.get(key, []) for key in keys]


class Loaders:
    def __init__(self):
        self.round_loader = DataLoader(load_fn=load_rounds)
        self.winner_loader = DataLoader(load_fn=load_winners)
