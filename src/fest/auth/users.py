"""Mapping token principals onto local participant rows."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import Users
from ..logging import get_logger
from .tokens import Principal

logger = get_logger(__name__)


async def get_or_create_user(db: AsyncSession, principal: Principal) -> int:
    """
    Return the id of the local user for ``principal``, registering it on first sight.

    Team memberships reference this id, so it is what registeredEvents filters on.
    The new row is flushed, not committed; the caller's session decides.
    """
    result = await db.execute(
        select(Users.id).where(
            Users.auth_provider == principal["provider"],
            Users.auth_subject == principal["subject"],
        )
    )
    user_id = result.scalar_one_or_none()
    if user_id is not None:
        return user_id

    user = Users(
        auth_provider=principal["provider"],
        auth_subject=principal["subject"],
        email=principal.get("email"),
        name=principal.get("name"),
    )
    db.add(user)
    await db.flush()

    logger.info("Registered participant", user_id=user.id, provider=principal["provider"])
    return user.id
