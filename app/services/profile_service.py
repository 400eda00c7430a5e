"""Profile service: lookups and creation for user profiles."""

import logging
from uuid import UUID

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, InternalServerError, NotFoundError
from app.models.profile import Profile
from app.schemas.user import ProfileResponse
from app.services.converters import to_profile

logger = logging.getLogger(__name__)


async def get_profile(db: AsyncSession, profile_id: UUID) -> ProfileResponse:
    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError("The profile couldn't be found.")
    return to_profile(row)


async def get_profile_by_handle(db: AsyncSession, handle: str) -> ProfileResponse:
    result = await db.execute(select(Profile).where(Profile.handle == handle))
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError("The profile couldn't be found.")
    return to_profile(row)


async def list_profiles(db: AsyncSession, user_id: UUID) -> list[ProfileResponse]:
    """All profiles owned by a user, oldest first. May be empty."""
    result = await db.execute(
        select(Profile).where(Profile.user_id == user_id).order_by(Profile.created_at.asc())
    )
    return [to_profile(r) for r in result.scalars().all()]


async def create_profile(db: AsyncSession, user_id: UUID, handle: str) -> ProfileResponse:
    try:
        # SAVEPOINT so a duplicate handle doesn't poison the request transaction
        async with db.begin_nested():
            result = await db.execute(
                insert(Profile).values(user_id=user_id, handle=handle).returning(Profile)
            )
            row = result.scalar_one_or_none()
    except IntegrityError:
        raise ConflictError("The profile couldn't be added because it is already being used.")

    if row is None:
        raise InternalServerError("Failed to add a new profile because of an internal server error.")

    logger.info("Profile %s (%s) created for user %s", row.id, handle, user_id)
    return to_profile(row)
