"""Theme service: transactional queries for the themes table.

Every operation issues a single parameterized statement. Ownership is part of
the WHERE clause for update/delete, so touching someone else's theme looks
exactly like touching a theme that doesn't exist.
"""

import logging
from uuid import UUID

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InternalServerError, NotFoundError
from app.models.theme import Theme
from app.schemas.theme import ThemeColors, ThemeResponse
from app.services.converters import to_theme

logger = logging.getLogger(__name__)


async def get_theme(db: AsyncSession, theme_id: UUID) -> ThemeResponse:
    """Get a theme by id."""
    result = await db.execute(select(Theme).where(Theme.id == theme_id))
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError("The theme couldn't be found.")
    return to_theme(row)


async def list_themes(db: AsyncSession, user_id: UUID, include_global: bool = True) -> list[ThemeResponse]:
    """Get all the themes available to a user.

    An empty result is reported as NotFoundError, not as an empty list.
    """
    stmt = select(Theme)
    if include_global:
        stmt = stmt.where(or_(Theme.user_id == user_id, Theme.is_global == True))  # noqa: E712
    else:
        stmt = stmt.where(Theme.user_id == user_id)

    result = await db.execute(stmt.order_by(Theme.created_at.asc()))
    rows = result.scalars().all()
    if not rows:
        raise NotFoundError("No themes were found.")
    return [to_theme(r) for r in rows]


async def create_theme(
    db: AsyncSession,
    user_id: UUID,
    label: str,
    colors: ThemeColors | None = None,
    custom_css: str | None = None,
    custom_html: str | None = None,
) -> ThemeResponse:
    result = await db.execute(
        insert(Theme)
        .values(
            label=label,
            colors=colors,
            custom_css=custom_css,
            custom_html=custom_html,
            user_id=user_id,
        )
        .returning(Theme)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise InternalServerError("Failed to add a new theme because of an internal server error.")

    logger.info("Theme %s created by user %s", row.id, user_id)
    return to_theme(row)


async def update_theme(
    db: AsyncSession,
    theme_id: UUID,
    user_id: UUID,
    label: str,
    colors: ThemeColors | None = None,
    custom_css: str | None = None,
    custom_html: str | None = None,
) -> ThemeResponse:
    """Update a theme. Must be owned by the user."""
    result = await db.execute(
        update(Theme)
        .where(Theme.id == theme_id, Theme.user_id == user_id)
        .values(label=label, colors=colors, custom_css=custom_css, custom_html=custom_html)
        .returning(Theme)
        .execution_options(populate_existing=True)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError("Failed to update the theme because the id couldn't be found.")
    return to_theme(row)


async def delete_theme(db: AsyncSession, theme_id: UUID, user_id: UUID) -> ThemeResponse:
    """Delete a theme. Must be owned by the user. Returns the values it had before deletion."""
    result = await db.execute(
        delete(Theme).where(Theme.id == theme_id, Theme.user_id == user_id).returning(Theme)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError("Failed to delete the theme because the id couldn't be found.")

    logger.info("Theme %s deleted by user %s", theme_id, user_id)
    return to_theme(row)


async def set_global(db: AsyncSession, theme_id: UUID, is_global: bool) -> ThemeResponse:
    """Mark a theme as global (or not)."""
    result = await db.execute(
        update(Theme)
        .where(Theme.id == theme_id)
        .values({Theme.is_global: is_global})
        .returning(Theme)
        .execution_options(populate_existing=True)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError("Failed to update the theme because the id couldn't be found.")
    return to_theme(row)


async def set_user_id(db: AsyncSession, theme_id: UUID, user_id: UUID) -> ThemeResponse:
    """Transfer a theme to another owner."""
    result = await db.execute(
        update(Theme)
        .where(Theme.id == theme_id)
        .values(user_id=user_id)
        .returning(Theme)
        .execution_options(populate_existing=True)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError("Failed to update the theme because the id couldn't be found.")

    logger.info("Theme %s transferred to user %s", theme_id, user_id)
    return to_theme(row)
