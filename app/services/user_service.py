"""User service: login, registration, password reset, active profile."""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ConflictError, InternalServerError, NotFoundError, UnauthorizedError
from app.core.security import create_session_token, hash_password, verify_password
from app.models.password_reset_token import PasswordResetToken
from app.models.profile import Profile
from app.models.user import User
from app.schemas.user import LoginResponse, UserResponse
from app.services.converters import to_profile, to_user
from app.services.mailer import send_password_reset_email as deliver_password_reset_email

logger = logging.getLogger(__name__)


def _hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def _get_user_row_by_email(db: AsyncSession, email: str) -> User:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("The user couldn't be found.")
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> UserResponse:
    return to_user(await _get_user_row_by_email(db, email))


async def login_user(db: AsyncSession, email: str, password: str) -> LoginResponse:
    """Check credentials and open a session.

    Returns the user, their active profile (if any) and a signed session token.
    """
    user = await _get_user_row_by_email(db, email)

    if not verify_password(password, user.password_hash):
        raise UnauthorizedError("The password was incorrect.")

    active_profile = None
    if user.active_profile_id is not None:
        result = await db.execute(select(Profile).where(Profile.id == user.active_profile_id))
        profile = result.scalar_one_or_none()
        if profile is not None:
            active_profile = to_profile(profile)

    logger.info("User %s logged in", user.id)
    return LoginResponse(
        user=to_user(user),
        active_profile=active_profile,
        token=create_session_token(user.email),
    )


async def create_user(db: AsyncSession, email: str, password: str, full_name: str | None = None) -> UserResponse:
    existing = await db.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none():
        raise ConflictError("The user couldn't be created because the email is already being used.")

    try:
        async with db.begin_nested():
            result = await db.execute(
                insert(User)
                .values(email=email, password_hash=hash_password(password), full_name=full_name)
                .returning(User)
            )
            user = result.scalar_one_or_none()
    except IntegrityError:
        raise ConflictError("The user couldn't be created because the email is already being used.")

    if user is None:
        raise InternalServerError("Failed to create the user because of an internal server error.")

    logger.info("User %s created", user.id)
    return to_user(user)


async def set_active_profile(db: AsyncSession, user_id: UUID, profile_id: UUID) -> UserResponse:
    """Point the user's active profile at ``profile_id``. Ownership is checked by the caller."""
    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(active_profile_id=profile_id)
        .returning(User)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("The user couldn't be found.")
    return to_user(user)


async def send_password_reset_email(db: AsyncSession, email: str) -> UserResponse:
    """Issue a reset token for the user and email them a link containing it."""
    user = await _get_user_row_by_email(db, email)

    token = secrets.token_urlsafe(32)
    await db.execute(
        insert(PasswordResetToken).values(
            user_id=user.id,
            token_hash=_hash_reset_token(token),
            expires_at=datetime.now(timezone.utc) + timedelta(minutes=settings.password_reset_token_expire_minutes),
        )
    )
    # The link must work as soon as it lands in the inbox
    await db.commit()

    reset_url = f"{settings.frontend_url.rstrip('/')}/reset-password?token={token}"
    await deliver_password_reset_email(user.email, reset_url)

    logger.info("Password reset requested for user %s", user.id)
    return to_user(user)


async def set_password_with_token(db: AsyncSession, token: str, password: str) -> UserResponse:
    """Change a password using a reset token. The token (and any other pending ones) is consumed."""
    result = await db.execute(
        select(PasswordResetToken).where(
            PasswordResetToken.token_hash == _hash_reset_token(token),
            PasswordResetToken.expires_at > datetime.now(timezone.utc),
        )
    )
    reset_token = result.scalar_one_or_none()
    if reset_token is None:
        raise UnauthorizedError("The password reset token is invalid or has expired.")

    user_id = reset_token.user_id
    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(password_hash=hash_password(password))
        .returning(User)
        .execution_options(populate_existing=True)
    )
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("The user couldn't be found.")

    await db.execute(delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id))

    logger.info("Password changed with reset token for user %s", user_id)
    return to_user(user)
