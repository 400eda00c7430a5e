"""Tests for the user and profile services."""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.models.password_reset_token import PasswordResetToken
from app.services import profile_service, user_service


@pytest.mark.asyncio
async def test_create_user_and_login(db: AsyncSession):
    user = await user_service.create_user(db, "new@example.com", "pw-123456", "New Person")
    assert user.full_name == "New Person"
    assert user.active_profile_id is None

    result = await user_service.login_user(db, "new@example.com", "pw-123456")
    assert result.user.id == user.id
    assert result.active_profile is None
    assert result.token


@pytest.mark.asyncio
async def test_create_user_duplicate_email(db: AsyncSession, user_and_profile):
    with pytest.raises(ConflictError):
        await user_service.create_user(db, "test@example.com", "whatever")


@pytest.mark.asyncio
async def test_get_user_by_email(db: AsyncSession, user_and_profile):
    user, _ = user_and_profile
    assert (await user_service.get_user_by_email(db, "test@example.com")).id == user.id
    with pytest.raises(NotFoundError):
        await user_service.get_user_by_email(db, "nobody@example.com")


@pytest.mark.asyncio
async def test_set_active_profile_unknown_user(db: AsyncSession, user_and_profile):
    _, profile = user_and_profile
    with pytest.raises(NotFoundError):
        await user_service.set_active_profile(db, uuid.uuid4(), profile.id)


@pytest.mark.asyncio
async def test_reset_token_is_stored_hashed(db: AsyncSession, user_and_profile):
    with patch("app.services.user_service.deliver_password_reset_email", new=AsyncMock()) as send:
        await user_service.send_password_reset_email(db, "test@example.com")

    token = send.call_args.args[1].split("token=", 1)[1]
    rows = (await db.execute(select(PasswordResetToken))).scalars().all()
    assert len(rows) == 1
    assert rows[0].token_hash != token
    assert len(rows[0].token_hash) == 64


@pytest.mark.asyncio
async def test_expired_reset_token_is_rejected(db: AsyncSession, user_and_profile):
    with patch("app.services.user_service.deliver_password_reset_email", new=AsyncMock()) as send:
        await user_service.send_password_reset_email(db, "test@example.com")
    token = send.call_args.args[1].split("token=", 1)[1]

    await db.execute(
        update(PasswordResetToken).values(expires_at=datetime.now(timezone.utc) - timedelta(minutes=1))
    )

    with pytest.raises(UnauthorizedError):
        await user_service.set_password_with_token(db, token, "new-password")


@pytest.mark.asyncio
async def test_profile_lookups(db: AsyncSession, user_and_profile):
    user, profile = user_and_profile
    assert (await profile_service.get_profile(db, profile.id)).handle == "tester"
    assert (await profile_service.get_profile_by_handle(db, "tester")).id == profile.id

    with pytest.raises(NotFoundError):
        await profile_service.get_profile(db, uuid.uuid4())
    with pytest.raises(NotFoundError):
        await profile_service.get_profile_by_handle(db, "nobody")


@pytest.mark.asyncio
async def test_create_profile_and_list(db: AsyncSession, user_and_profile):
    user, profile = user_and_profile
    second = await profile_service.create_profile(db, user.id, "tester-alt")

    handles = [p.handle for p in await profile_service.list_profiles(db, user.id)]
    assert handles == ["tester", "tester-alt"]
    assert second.user_id == user.id


@pytest.mark.asyncio
async def test_create_profile_duplicate_handle(db: AsyncSession, user_and_profile, other_user):
    stranger, _ = other_user
    with pytest.raises(ConflictError):
        await profile_service.create_profile(db, stranger.id, "tester")

    # The savepoint keeps the session usable
    assert (await profile_service.get_profile_by_handle(db, "tester")).user_id != stranger.id
