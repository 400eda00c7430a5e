import jwt
from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UnauthorizedError
from app.core.security import decode_token
from app.db.postgres import get_db
from app.models.user import User

BEARER_PREFIX = "Bearer "


def _session_email(authorization: str | None) -> str:
    """Pull the email claim out of an ``Authorization: Bearer <jwt>`` header."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError("No session token was provided.")
    try:
        claims = decode_token(authorization[len(BEARER_PREFIX):])
    except jwt.PyJWTError:
        raise UnauthorizedError("The session token is invalid or has expired.")
    email = claims.get("email")
    if not email:
        raise UnauthorizedError("The session token is invalid or has expired.")
    return email


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    authorization: str | None = Header(None, description="Bearer <session token>"),
) -> User:
    email = _session_email(authorization)
    user = await db.scalar(select(User).where(User.email == email))
    # Account removed after the token was issued
    if user is None:
        raise UnauthorizedError("The session token is invalid or has expired.")
    return user
