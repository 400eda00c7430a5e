"""User endpoints: login, registration, password reset, active profile.

Every route under /user answers any HTTP verb. Missing fields are 400s raised
here; everything else comes from the services as HttpError.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routing import Route, client_ip, register_routes
from app.core.analytics import Analytics, get_analytics
from app.core.dependencies import get_current_user
from app.core.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    NotImplementedHttpError,
    UnauthorizedError,
)
from app.core.rate_limit import RESET_PASSWORD_REQUEST_LIMIT, limiter
from app.core.security import create_session_token
from app.db.postgres import get_db
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import (
    CreateUserRequest,
    LoginResponse,
    LoginUserRequest,
    ProfileResponse,
    RequestResetPasswordRequest,
    ResetPasswordRequest,
    SetActiveProfileRequest,
    UserResponse,
)
from app.services import profile_service, user_service
from app.services.converters import to_user

router = APIRouter(prefix="/user", tags=["user"])

NOT_IMPLEMENTED_MESSAGE = "Sorry, this is not implemented yet."


async def login_user(
    request: Request,
    body: LoginUserRequest | None = None,
    db: AsyncSession = Depends(get_db),
    analytics: Analytics = Depends(get_analytics),
) -> LoginResponse:
    body = body or LoginUserRequest()
    if not body.email:
        raise BadRequestError("No email was provided.")
    if not body.password:
        raise BadRequestError("No password was provided.")

    result = await user_service.login_user(db, body.email, body.password)

    await analytics.track(
        result.user.id,
        "user logged in",
        {"$ip": client_ip(request), "profile": result.active_profile.id if result.active_profile else None},
    )
    return result


async def create_user(
    request: Request,
    body: CreateUserRequest | None = None,
    db: AsyncSession = Depends(get_db),
    analytics: Analytics = Depends(get_analytics),
) -> LoginResponse:
    """Register a user together with their first profile, which becomes active."""
    body = body or CreateUserRequest()
    if not body.email:
        raise BadRequestError("No email was provided.")
    if not body.password:
        raise BadRequestError("No password was provided.")
    if not body.handle:
        raise BadRequestError("No handle was provided.")

    # Not found means the handle is free; any other lookup error propagates
    try:
        await profile_service.get_profile_by_handle(db, body.handle)
    except NotFoundError:
        pass
    else:
        raise ConflictError("The profile couldn't be added because it is already being used.")

    user = await user_service.create_user(db, body.email, body.password, body.name)
    profile = await profile_service.create_profile(db, user.id, body.handle)
    user = await user_service.set_active_profile(db, user.id, profile.id)

    token = create_session_token(user.email)

    await analytics.track(user.id, "user created", {"$ip": client_ip(request), "profile": profile.id})
    await analytics.people_set(user.id, {"$email": user.email, "$created": user.created_on.isoformat()})

    return LoginResponse(user=user, active_profile=profile, token=token)


@limiter.limit(RESET_PASSWORD_REQUEST_LIMIT)
async def request_reset_password(
    request: Request,
    body: RequestResetPasswordRequest | None = None,
    db: AsyncSession = Depends(get_db),
    analytics: Analytics = Depends(get_analytics),
) -> MessageResponse:
    body = body or RequestResetPasswordRequest()
    if not body.email:
        raise NotFoundError("No email was provided.")

    user = await user_service.send_password_reset_email(db, body.email)

    await analytics.track(user.id, "user requested password reset", {"$ip": client_ip(request)})
    return MessageResponse(message="Successfully sent password reset email.")


async def reset_password(
    body: ResetPasswordRequest | None = None,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    body = body or ResetPasswordRequest()
    if not body.token:
        raise BadRequestError("No token was provided.")
    if not body.password:
        raise BadRequestError("No password was provided.")

    await user_service.set_password_with_token(db, body.token, body.password)
    return MessageResponse(message="Successfully changed password.")


async def get_user(user: User = Depends(get_current_user)) -> UserResponse:
    return to_user(user)


async def list_profiles(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[ProfileResponse]:
    """The caller's profiles, oldest first, for picking a new active one."""
    return await profile_service.list_profiles(db, user.id)


# TODO: implement profile/account update, account deletion and the GDPR data package
async def update_user():
    raise NotImplementedHttpError(NOT_IMPLEMENTED_MESSAGE)


async def delete_user():
    raise NotImplementedHttpError(NOT_IMPLEMENTED_MESSAGE)


async def get_user_data_package():
    raise NotImplementedHttpError(NOT_IMPLEMENTED_MESSAGE)


async def _find_profile(db: AsyncSession, raw_id: str) -> ProfileResponse | None:
    try:
        profile_id = UUID(raw_id)
    except ValueError:
        return None
    try:
        return await profile_service.get_profile(db, profile_id)
    except NotFoundError:
        return None


async def set_active_profile(
    request: Request,
    body: SetActiveProfileRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    analytics: Analytics = Depends(get_analytics),
) -> UserResponse:
    """Switch the caller's active profile.

    Unknown, malformed and foreign profile ids all answer 401 so the caller
    can't probe for profiles they don't own.
    """
    body = body or SetActiveProfileRequest()
    if not body.new_profile_id:
        raise BadRequestError("No profile id was provided.")

    profile = await _find_profile(db, body.new_profile_id)
    if profile is None or profile.user_id != user.id:
        raise UnauthorizedError("The user doesn't own the profile.")

    updated = await user_service.set_active_profile(db, user.id, profile.id)

    await analytics.track(user.id, "user set active profile", {"$ip": client_ip(request), "profile": profile.id})
    return updated


register_routes(
    router,
    [
        # Unauthenticated
        Route("/login", login_user),
        Route("/create", create_user),
        Route("/request-reset-password", request_reset_password),
        Route("/reset-password", reset_password),
        # Authenticated
        Route("", get_user, auth=True),
        Route("/profiles", list_profiles, auth=True),
        Route("/update", update_user, auth=True),
        Route("/delete", delete_user, auth=True),
        Route("/set-active-profile", set_active_profile, auth=True),
        Route("/data-package", get_user_data_package, auth=True),
    ],
)
