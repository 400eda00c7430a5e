"""User, profile and session schemas."""

from datetime import datetime
from uuid import UUID

from app.schemas.common import CamelModel


class UserResponse(CamelModel):
    id: UUID
    email: str
    full_name: str | None = None
    active_profile_id: UUID | None = None
    created_on: datetime


class ProfileResponse(CamelModel):
    id: UUID
    user_id: UUID
    handle: str
    created_on: datetime


class LoginResponse(CamelModel):
    user: UserResponse
    active_profile: ProfileResponse | None = None
    token: str


# Request bodies. Every field is optional so that missing values are reported
# by the handlers as 400s rather than by FastAPI validation.


class LoginUserRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class CreateUserRequest(CamelModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None
    handle: str | None = None


class RequestResetPasswordRequest(CamelModel):
    email: str | None = None


class ResetPasswordRequest(CamelModel):
    token: str | None = None
    password: str | None = None


class SetActiveProfileRequest(CamelModel):
    new_profile_id: str | None = None
