"""Map database rows to the public domain objects returned by the API."""

from app.models.profile import Profile
from app.models.theme import Theme
from app.models.user import User
from app.schemas.theme import ThemeResponse
from app.schemas.user import ProfileResponse, UserResponse


def to_theme(row: Theme) -> ThemeResponse:
    return ThemeResponse(
        id=row.id,
        user_id=row.user_id,
        label=row.label,
        colors=row.colors,
        custom_css=row.custom_css,
        custom_html=row.custom_html,
        is_global=bool(row.is_global),
    )


def to_user(row: User) -> UserResponse:
    """Public user shape. The password hash never leaves the service layer."""
    return UserResponse(
        id=row.id,
        email=row.email,
        full_name=row.full_name,
        active_profile_id=row.active_profile_id,
        created_on=row.created_at,
    )


def to_profile(row: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=row.id,
        user_id=row.user_id,
        handle=row.handle,
        created_on=row.created_at,
    )
