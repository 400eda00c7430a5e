from app.models.password_reset_token import PasswordResetToken
from app.models.profile import Profile
from app.models.theme import Theme
from app.models.user import User

__all__ = [
    "PasswordResetToken",
    "Profile",
    "Theme",
    "User",
]
