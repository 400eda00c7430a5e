"""Rate limiting configuration using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# Rate limiter instance: use remote address as key
limiter = Limiter(key_func=get_remote_address)

# /user/request-reset-password
RESET_PASSWORD_REQUEST_LIMIT = "3 per 4 hours"
