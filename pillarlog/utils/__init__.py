"""Request-level helpers shared by the routers."""

from .deps import get_current_user, oauth2_scheme, user_id_from_token

__all__ = [
    "get_current_user",
    "oauth2_scheme",
    "user_id_from_token",
]
