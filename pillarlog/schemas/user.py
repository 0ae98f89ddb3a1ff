from typing import Optional

from .base import CamelModel


class UserOut(CamelModel):
    id: int
    username: Optional[str] = None
    friend_code: Optional[str] = None


class FriendCodeOut(CamelModel):
    friend_code: str
