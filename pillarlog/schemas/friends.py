from pydantic import Field

from .base import CamelModel


class FriendTarget(CamelModel):
    friend_id: int = Field(gt=0)


class FriendSearchRequest(CamelModel):
    code: str = Field(min_length=1)


class FriendRequestResult(CamelModel):
    ok: bool = True
    status: str


class FriendActionResult(CamelModel):
    ok: bool = True
    changed: bool = True


class EncourageRequest(CamelModel):
    friend_id: int = Field(gt=0)
    emoji: str = "👍"
    message: str | None = None


class EncourageResult(CamelModel):
    ok: bool = True
    text: str
