from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.db.models import User
from pillarlog.db.session import get_db
from pillarlog.schemas.friends import (
    EncourageRequest,
    EncourageResult,
    FriendActionResult,
    FriendRequestResult,
    FriendSearchRequest,
    FriendTarget,
)
from pillarlog.schemas.user import FriendCodeOut, UserOut
from pillarlog.services import friendship as friendship_service
from pillarlog.utils.deps import get_current_user

router = APIRouter(prefix="/friends", tags=["friends"])
me_router = APIRouter(prefix="/me", tags=["friends"])


def _user_out(user: User) -> UserOut:
    return UserOut(id=user.id, username=user.username, friend_code=user.friend_code)


@me_router.get("/friend_code", response_model=FriendCodeOut)
async def get_my_friend_code(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    code = await friendship_service.ensure_friend_code(db, user)
    return FriendCodeOut(friend_code=code)


@router.post("/search", response_model=UserOut)
async def search_by_code(
    payload: FriendSearchRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    found = await friendship_service.find_by_friend_code(db, user.id, payload.code)
    return _user_out(found)


@router.post("/request", response_model=FriendRequestResult)
async def send_request(
    payload: FriendTarget,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    status = await friendship_service.request_friendship(db, user.id, payload.friend_id)
    return FriendRequestResult(status=status)


@router.post("/accept", response_model=FriendActionResult)
async def accept_request(
    payload: FriendTarget,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    await friendship_service.accept_friendship(db, user.id, payload.friend_id)
    return FriendActionResult()


@router.post("/decline", response_model=FriendActionResult)
async def decline_request(
    payload: FriendTarget,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    changed = await friendship_service.decline_friendship(db, user.id, payload.friend_id)
    return FriendActionResult(changed=changed)


@router.get("", response_model=List[UserOut])
async def list_friends(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    friends = await friendship_service.list_accepted_friends(db, user.id)
    return [_user_out(f) for f in friends]


@router.get("/requests", response_model=List[UserOut])
async def list_requests(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Incoming requests waiting for the caller to accept or decline."""
    requesters = await friendship_service.list_incoming_requests(db, user.id)
    return [_user_out(r) for r in requesters]


@router.get("/{friend_id}/shared_habits", response_model=List[str])
async def shared_habits(
    friend_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return await friendship_service.shared_habit_titles(db, user.id, friend_id)


@router.post("/encourage", response_model=EncourageResult)
async def encourage(
    payload: EncourageRequest,
    user: User = Depends(get_current_user),
):
    suffix = f': "{payload.message}"' if payload.message else ""
    return EncourageResult(text=f"{payload.emoji} You encouraged user {payload.friend_id}{suffix}")
