"""
Friendship state machine.

Per pair of users:  (none) -> pending -> accepted
                                      -> declined -> pending ...

Every transition is a single conditional statement against the canonical
pair row, so two racing calls can never both win.
"""
import logging
import secrets
import string

from sqlalchemy import case, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from pillarlog.core.errors import InvalidInput, NoPendingRequest, NotFound, StoreFailure
from pillarlog.db.guard import store_errors
from pillarlog.db.models import (
    FRIENDSHIP_ACCEPTED,
    FRIENDSHIP_DECLINED,
    FRIENDSHIP_PENDING,
    Friendship,
    Habit,
    User,
)
from pillarlog.services.pairs import canonical_pair

log = logging.getLogger(__name__)

FRIEND_CODE_LENGTH = 6
FRIEND_CODE_ALPHABET = string.ascii_uppercase + string.digits
_FRIEND_CODE_ATTEMPTS = 5


def _pair_clause(low: int, high: int):
    return (Friendship.user_low == low, Friendship.user_high == high)


def _involves(user_id: int):
    return or_(Friendship.user_low == user_id, Friendship.user_high == user_id)


async def get_friendship(db: AsyncSession, user_id: int, other_id: int) -> Friendship | None:
    low, high = canonical_pair(user_id, other_id)
    result = await db.execute(
        select(Friendship)
        .where(*_pair_clause(low, high))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _friendship_id(db: AsyncSession, low: int, high: int) -> int | None:
    return await db.scalar(select(Friendship.id).where(*_pair_clause(low, high)))


async def _ensure_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User", user_id)
    return user


async def request_friendship(db: AsyncSession, user_id: int, other_id: int) -> str:
    """
    Ask ``other_id`` to be friends. Returns the pair's status afterwards.

    Repeating a request is harmless: a pending or accepted pair is left as
    is, a declined pair is re-opened with ``user_id`` as the new requester.
    """
    low, high = canonical_pair(user_id, other_id)

    async with store_errors(db, "send friend request"):
        await _ensure_user(db, other_id)

        if await _friendship_id(db, low, high) is None:
            db.add(Friendship(
                user_low=low,
                user_high=high,
                requester_id=user_id,
                status=FRIENDSHIP_PENDING,
            ))
            try:
                await db.commit()
            except IntegrityError:
                # someone created the row first
                await db.rollback()
                log.debug("Friendship %s/%s created concurrently", low, high)
            else:
                log.info("Friend request %s -> %s created", user_id, other_id)
                return FRIENDSHIP_PENDING

        reopened = await db.execute(
            update(Friendship)
            .where(*_pair_clause(low, high), Friendship.status == FRIENDSHIP_DECLINED)
            .values(requester_id=user_id, status=FRIENDSHIP_PENDING)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        if reopened.rowcount:
            log.info("Friend request %s -> %s re-opened after decline", user_id, other_id)
            return FRIENDSHIP_PENDING

        status = await db.scalar(select(Friendship.status).where(*_pair_clause(low, high)))

    if status is None:
        raise StoreFailure("Friendship row missing after insert conflict")
    log.debug("Friend request %s -> %s is a no-op (status=%s)", user_id, other_id, status)
    return status


async def accept_friendship(db: AsyncSession, user_id: int, other_id: int) -> None:
    """Only the invitee may accept, and only while the pair is pending."""
    low, high = canonical_pair(user_id, other_id)

    async with store_errors(db, "accept friend request"):
        result = await db.execute(
            update(Friendship)
            .where(
                *_pair_clause(low, high),
                Friendship.status == FRIENDSHIP_PENDING,
                Friendship.requester_id != user_id,
            )
            .values(status=FRIENDSHIP_ACCEPTED)
            .execution_options(synchronize_session=False)
        )
        await db.commit()

    if result.rowcount == 0:
        raise NoPendingRequest()
    log.info("Friendship %s <-> %s accepted by %s", low, high, user_id)


async def decline_friendship(db: AsyncSession, user_id: int, other_id: int) -> bool:
    """
    Decline (or withdraw) a pending request. Either side may do it.

    Returns False when there was nothing pending; that is not an error.
    """
    low, high = canonical_pair(user_id, other_id)

    async with store_errors(db, "decline friend request"):
        result = await db.execute(
            update(Friendship)
            .where(*_pair_clause(low, high), Friendship.status == FRIENDSHIP_PENDING)
            .values(status=FRIENDSHIP_DECLINED)
            .execution_options(synchronize_session=False)
        )
        await db.commit()

    if result.rowcount == 0:
        log.debug("Decline %s/%s by %s: nothing pending", low, high, user_id)
        return False
    log.info("Friendship %s <-> %s declined by %s", low, high, user_id)
    return True


async def list_accepted_friends(db: AsyncSession, user_id: int) -> list[User]:
    other_id = case(
        (Friendship.user_low == user_id, Friendship.user_high),
        else_=Friendship.user_low,
    )
    async with store_errors(db, "load friends"):
        result = await db.execute(
            select(User)
            .join(Friendship, other_id == User.id)
            .where(_involves(user_id), Friendship.status == FRIENDSHIP_ACCEPTED)
            .order_by(User.username)
        )
        return list(result.scalars().all())


async def list_incoming_requests(db: AsyncSession, user_id: int) -> list[User]:
    """Users waiting on ``user_id`` to accept or decline. Sent requests are excluded."""
    async with store_errors(db, "load friend requests"):
        result = await db.execute(
            select(User)
            .join(Friendship, Friendship.requester_id == User.id)
            .where(
                _involves(user_id),
                Friendship.status == FRIENDSHIP_PENDING,
                Friendship.requester_id != user_id,
            )
            .order_by(Friendship.updated_at.desc())
        )
        return list(result.scalars().all())


async def are_friends(db: AsyncSession, user_id: int, other_id: int) -> bool:
    friendship = await get_friendship(db, user_id, other_id)
    return friendship is not None and friendship.status == FRIENDSHIP_ACCEPTED


def generate_friend_code() -> str:
    return "".join(secrets.choice(FRIEND_CODE_ALPHABET) for _ in range(FRIEND_CODE_LENGTH))


async def ensure_friend_code(db: AsyncSession, user: User) -> str:
    """Return the user's friend code, assigning a fresh unique one if missing."""
    if user.friend_code:
        return user.friend_code

    user_id = user.id
    for attempt in range(_FRIEND_CODE_ATTEMPTS):
        code = generate_friend_code()
        user.friend_code = code
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            log.warning("Friend code collision for user %s (attempt %s)", user_id, attempt + 1)
            continue
        log.info("Assigned friend code to user %s", user_id)
        return code

    raise StoreFailure("Could not assign a unique friend code")


async def find_by_friend_code(db: AsyncSession, user_id: int, code: str) -> User:
    code = code.strip().upper()
    if not code:
        raise InvalidInput("code required")

    async with store_errors(db, "look up friend code"):
        user = await db.scalar(select(User).where(User.friend_code == code))

    if not user:
        raise NotFound("Friend code", code)
    if user.id == user_id:
        raise InvalidInput("Cannot friend yourself")
    return user


async def shared_habit_titles(db: AsyncSession, user_id: int, friend_id: int) -> list[str]:
    """Habit titles both users track. Only visible between accepted friends."""
    if not await are_friends(db, user_id, friend_id):
        raise NotFound("Friend", friend_id)

    theirs = aliased(Habit)
    async with store_errors(db, "load shared habits"):
        result = await db.execute(
            select(Habit.title)
            .join(theirs, theirs.title == Habit.title)
            .where(Habit.user_id == user_id, theirs.user_id == friend_id)
            .distinct()
            .order_by(Habit.title)
        )
        return list(result.scalars().all())
