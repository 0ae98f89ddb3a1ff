"""Friendship graph models."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

FRIENDSHIP_PENDING = "pending"
FRIENDSHIP_ACCEPTED = "accepted"
FRIENDSHIP_DECLINED = "declined"

FRIENDSHIP_STATUSES = (FRIENDSHIP_PENDING, FRIENDSHIP_ACCEPTED, FRIENDSHIP_DECLINED)


class Friendship(Base):
    """
    One row per unordered pair of users.

    The pair is stored in canonical order (user_low < user_high) so the same
    two people always map to the same row, whichever of them acts.
    """

    __tablename__ = "friendships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_low: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    user_high: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    requester_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))

    status: Mapped[str] = mapped_column(String(16), default=FRIENDSHIP_PENDING)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("user_low", "user_high", name="uq_friendships_pair"),
        CheckConstraint("user_low < user_high", name="ck_friendships_canonical_order"),
        CheckConstraint("requester_id IN (user_low, user_high)", name="ck_friendships_requester_in_pair"),
        CheckConstraint(
            f"status IN {FRIENDSHIP_STATUSES!r}",
            name="ck_friendships_status",
        ),
        Index("ix_friendships_user_high", "user_high"),
    )
