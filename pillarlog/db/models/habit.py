"""Pillars, habits and the habit completion log."""

from datetime import date, datetime, timezone
from typing import List, TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .user import User

DEFAULT_PILLAR_COLOR = 0xFF3B82F6  # ARGB


class Pillar(Base):
    """A life area ("Health", "Work", ...) grouping a user's habits."""

    __tablename__ = "pillars"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default="")
    color: Mapped[int] = mapped_column(BigInteger, default=DEFAULT_PILLAR_COLOR)
    progress: Mapped[int] = mapped_column(Integer, default=0)

    user: Mapped["User"] = relationship(back_populates="pillars")
    habits: Mapped[List["Habit"]] = relationship(
        back_populates="pillar",
        cascade="all, delete-orphan",
    )


class Habit(Base):
    """
    A habit under a pillar.

    ``streak`` is a plain counter moved by toggling; it is not the calendar
    streak computed from HabitEvent rows.
    """

    __tablename__ = "habits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    pillar_id: Mapped[int] = mapped_column(ForeignKey("pillars.id", ondelete="CASCADE"))
    title: Mapped[str] = mapped_column(String, nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    streak: Mapped[int] = mapped_column(Integer, default=0)

    pillar: Mapped["Pillar"] = relationship(back_populates="habits")

    __table_args__ = (
        Index("ix_habits_user_pillar", "user_id", "pillar_id"),
        CheckConstraint("streak >= 0", name="ck_habits_streak_non_negative"),
    )


class HabitEvent(Base):
    """Append-only completion log, at most one row per user/habit/day."""

    __tablename__ = "habit_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    habit_name: Mapped[str] = mapped_column(String, nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint("user_id", "habit_name", "date", name="uq_habit_events_user_habit_date"),
        Index("ix_habit_events_user_name_date", "user_id", "habit_name", "date"),
    )
