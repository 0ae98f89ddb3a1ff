"""User-related database models."""

from datetime import datetime, timezone
from typing import List, TYPE_CHECKING

from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .habit import Pillar


class User(Base):
    """
    User account as seen by this service.

    Accounts are created by the auth service; we only reference them and keep
    the shareable friend code.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String, unique=True)
    friend_code: Mapped[str | None] = mapped_column(String(16), unique=True, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc)
    )

    pillars: Mapped[List["Pillar"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )
