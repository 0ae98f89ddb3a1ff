"""Moods, sleep, journal and goal records for the calling user."""
import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.db.guard import store_errors
from pillarlog.db.models import Goal, JournalEntry, Mood, SleepLog

log = logging.getLogger(__name__)


async def add_mood(db: AsyncSession, user_id: int, mood: float, recorded_at: datetime) -> Mood:
    row = Mood(user_id=user_id, mood=mood, recorded_at=recorded_at)
    async with store_errors(db, "save mood"):
        db.add(row)
        await db.commit()
        await db.refresh(row)
    return row


async def list_moods(db: AsyncSession, user_id: int) -> List[Mood]:
    async with store_errors(db, "load moods"):
        result = await db.execute(
            select(Mood).where(Mood.user_id == user_id).order_by(Mood.recorded_at.asc())
        )
        return list(result.scalars().all())


async def add_sleep(db: AsyncSession, user_id: int, day: date, hours: float) -> SleepLog:
    row = SleepLog(user_id=user_id, date=day, hours=hours)
    async with store_errors(db, "save sleep data"):
        db.add(row)
        await db.commit()
        await db.refresh(row)
    return row


async def list_sleep(db: AsyncSession, user_id: int) -> List[SleepLog]:
    async with store_errors(db, "load sleep data"):
        result = await db.execute(
            select(SleepLog).where(SleepLog.user_id == user_id).order_by(SleepLog.date.desc())
        )
        return list(result.scalars().all())


async def add_journal_entry(
    db: AsyncSession,
    user_id: int,
    *,
    title: Optional[str],
    entry: Optional[str],
    timestamp: Optional[datetime] = None,
    mood: Optional[str] = None,
    tags: Optional[List[str]] = None,
    gratitude: Optional[List[str]] = None,
) -> JournalEntry:
    row = JournalEntry(
        user_id=user_id,
        title=title,
        entry=entry,
        timestamp=timestamp or datetime.now(timezone.utc),
        mood=mood,
        tags=list(tags or []),
        gratitude=list(gratitude or []),
    )
    async with store_errors(db, "save entry"):
        db.add(row)
        await db.commit()
        await db.refresh(row)
    return row


async def list_journal_entries(db: AsyncSession, user_id: int) -> List[JournalEntry]:
    async with store_errors(db, "load journal entries"):
        result = await db.execute(
            select(JournalEntry)
            .where(JournalEntry.user_id == user_id)
            .order_by(JournalEntry.timestamp.desc())
        )
        return list(result.scalars().all())


async def get_goal_text(db: AsyncSession, user_id: int) -> str:
    async with store_errors(db, "fetch goals"):
        goal = await db.get(Goal, user_id)
    return goal.goal_text if goal else ""


async def set_goal_text(db: AsyncSession, user_id: int, goal_text: str) -> str:
    async with store_errors(db, "save goals"):
        goal = await db.get(Goal, user_id)
        if goal:
            goal.goal_text = goal_text
        else:
            db.add(Goal(user_id=user_id, goal_text=goal_text))
        await db.commit()
    log.info("Goal updated for user %s", user_id)
    return goal_text
