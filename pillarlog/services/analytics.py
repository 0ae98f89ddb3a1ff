"""
Habit analytics over the completion log.

All calculations take an explicit ``today`` so a request samples the clock
once (see ``utc_today``) and every comparison uses that same day.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Collection, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.core.config import settings
from pillarlog.core.errors import InvalidInput
from pillarlog.db.guard import store_errors
from pillarlog.db.models import Mood
from pillarlog.services.habit_events import dates_in_window, normalize_habit_name

log = logging.getLogger(__name__)

SHORT_WINDOW_DAYS = 7
LONG_WINDOW_DAYS = 30

ONE_DAY = timedelta(days=1)


@dataclass
class HabitSignals:
    last7_count: int
    last30_count: int
    current_streak: int
    weekly_frequency_target: int

    def as_features(self) -> dict:
        return {
            "last7Count": self.last7_count,
            "last30Count": self.last30_count,
            "currentStreak": self.current_streak,
            "weeklyFrequencyTarget": self.weekly_frequency_target,
        }


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def calendar_day(moment: datetime) -> date:
    """Calendar date of a timestamp; aware values are read in UTC."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def window_start(today: date, days: int) -> date:
    return today - timedelta(days=days - 1)


def consecutive_day_streak(days: Collection[date], today: date) -> int:
    """Number of consecutive days ending at ``today`` that appear in ``days``."""
    streak = 0
    day = today
    while day in days:
        streak += 1
        day -= ONE_DAY
    return streak


def count_in_window(days: Collection[date], today: date, size: int) -> int:
    start = window_start(today, size)
    return sum(1 for d in days if start <= d <= today)


async def _habit_streak(
    db: AsyncSession,
    user_id: int,
    habit_name: str,
    today: date,
    known: Collection[date],
    known_from: date,
) -> int:
    streak = consecutive_day_streak(known, today)

    # A run that fills the whole fetched block may continue further back.
    covered_from = known_from
    while streak == (today - covered_from).days + 1:
        block_end = covered_from - ONE_DAY
        covered_from = window_start(block_end, LONG_WINDOW_DAYS)
        older = await dates_in_window(db, user_id, habit_name, covered_from, block_end)
        streak += consecutive_day_streak(older, block_end)
    return streak


async def compute_habit_signals(
    db: AsyncSession,
    user_id: int,
    habit_name: str,
    today: date,
    weekly_frequency_target: Optional[int] = None,
) -> HabitSignals:
    """
    Rolling 7/30-day completion counts and the current calendar streak.

    Both counts come from a single read of the 30-day window; the 7-day
    count is the subset of it. An empty log yields zeros.
    """
    habit_name = normalize_habit_name(habit_name)
    target = weekly_frequency_target
    if target is None:
        target = settings.DEFAULT_WEEKLY_FREQUENCY_TARGET
    if not 1 <= target <= 7:
        raise InvalidInput("weeklyFrequencyTarget must be between 1 and 7")

    start30 = window_start(today, LONG_WINDOW_DAYS)
    days = await dates_in_window(db, user_id, habit_name, start30, today)

    signals = HabitSignals(
        last7_count=count_in_window(days, today, SHORT_WINDOW_DAYS),
        last30_count=len(days),
        current_streak=await _habit_streak(db, user_id, habit_name, today, days, start30),
        weekly_frequency_target=target,
    )
    log.debug("Signals user=%s habit=%r today=%s: %s", user_id, habit_name, today, signals)
    return signals


async def mood_streak(db: AsyncSession, user_id: int, today: date) -> int:
    """Consecutive days up to ``today`` with at least one mood logged."""
    async with store_errors(db, "load streaks"):
        result = await db.execute(
            select(Mood.recorded_at).where(Mood.user_id == user_id)
        )
        days = {calendar_day(moment) for moment in result.scalars().all()}
    return consecutive_day_streak(days, today)
