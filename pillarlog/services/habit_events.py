import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.core.errors import InvalidInput, StoreFailure
from pillarlog.db.guard import store_errors
from pillarlog.db.models import HabitEvent

log = logging.getLogger(__name__)


async def _event_exists(db: AsyncSession, user_id: int, habit_name: str, day: date) -> bool:
    found = await db.scalar(
        select(HabitEvent.id).where(
            HabitEvent.user_id == user_id,
            HabitEvent.habit_name == habit_name,
            HabitEvent.date == day,
        )
    )
    return found is not None


def normalize_habit_name(habit_name: str | None) -> str:
    """Habit names are matched after trimming surrounding whitespace."""
    habit_name = (habit_name or "").strip()
    if not habit_name:
        raise InvalidInput("habitName and date required")
    return habit_name


async def record_completion(db: AsyncSession, user_id: int, habit_name: str, day: date) -> bool:
    """
    Log that ``habit_name`` was done on ``day``.

    Safe to retry: a second completion for the same day is dropped. Returns
    True only when a new event was written.
    """
    habit_name = normalize_habit_name(habit_name)

    async with store_errors(db, "log completion"):
        if await _event_exists(db, user_id, habit_name, day):
            log.debug("Completion %s/%s on %s already logged", user_id, habit_name, day)
            return False

        db.add(HabitEvent(user_id=user_id, habit_name=habit_name, date=day))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            if await _event_exists(db, user_id, habit_name, day):
                return False
            raise StoreFailure("Failed to log completion")

    log.info("Completion logged user=%s habit=%r date=%s", user_id, habit_name, day)
    return True


async def dates_in_window(
    db: AsyncSession,
    user_id: int,
    habit_name: str,
    start: date,
    end: date,
) -> set[date]:
    """Days in [start, end] (inclusive) on which the habit was completed."""
    habit_name = normalize_habit_name(habit_name)
    if start > end:
        return set()

    async with store_errors(db, "load completions"):
        result = await db.execute(
            select(HabitEvent.date).where(
                HabitEvent.user_id == user_id,
                HabitEvent.habit_name == habit_name,
                HabitEvent.date >= start,
                HabitEvent.date <= end,
            )
        )
        return set(result.scalars().all())
