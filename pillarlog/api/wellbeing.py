from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.db.models import User
from pillarlog.db.session import get_db
from pillarlog.schemas.wellbeing import (
    GoalIn,
    GoalOut,
    JournalCreate,
    JournalOut,
    MoodCreate,
    MoodOut,
    SavedOut,
    SleepCreate,
    SleepOut,
    StreakOut,
)
from pillarlog.services import wellbeing as wellbeing_service
from pillarlog.services.analytics import mood_streak, utc_today
from pillarlog.utils.deps import get_current_user

router = APIRouter(tags=["wellbeing"])


# ─── Moods ────────────────────────────────────────────────────────


@router.post("/moods", response_model=SavedOut)
async def save_mood(
    payload: MoodCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    row = await wellbeing_service.add_mood(db, user.id, payload.mood, payload.date)
    return SavedOut(message="Mood saved successfully", id=row.id)


@router.get("/moods", response_model=List[MoodOut])
async def list_moods(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows = await wellbeing_service.list_moods(db, user.id)
    return [MoodOut(mood=m.mood, date=m.recorded_at) for m in rows]


@router.get("/streaks", response_model=StreakOut)
async def get_mood_streak(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Consecutive days, ending today, with at least one mood entry."""
    return StreakOut(streak=await mood_streak(db, user.id, utc_today()))


# ─── Sleep ────────────────────────────────────────────────────────


@router.post("/sleep", response_model=SavedOut)
async def save_sleep(
    payload: SleepCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    row = await wellbeing_service.add_sleep(db, user.id, payload.date, payload.hours)
    return SavedOut(message="Sleep data saved successfully", id=row.id)


@router.get("/sleep", response_model=List[SleepOut])
async def list_sleep(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [SleepOut.model_validate(s) for s in await wellbeing_service.list_sleep(db, user.id)]


# ─── Journal ──────────────────────────────────────────────────────


@router.post("/journal", response_model=SavedOut)
async def save_journal_entry(
    payload: JournalCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    row = await wellbeing_service.add_journal_entry(
        db,
        user.id,
        title=payload.title,
        entry=payload.entry,
        timestamp=payload.timestamp,
        mood=payload.mood,
        tags=payload.tags,
        gratitude=payload.gratitude,
    )
    return SavedOut(message="Entry saved", id=row.id)


@router.get("/journal", response_model=List[JournalOut])
async def list_journal_entries(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows = await wellbeing_service.list_journal_entries(db, user.id)
    return [JournalOut.model_validate(j) for j in rows]


# ─── Goals ────────────────────────────────────────────────────────


@router.get("/goals", response_model=GoalOut)
async def get_goals(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return GoalOut(goals=await wellbeing_service.get_goal_text(db, user.id))


@router.put("/goals", response_model=GoalOut)
async def set_goals(
    payload: GoalIn,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return GoalOut(goals=await wellbeing_service.set_goal_text(db, user.id, payload.goals))
