import logging
from collections import defaultdict

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.core.errors import InvalidInput, NotFound
from pillarlog.db.guard import store_errors
from pillarlog.db.models import DEFAULT_PILLAR_COLOR, Habit, Pillar

log = logging.getLogger(__name__)


async def create_pillar(
    db: AsyncSession,
    user_id: int,
    *,
    title: str,
    description: str = "",
    color: int = DEFAULT_PILLAR_COLOR,
    progress: int = 0,
) -> Pillar:
    if not title or not title.strip():
        raise InvalidInput("title required")

    pillar = Pillar(
        user_id=user_id,
        title=title.strip(),
        description=description,
        color=color,
        progress=progress,
    )
    async with store_errors(db, "create pillar"):
        db.add(pillar)
        await db.commit()
        await db.refresh(pillar)
    log.info("Pillar %s created for user %s", pillar.id, user_id)
    return pillar


async def list_pillars(db: AsyncSession, user_id: int) -> list[tuple[Pillar, list[Habit]]]:
    """Pillars newest first, each with its habits newest first."""
    async with store_errors(db, "load pillars"):
        pillars = (
            await db.execute(
                select(Pillar).where(Pillar.user_id == user_id).order_by(Pillar.id.desc())
            )
        ).scalars().all()
        if not pillars:
            return []

        habits = (
            await db.execute(
                select(Habit)
                .where(
                    Habit.user_id == user_id,
                    Habit.pillar_id.in_([p.id for p in pillars]),
                )
                .order_by(Habit.id.desc())
            )
        ).scalars().all()

    by_pillar: dict[int, list[Habit]] = defaultdict(list)
    for habit in habits:
        by_pillar[habit.pillar_id].append(habit)

    return [(p, by_pillar.get(p.id, [])) for p in pillars]


async def add_habit(db: AsyncSession, user_id: int, pillar_id: int, title: str) -> Habit:
    if not title or not title.strip():
        raise InvalidInput("title required")

    async with store_errors(db, "add habit"):
        pillar = await db.scalar(
            select(Pillar).where(Pillar.id == pillar_id, Pillar.user_id == user_id)
        )
        if not pillar:
            raise NotFound("Pillar", pillar_id)

        habit = Habit(
            user_id=user_id,
            pillar_id=pillar_id,
            title=title.strip(),
            completed=False,
            streak=0,
        )
        db.add(habit)
        await db.commit()
        await db.refresh(habit)
    return habit


async def toggle_habit(db: AsyncSession, habit_id: int, owner_id: int) -> tuple[bool, int]:
    """
    Flip ``completed`` and move the habit's streak counter with it.

    Completing adds one; un-completing takes one away, never below zero.
    Done as one UPDATE so the read and the write cannot interleave.
    """
    next_streak = case(
        (Habit.completed.is_(True), case((Habit.streak > 0, Habit.streak - 1), else_=0)),
        else_=Habit.streak + 1,
    )
    async with store_errors(db, "update habit"):
        row = (
            await db.execute(
                update(Habit)
                .where(Habit.id == habit_id, Habit.user_id == owner_id)
                .values(completed=~Habit.completed, streak=next_streak)
                .returning(Habit.completed, Habit.streak)
                .execution_options(synchronize_session=False)
            )
        ).first()
        await db.commit()

    if row is None:
        raise NotFound("Habit", habit_id)

    completed, streak = bool(row[0]), int(row[1])
    log.info("Habit %s toggled: completed=%s streak=%s", habit_id, completed, streak)
    return completed, streak
