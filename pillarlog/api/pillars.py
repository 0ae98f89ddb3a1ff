from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.db.models import User
from pillarlog.db.session import get_db
from pillarlog.schemas.habit import HabitCreate, HabitCreated, HabitOut, PillarCreate, PillarOut
from pillarlog.services import pillars as pillar_service
from pillarlog.utils.deps import get_current_user

router = APIRouter(prefix="/pillars", tags=["pillars"])


@router.get("", response_model=List[PillarOut])
async def list_pillars(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    rows = await pillar_service.list_pillars(db, user.id)
    return [
        PillarOut(
            id=p.id,
            title=p.title,
            description=p.description,
            color=p.color,
            progress=p.progress,
            habits=[HabitOut.model_validate(h) for h in habits],
        )
        for p, habits in rows
    ]


@router.post("", response_model=PillarOut)
async def create_pillar(
    payload: PillarCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    pillar = await pillar_service.create_pillar(
        db,
        user.id,
        title=payload.title,
        description=payload.description,
        color=payload.color,
        progress=payload.progress,
    )
    return PillarOut(
        id=pillar.id,
        title=pillar.title,
        description=pillar.description,
        color=pillar.color,
        progress=pillar.progress,
        habits=[],
    )


@router.post("/{pillar_id}/habits", response_model=HabitCreated)
async def add_habit(
    pillar_id: int,
    payload: HabitCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    habit = await pillar_service.add_habit(db, user.id, pillar_id, payload.title)
    return HabitCreated(id=habit.id)
