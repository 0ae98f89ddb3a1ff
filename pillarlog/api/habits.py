import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from pillarlog.core.errors import PredictorFailure
from pillarlog.db.models import User
from pillarlog.db.session import get_db
from pillarlog.schemas.habit import HabitCompleteRequest, HabitCompleteResult, HabitToggleResult
from pillarlog.schemas.prediction import (
    HabitPrediction,
    HabitSignalsOut,
    PredictFeatures,
    PredictFromHistoryRequest,
    PredictionWithSignals,
    PredictRequest,
)
from pillarlog.services.analytics import compute_habit_signals, utc_today
from pillarlog.services.habit_events import record_completion
from pillarlog.services.pillars import toggle_habit
from pillarlog.services.predictor import HabitPredictor, get_predictor
from pillarlog.utils.deps import get_current_user

log = logging.getLogger(__name__)

router = APIRouter(tags=["habits"])


@router.post("/habit/complete", response_model=HabitCompleteResult)
async def complete_habit(
    payload: HabitCompleteRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    created = await record_completion(db, user.id, payload.habit_name, payload.date)
    return HabitCompleteResult(created=created)


@router.get("/habit/signals", response_model=HabitSignalsOut)
async def habit_signals(
    habit_name: str = Query(..., alias="habitName", min_length=1),
    weekly_frequency_target: Optional[int] = Query(None, alias="weeklyFrequencyTarget", ge=1, le=7),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    signals = await compute_habit_signals(
        db, user.id, habit_name, utc_today(), weekly_frequency_target
    )
    return HabitSignalsOut(**asdict(signals))


@router.patch("/habits/{habit_id}/toggle", response_model=HabitToggleResult)
async def toggle(
    habit_id: int,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    completed, streak = await toggle_habit(db, habit_id, user.id)
    return HabitToggleResult(completed=completed, streak=streak)


@router.post("/predict", response_model=HabitPrediction)
async def predict(
    payload: PredictRequest,
    user: User = Depends(get_current_user),
    predictor: HabitPredictor = Depends(get_predictor),
):
    return await predictor.predict(
        habit_name=payload.habit_name,
        current_streak=payload.current_streak,
        reflection=payload.reflection,
        features=payload.features,
    )


@router.post("/predict_from_history", response_model=PredictionWithSignals)
async def predict_from_history(
    payload: PredictFromHistoryRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
    predictor: HabitPredictor = Depends(get_predictor),
):
    signals = await compute_habit_signals(
        db, user.id, payload.habit_name, utc_today(), payload.weekly_frequency_target
    )
    signals_out = HabitSignalsOut(**asdict(signals))

    try:
        prediction = await predictor.predict(
            habit_name=payload.habit_name,
            current_streak=signals.current_streak,
            reflection=payload.reflection,
            features=PredictFeatures(
                last7_count=signals.last7_count,
                last30_count=signals.last30_count,
                weekly_frequency_target=signals.weekly_frequency_target,
            ),
            from_history=True,
        )
    except PredictorFailure as exc:
        # the signals are still good; hand them back with the error
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.detail,
                "code": exc.error_code,
                "signals": signals_out.model_dump(by_alias=True),
            },
        )

    return PredictionWithSignals(**prediction.model_dump(), signals=signals_out)
