from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class PredictFeatures(CamelModel):
    last7_count: Optional[int] = Field(default=None, ge=0, le=7)
    last30_count: Optional[int] = Field(default=None, ge=0, le=31)
    weekly_frequency_target: Optional[int] = Field(default=None, ge=1, le=7)
    last7_days: Optional[List[bool]] = Field(default=None, min_length=1, max_length=7)
    time_of_day: Optional[str] = None
    sleep_hours_avg: Optional[float] = None
    stress_level: Optional[float] = Field(default=None, ge=1, le=10)


class PredictRequest(CamelModel):
    habit_name: str = Field(min_length=1)
    current_streak: int = Field(ge=0)
    reflection: str = ""
    features: PredictFeatures = Field(default_factory=PredictFeatures)


class PredictFromHistoryRequest(CamelModel):
    habit_name: str = Field(min_length=1)
    weekly_frequency_target: Optional[int] = Field(default=None, ge=1, le=7)
    reflection: str = ""


class HabitPrediction(CamelModel):
    success_probability: int = Field(ge=0, le=100)
    recommendation: str
    risk_factors: List[str]
    rationale: str


class HabitSignalsOut(CamelModel):
    last7_count: int
    last30_count: int
    current_streak: int
    weekly_frequency_target: int


class PredictionWithSignals(HabitPrediction):
    signals: HabitSignalsOut
