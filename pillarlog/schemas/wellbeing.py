from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class MoodCreate(CamelModel):
    mood: float = Field(ge=0, le=10)
    date: datetime


class MoodOut(CamelModel):
    mood: float
    date: datetime


class StreakOut(CamelModel):
    streak: int


class SleepCreate(CamelModel):
    date: date
    hours: float = Field(ge=0, le=24)


class SleepOut(CamelModel):
    date: date
    hours: float


class JournalCreate(CamelModel):
    title: Optional[str] = None
    entry: Optional[str] = None
    timestamp: Optional[datetime] = None
    mood: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    gratitude: List[str] = Field(default_factory=list)


class JournalOut(CamelModel):
    title: Optional[str] = None
    entry: Optional[str] = None
    timestamp: Optional[datetime] = None
    mood: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    gratitude: List[str] = Field(default_factory=list)


class GoalIn(CamelModel):
    goals: str


class GoalOut(CamelModel):
    goals: str


class SavedOut(CamelModel):
    message: str
    id: int
