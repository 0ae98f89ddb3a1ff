from datetime import date
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class HabitCompleteRequest(CamelModel):
    habit_name: str = Field(min_length=1)
    date: date


class HabitCompleteResult(CamelModel):
    ok: bool = True
    created: bool


class HabitCreate(CamelModel):
    title: str = Field(min_length=1)


class HabitCreated(CamelModel):
    id: int


class HabitOut(CamelModel):
    id: int
    title: str
    completed: bool
    streak: int


class HabitToggleResult(CamelModel):
    completed: bool
    streak: int


class PillarCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    color: int = 0xFF3B82F6
    progress: int = Field(default=0, ge=0, le=100)


class PillarOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    color: int
    progress: int
    habits: List[HabitOut] = []
