"""
SQLAlchemy database models.

Models are organized by domain:
- base: Base declarative class
- user: User accounts (referenced, owned by the auth service)
- friendship: Friendship graph over canonical user pairs
- habit: Pillars, habits and the habit completion log
- wellbeing: Moods, sleep logs, journal entries and goals

Import any model from this module:
    from pillarlog.db.models import User, Friendship, HabitEvent
"""

# Base class (must be imported first)
from .base import Base

# User models
from .user import User

# Friendship graph
from .friendship import (
    Friendship,
    FRIENDSHIP_PENDING,
    FRIENDSHIP_ACCEPTED,
    FRIENDSHIP_DECLINED,
    FRIENDSHIP_STATUSES,
)

# Pillars, habits and events
from .habit import Pillar, Habit, HabitEvent, DEFAULT_PILLAR_COLOR

# Wellbeing records
from .wellbeing import Mood, SleepLog, JournalEntry, Goal

__all__ = [
    # Base
    "Base",
    # User
    "User",
    # Friendship
    "Friendship",
    "FRIENDSHIP_PENDING",
    "FRIENDSHIP_ACCEPTED",
    "FRIENDSHIP_DECLINED",
    "FRIENDSHIP_STATUSES",
    # Habits
    "Pillar",
    "Habit",
    "HabitEvent",
    "DEFAULT_PILLAR_COLOR",
    # Wellbeing
    "Mood",
    "SleepLog",
    "JournalEntry",
    "Goal",
]
