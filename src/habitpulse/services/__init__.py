"""Service module exports.

``compute_habit_streak`` and ``compute_weekly_aggregate`` are the single
implementation of the statistics; every caller imports them from here.
Modules that touch repositories (``tracking``, ``import_entries`` ...) are
imported directly by their callers.
"""

from . import frequency, habits, reports
from .habits import HabitStreak, compute_habit_streak
from .reports import WeeklyAggregate, compute_weekly_aggregate

__all__ = [
    "HabitStreak",
    "WeeklyAggregate",
    "compute_habit_streak",
    "compute_weekly_aggregate",
    "frequency",
    "habits",
    "reports",
]
