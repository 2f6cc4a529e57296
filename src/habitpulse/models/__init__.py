"""SQLModel table exports."""

from .habit import EntryStatus, Habit, HabitEntry
from .notification import Notification
from .user import User

__all__ = [
    "EntryStatus",
    "Habit",
    "HabitEntry",
    "Notification",
    "User",
]
