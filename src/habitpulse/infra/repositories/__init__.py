"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .notification import SQLModelNotificationRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelHabitRepository",
    "SQLModelNotificationRepository",
    "SQLModelUserRepository",
]
