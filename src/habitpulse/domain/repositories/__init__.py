"""Repository protocol definitions for domain layer."""

from .habit import HabitRepository
from .notification import NotificationRepository
from .user import UserRepository

__all__ = [
    "HabitRepository",
    "NotificationRepository",
    "UserRepository",
]
