"""Notification feed: event messages written alongside habit actions."""

from __future__ import annotations

from datetime import datetime

from ..domain.repositories import NotificationRepository
from ..logging_config import get_logger
from ..models.habit import EntryStatus, Habit
from ..models.notification import Notification
from .frequency import Frequency

logger = get_logger("notifications")

MSG_COMPLETED = "Habit completed"
MSG_SKIPPED = "Habit skipped"
MSG_DELETED = "Habit deleted"


def habit_added_message(title: str) -> str:
    return f'Kudos! Habit "{title}" has been added! Keep up the great work!'


def entry_message(status: EntryStatus) -> str:
    return MSG_COMPLETED if status is EntryStatus.COMPLETED else MSG_SKIPPED


def reminder_text(habit: Habit) -> str:
    """Describe when a habit will remind its owner."""

    if not habit.reminder_time:
        return "Reminders not configured"
    schedule = Frequency.parse(habit.frequency).describe()
    return f'Time for "{habit.title}"! Reminder set for {habit.reminder_time} ({schedule}).'


def record_event(
    repo: NotificationRepository,
    *,
    user_id: int,
    habit_title: str | None,
    message: str,
    now: datetime | None = None,
) -> Notification:
    """Append an event to the user's feed, stamped with the local display time."""

    now = now or datetime.now()
    notification = Notification(
        user_id=user_id,
        habit_title=habit_title,
        message=message,
        scheduled_time=now.strftime("%H:%M:%S"),
    )
    saved = repo.add(notification, user_id=user_id)
    logger.info("Notification recorded", extra={"user_id": user_id, "notification_id": saved.id})
    return saved


def mark_read(repo: NotificationRepository, notification_id: int, *, user_id: int) -> None:
    if not repo.mark_read(notification_id, user_id=user_id):
        raise ValueError(f"Notification {notification_id} not found")


def delete_notification(
    repo: NotificationRepository, notification_id: int, *, user_id: int
) -> None:
    if not repo.delete(notification_id, user_id=user_id):
        raise ValueError(f"Notification {notification_id} not found")


def to_payload(notification: Notification) -> dict:
    return {
        "id": notification.id,
        "habitTitle": notification.habit_title,
        "message": notification.message,
        "scheduledTime": notification.scheduled_time,
        "createdAt": notification.created_at.isoformat(),
        "read": notification.is_read,
    }
