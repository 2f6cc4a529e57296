"""Notification repository protocol."""

from __future__ import annotations

from typing import Protocol

from ...models.notification import Notification


class NotificationRepository(Protocol):
    """Repository for the notification feed."""

    def add(self, notification: Notification, *, user_id: int) -> Notification:
        ...

    def list_for_user(self, *, user_id: int, unread_only: bool = False) -> list[Notification]:
        ...

    def mark_read(self, notification_id: int, *, user_id: int) -> bool:
        ...

    def delete(self, notification_id: int, *, user_id: int) -> bool:
        ...

    def count_unread(self, *, user_id: int) -> int:
        ...
