"""SQLModel implementation of the notification repository."""

from __future__ import annotations

from sqlalchemy import func
from sqlmodel import col, select

from ...models.notification import Notification
from ..database import SessionFactory


class SQLModelNotificationRepository:
    """SQLModel-based notification feed."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def add(self, notification: Notification, *, user_id: int) -> Notification:
        with self.session_factory() as session:
            notification.user_id = user_id
            session.add(notification)
            session.commit()
            session.refresh(notification)
            session.expunge(notification)
            return notification

    def list_for_user(self, *, user_id: int, unread_only: bool = False) -> list[Notification]:
        """Return the feed newest first."""
        with self.session_factory() as session:
            statement = (
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(col(Notification.created_at).desc(), col(Notification.id).desc())
            )
            if unread_only:
                statement = statement.where(Notification.is_read == False)  # noqa: E712
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def mark_read(self, notification_id: int, *, user_id: int) -> bool:
        with self.session_factory() as session:
            row = session.exec(
                select(Notification).where(
                    Notification.id == notification_id, Notification.user_id == user_id
                )
            ).first()
            if row is None:
                return False
            row.is_read = True
            session.add(row)
            session.commit()
            return True

    def delete(self, notification_id: int, *, user_id: int) -> bool:
        with self.session_factory() as session:
            row = session.exec(
                select(Notification).where(
                    Notification.id == notification_id, Notification.user_id == user_id
                )
            ).first()
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def count_unread(self, *, user_id: int) -> int:
        with self.session_factory() as session:
            statement = (
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id)
                .where(Notification.is_read == False)  # noqa: E712
            )
            return int(session.exec(statement).one())
