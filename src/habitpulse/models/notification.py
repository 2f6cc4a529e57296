"""Notification feed records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Notification(SQLModel, table=True):
    """A message shown in the user's notification feed.

    ``habit_title`` is copied, not linked, so the record outlives the habit.
    """

    __tablename__: ClassVar[str] = "notification"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    habit_title: Optional[str] = Field(default=None, max_length=80)
    message: str = Field(nullable=False, max_length=255)
    scheduled_time: Optional[str] = Field(default=None, max_length=32)
    is_read: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
