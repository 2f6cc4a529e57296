"""Habits and their daily outcome log."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class EntryStatus(str, Enum):
    """Outcome recorded for a habit on one calendar day."""

    COMPLETED = "Completed"
    SKIPPED = "Skipped"


class Habit(SQLModel, table=True):
    """A user-defined habit with a weekly schedule and reminder time."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=80)
    description: Optional[str] = Field(default=None, max_length=255)
    frequency: str = Field(default="Daily", nullable=False, max_length=64)
    reminder_time: Optional[str] = Field(default=None, max_length=5)
    is_archived: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    entries: list["HabitEntry"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship(
            "HabitEntry", back_populates="habit", cascade="all, delete-orphan"
        ),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="habits"))


class HabitEntry(SQLModel, table=True):
    """One recorded outcome for a habit on a calendar day.

    Several entries may share a (habit, day) pair; consumers decide how to
    collapse them.
    """

    __tablename__: ClassVar[str] = "habit_entry"

    id: Optional[int] = Field(default=None, primary_key=True)
    habit_id: int = Field(foreign_key="habit.id", nullable=False, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    status: str = Field(default=EntryStatus.COMPLETED.value, nullable=False, max_length=16)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    habit: "Habit" = Relationship(
        back_populates="entries",
        sa_relationship=relationship("Habit", back_populates="entries"),
    )

    @property
    def is_completed(self) -> bool:
        return self.status == EntryStatus.COMPLETED
