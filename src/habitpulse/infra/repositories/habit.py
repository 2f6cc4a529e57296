"""SQLModel implementation of the habit repository."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import col, select

from ...models.habit import Habit, HabitEntry
from ..database import SessionFactory


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int, include_archived: bool = False) -> list[Habit]:
        """List habits, newest first, optionally including archived ones."""
        with self.session_factory() as session:
            statement = (
                select(Habit)
                .where(Habit.user_id == user_id)
                .order_by(col(Habit.created_at).desc(), col(Habit.id).desc())
            )
            if not include_archived:
                statement = statement.where(Habit.is_archived == False)  # noqa: E712

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_active(self, *, user_id: int) -> list[Habit]:
        """List only habits that are not archived."""
        return self.list_all(user_id=user_id, include_archived=False)

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        with self.session_factory() as session:
            habit.user_id = user_id
            merged = session.merge(habit)
            session.commit()
            session.refresh(merged)
            session.expunge(merged)
            return merged

    def archive(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Hide a habit from listings while keeping its entries."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return None
            habit.is_archived = True
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit; its entries go with it."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.user_id == user_id)
            ).first()
            if habit is None:
                return False
            session.delete(habit)
            session.commit()
            return True

    # Habit entry operations
    def add_entry(self, entry: HabitEntry, *, user_id: int) -> HabitEntry:
        """Append an entry; existing entries for the same day are left alone."""
        with self.session_factory() as session:
            entry.user_id = user_id
            session.add(entry)
            session.commit()
            session.refresh(entry)
            session.expunge(entry)
            return entry

    def list_entries(
        self,
        habit_id: int,
        *,
        user_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[HabitEntry]:
        """List a habit's entries, newest first, optionally bounded by dates."""
        with self.session_factory() as session:
            statement = (
                select(HabitEntry)
                .where(HabitEntry.user_id == user_id)
                .where(HabitEntry.habit_id == habit_id)
            )
            if start_date is not None:
                statement = statement.where(HabitEntry.occurred_on >= start_date)
            if end_date is not None:
                statement = statement.where(HabitEntry.occurred_on <= end_date)
            statement = statement.order_by(
                col(HabitEntry.occurred_on).desc(), col(HabitEntry.id).desc()
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def fetch_entries_for_habit(self, habit_id: int, *, user_id: int) -> list[HabitEntry]:
        """Return the full entry history of one habit, newest first."""
        return self.list_entries(habit_id, user_id=user_id)

    def fetch_entries_for_user_in_range(
        self, user_id: int, start_date: date, end_date: date
    ) -> list[HabitEntry]:
        """Return every entry of a user dated within [start_date, end_date]."""
        with self.session_factory() as session:
            statement = (
                select(HabitEntry)
                .where(HabitEntry.user_id == user_id)
                .where(HabitEntry.occurred_on >= start_date)
                .where(HabitEntry.occurred_on <= end_date)
                .order_by(col(HabitEntry.occurred_on), col(HabitEntry.id))
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_user_entries(self, *, user_id: int) -> list[HabitEntry]:
        """Return every entry of a user, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(HabitEntry)
                .where(HabitEntry.user_id == user_id)
                .order_by(col(HabitEntry.occurred_on), col(HabitEntry.id))
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows
