"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.habit import Habit, HabitEntry


class HabitRepository(Protocol):
    """Repository for habits and their entry log."""

    def get_by_id(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self, *, user_id: int, include_archived: bool = False) -> list[Habit]:
        """List habits, newest first, optionally including archived ones."""
        ...

    def list_active(self, *, user_id: int) -> list[Habit]:
        """List only habits that are not archived."""
        ...

    def create(self, habit: Habit, *, user_id: int) -> Habit:
        """Create a new habit."""
        ...

    def update(self, habit: Habit, *, user_id: int) -> Habit:
        """Update an existing habit."""
        ...

    def archive(self, habit_id: int, *, user_id: int) -> Optional[Habit]:
        """Hide a habit from listings while keeping its entries."""
        ...

    def delete(self, habit_id: int, *, user_id: int) -> bool:
        """Delete a habit together with its entries."""
        ...

    def add_entry(self, entry: HabitEntry, *, user_id: int) -> HabitEntry:
        """Append an entry; never overwrites existing entries."""
        ...

    def list_entries(
        self,
        habit_id: int,
        *,
        user_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[HabitEntry]:
        """List a habit's entries, newest first, optionally bounded by dates."""
        ...

    def fetch_entries_for_habit(self, habit_id: int, *, user_id: int) -> list[HabitEntry]:
        """Return the full entry history of one habit."""
        ...

    def fetch_entries_for_user_in_range(
        self, user_id: int, start_date: date, end_date: date
    ) -> list[HabitEntry]:
        """Return every entry of a user dated within [start_date, end_date]."""
        ...

    def list_user_entries(self, *, user_id: int) -> list[HabitEntry]:
        """Return every entry of a user, oldest first."""
        ...
