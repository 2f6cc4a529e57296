"""Pytest configuration and shared fixtures for HabitPulse tests.

Every test gets its own temporary SQLite database wired through the same
``create_app_context`` path the CLI uses.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from habitpulse.config import TestingConfig
from habitpulse.context import AppContext, create_app_context
from habitpulse.models import EntryStatus, Habit, HabitEntry, User

# Wednesday; the seven-day window ending here runs Thu 2024-05-09 .. Wed 2024-05-15.
TODAY = date(2024, 5, 15)


def days_ago(n: int, today: date = TODAY) -> date:
    return today - timedelta(days=n)


def make_entry(
    occurred_on: date,
    status: EntryStatus | str = EntryStatus.COMPLETED,
    habit_id: int = 1,
) -> HabitEntry:
    """Unsaved entry for exercising the pure calculators."""

    status_value = status.value if isinstance(status, EntryStatus) else status
    return HabitEntry(habit_id=habit_id, user_id=1, occurred_on=occurred_on, status=status_value)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def app_ctx(tmp_path) -> AppContext:
    """Application context backed by a throwaway SQLite file."""

    ctx = create_app_context(TestingConfig(tmp_path))
    yield ctx
    ctx.dispose()


@pytest.fixture
def session_factory(app_ctx):
    return app_ctx.session_factory


@pytest.fixture
def user(app_ctx) -> User:
    """Default user owning the test data."""

    return app_ctx.user_repo.create(User(email="tester@example.com", name="Tester"))


@pytest.fixture
def other_user(app_ctx) -> User:
    return app_ctx.user_repo.create(User(email="other@example.com", name="Other"))


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(app_ctx, user):
    """Factory for creating persisted habits."""

    def _create_habit(
        title: str = "Test Habit",
        description: str | None = "Test habit description",
        frequency: str = "Daily",
        reminder_time: str | None = None,
        is_archived: bool = False,
        owner: User | None = None,
    ) -> Habit:
        owner = owner or user
        habit = Habit(
            user_id=owner.id,
            title=title,
            description=description,
            frequency=frequency,
            reminder_time=reminder_time,
            is_archived=is_archived,
        )
        return app_ctx.habit_repo.create(habit, user_id=owner.id)

    return _create_habit


@pytest.fixture
def entry_factory(app_ctx, user):
    """Factory for persisting raw entries, bypassing the tracking rules."""

    def _create_entry(
        habit: Habit,
        occurred_on: date,
        status: EntryStatus = EntryStatus.COMPLETED,
    ) -> HabitEntry:
        entry = HabitEntry(
            habit_id=habit.id,
            user_id=habit.user_id,
            occurred_on=occurred_on,
            status=status.value,
        )
        return app_ctx.habit_repo.add_entry(entry, user_id=habit.user_id)

    return _create_entry
