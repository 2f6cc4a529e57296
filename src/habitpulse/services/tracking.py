"""Habit lifecycle and entry recording on top of the repositories.

These functions are the seam between callers (CLI, importers) and the pure
calculators: they read "today" once, fetch the entries in a single query and
hand the list to :mod:`habitpulse.services.habits` or
:mod:`habitpulse.services.reports`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Optional

from ..domain.repositories import HabitRepository
from ..forms import EntryForm, HabitForm, HabitUpdateForm, validate
from ..logging_config import get_logger
from ..models.habit import EntryStatus, Habit, HabitEntry
from . import notifications
from .frequency import Frequency
from .habits import WINDOW_DAYS, HabitStreak, compute_habit_streak
from .reports import WeeklyAggregate, compute_weekly_aggregate

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger("tracking")


@dataclass(frozen=True)
class DueHabit:
    """A habit scheduled for a given day and whether it is already done."""

    habit: Habit
    completed: bool


def _require_habit(repo: HabitRepository, habit_id: int, user_id: int) -> Habit:
    habit = repo.get_by_id(habit_id, user_id=user_id)
    if habit is None:
        raise ValueError(f"Habit {habit_id} not found")
    return habit


def create_habit(ctx: AppContext, *, user_id: int, **fields) -> Habit:
    """Validate and store a new habit, then congratulate the user."""

    form = validate(HabitForm, fields)
    habit = ctx.habit_repo.create(Habit(user_id=user_id, **form.model_dump()), user_id=user_id)
    logger.info("Habit created", extra={"user_id": user_id, "habit_id": habit.id})
    notifications.record_event(
        ctx.notification_repo,
        user_id=user_id,
        habit_title=habit.title,
        message=notifications.habit_added_message(habit.title),
    )
    return habit


def update_habit(ctx: AppContext, habit_id: int, *, user_id: int, **fields) -> Habit:
    """Apply the provided fields; ``None`` leaves a field unchanged."""

    habit = _require_habit(ctx.habit_repo, habit_id, user_id)
    form = validate(HabitUpdateForm, fields)
    changes = form.model_dump(exclude_none=True)
    for name, value in changes.items():
        setattr(habit, name, value)
    updated = ctx.habit_repo.update(habit, user_id=user_id)
    logger.info("Habit updated", extra={"habit_id": habit_id, "fields": sorted(changes)})
    return updated


def archive_habit(ctx: AppContext, habit_id: int, *, user_id: int) -> Habit:
    """Hide a habit from active listings; its entries stay in the statistics."""

    habit = ctx.habit_repo.archive(habit_id, user_id=user_id)
    if habit is None:
        raise ValueError(f"Habit {habit_id} not found")
    logger.info("Habit archived", extra={"habit_id": habit_id})
    return habit


def delete_habit(ctx: AppContext, habit_id: int, *, user_id: int) -> None:
    """Remove a habit and its entries for good."""

    habit = _require_habit(ctx.habit_repo, habit_id, user_id)
    ctx.habit_repo.delete(habit_id, user_id=user_id)
    logger.info("Habit deleted", extra={"habit_id": habit_id})
    notifications.record_event(
        ctx.notification_repo,
        user_id=user_id,
        habit_title=habit.title,
        message=notifications.MSG_DELETED,
    )


def record_entry(
    ctx: AppContext,
    habit_id: int,
    *,
    user_id: int,
    occurred_on: date | str,
    status: EntryStatus | str = EntryStatus.COMPLETED,
) -> HabitEntry:
    """Record one outcome for a habit.

    A second ``Completed`` for the same habit and day is refused; skips are
    always appended.
    """

    form = validate(EntryForm, {"occurred_on": occurred_on, "status": status})
    habit = _require_habit(ctx.habit_repo, habit_id, user_id)
    if habit.is_archived:
        raise ValueError(f"Habit {habit_id} is archived")

    if form.status is EntryStatus.COMPLETED:
        same_day = ctx.habit_repo.list_entries(
            habit_id, user_id=user_id, start_date=form.occurred_on, end_date=form.occurred_on
        )
        if any(e.is_completed for e in same_day):
            raise ValueError(f"Habit already completed on {form.occurred_on.isoformat()}")

    entry = ctx.habit_repo.add_entry(
        HabitEntry(
            habit_id=habit_id,
            user_id=user_id,
            occurred_on=form.occurred_on,
            status=form.status.value,
        ),
        user_id=user_id,
    )
    logger.info(
        "Entry recorded",
        extra={"habit_id": habit_id, "status": form.status.value, "date": form.occurred_on.isoformat()},
    )
    notifications.record_event(
        ctx.notification_repo,
        user_id=user_id,
        habit_title=habit.title,
        message=notifications.entry_message(form.status),
    )
    return entry


def habit_summary(
    ctx: AppContext, habit_id: int, *, user_id: int, today: Optional[date] = None
) -> tuple[Habit, HabitStreak]:
    """Return the habit with its streak figures as of ``today``."""

    today = today or date.today()
    habit = _require_habit(ctx.habit_repo, habit_id, user_id)
    entries = ctx.habit_repo.fetch_entries_for_habit(habit_id, user_id=user_id)
    return habit, compute_habit_streak(entries, today)


def weekly_summary(
    ctx: AppContext, *, user_id: int, today: Optional[date] = None
) -> WeeklyAggregate:
    """Aggregate the user's entries over the seven days ending ``today``."""

    today = today or date.today()
    start = today - timedelta(days=WINDOW_DAYS - 1)
    entries = ctx.habit_repo.fetch_entries_for_user_in_range(user_id, start, today)
    return compute_weekly_aggregate(entries, today)


def due_today(ctx: AppContext, *, user_id: int, today: Optional[date] = None) -> list[DueHabit]:
    """Active habits scheduled for ``today`` with their completion flag."""

    today = today or date.today()
    done = {
        e.habit_id
        for e in ctx.habit_repo.fetch_entries_for_user_in_range(user_id, today, today)
        if e.is_completed
    }
    return [
        DueHabit(habit=h, completed=h.id in done)
        for h in ctx.habit_repo.list_active(user_id=user_id)
        if Frequency.parse(h.frequency).is_due(today)
    ]


def habit_to_payload(habit: Habit) -> dict:
    return {
        "id": habit.id,
        "title": habit.title,
        "description": habit.description,
        "frequency": habit.frequency,
        "reminderTime": habit.reminder_time,
        "archived": habit.is_archived,
        "createdAt": habit.created_at.isoformat(),
    }


def entry_to_payload(entry: HabitEntry) -> dict:
    return {
        "id": entry.id,
        "habitId": entry.habit_id,
        "date": entry.occurred_on.isoformat(),
        "status": entry.status,
        "createdAt": entry.created_at.isoformat(),
    }
