"""Per-habit streak, progress and completion-state derivation.

Everything here is a pure function of the entry list and the caller's
``today``; nothing reads the clock or touches the database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Protocol

from ..models.habit import EntryStatus

WINDOW_DAYS = 7
_ONE_DAY = timedelta(days=1)


class EntryLike(Protocol):
    """Anything carrying a calendar day and an outcome (ORM rows, parsed CSV rows)."""

    occurred_on: date
    status: str


def round_half_up(value: float | Decimal) -> int:
    """Round to the nearest integer with halves going up (12.5 -> 13)."""

    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> int:
    """Integer percentage of ``part`` in ``whole``; 0 when ``whole`` is 0."""

    if whole <= 0:
        return 0
    return round_half_up(Decimal(part) * 100 / Decimal(whole))


def is_completed(entry: EntryLike) -> bool:
    return entry.status == EntryStatus.COMPLETED


def completed_dates(entries: Iterable[EntryLike]) -> set[date]:
    """Distinct days with at least one ``Completed`` entry."""

    return {e.occurred_on for e in entries if is_completed(e)}


def window_dates(today: date, days: int = WINDOW_DAYS) -> list[date]:
    """The ``days`` consecutive dates ending at ``today``, oldest first."""

    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


@dataclass(frozen=True)
class Activity:
    """Display record for one entry."""

    type: str
    date: date

    def to_payload(self) -> dict[str, str]:
        return {"type": self.type, "date": self.date.isoformat()}


@dataclass(frozen=True)
class HabitStreak:
    """Derived completion state of a single habit."""

    completed_today: bool = False
    current_streak: int = 0
    longest_streak: int = 0
    progress: int = 0
    activities: tuple[Activity, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict:
        return {
            "streak": self.current_streak,
            "longestStreak": self.longest_streak,
            "progress": self.progress,
            "completedToday": self.completed_today,
            "activities": [a.to_payload() for a in self.activities],
        }


def current_streak(days: set[date], today: date) -> int:
    """Consecutive completed days ending today, or ending yesterday if today is open."""

    if today in days:
        cursor = today
    elif today - _ONE_DAY in days:
        cursor = today - _ONE_DAY
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= _ONE_DAY
    return streak


def longest_streak(days: set[date]) -> int:
    """Length of the longest run of consecutive completed days."""

    longest = 0
    run = 0
    last_day: date | None = None
    for d in sorted(days):
        if last_day is not None and d == last_day + _ONE_DAY:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = d
    return longest


def weekly_progress(days: set[date], today: date) -> int:
    """Share of the trailing seven days (today included) that were completed."""

    hits = sum(1 for d in window_dates(today) if d in days)
    return percentage(hits, WINDOW_DAYS)


def compute_habit_streak(entries: Iterable[EntryLike], today: date) -> HabitStreak:
    """Derive streak, progress and today's state from one habit's entries.

    Entries may arrive in any order and may repeat a day; only the set of
    completed days matters for the figures. ``activities`` keeps the input
    order, one record per entry.
    """

    rows = list(entries)
    days = completed_dates(rows)
    activities = tuple(
        Activity(
            type=EntryStatus.COMPLETED.value if is_completed(e) else EntryStatus.SKIPPED.value,
            date=e.occurred_on,
        )
        for e in rows
    )
    return HabitStreak(
        completed_today=today in days,
        current_streak=current_streak(days, today),
        longest_streak=longest_streak(days),
        progress=weekly_progress(days, today),
        activities=activities,
    )


__all__ = [
    "Activity",
    "EntryLike",
    "HabitStreak",
    "WINDOW_DAYS",
    "completed_dates",
    "compute_habit_streak",
    "current_streak",
    "longest_streak",
    "percentage",
    "round_half_up",
    "weekly_progress",
    "window_dates",
]
