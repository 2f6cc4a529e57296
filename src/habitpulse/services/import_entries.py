"""CSV ingestion of habit entries.

Malformed rows are skipped and reported instead of aborting the import.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Mapping

import pandas as pd

from ..forms import EntryForm, validate
from ..logging_config import get_logger
from ..models.habit import Habit, HabitEntry

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger("import_entries")


@dataclass(slots=True)
class ColumnMapping:
    """Maps entry fields to CSV headers (compared lower-cased).

    Rows are matched on ``habit_id`` when that column holds a value and on
    the ``habit`` title otherwise.
    """

    habit: str = "habit"
    habit_id: str = "habit_id"
    date: str = "date"
    status: str = "status"


@dataclass
class ImportResult:
    imported: int = 0
    duplicates: int = 0
    skipped: list[tuple[int, str]] = field(default_factory=list)


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file as strings with consistent column casing."""

    frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    frame.columns = [c.strip().lower() for c in frame.columns]
    return frame


def _habit_lookups(habits: Iterable[Habit]) -> tuple[dict[str, Habit], dict[str, list[Habit]]]:
    by_id: dict[str, Habit] = {}
    by_title: dict[str, list[Habit]] = {}
    for habit in habits:
        by_id[str(habit.id)] = habit
        by_title.setdefault(habit.title.strip().lower(), []).append(habit)
    return by_id, by_title


def _resolve_habit(
    row: Mapping[str, str],
    mapping: ColumnMapping,
    by_id: Mapping[str, Habit],
    by_title: Mapping[str, list[Habit]],
) -> tuple[Habit | None, str]:
    """Find the row's habit; the id column wins, titles must be unambiguous."""

    habit_id = str(row.get(mapping.habit_id, "")).strip()
    if habit_id:
        habit = by_id.get(habit_id)
        return habit, "" if habit else f"unknown habit id {habit_id!r}"

    title = str(row.get(mapping.habit, "")).strip().lower()
    matches = by_title.get(title, [])
    if len(matches) == 1:
        return matches[0], ""
    if matches:
        return None, f"ambiguous habit title {title!r}"
    return None, f"unknown habit {title!r}"


def parse_rows(
    *,
    rows: Iterable[Mapping[str, str]],
    mapping: ColumnMapping,
    habits: Iterable[Habit],
    user_id: int,
    result: ImportResult,
) -> list[HabitEntry]:
    """Turn CSV rows into unsaved entries, recording rejects in ``result``.

    Row numbers in ``result.skipped`` are 1-based data rows (header excluded).
    """

    by_id, by_title = _habit_lookups(habits)
    entries: list[HabitEntry] = []
    for number, row in enumerate(rows, start=1):
        habit, reason = _resolve_habit(row, mapping, by_id, by_title)
        if habit is None:
            result.skipped.append((number, reason))
            logger.warning("Skipping entry row", extra={"row": number, "reason": reason})
            continue
        try:
            form = validate(
                EntryForm,
                {"occurred_on": row.get(mapping.date), "status": row.get(mapping.status) or "Completed"},
            )
        except ValueError as exc:
            result.skipped.append((number, str(exc)))
            logger.warning("Skipping entry row", extra={"row": number, "reason": str(exc)})
            continue
        entries.append(
            HabitEntry(
                habit_id=habit.id,
                user_id=user_id,
                occurred_on=form.occurred_on,
                status=form.status.value,
            )
        )
    return entries


def import_entries_csv(
    ctx: AppContext,
    *,
    csv_path: Path,
    user_id: int,
    mapping: ColumnMapping | None = None,
) -> ImportResult:
    """Import entries for the user's habits (archived ones included).

    Rows identical to an existing entry (same habit, day and status) are not
    stored twice.
    """

    mapping = mapping or ColumnMapping()
    frame = normalize_frame(file_path=csv_path)
    columns = set(frame.columns)
    if mapping.date not in columns:
        raise ValueError(f"CSV is missing columns: {mapping.date}")
    if mapping.habit not in columns and mapping.habit_id not in columns:
        raise ValueError(f"CSV is missing columns: {mapping.habit} or {mapping.habit_id}")

    result = ImportResult()
    habits = ctx.habit_repo.list_all(user_id=user_id, include_archived=True)
    parsed = parse_rows(
        rows=frame.to_dict(orient="records"),
        mapping=mapping,
        habits=habits,
        user_id=user_id,
        result=result,
    )

    seen = {
        (e.habit_id, e.occurred_on, e.status)
        for e in ctx.habit_repo.list_user_entries(user_id=user_id)
    }
    for entry in parsed:
        key = (entry.habit_id, entry.occurred_on, entry.status)
        if key in seen:
            result.duplicates += 1
            continue
        seen.add(key)
        ctx.habit_repo.add_entry(entry, user_id=user_id)
        result.imported += 1

    logger.info(
        "Entries imported",
        extra={
            "path": str(csv_path),
            "imported": result.imported,
            "duplicates": result.duplicates,
            "skipped": len(result.skipped),
        },
    )
    return result
