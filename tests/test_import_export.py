"""Tests for CSV import and export of habit entries."""

from __future__ import annotations

import csv

import pytest

from conftest import TODAY, days_ago
from habitpulse.config import TestingConfig
from habitpulse.context import create_app_context
from habitpulse.models import EntryStatus, Habit, HabitEntry, User
from habitpulse.services.export_csv import HEADERS, export_entries_csv
from habitpulse.services.import_entries import ColumnMapping, import_entries_csv


def _write_csv(path, rows):
    path.write_text("\n".join(rows) + "\n", encoding="utf-8")
    return path


def test_import_reports_imported_duplicates_and_skips(app_ctx, user, habit_factory, tmp_path):
    habit = habit_factory(title="Read")
    csv_path = _write_csv(
        tmp_path / "entries.csv",
        [
            "Habit,Date,Status",
            "Read,2024-05-15,Completed",
            "read,2024-05-14,",
            "Unknown,2024-05-14,Completed",
            "Read,14/05/2024,Completed",
            "Read,2024-05-15,Completed",
        ],
    )

    result = import_entries_csv(app_ctx, csv_path=csv_path, user_id=user.id)

    assert result.imported == 2
    assert result.duplicates == 1
    assert [row for row, _ in result.skipped] == [3, 4]
    assert "unknown habit" in result.skipped[0][1]
    assert "occurred_on" in result.skipped[1][1]

    entries = app_ctx.habit_repo.list_entries(habit.id, user_id=user.id)
    assert [(e.occurred_on, e.status) for e in entries] == [
        (TODAY, "Completed"),
        (days_ago(1), "Completed"),
    ]


def test_import_prefers_habit_id_column(app_ctx, user, habit_factory, tmp_path):
    habit = habit_factory(title="Meditate")
    habit_factory(title="Stretch")
    csv_path = _write_csv(
        tmp_path / "by_id.csv",
        ["habit_id,habit,date,status", f"{habit.id},Stretch,2024-05-15,Skipped"],
    )

    result = import_entries_csv(app_ctx, csv_path=csv_path, user_id=user.id)

    assert result.imported == 1
    (entry,) = app_ctx.habit_repo.list_entries(habit.id, user_id=user.id)
    assert entry.status == EntryStatus.SKIPPED.value


def test_import_unknown_habit_id_is_skipped(app_ctx, user, habit_factory, tmp_path):
    habit_factory(title="Read")
    csv_path = _write_csv(tmp_path / "ids.csv", ["habit_id,habit,date", "999,Read,2024-05-15"])

    result = import_entries_csv(app_ctx, csv_path=csv_path, user_id=user.id)

    assert result.imported == 0
    assert result.skipped == [(1, "unknown habit id '999'")]


def test_import_title_is_never_read_as_an_id(app_ctx, user, habit_factory, tmp_path):
    walk = habit_factory(title="Walk")
    numeric = habit_factory(title=str(walk.id))
    csv_path = _write_csv(tmp_path / "titles.csv", ["habit,date", f"{walk.id},2024-05-15"])

    result = import_entries_csv(app_ctx, csv_path=csv_path, user_id=user.id)

    assert result.imported == 1
    assert app_ctx.habit_repo.list_entries(walk.id, user_id=user.id) == []
    assert len(app_ctx.habit_repo.list_entries(numeric.id, user_id=user.id)) == 1


def test_import_ambiguous_title_is_skipped(app_ctx, user, habit_factory, tmp_path):
    habit_factory(title="Run")
    habit_factory(title="run")
    csv_path = _write_csv(tmp_path / "dupes.csv", ["habit,date", "Run,2024-05-15"])

    result = import_entries_csv(app_ctx, csv_path=csv_path, user_id=user.id)

    assert result.imported == 0
    assert result.skipped == [(1, "ambiguous habit title 'run'")]


def test_import_with_custom_mapping(app_ctx, user, habit_factory, tmp_path):
    habit_factory(title="Run")
    csv_path = _write_csv(
        tmp_path / "mapped.csv",
        ["Name,Day,Outcome", "Run,2024-05-13,Completed"],
    )

    result = import_entries_csv(
        app_ctx,
        csv_path=csv_path,
        user_id=user.id,
        mapping=ColumnMapping(habit="name", date="day", status="outcome"),
    )

    assert result.imported == 1


def test_import_requires_habit_and_date_columns(app_ctx, user, tmp_path):
    csv_path = _write_csv(tmp_path / "bad.csv", ["habit,status", "Read,Completed"])

    with pytest.raises(ValueError, match="missing columns: date"):
        import_entries_csv(app_ctx, csv_path=csv_path, user_id=user.id)


def test_import_ignores_other_users_habits(app_ctx, user, other_user, habit_factory, tmp_path):
    habit_factory(title="Theirs", owner=other_user)
    csv_path = _write_csv(tmp_path / "x.csv", ["habit,date", "Theirs,2024-05-15"])

    result = import_entries_csv(app_ctx, csv_path=csv_path, user_id=user.id)

    assert result.imported == 0
    assert len(result.skipped) == 1


def test_export_writes_titles_and_reimports_cleanly(
    app_ctx, user, habit_factory, entry_factory, tmp_path
):
    habit = habit_factory(title="Journal")
    entry_factory(habit, days_ago(1))
    entry_factory(habit, TODAY, EntryStatus.SKIPPED)
    entries = app_ctx.habit_repo.list_user_entries(user_id=user.id)

    path = export_entries_csv(
        entries=entries,
        habit_titles={habit.id: habit.title},
        output_path=tmp_path / "exports" / "entries.csv",
    )

    with path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert list(rows[0]) == HEADERS
    assert [(r["habit_id"], r["habit"], r["date"], r["status"]) for r in rows] == [
        (str(habit.id), "Journal", "2024-05-14", "Completed"),
        (str(habit.id), "Journal", "2024-05-15", "Skipped"),
    ]

    again = import_entries_csv(app_ctx, csv_path=path, user_id=user.id)
    assert (again.imported, again.duplicates) == (0, 2)


def test_round_trip_keeps_habits_with_shared_titles(
    app_ctx, user, habit_factory, entry_factory, tmp_path
):
    first = habit_factory(title="Run")
    second = habit_factory(title="Run")
    entry_factory(first, TODAY)
    entry_factory(second, TODAY)
    path = export_entries_csv(
        entries=app_ctx.habit_repo.list_user_entries(user_id=user.id),
        habit_titles={first.id: first.title, second.id: second.title},
        output_path=tmp_path / "entries.csv",
    )

    restored = create_app_context(TestingConfig(tmp_path / "restored"))
    try:
        owner = restored.user_repo.create(User(email="tester@example.com", name="Tester"))
        a = restored.habit_repo.create(Habit(user_id=owner.id, title="Run"), user_id=owner.id)
        b = restored.habit_repo.create(Habit(user_id=owner.id, title="Run"), user_id=owner.id)
        assert (a.id, b.id) == (first.id, second.id)

        result = import_entries_csv(restored, csv_path=path, user_id=owner.id)

        assert (result.imported, result.duplicates, result.skipped) == (2, 0, [])
        counts = [
            len(restored.habit_repo.list_entries(h.id, user_id=owner.id)) for h in (a, b)
        ]
        assert counts == [1, 1]
    finally:
        restored.dispose()


def test_round_trip_of_numeric_title(app_ctx, user, habit_factory, entry_factory, tmp_path):
    walk = habit_factory(title="Walk")
    numeric = habit_factory(title=str(walk.id))
    entry_factory(numeric, TODAY)
    path = export_entries_csv(
        entries=app_ctx.habit_repo.list_user_entries(user_id=user.id),
        habit_titles={walk.id: walk.title, numeric.id: numeric.title},
        output_path=tmp_path / "entries.csv",
    )
    with app_ctx.session_factory() as session:
        for entry in app_ctx.habit_repo.list_user_entries(user_id=user.id):
            session.delete(session.get(HabitEntry, entry.id))

    result = import_entries_csv(app_ctx, csv_path=path, user_id=user.id)

    assert result.imported == 1
    assert app_ctx.habit_repo.list_entries(walk.id, user_id=user.id) == []
    assert len(app_ctx.habit_repo.list_entries(numeric.id, user_id=user.id)) == 1


def test_import_requires_a_habit_column(app_ctx, user, tmp_path):
    csv_path = _write_csv(tmp_path / "bad.csv", ["date,status", "2024-05-15,Completed"])

    with pytest.raises(ValueError, match="habit or habit_id"):
        import_entries_csv(app_ctx, csv_path=csv_path, user_id=user.id)
