"""CSV export of habit entries."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Mapping

from ..models.habit import HabitEntry

HEADERS = ["id", "habit_id", "habit", "date", "status", "created_at"]


def export_entries_csv(
    *,
    entries: Iterable[HabitEntry],
    habit_titles: Mapping[int, str],
    output_path: Path,
) -> Path:
    """Write entries to CSV at ``output_path``.

    ``habit_id`` lets the file be re-imported unambiguously; ``habit`` holds
    the title for people reading the file.
    Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # newline='' keeps csv from doubling line endings on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for entry in entries:
            writer.writerow(
                {
                    "id": entry.id,
                    "habit_id": entry.habit_id,
                    "habit": habit_titles.get(entry.habit_id, ""),
                    "date": entry.occurred_on.isoformat(),
                    "status": entry.status,
                    "created_at": entry.created_at.isoformat() if entry.created_at else "",
                }
            )

    return output_path
