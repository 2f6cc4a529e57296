"""Weekly aggregate reporting and chart export."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable, Protocol

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
from matplotlib.figure import Figure

from ..logging_config import get_logger
from .habits import WINDOW_DAYS, EntryLike, is_completed, percentage, round_half_up, window_dates

logger = get_logger("reports")

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


@dataclass(frozen=True)
class DayBucket:
    """Outcome counts for one calendar day of the window."""

    day: date
    completed: int = 0
    total: int = 0

    @property
    def label(self) -> str:
        return WEEKDAY_LABELS[self.day.weekday()]

    @property
    def completion_rate(self) -> int:
        return percentage(self.completed, self.total)


@dataclass(frozen=True)
class WeeklyAggregate:
    """Seven-day statistics for one user, buckets ordered oldest to newest."""

    buckets: tuple[DayBucket, ...]
    total_completed: int
    current_streak: int
    progress: int

    @property
    def labels(self) -> list[str]:
        return [b.label for b in self.buckets]

    @property
    def series(self) -> list[int]:
        return [b.completed for b in self.buckets]

    def to_payload(self) -> dict:
        return {
            "totalHabitsCompleted": self.total_completed,
            "currentStreak": self.current_streak,
            "progress": self.progress,
            "days": {
                b.day.isoformat(): {"completed": b.completed, "total": b.total}
                for b in self.buckets
            },
            "chart": {"labels": self.labels, "datasets": [{"data": self.series}]},
        }


def _habit_key(entry: EntryLike) -> object:
    # Rows without a habit id (e.g. ad-hoc records) each count on their own.
    habit_id = getattr(entry, "habit_id", None)
    return habit_id if habit_id is not None else id(entry)


def bucket_entries(entries: Iterable[EntryLike], today: date) -> tuple[DayBucket, ...]:
    """Group entries into the seven day buckets ending at ``today``.

    A habit contributes one outcome per day: it counts towards ``total`` once
    and towards ``completed`` once if any of its entries that day is
    ``Completed``. Entries outside the window are ignored.
    """

    days = window_dates(today)
    outcomes: dict[date, dict[object, bool]] = {d: {} for d in days}
    for entry in entries:
        per_day = outcomes.get(entry.occurred_on)
        if per_day is None:
            continue
        key = _habit_key(entry)
        per_day[key] = per_day.get(key, False) or is_completed(entry)

    return tuple(
        DayBucket(day=d, completed=sum(outcomes[d].values()), total=len(outcomes[d]))
        for d in days
    )


def trailing_streak(buckets: Iterable[DayBucket]) -> int:
    """Run of days with a completion that reaches the newest bucket."""

    run = 0
    for bucket in buckets:
        run = run + 1 if bucket.completed > 0 else 0
    return run


def compute_weekly_aggregate(entries: Iterable[EntryLike], today: date) -> WeeklyAggregate:
    """Aggregate a user's entries over the seven days ending at ``today``."""

    buckets = bucket_entries(entries, today)
    rates = sum(b.completion_rate for b in buckets)
    aggregate = WeeklyAggregate(
        buckets=buckets,
        total_completed=sum(b.completed for b in buckets),
        current_streak=trailing_streak(buckets),
        progress=round_half_up(rates / WINDOW_DAYS),
    )
    logger.debug(
        "Weekly aggregate computed",
        extra={"today": today.isoformat(), "total_completed": aggregate.total_completed},
    )
    return aggregate


def build_weekly_chart(aggregate: WeeklyAggregate) -> Figure:
    """Bar chart of completions per day with the completion rate on top of each bar."""

    fig, ax = plt.subplots(figsize=(8, 4.5))
    positions = range(len(aggregate.buckets))
    bars = ax.bar(positions, aggregate.series, color="#4caf50", edgecolor="white")
    ax.set_xticks(list(positions))
    ax.set_xticklabels(
        [f"{b.label}\n{b.day:%d.%m}" for b in aggregate.buckets], fontsize=9
    )

    for bar, bucket in zip(bars, aggregate.buckets):
        if bucket.total:
            ax.annotate(
                f"{bucket.completion_rate}%",
                xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                xytext=(0, 3),
                textcoords="offset points",
                ha="center",
                fontsize=8,
                color="#374151",
            )

    ax.set_ylabel("Habits completed")
    ax.set_ylim(0, max(aggregate.series + [1]) + 1)
    ax.yaxis.set_major_locator(mticker.MaxNLocator(integer=True))
    ax.set_title(
        f"Last 7 days: {aggregate.total_completed} completed, "
        f"streak {aggregate.current_streak}, {aggregate.progress}% average",
        fontsize=11,
    )
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    plt.tight_layout()
    return fig


def export_weekly_png(
    *,
    aggregate: WeeklyAggregate,
    output_path: Path,
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render the weekly chart to PNG and return the path."""

    fig = build_weekly_chart(aggregate)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if renderer is not None:
        renderer.render(fig, output_path=output_path)
    else:
        fig.savefig(output_path, bbox_inches="tight", dpi=120)
    plt.close(fig)
    return output_path


__all__ = [
    "DayBucket",
    "WEEKDAY_LABELS",
    "WeeklyAggregate",
    "bucket_entries",
    "build_weekly_chart",
    "compute_weekly_aggregate",
    "export_weekly_png",
    "trailing_streak",
]
