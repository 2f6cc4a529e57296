"""Habit frequency descriptors.

Stored form is one of ``Daily``, ``Mon-Fri``, ``Sat-Sun`` or
``Custom: 1,3,5`` where the numbers are weekday indices with 0 = Sunday.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum


class FrequencyKind(str, Enum):
    DAILY = "Daily"
    WEEKDAYS = "Mon-Fri"
    WEEKENDS = "Sat-Sun"
    CUSTOM = "Custom"


_ALIASES = {
    "daily": FrequencyKind.DAILY,
    "mon-fri": FrequencyKind.WEEKDAYS,
    "weekdays": FrequencyKind.WEEKDAYS,
    "sat-sun": FrequencyKind.WEEKENDS,
    "weekends": FrequencyKind.WEEKENDS,
}

_DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def sunday_index(day: date) -> int:
    """Weekday index with 0 = Sunday, as used by custom schedules."""

    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class Frequency:
    """Parsed schedule: the set of weekday indices (0 = Sunday) a habit is due on."""

    kind: FrequencyKind
    days: frozenset[int]

    @classmethod
    def parse(cls, raw: str | None) -> "Frequency":
        """Parse a stored or user-supplied descriptor; empty means daily."""

        text = (raw or "").strip()
        if not text:
            return DAILY
        alias = _ALIASES.get(text.lower())
        if alias is FrequencyKind.DAILY:
            return DAILY
        if alias is FrequencyKind.WEEKDAYS:
            return WEEKDAYS
        if alias is FrequencyKind.WEEKENDS:
            return WEEKENDS

        head, sep, tail = text.partition(":")
        if head.strip().lower() != "custom" or not sep:
            raise ValueError(f"Unknown frequency: {raw!r}")
        try:
            days = frozenset(int(part) for part in tail.split(",") if part.strip())
        except ValueError as exc:
            raise ValueError(f"Custom frequency days must be integers 0-6: {raw!r}") from exc
        if not days:
            raise ValueError("Custom frequency needs at least one day.")
        if any(d < 0 or d > 6 for d in days):
            raise ValueError(f"Custom frequency days must be integers 0-6: {raw!r}")
        return cls(kind=FrequencyKind.CUSTOM, days=days)

    def is_due(self, day: date) -> bool:
        return sunday_index(day) in self.days

    def describe(self) -> str:
        """Human friendly text, e.g. ``Mon, Wed, Fri`` for a custom schedule."""

        if self.kind is not FrequencyKind.CUSTOM:
            return self.kind.value
        return ", ".join(_DAY_NAMES[d] for d in sorted(self.days))

    def __str__(self) -> str:
        if self.kind is FrequencyKind.CUSTOM:
            return f"Custom: {','.join(str(d) for d in sorted(self.days))}"
        return self.kind.value


DAILY = Frequency(kind=FrequencyKind.DAILY, days=frozenset(range(7)))
WEEKDAYS = Frequency(kind=FrequencyKind.WEEKDAYS, days=frozenset({1, 2, 3, 4, 5}))
WEEKENDS = Frequency(kind=FrequencyKind.WEEKENDS, days=frozenset({0, 6}))


def normalize_frequency(raw: str | None) -> str:
    """Validate a descriptor and return its canonical stored form."""

    return str(Frequency.parse(raw))


def is_due(frequency: str | None, day: date) -> bool:
    return Frequency.parse(frequency).is_due(day)


__all__ = [
    "DAILY",
    "Frequency",
    "FrequencyKind",
    "WEEKDAYS",
    "WEEKENDS",
    "is_due",
    "normalize_frequency",
    "sunday_index",
]
