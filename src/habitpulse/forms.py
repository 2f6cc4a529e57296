"""Input validation for habits and entries.

Everything entering the system (CLI options, CSV rows) goes through these
models, so the calculators only ever see real ``date`` objects and canonical
statuses.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models.habit import EntryStatus
from .services.frequency import normalize_frequency

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CLOCK = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def first_error(exc: ValidationError) -> str:
    """Return the first validation message prefixed with its field name."""

    error = exc.errors(include_url=False)[0]
    loc = ".".join(str(part) for part in error.get("loc", ())) or "input"
    message = error.get("msg", "Invalid value").removeprefix("Value error, ")
    return f"{loc}: {message}"


def validate(model: type[BaseModel], data: dict[str, Any]) -> BaseModel:
    """Validate ``data`` or raise ``ValueError`` with a readable message."""

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValueError(first_error(exc)) from exc


class HabitForm(BaseModel):
    """Payload for creating a habit."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(max_length=80, description="Short label for the habit")
    description: str | None = Field(default=None, max_length=255)
    frequency: str = Field(default="Daily", description="Daily, Mon-Fri, Sat-Sun or Custom: d,d")
    reminder_time: str | None = Field(default=None, description="Wall-clock HH:MM")

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        if not value:
            raise ValueError("Please provide a habit title.")
        return value

    @field_validator("description")
    @classmethod
    def blank_description(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("frequency")
    @classmethod
    def validate_frequency(cls, value: str) -> str:
        return normalize_frequency(value)

    @field_validator("reminder_time")
    @classmethod
    def validate_reminder_time(cls, value: str | None) -> str | None:
        if not value:
            return None
        if not _CLOCK.match(value):
            raise ValueError("Reminder time must look like HH:MM (24h).")
        return value


class HabitUpdateForm(HabitForm):
    """Partial update; every field is optional."""

    title: str | None = Field(default=None, max_length=80)  # type: ignore[assignment]
    frequency: str | None = None  # type: ignore[assignment]

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str | None) -> str | None:
        if value is not None and not value:
            raise ValueError("Habit title cannot be blank.")
        return value

    @field_validator("frequency")
    @classmethod
    def validate_frequency(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_frequency(value)


class EntryForm(BaseModel):
    """One daily outcome as received from a caller."""

    model_config = ConfigDict(str_strip_whitespace=True)

    occurred_on: date
    status: EntryStatus = EntryStatus.COMPLETED

    @field_validator("occurred_on", mode="before")
    @classmethod
    def parse_iso_date(cls, value: Any) -> Any:
        if isinstance(value, date):
            return value
        text = str(value or "").strip()
        if not _ISO_DATE.match(text):
            raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}.")
        try:
            return date.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"Not a calendar date: {text}.") from exc

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Any:
        if isinstance(value, EntryStatus):
            return value
        text = str(value or "").strip().lower()
        for status in EntryStatus:
            if status.value.lower() == text:
                return status
        raise ValueError("Status must be Completed or Skipped.")


__all__ = ["EntryForm", "HabitForm", "HabitUpdateForm", "first_error", "validate"]
