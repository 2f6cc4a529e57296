"""Command line interface for HabitPulse."""

from __future__ import annotations

import functools
import json
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .models.habit import EntryStatus
from .models.user import User
from .services import notifications, tracking, users
from .services.export_csv import export_entries_csv
from .services.import_entries import import_entries_csv
from .services.reports import export_weekly_png

pass_app = click.make_pass_decorator(AppContext)

ISO_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def _current_user(app: AppContext) -> User:
    email = click.get_current_context().meta.get("habitpulse.user_email")
    return users.require_user(app.user_repo, email)


def handle_errors(func: Callable) -> Callable:
    """Report validation and lookup failures as clean CLI errors."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper


@click.group()
@click.option(
    "--user",
    "user_email",
    envvar="HABITPULSE_USER_EMAIL",
    help="Email of the user to act as.",
)
@click.pass_context
def main(ctx: click.Context, user_email: Optional[str]) -> None:
    """Track habits and review streaks from the terminal."""

    if ctx.obj is None:
        config = BaseConfig()
        setup_logging(config)
        ctx.obj = create_app_context(config)
        ctx.call_on_close(ctx.obj.dispose)
    ctx.meta["habitpulse.user_email"] = user_email or ctx.obj.config.DEFAULT_USER_EMAIL


@main.command("init-db")
@pass_app
def init_db(app: AppContext) -> None:
    """Create the database schema."""

    click.echo(f"Database ready: {app.config.DATABASE_URL}")


# Users --------------------------------------------------------------------


@main.group("user")
def user_group() -> None:
    """Manage users."""


@user_group.command("add")
@click.argument("email")
@click.option("--name", default=None, help="Display name (defaults to the email's local part).")
@pass_app
@handle_errors
def user_add(app: AppContext, email: str, name: Optional[str]) -> None:
    """Create a user (no-op when it already exists)."""

    user = users.ensure_user(app.user_repo, email=email, name=name)
    click.echo(f"User #{user.id}: {user.email}")


# Habits -------------------------------------------------------------------


@main.group("habit")
def habit_group() -> None:
    """Create, list and inspect habits."""


@habit_group.command("add")
@click.argument("title")
@click.option("--description", default=None)
@click.option("--frequency", default="Daily", show_default=True, help="Daily, Mon-Fri, Sat-Sun or 'Custom: 1,3,5' (0 = Sunday).")
@click.option("--reminder", "reminder_time", default=None, help="Reminder time as HH:MM.")
@pass_app
@handle_errors
def habit_add(
    app: AppContext,
    title: str,
    description: Optional[str],
    frequency: str,
    reminder_time: Optional[str],
) -> None:
    """Add a habit."""

    user = _current_user(app)
    habit = tracking.create_habit(
        app,
        user_id=user.id,
        title=title,
        description=description,
        frequency=frequency,
        reminder_time=reminder_time,
    )
    click.echo(f"Habit #{habit.id} added: {habit.title} ({habit.frequency})")


@habit_group.command("list")
@click.option("--all", "include_archived", is_flag=True, help="Include archived habits.")
@pass_app
@handle_errors
def habit_list(app: AppContext, include_archived: bool) -> None:
    """List habits as JSON."""

    user = _current_user(app)
    habits = app.habit_repo.list_all(user_id=user.id, include_archived=include_archived)
    _echo_json([tracking.habit_to_payload(h) for h in habits])


@habit_group.command("update")
@click.argument("habit_id", type=int)
@click.option("--title", default=None)
@click.option("--description", default=None)
@click.option("--frequency", default=None)
@click.option("--reminder", "reminder_time", default=None)
@pass_app
@handle_errors
def habit_update(app: AppContext, habit_id: int, **fields: Optional[str]) -> None:
    """Change a habit's details."""

    user = _current_user(app)
    habit = tracking.update_habit(app, habit_id, user_id=user.id, **fields)
    click.echo(f"Habit #{habit.id} updated")


@habit_group.command("archive")
@click.argument("habit_id", type=int)
@pass_app
@handle_errors
def habit_archive(app: AppContext, habit_id: int) -> None:
    """Hide a habit but keep its history."""

    user = _current_user(app)
    tracking.archive_habit(app, habit_id, user_id=user.id)
    click.echo(f"Habit #{habit_id} archived")


@habit_group.command("delete")
@click.argument("habit_id", type=int)
@click.confirmation_option(prompt="Delete this habit and all of its entries?")
@pass_app
@handle_errors
def habit_delete(app: AppContext, habit_id: int) -> None:
    """Delete a habit and its entries."""

    user = _current_user(app)
    tracking.delete_habit(app, habit_id, user_id=user.id)
    click.echo(f"Habit #{habit_id} deleted")


@habit_group.command("stats")
@click.argument("habit_id", type=int)
@click.option("--today", type=ISO_DATE, default=None, help="Evaluate as of this date.")
@pass_app
@handle_errors
def habit_stats(app: AppContext, habit_id: int, today: Optional[datetime]) -> None:
    """Streak, 7-day progress and activity log of one habit."""

    user = _current_user(app)
    habit, streak = tracking.habit_summary(app, habit_id, user_id=user.id, today=_as_date(today))
    payload = {
        "habit": tracking.habit_to_payload(habit),
        "reminder": notifications.reminder_text(habit),
        **streak.to_payload(),
    }
    _echo_json(payload)


# Entries ------------------------------------------------------------------


@main.group("entry")
def entry_group() -> None:
    """Record and list daily outcomes."""


@entry_group.command("add")
@click.argument("habit_id", type=int)
@click.option("--date", "occurred_on", default=None, help="YYYY-MM-DD (defaults to today).")
@click.option(
    "--status",
    type=click.Choice([s.value for s in EntryStatus], case_sensitive=False),
    default=EntryStatus.COMPLETED.value,
    show_default=True,
)
@pass_app
@handle_errors
def entry_add(app: AppContext, habit_id: int, occurred_on: Optional[str], status: str) -> None:
    """Mark a habit completed or skipped."""

    user = _current_user(app)
    entry = tracking.record_entry(
        app,
        habit_id,
        user_id=user.id,
        occurred_on=occurred_on or date.today(),
        status=status,
    )
    click.echo(f"Habit #{habit_id} marked {entry.status} on {entry.occurred_on.isoformat()}")


@entry_group.command("list")
@click.argument("habit_id", type=int)
@click.option("--start", type=ISO_DATE, default=None)
@click.option("--end", type=ISO_DATE, default=None)
@pass_app
@handle_errors
def entry_list(
    app: AppContext, habit_id: int, start: Optional[datetime], end: Optional[datetime]
) -> None:
    """List a habit's entries, newest first."""

    user = _current_user(app)
    entries = app.habit_repo.list_entries(
        habit_id, user_id=user.id, start_date=_as_date(start), end_date=_as_date(end)
    )
    _echo_json([tracking.entry_to_payload(e) for e in entries])


@main.group("entries")
def entries_group() -> None:
    """Bulk import and export."""


@entries_group.command("import")
@click.argument("csv_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@pass_app
@handle_errors
def entries_import(app: AppContext, csv_path: Path) -> None:
    """Import entries from CSV (columns: habit_id or habit, date, status)."""

    user = _current_user(app)
    result = import_entries_csv(app, csv_path=csv_path, user_id=user.id)
    click.echo(
        f"Imported {result.imported} entries "
        f"({result.duplicates} duplicates, {len(result.skipped)} skipped)"
    )
    for row, reason in result.skipped:
        click.echo(f"  row {row}: {reason}", err=True)


@entries_group.command("export")
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@pass_app
@handle_errors
def entries_export(app: AppContext, output_path: Path) -> None:
    """Export all entries to CSV."""

    user = _current_user(app)
    titles = {
        h.id: h.title for h in app.habit_repo.list_all(user_id=user.id, include_archived=True)
    }
    path = export_entries_csv(
        entries=app.habit_repo.list_user_entries(user_id=user.id),
        habit_titles=titles,
        output_path=output_path,
    )
    click.echo(f"Export written: {path}")


# Statistics ---------------------------------------------------------------


@main.command("weekly")
@click.option("--today", type=ISO_DATE, default=None, help="Evaluate as of this date.")
@click.option("--png", "png_path", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Also render the chart to this PNG file.")
@pass_app
@handle_errors
def weekly(app: AppContext, today: Optional[datetime], png_path: Optional[Path]) -> None:
    """Seven-day totals, streak and chart series as JSON."""

    user = _current_user(app)
    aggregate = tracking.weekly_summary(app, user_id=user.id, today=_as_date(today))
    if png_path is not None:
        export_weekly_png(aggregate=aggregate, output_path=png_path)
    _echo_json(aggregate.to_payload())


@main.command("today")
@click.option("--today", type=ISO_DATE, default=None, help="Evaluate as of this date.")
@pass_app
@handle_errors
def today_cmd(app: AppContext, today: Optional[datetime]) -> None:
    """Habits scheduled for today and whether they are done."""

    user = _current_user(app)
    due = tracking.due_today(app, user_id=user.id, today=_as_date(today))
    if not due:
        click.echo("Nothing scheduled today.")
        return
    for item in due:
        mark = "x" if item.completed else " "
        click.echo(f"[{mark}] #{item.habit.id} {item.habit.title}")


# Notifications ------------------------------------------------------------


@main.group("notifications")
def notifications_group() -> None:
    """Read the notification feed."""


@notifications_group.command("list")
@click.option("--unread", "unread_only", is_flag=True)
@pass_app
@handle_errors
def notifications_list(app: AppContext, unread_only: bool) -> None:
    """The feed, newest first, with the unread count."""

    user = _current_user(app)
    rows = app.notification_repo.list_for_user(user_id=user.id, unread_only=unread_only)
    _echo_json(
        {
            "unread": app.notification_repo.count_unread(user_id=user.id),
            "notifications": [notifications.to_payload(n) for n in rows],
        }
    )


@notifications_group.command("read")
@click.argument("notification_id", type=int)
@pass_app
@handle_errors
def notifications_read(app: AppContext, notification_id: int) -> None:
    user = _current_user(app)
    notifications.mark_read(app.notification_repo, notification_id, user_id=user.id)
    click.echo(f"Notification #{notification_id} marked read")


@notifications_group.command("delete")
@click.argument("notification_id", type=int)
@pass_app
@handle_errors
def notifications_delete(app: AppContext, notification_id: int) -> None:
    user = _current_user(app)
    notifications.delete_notification(app.notification_repo, notification_id, user_id=user.id)
    click.echo(f"Notification #{notification_id} deleted")


if __name__ == "__main__":  # pragma: no cover
    main()
