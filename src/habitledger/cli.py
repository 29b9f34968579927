"""Command line interface for HabitLedger."""

from __future__ import annotations

from functools import wraps

import click

from .config import BaseConfig
from .dates import as_date, today_key, week_start
from .errors import HabitLedgerError
from .logging_config import setup_logging
from .models.habit import HABIT_COLORS, NewHabit, active_habits
from .services.progress import OVERALL_RANGES, weekly_progress


def _handle_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except HabitLedgerError as exc:
            raise click.ClickException(exc.message) from exc

    return wrapper


@click.group()
@click.option("--quiet", is_flag=True, default=False, help="Log to file only")
@click.pass_context
def cli(ctx: click.Context, quiet: bool) -> None:
    """Track daily habits and report streaks and progress."""

    from .context import create_app_context

    config = BaseConfig()
    setup_logging(config, console=not quiet)
    ctx.obj = create_app_context(config)


@cli.command("seed")
@click.pass_obj
@_handle_errors
def seed(app) -> None:
    """Add the starter habit set."""

    if app.tracker.habits:
        click.echo("Habits already exist; nothing seeded.")
        return
    created = app.tracker.initialize_default_habits()
    click.echo(f"Seeded {len(created)} habits.")


@cli.command("list")
@click.option("--date", "day", default=None, help="Day to show (YYYY-MM-DD)")
@click.pass_obj
@_handle_errors
def list_habits(app, day: str | None) -> None:
    """List habits with their status for a day."""

    progress = app.tracker.daily_progress(day)
    statuses = {status.habit_id: status for status in progress.habits}
    for habit in app.tracker.habits:
        status = statuses[habit.id]
        mark = "x" if status.completed else " "
        target = f" {status.count}/{habit.target_count}" if habit.is_multi_count else ""
        inactive = "" if habit.is_active else " (inactive)"
        click.echo(f"[{mark}] {habit.id}  {habit.icon} {habit.name}{target}{inactive}")
    click.echo(f"{progress.date}: {progress.completion_rate:.0f}% complete")


@cli.command("add")
@click.argument("name")
@click.option("--target", "target_count", type=int, default=1, show_default=True)
@click.option("--description", default=None)
@click.option("--color", default=None, help="Hex colour tag; cycles the palette when omitted")
@click.option("--icon", default="✅", show_default=True)
@click.option(
    "--frequency",
    type=click.Choice(["daily", "weekly", "custom"]),
    default="daily",
    show_default=True,
)
@click.pass_obj
@_handle_errors
def add(app, name, target_count, description, color, icon, frequency) -> None:
    """Create a habit."""

    if color is None:
        color = HABIT_COLORS[len(app.tracker.habits) % len(HABIT_COLORS)]
    habit = app.tracker.add_habit(
        NewHabit(
            name=name,
            description=description,
            color=color,
            icon=icon,
            frequency=frequency,
            target_count=target_count,
        )
    )
    click.echo(f"Added {habit.name} ({habit.id})")


@cli.command("toggle")
@click.argument("habit_id")
@click.option("--date", "day", default=None, help="Day to toggle (YYYY-MM-DD)")
@click.pass_obj
@_handle_errors
def toggle(app, habit_id: str, day: str | None) -> None:
    """Flip a habit's completion for a day."""

    entry = app.tracker.toggle_habit(habit_id, day)
    state = "done" if entry.completed else "not done"
    click.echo(f"{entry.date}: {state}")


@cli.command("count")
@click.argument("habit_id")
@click.argument("value", type=int)
@click.option("--date", "day", default=None, help="Day to update (YYYY-MM-DD)")
@click.pass_obj
@_handle_errors
def count(app, habit_id: str, value: int, day: str | None) -> None:
    """Set a habit's count for a day."""

    entry = app.tracker.update_habit_count(habit_id, value, day)
    if entry is None:
        click.echo("Nothing recorded.")
        return
    click.echo(f"{entry.date}: count {entry.count}")


@cli.command("delete")
@click.argument("habit_id")
@click.confirmation_option(prompt="Delete this habit and all of its history?")
@click.pass_obj
@_handle_errors
def delete(app, habit_id: str) -> None:
    """Delete a habit and its completion history."""

    app.tracker.delete_habit(habit_id)
    click.echo(f"Deleted {habit_id}")


@cli.command("stats")
@click.argument("habit_id")
@click.pass_obj
@_handle_errors
def stats(app, habit_id: str) -> None:
    """Show streaks and completion rates for a habit."""

    result = app.tracker.stats(habit_id)
    click.echo(app.tracker.state.find_habit(habit_id).name)
    click.echo(f"  current streak: {result.streak.current_streak}")
    click.echo(f"  longest streak: {result.streak.longest_streak}")
    click.echo(f"  completion rate: {result.completion_rate:.1f}%")
    click.echo(f"  average per week: {result.average_per_week:.1f}")
    click.echo(f"  total completions: {result.total_completions}")


@cli.command("week")
@click.option("--start", default=None, help="Any day in the week (YYYY-MM-DD)")
@click.pass_obj
@_handle_errors
def week(app, start: str | None) -> None:
    """Show progress for a calendar week."""

    first = week_start(as_date(start or today_key()), app.config.WEEK_STARTS_ON)
    summary = weekly_progress(first, active_habits(app.tracker.habits), app.tracker.ledger)
    for day in summary.days:
        click.echo(f"{day.date}  {day.completed_count}/{summary.total_habits}")
    click.echo(
        f"Week of {summary.week_start_date}: {summary.completed_habits} completions, "
        f"{summary.completion_rate:.0f}%"
    )


@cli.command("progress")
@click.option(
    "--days",
    type=click.Choice([str(days) for days in OVERALL_RANGES]),
    default="30",
    show_default=True,
)
@click.pass_obj
@_handle_errors
def overall(app, days: str) -> None:
    """Show completion across active habits for a trailing range."""

    summary = app.tracker.overall_progress(int(days))
    names = {habit.id: habit.name for habit in app.tracker.habits}
    for rate in summary.habits:
        click.echo(f"{names[rate.habit_id]}: {rate.completed}/{summary.days} ({rate.completion_rate:.0f}%)")
    click.echo(
        f"{summary.start_date}..{summary.end_date}: {summary.completed}/{summary.possible} "
        f"completions, {summary.completion_rate:.0f}%"
    )


def main() -> None:  # pragma: no cover - console entry point
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
