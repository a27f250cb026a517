"""AutoDay CLI - single-day task scheduler."""

import json
import logging
import sys
from datetime import date

import click
import requests

from .adapters.google_auth import AuthenticationError, authenticate, token_path
from .config import load_config
from .core.schedule import format_schedule
from .core.settings import BreakWindow, ConfigurationError
from .core.tasks import Priority, RankStrategy
from .core.timegrid import format_minutes, parse_hhmm
from .workflows import (
    NoScheduleError,
    add_task,
    complete_task,
    delete_task,
    edit_task,
    export_schedule,
    generate_schedule,
    get_store,
    load_schedule,
    move,
    remove_block,
    sync_from_google,
    toggle_block_done,
    update_settings,
)

PRIORITY_CHOICE = click.Choice([p.value for p in Priority])
STRATEGY_CHOICE = click.Choice([s.value for s in RankStrategy])


def _store():
    return get_store(load_config())


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """AutoDay - fit your tasks into today's free time."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


# ============== Tasks ==============


@main.group()
def task():
    """Manage tasks."""
    pass


@task.command("add")
@click.argument("title")
@click.option("--duration", "-d", type=int, required=True, help="Minutes needed")
@click.option("--priority", "-p", type=PRIORITY_CHOICE, default="medium", show_default=True)
@click.option("--split/--no-split", default=True, show_default=True, help="Allow splitting into chunks")
@click.option("--deadline", default=None, help="YYYY-MM-DD or 'YYYY-MM-DD HH:MM'")
def task_add(title: str, duration: int, priority: str, split: bool, deadline: str | None):
    """Add a task."""
    try:
        t = add_task(_store(), title, duration, priority, split, deadline)
    except ValueError as e:
        _fail(str(e))
    click.echo(f"Added {t.title} ({t.duration} min) #{t.id}")


@task.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def task_list(as_json: bool):
    """List tasks."""
    tasks = _store().load_tasks()

    if as_json:
        click.echo(json.dumps([t.to_dict() for t in tasks], indent=2, ensure_ascii=False))
        return

    if not tasks:
        click.echo("No tasks.")
        return

    for t in tasks:
        marker = "x" if t.completed else " "
        due = f" (due {t.deadline:%Y-%m-%d %H:%M})" if t.deadline else ""
        split = "" if t.splittable else ", no split"
        click.echo(f"[{marker}] {t.display_title()} - {t.duration} min, {t.priority.value}{split}{due} #{t.id}")


@task.command("edit")
@click.argument("task_id")
@click.option("--title", default=None)
@click.option("--duration", "-d", type=int, default=None)
@click.option("--priority", "-p", type=PRIORITY_CHOICE, default=None)
@click.option("--split/--no-split", default=None)
@click.option("--deadline", default=None, help="New deadline, or '' to clear")
def task_edit(task_id, title, duration, priority, split, deadline):
    """Edit a task."""
    changes = {}
    if title is not None:
        changes["title"] = title
    if duration is not None:
        changes["duration"] = duration
    if priority is not None:
        changes["priority"] = priority
    if split is not None:
        changes["splittable"] = split
    if deadline is not None:
        changes["deadline"] = deadline
    try:
        t = edit_task(_store(), task_id, **changes)
    except ValueError as e:
        _fail(str(e))
    click.echo(f"Updated {t.title} #{t.id}")


@task.command("delete")
@click.argument("task_id")
def task_delete(task_id: str):
    """Delete a task and its scheduled blocks."""
    try:
        t = delete_task(_store(), task_id)
    except ValueError as e:
        _fail(str(e))
    click.echo(f"Deleted {t.title}")


@task.command("done")
@click.argument("task_id")
def task_done(task_id: str):
    """Mark a task completed."""
    try:
        t = complete_task(_store(), task_id)
    except ValueError as e:
        _fail(str(e))
    click.echo(f"Completed {t.title}")


# ============== Settings ==============


@main.group()
def settings():
    """Show or change the day settings."""
    pass


@settings.command("show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def settings_show(as_json: bool):
    """Show the current settings."""
    s = _store().load_settings()
    if as_json:
        click.echo(json.dumps(s.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(f"Date:      {s.date.isoformat()}")
    click.echo(f"Day:       {format_minutes(s.day_start)}-{format_minutes(s.day_end)}")
    click.echo(f"Buffer:    {s.buffer} min")
    click.echo(f"Strategy:  {s.strategy.value}")
    if s.break_window:
        window = f"{format_minutes(s.break_window.start)}-{format_minutes(s.break_window.end)}"
        click.echo(f"Break:     {window} ({s.break_window.title})")
    else:
        click.echo("Break:     none")
    click.echo(f"Import:    {s.import_default_duration} min default")


@settings.command("set")
@click.option("--date", "target_date", default=None, help="Target date (YYYY-MM-DD)")
@click.option("--start", default=None, help="Start of day (HH:MM)")
@click.option("--end", default=None, help="End of day (HH:MM)")
@click.option("--buffer", type=int, default=None, help="Minutes between blocks")
@click.option("--strategy", type=STRATEGY_CHOICE, default=None)
@click.option("--break", "break_window", default=None, help="Break window HH:MM-HH:MM")
@click.option("--break-title", default="Break", show_default=True)
@click.option("--no-break", is_flag=True, help="Remove the break window")
@click.option("--import-duration", type=int, default=None, help="Default minutes for imported tasks")
def settings_set(target_date, start, end, buffer, strategy, break_window, break_title, no_break, import_duration):
    """Change settings."""
    changes = {}
    try:
        if target_date is not None:
            changes["date"] = date.fromisoformat(target_date)
        if start is not None:
            changes["day_start"] = parse_hhmm(start)
        if end is not None:
            changes["day_end"] = parse_hhmm(end)
        if buffer is not None:
            changes["buffer"] = buffer
        if strategy is not None:
            changes["strategy"] = RankStrategy(strategy)
        if no_break:
            changes["break_window"] = None
        elif break_window is not None:
            break_start, _, break_end = break_window.partition("-")
            changes["break_window"] = BreakWindow(parse_hhmm(break_start), parse_hhmm(break_end), break_title)
        if import_duration is not None:
            changes["import_default_duration"] = import_duration
        update_settings(_store(), **changes)
    except ValueError as e:
        _fail(str(e))
    click.echo("Settings saved.")


# ============== Schedule ==============


def _show_schedule(schedule, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(schedule.to_dict(), indent=2, ensure_ascii=False))
    else:
        click.echo(format_schedule(schedule))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def generate(as_json: bool):
    """Generate today's schedule from scratch."""
    try:
        schedule = generate_schedule(_store())
    except ConfigurationError as e:
        _fail(str(e))
    _show_schedule(schedule, as_json)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show(as_json: bool):
    """Show the last generated schedule."""
    try:
        schedule = load_schedule(_store())
    except NoScheduleError as e:
        _fail(str(e))
    _show_schedule(schedule, as_json)


@main.command("move")
@click.argument("block_id")
@click.option("--to", "to_time", default=None, help="New start time (HH:MM)")
@click.option("--by", "by_minutes", type=int, default=None, help="Shift by N minutes (negative moves earlier)")
def move_cmd(block_id: str, to_time: str | None, by_minutes: int | None):
    """Move a block. Overlapping moves are reverted."""
    if (to_time is None) == (by_minutes is None):
        _fail("Give exactly one of --to or --by")
    store = _store()
    try:
        if to_time is not None:
            new_start = parse_hhmm(to_time)
        else:
            block = load_schedule(store).find(block_id)
            if block is None:
                _fail(f"No block '{block_id}'")
            new_start = block.start + by_minutes
        result = move(store, block_id, new_start)
    except (NoScheduleError, ValueError) as e:
        _fail(str(e))

    if result.committed:
        click.echo(f"Moved: {result.block.format()}")
    else:
        click.echo(f"Not moved: {result.reason}")


@main.command()
@click.argument("block_id")
def done(block_id: str):
    """Toggle a block's done mark."""
    try:
        block = toggle_block_done(_store(), block_id)
    except NoScheduleError as e:
        _fail(str(e))
    if block is None:
        _fail(f"No block '{block_id}'")
    click.echo(f"{'Done' if block.done else 'Not done'}: {block.format()}")


@main.command()
@click.argument("block_id")
def remove(block_id: str):
    """Remove a block from the schedule."""
    try:
        removed = remove_block(_store(), block_id)
    except NoScheduleError as e:
        _fail(str(e))
    if not removed:
        _fail(f"No block '{block_id}'")
    click.echo(f"Removed {block_id}")


@main.command()
@click.option("--output", "-o", default="schedule.ics", show_default=True, help="File to write")
def export(output: str):
    """Export the schedule as an iCalendar file."""
    try:
        path = export_schedule(_store(), output)
    except NoScheduleError as e:
        _fail(str(e))
    click.echo(f"Exported to {path}")


# ============== Google ==============


@main.command()
def auth():
    """Authenticate with Google (Calendar and Tasks, read-only)."""
    config = load_config()
    try:
        authenticate(config.google_config_folder, config.google_client_secret_file)
    except AuthenticationError as e:
        _fail(str(e))
    click.echo(f"✓ Token saved to {token_path(config.google_config_folder)}")


@main.command()
def sync():
    """Import the target date's Google Calendar events and Google Tasks."""
    from .adapters.google_calendar import GoogleCalendarAdapter
    from .adapters.google_tasks import GoogleTasksAdapter

    config = load_config()
    calendar = GoogleCalendarAdapter(
        config_folder=config.google_config_folder,
        calendars=config.google_calendars or None,
        timezone=config.timezone,
    )
    todos = GoogleTasksAdapter(config_folder=config.google_config_folder)
    try:
        n_events, n_tasks = sync_from_google(get_store(config), calendar, todos)
    except AuthenticationError as e:
        _fail(str(e))
    except requests.RequestException as e:
        _fail(f"Google sync failed: {e}")
    click.echo(f"Synced {n_events} event(s) and {n_tasks} task(s).")


if __name__ == "__main__":
    main()
