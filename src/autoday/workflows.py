"""Shared workflow layer between the CLI and the core.

Each function loads what it needs from storage, runs the pure core and
saves the result. Every schedule mutation runs to completion before the
next one starts.
"""

import logging
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path

from .adapters.file_store import FileStore
from .config import Config
from .core.allocator import Block
from .core.export import schedule_to_ics
from .core.reposition import MoveResult, move_block
from .core.schedule import ScheduleStore
from .core.settings import Settings
from .core.tasks import Priority, Task, new_task, update_task
from .ports import CalendarRepository, TodoSource

logger = logging.getLogger(__name__)


class NoScheduleError(RuntimeError):
    """Raised when an operation needs a generated schedule and there is none."""

    def __init__(self):
        super().__init__("No schedule yet. Run 'autoday generate' first.")


def get_store(config: Config) -> FileStore:
    """Resolve the data directory from config."""
    return FileStore(config.data_path)


# ============== Tasks ==============


def _find_task(tasks: list[Task], task_id: str) -> Task:
    task = next((t for t in tasks if t.id == task_id), None)
    if task is None:
        raise ValueError(f"No task with id '{task_id}'")
    return task


def add_task(
    store: FileStore,
    title: str,
    duration: int,
    priority: Priority | str = Priority.MEDIUM,
    splittable: bool = True,
    deadline: str | None = None,
) -> Task:
    task = new_task(title, duration, priority, splittable, deadline)
    tasks = store.load_tasks()
    tasks.append(task)
    store.save_tasks(tasks)
    return task


def edit_task(store: FileStore, task_id: str, **changes) -> Task:
    """Apply a partial update to a stored task."""
    tasks = store.load_tasks()
    updated = update_task(_find_task(tasks, task_id), **changes)
    store.save_tasks([updated if t.id == task_id else t for t in tasks])
    return updated


def delete_task(store: FileStore, task_id: str) -> Task:
    """Delete a task and every block that references it."""
    tasks = store.load_tasks()
    task = _find_task(tasks, task_id)
    store.save_tasks([t for t in tasks if t.id != task_id])

    schedule = store.load_schedule()
    if schedule:
        schedule.remove_task(task_id)
        store.save_schedule(schedule)
    return task


def complete_task(store: FileStore, task_id: str) -> Task:
    """Mark a task completed and its scheduled blocks done."""
    tasks = store.load_tasks()
    task = replace(_find_task(tasks, task_id), completed=True)
    store.save_tasks([task if t.id == task_id else t for t in tasks])

    schedule = store.load_schedule()
    if schedule:
        for block in schedule.blocks:
            if block.task_id == task_id:
                block.done = True
        store.save_schedule(schedule)
    return task


# ============== Settings ==============


def update_settings(store: FileStore, **changes) -> Settings:
    """Apply changes to the stored settings. Raises ConfigurationError."""
    settings = replace(store.load_settings(), **changes)
    settings.validate()
    store.save_settings(settings)
    return settings


# ============== Schedule ==============


def generate_schedule(store: FileStore, now: datetime | None = None) -> ScheduleStore:
    """
    Regenerate the day's schedule from scratch and persist it.

    Fixed blocks come from the break window and the events cached by the
    last sync for the target date. Raises ConfigurationError.
    """
    settings = store.load_settings()
    schedule = ScheduleStore(settings=settings)
    schedule.regenerate(store.load_tasks(), store.load_events(settings.date), now=now)
    store.save_schedule(schedule)
    return schedule


def load_schedule(store: FileStore) -> ScheduleStore:
    schedule = store.load_schedule()
    if schedule is None:
        raise NoScheduleError()
    return schedule


def move(store: FileStore, block_id: str, new_start: int) -> MoveResult:
    """Move a block, persisting only if the move is accepted."""
    schedule = load_schedule(store)
    result = move_block(schedule, block_id, new_start)
    if result.committed:
        store.save_schedule(schedule)
    else:
        logger.info(f"Move of {block_id} reverted: {result.reason}")
    return result


def toggle_block_done(store: FileStore, block_id: str) -> Block | None:
    schedule = load_schedule(store)
    block = schedule.toggle_done(block_id)
    if block:
        store.save_schedule(schedule)
    return block


def remove_block(store: FileStore, block_id: str) -> bool:
    schedule = load_schedule(store)
    removed = schedule.remove_block(block_id)
    if removed:
        store.save_schedule(schedule)
    return removed


def export_schedule(store: FileStore, output: Path | str, now: datetime | None = None) -> Path:
    """Write the stored schedule as an .ics file."""
    schedule = load_schedule(store)
    path = Path(output).expanduser()
    path.write_text(schedule_to_ics(schedule, now=now), newline="")
    return path


# ============== Sync ==============


def sync_from_google(
    store: FileStore,
    calendar: CalendarRepository,
    todos: TodoSource,
    target_date: date | None = None,
) -> tuple[int, int]:
    """
    Cache the day's calendar events and import its to-do items.

    Imported tasks replace earlier imports; their completion flag is kept.
    Returns (event count, task count).
    """
    settings = store.load_settings()
    target_date = target_date or settings.date

    events = calendar.fetch_day(target_date)
    store.save_events(target_date, events)

    imported = todos.fetch_due(target_date, settings.import_default_duration)
    tasks = store.load_tasks()
    completed = {t.id for t in tasks if t.is_imported and t.completed}
    imported = [replace(t, completed=t.id in completed) for t in imported]
    store.save_tasks([t for t in tasks if not t.is_imported] + imported)

    logger.info(f"Synced {len(events)} event(s) and {len(imported)} task(s) for {target_date}")
    return len(events), len(imported)
