"""Task repository interfaces."""

from datetime import date
from typing import Protocol

from autoday.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for loading and persisting the task list."""

    def load_tasks(self) -> list[Task]:
        """Load all tasks. Returns an empty list if nothing is stored."""
        ...

    def save_tasks(self, tasks: list[Task]) -> None:
        """Persist the full task list."""
        ...


class TodoSource(Protocol):
    """Interface for importing deadline-bearing items from an external to-do list."""

    def fetch_due(self, target_date: date, default_duration: int) -> list[Task]:
        """Fetch open items due on target_date (or undated) as tasks."""
        ...
