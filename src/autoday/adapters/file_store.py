"""File-based storage adapter for tasks, settings and the schedule."""

import json
import logging
from dataclasses import asdict
from datetime import date
from pathlib import Path

from autoday.core.allocator import FixedEvent
from autoday.core.schedule import ScheduleStore
from autoday.core.settings import Settings
from autoday.core.tasks import Task

logger = logging.getLogger(__name__)

TASKS_FILE = "tasks.json"
SETTINGS_FILE = "settings.json"
SCHEDULE_FILE = "schedule.json"
EVENTS_FILE = "events.json"


class FileStore:
    """
    JSON file storage.

    Implements TaskRepository, SettingsRepository, ScheduleRepository and
    EventCache.
    Corrupt files never raise on load: defaults are returned instead.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _read_json(self, name: str):
        path = self.data_dir / name
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring corrupt {path}: {e}")
            return None

    def _write_json(self, name: str, data) -> None:
        path = self.data_dir / name
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False))

    def load_tasks(self) -> list[Task]:
        """Load all tasks. Returns an empty list if nothing is stored."""
        data = self._read_json(TASKS_FILE)
        if data is None:
            return []
        try:
            return [Task.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Failed to parse stored tasks, starting empty: {e}")
            return []

    def save_tasks(self, tasks: list[Task]) -> None:
        self._write_json(TASKS_FILE, [t.to_dict() for t in tasks])

    def load_settings(self) -> Settings:
        """Load settings. Falls back to defaults if missing or corrupt."""
        data = self._read_json(SETTINGS_FILE)
        if data is None:
            return Settings()
        try:
            return Settings.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Failed to parse stored settings, using defaults: {e}")
            return Settings()

    def save_settings(self, settings: Settings) -> None:
        self._write_json(SETTINGS_FILE, settings.to_dict())

    def load_schedule(self) -> ScheduleStore | None:
        """Load the last generated schedule. Returns None if not found."""
        data = self._read_json(SCHEDULE_FILE)
        if data is None:
            return None
        try:
            return ScheduleStore.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Failed to parse stored schedule: {e}")
            return None

    def save_schedule(self, store: ScheduleStore) -> None:
        self._write_json(SCHEDULE_FILE, store.to_dict())

    def load_events(self, target_date: date) -> list[FixedEvent]:
        """Cached events for a date. Returns an empty list if never synced."""
        data = self._read_json(EVENTS_FILE) or {}
        try:
            return [FixedEvent(**item) for item in data.get(target_date.isoformat(), [])]
        except (AttributeError, TypeError) as e:
            logger.warning(f"Failed to parse cached events: {e}")
            return []

    def save_events(self, target_date: date, events: list[FixedEvent]) -> None:
        data = self._read_json(EVENTS_FILE)
        if not isinstance(data, dict):
            data = {}
        data[target_date.isoformat()] = [asdict(e) for e in events]
        self._write_json(EVENTS_FILE, data)
