"""Settings and schedule storage interfaces."""

from datetime import date
from typing import Protocol

from autoday.core.allocator import FixedEvent
from autoday.core.schedule import ScheduleStore
from autoday.core.settings import Settings


class SettingsRepository(Protocol):
    """Interface for reading and writing day settings."""

    def load_settings(self) -> Settings:
        """Load settings. Falls back to defaults if missing or corrupt."""
        ...

    def save_settings(self, settings: Settings) -> None:
        ...


class ScheduleRepository(Protocol):
    """Interface for the persisted "current schedule" artifact."""

    def load_schedule(self) -> ScheduleStore | None:
        """Load the last generated schedule. Returns None if not found."""
        ...

    def save_schedule(self, store: ScheduleStore) -> None:
        ...


class EventCache(Protocol):
    """Interface for the locally cached calendar events of each date."""

    def load_events(self, target_date: date) -> list[FixedEvent]:
        """Cached events for a date. Returns an empty list if never synced."""
        ...

    def save_events(self, target_date: date, events: list[FixedEvent]) -> None:
        ...
