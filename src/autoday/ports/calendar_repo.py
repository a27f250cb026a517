"""Calendar repository interface."""

from datetime import date
from typing import Protocol

from autoday.core.allocator import FixedEvent


class CalendarRepository(Protocol):
    """Interface for fetching fixed events from any calendar backend."""

    def fetch_day(self, target_date: date) -> list[FixedEvent]:
        """Fetch timed events for a specific date, in local minutes."""
        ...
