"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository, TodoSource
from .calendar_repo import CalendarRepository
from .schedule_repo import EventCache, ScheduleRepository, SettingsRepository

__all__ = [
    "TaskRepository",
    "TodoSource",
    "CalendarRepository",
    "ScheduleRepository",
    "SettingsRepository",
    "EventCache",
]
