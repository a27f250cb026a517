"""Adapters - I/O implementations of ports."""

from .file_store import FileStore
from .google_auth import AuthenticationError
from .google_calendar import GoogleCalendarAdapter
from .google_tasks import GoogleTasksAdapter

__all__ = [
    "FileStore",
    "AuthenticationError",
    "GoogleCalendarAdapter",
    "GoogleTasksAdapter",
]
