"""Time arithmetic on minutes since midnight - no I/O dependencies."""

import math
from datetime import date, datetime, timedelta

GRID_MINUTES = 5
DAY_MINUTES = 24 * 60


def parse_hhmm(value: str) -> int:
    """Parse 'HH:MM' into minutes since midnight. '24:00' is allowed."""
    try:
        hh, mm = value.strip().split(":")
        hours, minutes = int(hh), int(mm)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    if not (0 <= minutes < 60) or not (0 <= hours <= 24):
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    total = hours * 60 + minutes
    if total > DAY_MINUTES:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return total


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as 'HH:MM'."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def round_to_grid(minutes: float, grid: int = GRID_MINUTES) -> int:
    """Round a duration to the nearest grid step, never below one step."""
    return max(grid, snap_to_grid(minutes, grid))


def snap_to_grid(minutes: float, grid: int = GRID_MINUTES) -> int:
    """Snap an offset to the nearest grid step. Halves round up."""
    return int(math.floor(minutes / grid + 0.5)) * grid


def minutes_to_datetime(day: date, minutes: int) -> datetime:
    """Local wall-clock datetime for minutes since midnight on a day."""
    return datetime(day.year, day.month, day.day) + timedelta(minutes=minutes)
