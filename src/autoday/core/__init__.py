"""Functional core - pure scheduling logic with no I/O."""

from .tasks import Task, Priority, RankStrategy, new_task, rank_tasks, parse_duration_from_text
from .settings import Settings, BreakWindow, ConfigurationError
from .intervals import Interval, IntervalSet
from .allocator import Allocation, Block, BlockKind, FixedEvent, Unplaced, allocate, build_fixed_blocks
from .schedule import ScheduleStore, format_schedule
from .reposition import DragGesture, DragState, MoveResult, move_block
from .export import schedule_to_ics

__all__ = [
    # Tasks
    "Task",
    "Priority",
    "RankStrategy",
    "new_task",
    "rank_tasks",
    "parse_duration_from_text",
    # Settings
    "Settings",
    "BreakWindow",
    "ConfigurationError",
    # Free time
    "Interval",
    "IntervalSet",
    # Allocation
    "Allocation",
    "Block",
    "BlockKind",
    "FixedEvent",
    "Unplaced",
    "allocate",
    "build_fixed_blocks",
    # Schedule
    "ScheduleStore",
    "format_schedule",
    "DragGesture",
    "DragState",
    "MoveResult",
    "move_block",
    "schedule_to_ics",
]
