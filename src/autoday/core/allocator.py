"""Greedy first-fit placement of tasks into a day - no I/O dependencies."""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from .intervals import IntervalSet
from .settings import Settings
from .tasks import Task, rank_tasks
from .timegrid import GRID_MINUTES, format_minutes, round_to_grid

logger = logging.getLogger(__name__)

CONTINUATION_SUFFIX = " (cont.)"
BREAK_BLOCK_ID = "break"


class BlockKind(str, Enum):
    TASK = "task"
    TODO = "todo"
    EVENT = "event"
    BREAK = "break"


@dataclass
class Block:
    """A placed or fixed range [start, end) in minutes since midnight."""

    id: str
    title: str
    start: int
    end: int
    kind: BlockKind = BlockKind.TASK
    task_id: str | None = None
    fixed: bool = False
    done: bool = False
    continued: bool = False

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Block") -> bool:
        """Check if this block overlaps with another. Touching is fine."""
        return max(self.start, other.start) < min(self.end, other.end)

    def format(self) -> str:
        return f"{format_minutes(self.start)}-{format_minutes(self.end)} {self.title}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start,
            "end": self.end,
            "kind": self.kind.value,
            "task_id": self.task_id,
            "fixed": self.fixed,
            "done": self.done,
            "continued": self.continued,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Block":
        return cls(
            id=data["id"],
            title=data["title"],
            start=int(data["start"]),
            end=int(data["end"]),
            kind=BlockKind(data.get("kind", "task")),
            task_id=data.get("task_id"),
            fixed=bool(data.get("fixed", False)),
            done=bool(data.get("done", False)),
            continued=bool(data.get("continued", False)),
        )


@dataclass
class FixedEvent:
    """An imported calendar entry for the target date."""

    id: str
    title: str
    start_minutes: int
    end_minutes: int


@dataclass
class Unplaced:
    """Minutes of a task that found no room in the day."""

    task_id: str
    title: str
    remaining: int

    def to_dict(self) -> dict:
        return {"task_id": self.task_id, "title": self.title, "remaining": self.remaining}

    @classmethod
    def from_dict(cls, data: dict) -> "Unplaced":
        return cls(task_id=data["task_id"], title=data["title"], remaining=int(data["remaining"]))


@dataclass
class Allocation:
    """Allocator output: all blocks sorted by start, plus what did not fit."""

    blocks: list[Block]
    unplaced: list[Unplaced]


def sort_blocks(blocks: list[Block]) -> list[Block]:
    return sorted(blocks, key=lambda b: (b.start, b.end, b.id))


def _clip_to_day(block: Block, settings: Settings) -> Block | None:
    start = max(block.start, settings.day_start)
    end = min(block.end, settings.day_end)
    if end <= start:
        return None
    if (start, end) == (block.start, block.end):
        return block
    return replace(block, start=start, end=end)


def build_fixed_blocks(settings: Settings, events: list[FixedEvent]) -> list[Block]:
    """
    Turn the break window and imported events into fixed blocks.

    Events are clipped to the day window; anything left empty is dropped.
    """
    candidates = []
    if settings.break_window:
        candidates.append(
            Block(
                id=BREAK_BLOCK_ID,
                title=settings.break_window.title,
                start=settings.break_window.start,
                end=settings.break_window.end,
                kind=BlockKind.BREAK,
                fixed=True,
            )
        )
    for event in events:
        candidates.append(
            Block(
                id=f"E_{event.id}",
                title=event.title,
                start=event.start_minutes,
                end=event.end_minutes,
                kind=BlockKind.EVENT,
                fixed=True,
            )
        )

    blocks = []
    for block in candidates:
        clipped = _clip_to_day(block, settings)
        if clipped is None:
            logger.debug(f"Dropping fixed block outside the day: {block.title}")
            continue
        blocks.append(clipped)
    return sort_blocks(blocks)


def _place_whole(task: Task, duration: int, free: IntervalSet, kind: BlockKind) -> list[Block]:
    start = free.first_gap_of_size(duration)
    if start is None:
        return []
    free.carve(start, start + duration)
    return [
        Block(
            id=f"{task.id}#1",
            title=task.display_title(),
            start=start,
            end=start + duration,
            kind=kind,
            task_id=task.id,
        )
    ]


def _place_chunks(task: Task, duration: int, free: IntervalSet, kind: BlockKind) -> list[Block]:
    blocks = []
    remaining = duration
    while remaining > 0:
        gap = free.first_gap(GRID_MINUTES)
        if gap is None:
            break

        # The whole remainder if it fits, otherwise fill the gap on the grid
        start = gap.start
        chunk = min(remaining, gap.length // GRID_MINUTES * GRID_MINUTES)
        continued = remaining > chunk
        title = task.display_title()
        blocks.append(
            Block(
                id=f"{task.id}#{len(blocks) + 1}",
                title=f"{title}{CONTINUATION_SUFFIX}" if continued else title,
                start=start,
                end=start + chunk,
                kind=kind,
                task_id=task.id,
                continued=continued,
            )
        )
        free.carve(start, start + chunk)
        remaining -= chunk
    return blocks


def allocate(tasks: list[Task], settings: Settings, fixed_blocks: list[Block]) -> Allocation:
    """
    Place tasks into the day, highest ranked first.

    Fixed blocks are clipped to the day window and carved out before any
    task is placed. Completed tasks are skipped. Whatever cannot
    be placed is reported as Unplaced with its remaining minutes.

    Pure function - no I/O. Raises ConfigurationError on bad settings.
    """
    settings.validate()

    free = IntervalSet(settings.day_start, settings.day_end, settings.buffer)
    blocks = []
    for block in fixed_blocks:
        clipped = _clip_to_day(block, settings)
        if clipped is None:
            continue
        free.carve(clipped.start, clipped.end)
        blocks.append(clipped)

    unplaced = []
    pending = [t for t in tasks if not t.completed]
    for task in rank_tasks(pending, settings.strategy):
        duration = round_to_grid(task.duration)
        kind = BlockKind.TODO if task.is_imported else BlockKind.TASK
        if task.splittable:
            placed = _place_chunks(task, duration, free, kind)
        else:
            placed = _place_whole(task, duration, free, kind)

        remaining = duration - sum(b.duration for b in placed)
        blocks.extend(placed)
        if remaining > 0:
            logger.debug(f"Unplaced {remaining} min of '{task.title}'")
            unplaced.append(Unplaced(task_id=task.id, title=task.title, remaining=remaining))
        else:
            logger.debug(f"Placed '{task.title}' in {len(placed)} block(s)")

    return Allocation(blocks=sort_blocks(blocks), unplaced=unplaced)
