"""Pure task domain logic - no I/O dependencies."""

import re
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from enum import Enum

from .timegrid import round_to_grid

END_OF_DAY = time(23, 59)


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class RankStrategy(str, Enum):
    DEADLINE_FIRST = "deadline-first"
    PRIORITY_FIRST = "priority-first"


@dataclass
class Task:
    """A task to be placed into the day's schedule."""

    id: str
    title: str
    duration: int
    priority: Priority = Priority.MEDIUM
    splittable: bool = True
    deadline_date: date | None = None
    deadline_time: time | None = None
    completed: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    source: str = "local"
    list_title: str = ""

    @property
    def deadline(self) -> datetime | None:
        """Deadline instant. A date without a time means end of day."""
        if not self.deadline_date:
            return None
        return datetime.combine(self.deadline_date, self.deadline_time or END_OF_DAY)

    @property
    def is_imported(self) -> bool:
        return self.source != "local"

    def display_title(self) -> str:
        if self.is_imported and self.list_title:
            return f"{self.title} ({self.list_title})"
        return self.title

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "duration": self.duration,
            "priority": self.priority.value,
            "splittable": self.splittable,
            "deadline_date": self.deadline_date.isoformat() if self.deadline_date else None,
            "deadline_time": self.deadline_time.strftime("%H:%M") if self.deadline_time else None,
            "completed": self.completed,
            "created_at": self.created_at.isoformat(),
            "source": self.source,
            "list_title": self.list_title,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from its stored form."""
        deadline_date = data.get("deadline_date")
        deadline_time = data.get("deadline_time")
        return cls(
            id=data["id"],
            title=data["title"],
            duration=round_to_grid(int(data["duration"])),
            priority=Priority(data.get("priority", "medium")),
            splittable=bool(data.get("splittable", True)),
            deadline_date=date.fromisoformat(deadline_date) if deadline_date else None,
            deadline_time=time.fromisoformat(deadline_time) if deadline_time else None,
            completed=bool(data.get("completed", False)),
            created_at=datetime.fromisoformat(data["created_at"]),
            source=data.get("source", "local") or "local",
            list_title=data.get("list_title", "") or "",
        )


def new_task(
    title: str,
    duration: int,
    priority: Priority | str = Priority.MEDIUM,
    splittable: bool = True,
    deadline: str | None = None,
    now: datetime | None = None,
) -> Task:
    """
    Build a new local task from user input.

    Raises ValueError on a blank title, non-positive duration or a
    deadline that cannot be parsed.
    """
    title = title.strip()
    if not title:
        raise ValueError("Task title must not be empty")
    if duration <= 0:
        raise ValueError("Task duration must be a positive number of minutes")

    deadline_date, deadline_time = parse_deadline(deadline)
    return Task(
        id=uuid.uuid4().hex[:12],
        title=title,
        duration=round_to_grid(duration),
        priority=Priority(priority),
        splittable=splittable,
        deadline_date=deadline_date,
        deadline_time=deadline_time,
        created_at=now or datetime.now(),
    )


def update_task(task: Task, **changes) -> Task:
    """Return a copy of task with changes applied, duration re-normalized."""
    if "title" in changes:
        changes["title"] = changes["title"].strip()
        if not changes["title"]:
            raise ValueError("Task title must not be empty")
    if "duration" in changes:
        if changes["duration"] <= 0:
            raise ValueError("Task duration must be a positive number of minutes")
        changes["duration"] = round_to_grid(changes["duration"])
    if "priority" in changes:
        changes["priority"] = Priority(changes["priority"])
    if "deadline" in changes:
        changes["deadline_date"], changes["deadline_time"] = parse_deadline(changes.pop("deadline"))
    return replace(task, **changes)


def parse_deadline(value: str | None) -> tuple[date | None, time | None]:
    """Parse 'YYYY-MM-DD' or 'YYYY-MM-DD HH:MM' (or with a 'T')."""
    if not value or not value.strip():
        return None, None
    text = value.strip().replace("T", " ")
    day, _, clock = text.partition(" ")
    try:
        deadline_date = date.fromisoformat(day)
        deadline_time = time.fromisoformat(clock.strip()) if clock.strip() else None
    except ValueError:
        raise ValueError(f"Invalid deadline '{value}', expected YYYY-MM-DD [HH:MM]")
    if deadline_time is not None and deadline_time.tzinfo is not None:
        # Deadlines are local wall-clock times
        raise ValueError(f"Invalid deadline '{value}', expected YYYY-MM-DD [HH:MM]")
    return deadline_date, deadline_time


def _deadline_key(task: Task) -> tuple[int, datetime]:
    # No deadline sorts after every real deadline
    deadline = task.deadline
    if deadline is None:
        return (1, datetime.max)
    return (0, deadline)


def rank_tasks(tasks: list[Task], strategy: RankStrategy | str) -> list[Task]:
    """
    Order tasks for allocation.

    deadline-first: deadline, then priority (high first), then creation time.
    priority-first: priority, then deadline, then creation time.
    The task id breaks any remaining tie so the order is total.

    Pure function - no I/O.
    """
    strategy = RankStrategy(strategy)

    def sort_key(t: Task) -> tuple:
        if strategy is RankStrategy.DEADLINE_FIRST:
            return (_deadline_key(t), -t.priority.weight, t.created_at, t.id)
        return (-t.priority.weight, _deadline_key(t), t.created_at, t.id)

    return sorted(tasks, key=sort_key)


_MINUTES_PATTERN = re.compile(
    r"(?:⏱\s*)?(\d{1,4})\s*(?:minutes?|mins?|m|分)(?![a-z])", re.IGNORECASE
)
_HOURS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?|h)(?![a-z])", re.IGNORECASE)
_TIMER_PATTERN = re.compile(r"⏱\s*(\d{1,4})")


def parse_duration_from_text(text: str | None) -> int | None:
    """
    Find a duration hint in free text, in minutes.

    Understands "30m", "45 min", "45分", "1h", "1.5h" and "⏱60".
    """
    if not text:
        return None
    m = _MINUTES_PATTERN.search(text)
    if m:
        return int(m.group(1))
    m = _HOURS_PATTERN.search(text)
    if m:
        return round(float(m.group(1)) * 60)
    m = _TIMER_PATTERN.search(text)
    if m:
        return int(m.group(1))
    return None
