"""The day's current schedule - the single owned, mutable schedule state."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from .allocator import Allocation, Block, FixedEvent, Unplaced, allocate, build_fixed_blocks, sort_blocks
from .settings import Settings
from .tasks import Task
from .timegrid import format_minutes

logger = logging.getLogger(__name__)


@dataclass
class ScheduleStore:
    """
    Blocks and unplaced remainders for one day.

    Regeneration replaces every block, rebuilding the fixed ones (break,
    imported events) from the settings and the day's events.
    """

    settings: Settings
    blocks: list[Block] = field(default_factory=list)
    unplaced: list[Unplaced] = field(default_factory=list)
    generated_at: datetime | None = None

    def find(self, block_id: str) -> Block | None:
        return next((b for b in self.blocks if b.id == block_id), None)

    def regenerate(self, tasks: list[Task], events: list[FixedEvent], now: datetime | None = None) -> Allocation:
        """
        Rerun allocation from scratch and replace the stored schedule.

        Fixed blocks are rebuilt from the current break window and the
        given events, so settings changes always take effect. Manual
        moves are not preserved. Raises ConfigurationError before
        touching the store.
        """
        fixed = build_fixed_blocks(self.settings, events)
        result = allocate(tasks, self.settings, fixed)
        self.blocks = result.blocks
        self.unplaced = result.unplaced
        self.generated_at = now or datetime.now()
        logger.info(
            f"Generated schedule for {self.settings.date}: "
            f"{len(self.blocks)} blocks, {len(self.unplaced)} unplaced"
        )
        return result

    def remove_block(self, block_id: str) -> bool:
        """Remove a block. Returns False if it does not exist."""
        block = self.find(block_id)
        if block is None:
            return False
        self.blocks.remove(block)
        return True

    def toggle_done(self, block_id: str) -> Block | None:
        """Flip a block's done flag. Returns the block, or None if missing."""
        block = self.find(block_id)
        if block is None:
            return None
        block.done = not block.done
        return block

    def remove_task(self, task_id: str) -> int:
        """Drop every block and unplaced entry of a deleted task."""
        before = len(self.blocks)
        self.blocks = [b for b in self.blocks if b.task_id != task_id]
        self.unplaced = [u for u in self.unplaced if u.task_id != task_id]
        return before - len(self.blocks)

    def replace_block(self, block: Block) -> None:
        """Swap in an updated copy of a block, keeping the list sorted."""
        self.blocks = sort_blocks([block if b.id == block.id else b for b in self.blocks])

    def to_dict(self) -> dict:
        return {
            "date": self.settings.date.isoformat(),
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
            "settings": self.settings.to_dict(),
            "blocks": [b.to_dict() for b in self.blocks],
            "unplaced": [u.to_dict() for u in self.unplaced],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ScheduleStore":
        generated_at = data.get("generated_at")
        return cls(
            settings=Settings.from_dict(data["settings"]),
            blocks=sort_blocks([Block.from_dict(b) for b in data.get("blocks", [])]),
            unplaced=[Unplaced.from_dict(u) for u in data.get("unplaced", [])],
            generated_at=datetime.fromisoformat(generated_at) if generated_at else None,
        )


def format_block_line(block: Block) -> str:
    """
    Format a single block for display.

    Pure function - no I/O.
    """
    marker = "x" if block.done else " "
    label = block.kind.value
    if block.fixed:
        label = f"{label}, fixed"
    return f"[{marker}] {format_minutes(block.start)}-{format_minutes(block.end)} {block.title} ({label}) #{block.id}"


def format_schedule(store: ScheduleStore) -> str:
    """Format the whole schedule as plain text."""
    settings = store.settings
    header = (
        f"Schedule for {settings.date.strftime('%A, %b %d')} "
        f"({format_minutes(settings.day_start)}-{format_minutes(settings.day_end)}, "
        f"buffer {settings.buffer} min)"
    )
    lines = [header, ""]
    lines.extend(format_block_line(b) for b in store.blocks)
    if not store.blocks:
        lines.append("No blocks scheduled.")
    if store.unplaced:
        lines.append("")
        lines.append("Unplaced:")
        lines.extend(f"- {u.title} ({u.remaining} min left)" for u in store.unplaced)
    return "\n".join(lines)
