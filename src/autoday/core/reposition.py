"""Manual block moves (drag) with snapping and overlap checks - no I/O."""

from dataclasses import dataclass, replace
from enum import Enum

from .allocator import Block
from .schedule import ScheduleStore
from .timegrid import format_minutes, snap_to_grid


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTED = "committed"
    REVERTED = "reverted"


@dataclass
class MoveResult:
    """Outcome of a drag. A revert is a normal result, not an error."""

    committed: bool
    block: Block | None
    reason: str = ""


class DragGesture:
    """
    One drag of one block: idle -> dragging -> committed | reverted.

    The store is only written on a successful end(); while dragging the
    candidate position lives on the gesture.
    """

    def __init__(self, store: ScheduleStore):
        self.store = store
        self.state = DragState.IDLE
        self.block: Block | None = None
        self.original: tuple[int, int] | None = None
        self.candidate: tuple[int, int] | None = None

    def begin(self, block_id: str) -> bool:
        """Start dragging. Refused for unknown or fixed blocks."""
        if self.state is DragState.DRAGGING:
            return False
        block = self.store.find(block_id)
        if block is None or block.fixed:
            return False
        self.block = block
        self.original = (block.start, block.end)
        self.candidate = self.original
        self.state = DragState.DRAGGING
        return True

    def update(self, delta_minutes: float) -> tuple[int, int]:
        """Move the candidate by a pointer displacement, snapped and clamped."""
        if self.state is not DragState.DRAGGING:
            raise RuntimeError("No drag in progress")
        settings = self.store.settings
        orig_start, orig_end = self.original
        duration = orig_end - orig_start

        start = orig_start + snap_to_grid(delta_minutes)
        if start < settings.day_start:
            start = settings.day_start
        if start + duration > settings.day_end:
            start = settings.day_end - duration

        self.candidate = (start, start + duration)
        return self.candidate

    def end(self) -> MoveResult:
        """Commit the candidate if it is valid, otherwise revert."""
        if self.state is not DragState.DRAGGING:
            raise RuntimeError("No drag in progress")

        start, end = self.candidate
        moved = replace(self.block, start=start, end=end)
        reason = self._rejection(moved)
        if reason:
            return self._revert(reason)

        self.store.replace_block(moved)
        self.block = moved
        self.state = DragState.COMMITTED
        return MoveResult(committed=True, block=moved)

    def cancel(self) -> MoveResult:
        if self.state is not DragState.DRAGGING:
            raise RuntimeError("No drag in progress")
        return self._revert("Move cancelled")

    def _rejection(self, moved: Block) -> str:
        settings = self.store.settings
        if not (settings.day_start <= moved.start < moved.end <= settings.day_end):
            return "Block would leave the day window"
        for other in self.store.blocks:
            if other.id != moved.id and moved.overlaps(other):
                return (
                    f"Overlaps '{other.title}' "
                    f"({format_minutes(other.start)}-{format_minutes(other.end)})"
                )
        return ""

    def _revert(self, reason: str) -> MoveResult:
        self.candidate = self.original
        self.state = DragState.REVERTED
        return MoveResult(committed=False, block=self.block, reason=reason)


def move_block(store: ScheduleStore, block_id: str, new_start: int) -> MoveResult:
    """Move a block to new_start as a single drag gesture."""
    gesture = DragGesture(store)
    if not gesture.begin(block_id):
        block = store.find(block_id)
        if block is None:
            return MoveResult(committed=False, block=None, reason=f"No block '{block_id}'")
        return MoveResult(committed=False, block=block, reason="Fixed blocks cannot be moved")
    gesture.update(new_start - gesture.original[0])
    return gesture.end()
