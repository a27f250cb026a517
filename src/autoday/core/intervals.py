"""Free-time bookkeeping for a single day - no I/O dependencies."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Interval:
    """A half-open [start, end) range in minutes since midnight."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


class IntervalSet:
    """
    The day's free time as a sorted list of non-touching intervals.

    Everything outside the free intervals is occupied. The buffer is
    applied when searching: a gap never starts sooner than `buffer`
    minutes after the end of an occupied region.
    """

    def __init__(self, day_start: int, day_end: int, buffer: int = 0):
        self.day_start = day_start
        self.day_end = day_end
        self.buffer = buffer
        self.intervals: list[Interval] = []
        if day_end > day_start:
            self.intervals.append(Interval(day_start, day_end))

    def carve(self, busy_start: int, busy_end: int) -> None:
        """Remove [busy_start, busy_end) from the free intervals."""
        if busy_end <= busy_start:
            return

        result = []
        for iv in self.intervals:
            if busy_end <= iv.start or busy_start >= iv.end:
                result.append(iv)
                continue
            if busy_start > iv.start:
                result.append(Interval(iv.start, busy_start))
            if busy_end < iv.end:
                result.append(Interval(busy_end, iv.end))

        self.intervals = sorted(result, key=lambda iv: iv.start)

    def first_gap(self, n: int) -> Interval | None:
        """
        Earliest usable free span at least n minutes long, or None.

        Walks the intervals with a cursor that starts at day start and is
        pushed to (end of occupied region + buffer) whenever an occupied
        region is crossed. The span runs from the cursor to the end of
        its free interval.
        """
        if n <= 0:
            return None

        cursor = self.day_start
        prev_end = self.day_start
        for iv in self.intervals:
            if iv.start > prev_end:
                cursor = max(cursor, iv.start + self.buffer)
            else:
                cursor = max(cursor, iv.start)
            if cursor + n <= iv.end:
                return Interval(cursor, iv.end)
            prev_end = iv.end
        return None

    def first_gap_of_size(self, n: int) -> int | None:
        """Earliest start where n free minutes fit, or None."""
        gap = self.first_gap(n)
        return gap.start if gap else None
