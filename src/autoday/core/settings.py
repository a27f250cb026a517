"""Day settings and their validation - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date

from .tasks import RankStrategy
from .timegrid import DAY_MINUTES, format_minutes, parse_hhmm

MIN_WINDOW_MINUTES = 60


class ConfigurationError(ValueError):
    """Raised when day settings cannot be scheduled against."""

    pass


@dataclass
class BreakWindow:
    """A fixed break (e.g. lunch) inside the day."""

    start: int
    end: int
    title: str = "Break"


@dataclass
class Settings:
    """Settings for one day's schedule. Times are minutes since midnight."""

    date: date = field(default_factory=date.today)
    day_start: int = 7 * 60
    day_end: int = 23 * 60
    buffer: int = 5
    strategy: RankStrategy = RankStrategy.PRIORITY_FIRST
    break_window: BreakWindow | None = None
    import_default_duration: int = 30

    @property
    def window_minutes(self) -> int:
        return self.day_end - self.day_start

    def validate(self) -> None:
        """Raise ConfigurationError if the settings are unusable."""
        if not (0 <= self.day_start <= DAY_MINUTES and 0 <= self.day_end <= DAY_MINUTES):
            raise ConfigurationError("Day start and end must lie within 00:00-24:00")
        if self.day_end <= self.day_start:
            raise ConfigurationError("End of day must be after start of day")
        if self.window_minutes < MIN_WINDOW_MINUTES:
            raise ConfigurationError(
                f"Day window must be at least {MIN_WINDOW_MINUTES} minutes "
                f"({format_minutes(self.day_start)}-{format_minutes(self.day_end)})"
            )
        if self.buffer < 0:
            raise ConfigurationError("Buffer must not be negative")
        if self.break_window and self.break_window.end <= self.break_window.start:
            raise ConfigurationError("Break end must be after break start")
        if self.import_default_duration < 5:
            raise ConfigurationError("Default import duration must be at least 5 minutes")

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "start": format_minutes(self.day_start),
            "end": format_minutes(self.day_end),
            "buffer": self.buffer,
            "strategy": self.strategy.value,
            "break": (
                {
                    "start": format_minutes(self.break_window.start),
                    "end": format_minutes(self.break_window.end),
                    "title": self.break_window.title,
                }
                if self.break_window
                else None
            ),
            "import_default_duration": self.import_default_duration,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create Settings from stored form. Raises on malformed data."""
        defaults = cls()
        break_data = data.get("break")
        break_window = None
        if break_data:
            break_window = BreakWindow(
                start=parse_hhmm(break_data["start"]),
                end=parse_hhmm(break_data["end"]),
                title=break_data.get("title") or "Break",
            )
        return cls(
            date=date.fromisoformat(data["date"]) if data.get("date") else defaults.date,
            day_start=parse_hhmm(data.get("start", "07:00")),
            day_end=parse_hhmm(data.get("end", "23:00")),
            buffer=int(data.get("buffer", defaults.buffer)),
            strategy=RankStrategy(data.get("strategy", defaults.strategy.value)),
            break_window=break_window,
            import_default_duration=int(
                data.get("import_default_duration", defaults.import_default_duration)
            ),
        )
