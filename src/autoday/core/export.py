"""iCalendar export of a schedule - no I/O dependencies."""

from datetime import datetime

from .schedule import ScheduleStore
from .timegrid import minutes_to_datetime

PRODID = "-//AutoDay//autoday//EN"
ICS_DATETIME = "%Y%m%dT%H%M%S"


def schedule_to_ics(store: ScheduleStore, now: datetime | None = None) -> str:
    """
    Render every non-fixed block as a VEVENT.

    Times are local wall-clock values without a timezone. Lines are
    joined with CRLF.

    Pure function - no I/O.
    """
    stamp = (now or datetime.now()).strftime(ICS_DATETIME)
    day = store.settings.date

    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", f"PRODID:{PRODID}"]
    for block in store.blocks:
        if block.fixed:
            continue
        lines.extend(
            [
                "BEGIN:VEVENT",
                f"UID:{block.id}@autoday",
                f"DTSTAMP:{stamp}",
                f"DTSTART:{minutes_to_datetime(day, block.start).strftime(ICS_DATETIME)}",
                f"DTEND:{minutes_to_datetime(day, block.end).strftime(ICS_DATETIME)}",
                f"SUMMARY:{block.title}",
                "END:VEVENT",
            ]
        )
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines)
