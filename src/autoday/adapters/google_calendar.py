"""Reads the day's fixed events from Google Calendar."""

import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from autoday.core.allocator import FixedEvent
from autoday.core.timegrid import DAY_MINUTES

from .google_auth import AuthenticationError, load_credentials

logger = logging.getLogger(__name__)

PRIMARY_CALENDAR = "primary"


def _parse_api_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _local_minutes(dt: datetime, target_date: date) -> int:
    """Minutes since midnight of target_date, clipped to [0, 24:00]."""
    if dt.date() < target_date:
        return 0
    if dt.date() > target_date:
        return DAY_MINUTES
    return dt.hour * 60 + dt.minute


class GoogleCalendarAdapter:
    """
    Timed events of one local day, as fixed events.

    Implements CalendarRepository protocol. Calendars are picked by
    display name; with no names configured the primary calendar is used.
    """

    def __init__(self, config_folder: str, calendars: list[str] | None = None, timezone: str = "Asia/Tokyo"):
        self.config_folder = config_folder
        self.calendars = calendars or []
        self.timezone = timezone

    def _build_service(self):
        from googleapiclient.discovery import build

        return build("calendar", "v3", credentials=load_credentials(self.config_folder))

    def _calendar_ids(self, service) -> list[str]:
        if not self.calendars:
            return [PRIMARY_CALENDAR]

        listing = service.calendarList().list().execute().get("items", [])
        by_name = {entry["summary"]: entry["id"] for entry in listing}
        missing = [name for name in self.calendars if name not in by_name]
        if missing:
            logger.warning(f"Unknown calendar(s) skipped: {', '.join(missing)}")
        return [by_name[name] for name in self.calendars if name in by_name] or [PRIMARY_CALENDAR]

    def fetch_day(self, target_date: date) -> list[FixedEvent]:
        """
        Fetch timed events for target_date.

        Auth problems propagate so the user can re-run 'autoday auth';
        any other API failure is logged and yields no events.
        """
        try:
            return self._fetch(target_date)
        except AuthenticationError:
            raise
        except Exception as e:
            logger.warning(f"Google Calendar fetch failed for {target_date}: {e}")
            return []

    def _fetch(self, target_date: date) -> list[FixedEvent]:
        service = self._build_service()
        tz = ZoneInfo(self.timezone)
        midnight = datetime.combine(target_date, datetime.min.time(), tzinfo=tz)
        query = {
            "timeMin": midnight.isoformat(),
            "timeMax": (midnight + timedelta(days=1)).isoformat(),
            "singleEvents": True,
            "orderBy": "startTime",
            "maxResults": 2500,
            "timeZone": self.timezone,
        }

        events = []
        for calendar_id in self._calendar_ids(service):
            response = service.events().list(calendarId=calendar_id, **query).execute()
            converted = (self._to_fixed_event(item, target_date, tz) for item in response.get("items", []))
            events.extend(e for e in converted if e is not None)

        return sorted(events, key=lambda e: (e.start_minutes, e.end_minutes, e.id))

    def _to_fixed_event(self, item: dict, target_date: date, tz: ZoneInfo) -> FixedEvent | None:
        start_raw = item.get("start", {}).get("dateTime")
        end_raw = item.get("end", {}).get("dateTime")
        # All-day events only carry "date" and do not block time
        if not start_raw or not end_raw:
            return None

        try:
            start = _parse_api_datetime(start_raw).astimezone(tz)
            end = _parse_api_datetime(end_raw).astimezone(tz)
        except ValueError as e:
            logger.debug(f"Skipping malformed event {item.get('id')}: {e}")
            return None

        start_minutes = _local_minutes(start, target_date)
        end_minutes = _local_minutes(end, target_date)
        if end_minutes <= start_minutes:
            return None

        return FixedEvent(
            id=item.get("id", f"{start_minutes}-{end_minutes}"),
            title=item.get("summary") or "(busy)",
            start_minutes=start_minutes,
            end_minutes=end_minutes,
        )
