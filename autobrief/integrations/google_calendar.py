"""
Google Calendar sync adapter.

Pulls events from every calendar in the user's list, from 30 days ago to 7
days ahead. Holiday calendars and holiday events are skipped. Event duration
is stored in minutes under metadata["duration"].
"""
from datetime import datetime, time, timedelta
from typing import Optional
from urllib.parse import quote

from autobrief.errors import ProviderSyncError
from autobrief.integrations.base import ProviderAdapter, parse_timestamp
from autobrief.logging_config import get_logger

logger = get_logger(__name__)

PAST_DAYS = 30
FUTURE_DAYS = 7
HOLIDAY_KEYWORDS = ("holiday", "bakrid", "eid", "diwali", "christmas", "new year")


def is_holiday(calendar_name: str, event_title: str) -> bool:
    if "holiday" in (calendar_name or "").lower():
        return True
    title = (event_title or "").lower()
    return any(keyword in title for keyword in HOLIDAY_KEYWORDS)


def event_duration_minutes(event) -> Optional[int]:
    start_info = event.get("start") or {}
    end_info = event.get("end") or {}
    start = parse_timestamp(start_info.get("dateTime") or start_info.get("date"))
    end = parse_timestamp(end_info.get("dateTime") or end_info.get("date"))
    if not start or not end:
        return None
    return round((end - start).total_seconds() / 60)


class GoogleCalendarAdapter(ProviderAdapter):
    provider = "google_calendar"

    @property
    def base_url(self) -> str:
        return self.settings.google_calendar_api_url

    def sync_user_data(self, integration) -> int:
        if not integration.access_token:
            raise ProviderSyncError(
                self.provider, "No access token available for Google Calendar integration"
            )

        today = datetime.now().date()
        time_min = datetime.combine(today - timedelta(days=PAST_DAYS), time.min)
        time_max = datetime.combine(today + timedelta(days=FUTURE_DAYS), time.max)

        calendars = self.request(integration, "/users/me/calendarList").get("items", [])
        logger.info(f"Found {len(calendars)} calendars for integration {integration.id}")

        created = 0
        for calendar in calendars:
            try:
                created += self.sync_calendar(integration, calendar, time_min, time_max)
            except ProviderSyncError as e:
                logger.error(f"Error syncing calendar {calendar.get('summary')}: {e}")

        self.store.update_integration(
            integration.id,
            is_connected=True,
            extra={
                **(integration.extra or {}),
                "calendars": [
                    {
                        "id": cal.get("id"),
                        "name": cal.get("summary"),
                        "primary": cal.get("primary", False),
                        "accessRole": cal.get("accessRole"),
                    }
                    for cal in calendars
                ],
            },
        )
        return created

    def sync_calendar(self, integration, calendar, time_min: datetime, time_max: datetime) -> int:
        events = self.request(
            integration,
            f"/calendars/{quote(calendar['id'], safe='')}/events",
            params={
                "timeMin": time_min.astimezone().isoformat(),
                "timeMax": time_max.astimezone().isoformat(),
                "orderBy": "startTime",
                "singleEvents": "true",
                "maxResults": 50,
            },
        ).get("items", [])

        created = 0
        for event in events:
            start_info = event.get("start") or {}
            start_raw = start_info.get("dateTime") or start_info.get("date")
            if not start_raw:
                continue
            if is_holiday(calendar.get("summary"), event.get("summary")):
                continue

            duration = event_duration_minutes(event)
            end_info = event.get("end") or {}
            if self.record_activity(
                integration,
                "calendar_event",
                event["id"],
                title=event.get("summary") or "Untitled Event",
                description=event.get("description")
                or (f"Calendar event ({duration} minutes)" if duration else "Calendar event"),
                timestamp=parse_timestamp(start_raw),
                metadata={
                    "eventId": event["id"],
                    "startTime": start_raw,
                    "endTime": end_info.get("dateTime") or end_info.get("date"),
                    "duration": duration,
                    "location": event.get("location"),
                    "attendees": [
                        {"email": a.get("email"), "responseStatus": a.get("responseStatus")}
                        for a in event.get("attendees", [])
                    ],
                    "htmlLink": event.get("htmlLink"),
                    "status": event.get("status"),
                    "calendarName": calendar.get("summary"),
                },
            ):
                created += 1
        return created
