"""
Activity Aggregation

Pulls a user's activities for one calendar day and groups them by provider.

Rules:
- The day runs from 00:00:00.000 to 23:59:59.999 in server-local time; no
  timezone conversion is done, callers pass the date in the zone they want.
- Groups keep the store's ordering (newest first); nothing is re-sorted.
- Grouping key is the literal provider string, so new providers simply form
  a new group.
- No deduplication: two stored records for the same event stay two entries.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, List, Tuple

from autobrief.errors import InvalidArgument


TASK_ACTIVITY_TYPES = ("commit", "pr", "jira_issue")
MEETING_ACTIVITY_TYPES = ("calendar_event",)


@dataclass
class DayActivity:
    """Activities for one user on one date, plus their provider groups."""

    day: date
    activities: list
    groups: Dict[str, list] = field(default_factory=dict)

    @property
    def has_data(self) -> bool:
        return len(self.activities) > 0


def parse_date(value) -> date:
    """Parse a YYYY-MM-DD string (or pass through a date)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidArgument(f"Date must be a YYYY-MM-DD string, got {type(value).__name__}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidArgument(f"Invalid date {value!r}, expected YYYY-MM-DD")


def day_bounds(value) -> Tuple[datetime, datetime]:
    """Inclusive [start, end] datetimes covering the whole day."""
    day = parse_date(value)
    start = datetime.combine(day, time.min)
    # Millisecond precision: 23:59:59.999
    end = datetime.combine(day, time(23, 59, 59, 999000))
    return start, end


def group_by_provider(activities) -> Dict[str, list]:
    """Partition activities by provider, preserving input order."""
    groups: Dict[str, list] = {}
    for activity in activities:
        groups.setdefault(activity.provider, []).append(activity)
    return groups


def collect_day(store, user_id: int, value) -> DayActivity:
    """Fetch and group all of a user's activities on the given date."""
    day = parse_date(value)
    start, end = day_bounds(day)
    activities = store.get_work_activities_by_date_range(user_id, start, end)
    return DayActivity(day=day, activities=list(activities), groups=group_by_provider(activities))


def count_tasks(activities: List) -> int:
    return sum(1 for a in activities if a.activity_type in TASK_ACTIVITY_TYPES)


def count_meetings(activities: List) -> int:
    return sum(1 for a in activities if a.activity_type in MEETING_ACTIVITY_TYPES)


def count_commits(activities: List) -> int:
    return sum(1 for a in activities if a.activity_type == "commit")
