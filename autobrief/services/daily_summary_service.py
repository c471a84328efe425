"""
Daily Summary Service

Entry point for the deterministic brief: aggregate the day's activities,
apply the filter, then format with the chosen tone.

Outcomes:
1. No activities at all for the date => fixed example brief
2. Filter leaves nothing => "No activities found matching filter: <filter>"
3. Otherwise => formatted brief
Store failures are logged and turned into a short apology string here, at
the outer boundary. Malformed arguments raise InvalidArgument.
"""

from typing import Optional

from autobrief.errors import InvalidArgument
from autobrief.logging_config import get_logger
from autobrief.services.aggregation import (
    collect_day,
    count_commits,
    count_meetings,
    count_tasks,
    day_bounds,
    group_by_provider,
    parse_date,
)
from autobrief.services.summary_formatter import format_daily_brief, format_example_brief
from autobrief.services.tone_policy import (
    TONES,
    apply_filter,
    no_match_message,
    resolve_filter,
    resolve_tone,
)

logger = get_logger(__name__)

SUMMARY_UNAVAILABLE = "Unable to generate summary at this time."


def validate_user_id(user_id) -> int:
    if isinstance(user_id, bool) or not isinstance(user_id, int) or user_id <= 0:
        raise InvalidArgument(f"user_id must be a positive integer, got {user_id!r}")
    return user_id


def generate_daily_summary(
    store,
    user_id: int,
    date: str,
    tone: Optional[str] = None,
    filter: Optional[str] = None,
) -> str:
    """
    Generate the Markdown daily brief for a user.

    Args:
        store: ActivityStore to read from
        user_id: Owning user
        date: Day to summarize (YYYY-MM-DD)
        tone: friendly / casual / formal / professional (default professional)
        filter: all / blockers / achievements / meetings / code (default all)

    Returns:
        The brief text. Never raises for store failures.
    """
    validate_user_id(user_id)
    day = parse_date(date)
    tone_preset = TONES[resolve_tone(tone)]
    summary_filter = resolve_filter(filter)

    try:
        day_activity = collect_day(store, user_id, day)
    except Exception as e:
        logger.error(f"Error generating daily summary for user {user_id} on {day}: {e}")
        return SUMMARY_UNAVAILABLE

    if not day_activity.has_data:
        return format_example_brief(day)

    selected = apply_filter(day_activity.activities, summary_filter)
    if not selected:
        return no_match_message(summary_filter)

    return format_daily_brief(group_by_provider(selected), day, tone_preset)


def save_daily_summary(store, user_id: int, date: str, summary: str):
    """Persist a generated brief with the day's task/meeting/commit counts."""
    validate_user_id(user_id)
    day = parse_date(date)
    start, end = day_bounds(day)
    activities = store.get_work_activities_by_date_range(user_id, start, end)

    return store.create_daily_summary(
        user_id=user_id,
        date=day.isoformat(),
        summary=summary,
        tasks_completed=count_tasks(activities),
        meetings_attended=count_meetings(activities),
        code_commits=count_commits(activities),
        blockers=None,
    )
