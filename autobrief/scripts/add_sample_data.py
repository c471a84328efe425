#!/usr/bin/env python3
"""
Add sample activities for a user so the daily brief has something to show.

Usage:
    autobrief-sample-data                 # user 1, today
    autobrief-sample-data 2 2025-01-18    # user 2, given date
"""
import sys
from datetime import date, datetime, time

from autobrief.config import Settings
from autobrief.database import get_engine, get_session_factory, init_db, session_scope
from autobrief.logging_config import configure_logging
from autobrief.services.aggregation import parse_date
from autobrief.storage import ActivityStore


SAMPLE_ACTIVITIES = [
    {
        "provider": "github",
        "activity_type": "commit",
        "title": "Fix authentication bug",
        "description": "Resolved login issues for users",
        "at": time(10, 0),
        "metadata": None,
    },
    {
        "provider": "github",
        "activity_type": "pr",
        "title": "Add new dashboard feature",
        "description": "Implemented user dashboard with analytics",
        "at": time(14, 0),
        "metadata": None,
    },
    {
        "provider": "google_calendar",
        "activity_type": "calendar_event",
        "title": "Team standup meeting",
        "description": "Daily team sync",
        "at": time(9, 0),
        "metadata": {"duration": 30},
    },
]


def add_sample_data(store: ActivityStore, user_id: int, day: date) -> int:
    """Create the sample activities for a day. Returns how many were new."""
    created = 0
    for sample in SAMPLE_ACTIVITIES:
        external_id = f"sample-{sample['activity_type']}-{day.isoformat()}"
        if store.find_work_activity(user_id, sample["activity_type"], external_id):
            continue
        store.create_work_activity(
            user_id=user_id,
            provider=sample["provider"],
            activity_type=sample["activity_type"],
            title=sample["title"],
            description=sample["description"],
            external_id=external_id,
            timestamp=datetime.combine(day, sample["at"]),
            metadata=sample["metadata"],
        )
        created += 1
    return created


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    user_id = int(argv[0]) if len(argv) > 0 else 1
    day = parse_date(argv[1]) if len(argv) > 1 else date.today()

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    engine = get_engine(settings)
    init_db(engine)

    with session_scope(get_session_factory(settings, engine)) as db:
        created = add_sample_data(ActivityStore(db), user_id, day)

    print(f"✓ Added {created} sample activities for user {user_id} on {day.isoformat()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
