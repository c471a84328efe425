#!/usr/bin/env python3
"""
Run the daily summary batch once.

Usage:
    # Run for today (intended for a cron entry: 0 20 * * *)
    autobrief-daily

    # Re-run a specific date for selected users
    autobrief-daily --date 2025-01-18 --user-id 1 --user-id 3

    # Show when the next scheduled run is due
    autobrief-daily --status
"""
import argparse
import json
import sys

from autobrief.background_jobs import DailySummaryJob, schedule_status
from autobrief.config import Settings
from autobrief.database import get_engine, get_session_factory, init_db
from autobrief.email_service import EmailService
from autobrief.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and email daily briefs")
    parser.add_argument("--date", help="Date to summarize (YYYY-MM-DD), defaults to today")
    parser.add_argument(
        "--user-id", type=int, action="append", dest="user_ids", help="Only process this user"
    )
    parser.add_argument("--no-email", action="store_true", help="Skip sending emails")
    parser.add_argument("--status", action="store_true", help="Print schedule status and exit")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    if args.status:
        print(json.dumps(schedule_status(), indent=2))
        return 0

    engine = get_engine(settings)
    init_db(engine)

    job = DailySummaryJob(
        get_session_factory(settings, engine),
        settings,
        email_service=None if args.no_email else EmailService(settings),
    )
    report = job.run(today=args.date, user_ids=args.user_ids)

    print(f"\n📊 Daily summaries for {report.date}")
    print(f"✅ Processed: {len(report.processed)}")
    print(f"📧 Emails sent: {report.emails_sent}")
    if report.failed:
        print(f"❌ Failed users: {', '.join(str(uid) for uid in report.failed)}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
