"""
Daily summary batch job.

Meant to be triggered once a day (8 PM) by an external scheduler through the
autobrief-daily command. For each user with connected integrations, in
order:
1. Sync every connected integration that has an adapter
2. Generate today's brief
3. Store it as a DailySummary
4. Email it, and post it to the user's Slack channel when Slack is connected

Each user runs in its own session, and each integration sync in its own
savepoint, so a failing sync only loses that integration's writes. Any other
error for one user is logged with the user id and the loop moves on.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from autobrief.config import Settings
from autobrief.database import session_scope
from autobrief.errors import ProviderSyncError
from autobrief.integrations import SlackAdapter, get_adapter
from autobrief.logging_config import get_logger
from autobrief.services.daily_summary_service import generate_daily_summary, save_daily_summary
from autobrief.slack_format import to_slack_markdown
from autobrief.storage import ActivityStore

logger = get_logger(__name__)

DAILY_RUN_HOUR = 20
CRON_SCHEDULE = "0 20 * * *"


@dataclass
class BatchUser:
    id: int
    email: str


DEMO_USER = BatchUser(id=1, email="demo@autobrief.dev")


@dataclass
class BatchReport:
    date: str
    processed: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)
    emails_sent: int = 0
    slack_posts: int = 0


def next_run_time(now: datetime) -> datetime:
    """Next 8 PM at or after now (tomorrow once 8 PM has passed)."""
    next_run = now.replace(hour=DAILY_RUN_HOUR, minute=0, second=0, microsecond=0)
    if now.hour >= DAILY_RUN_HOUR:
        next_run += timedelta(days=1)
    return next_run


def schedule_status(now: Optional[datetime] = None) -> dict:
    now = now or datetime.now()
    next_run = next_run_time(now)
    remaining = next_run - now
    hours, remainder = divmod(int(remaining.total_seconds()), 3600)
    minutes = remainder // 60
    return {
        "currentTime": now.isoformat(),
        "nextRunTime": next_run.isoformat(),
        "timeUntilNextRun": {
            "hours": hours,
            "minutes": minutes,
            "formatted": f"{hours}h {minutes}m",
        },
        "schedule": CRON_SCHEDULE,
    }


class DailySummaryJob:
    """Runs the daily sync / summarize / deliver pass over all users."""

    def __init__(
        self,
        session_factory,
        settings: Settings,
        email_service=None,
        adapter_factory: Callable = get_adapter,
        slack_adapter_class=SlackAdapter,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.session_factory = session_factory
        self.settings = settings
        self.email_service = email_service
        self.adapter_factory = adapter_factory
        self.slack_adapter_class = slack_adapter_class
        self.clock = clock

    def load_users(self, user_ids: Optional[List[int]] = None) -> List[BatchUser]:
        with session_scope(self.session_factory) as db:
            users = ActivityStore(db).get_all_users_with_integrations()
            batch = [BatchUser(id=u.id, email=u.email) for u in users]

        if user_ids:
            batch = [u for u in batch if u.id in user_ids]
        if not batch and not user_ids:
            logger.info("No users with integrations found. Using demo user...")
            batch = [DEMO_USER]
        return batch

    def run(self, today: Optional[str] = None, user_ids: Optional[List[int]] = None) -> BatchReport:
        today = today or self.clock().date().isoformat()
        logger.info(f"Starting daily summary generation for {today}...")

        report = BatchReport(date=today)
        users = self.load_users(user_ids)
        logger.info(f"Found {len(users)} users to process")

        for user in users:
            try:
                summary = self.process_user(user, today)
            except Exception as e:
                logger.error(f"Error processing user {user.id}: {e}")
                report.failed.append(user.id)
                continue

            report.processed.append(user.id)
            if self.send_email(user, summary, today):
                report.emails_sent += 1
            if self.post_to_slack(user, summary):
                report.slack_posts += 1
            logger.info(f"Daily summary completed for user {user.id}")

        logger.info(
            f"Daily summary generation finished: {len(report.processed)} processed, "
            f"{len(report.failed)} failed"
        )
        return report

    def process_user(self, user: BatchUser, today: str) -> str:
        """Sync, generate and store one user's brief. Returns the brief text."""
        logger.info(f"Processing daily summary for user {user.id}")
        with session_scope(self.session_factory) as db:
            store = ActivityStore(db)
            self.sync_all_integrations(store, user.id)
            summary = generate_daily_summary(store, user.id, today)
            save_daily_summary(store, user.id, today, summary)
        return summary

    def sync_all_integrations(self, store: ActivityStore, user_id: int) -> int:
        """Sync each connected integration; failures are logged and skipped."""
        synced = 0
        for integration in store.get_user_integrations(user_id):
            if not integration.is_connected:
                continue

            adapter = self.adapter_factory(integration.provider, store, self.settings)
            if adapter is None:
                continue

            try:
                with store.db.begin_nested():
                    adapter.sync_user_data(integration)
                    store.update_integration(integration.id, last_sync_at=datetime.utcnow())
            except Exception as e:
                logger.error(f"Error syncing {integration.provider} for user {user_id}: {e}")
                # The savepoint rollback also undid the adapter's disconnect
                if isinstance(e, ProviderSyncError) and e.disconnected:
                    store.update_integration(
                        integration.id, is_connected=False, last_sync_at=datetime.utcnow()
                    )
                continue
            synced += 1
        return synced

    def send_email(self, user: BatchUser, summary: str, today: str) -> bool:
        if self.email_service is None:
            return False
        try:
            result = self.email_service.send_daily_summary(user.email, summary, today)
        except Exception as e:
            logger.error(f"Failed to send email to {user.email}: {e}")
            return False
        return result is not None

    def post_to_slack(self, user: BatchUser, summary: str) -> bool:
        """Post the brief to the user's Slack channel if Slack is connected."""
        try:
            with session_scope(self.session_factory) as db:
                store = ActivityStore(db)
                integration = store.get_integration_by_provider(user.id, "slack")
                if integration is None or not integration.is_connected:
                    return False
                adapter = self.slack_adapter_class(store, self.settings)
                adapter.post_message(integration, to_slack_markdown(summary))
        except Exception as e:
            logger.error(f"Failed to post daily summary to Slack for user {user.id}: {e}")
            return False
        logger.info(f"Daily summary posted to Slack for user {user.id}")
        return True
