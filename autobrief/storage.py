"""
Activity Store

Repository over users, integrations, work activities and daily summaries.
The summary pipeline only reads from it; provider adapters write activities
through create_work_activity, which enforces the
(user_id, activity_type, external_id) dedup rule.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from autobrief.errors import IntegrationNotFound
from autobrief.models import DailySummary, Integration, User, UserProfile, WorkActivity


class ActivityStore:
    def __init__(self, db: Session):
        self.db = db

    # --- Users ---

    def get_user(self, user_id: int) -> Optional[User]:
        return (
            self.db.query(User)
            .options(selectinload(User.profile))
            .filter(User.id == user_id)
            .first()
        )

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email.ilike(email)).first()

    def create_user(self, username: str, email: str) -> User:
        user = User(username=username, email=email)
        self.db.add(user)
        self.db.flush()
        return user

    def get_user_profile(self, user_id: int) -> Optional[UserProfile]:
        return self.db.query(UserProfile).filter(UserProfile.user_id == user_id).first()

    def upsert_user_profile(self, user_id: int, **fields) -> UserProfile:
        profile = self.get_user_profile(user_id)
        if profile:
            for key, value in fields.items():
                setattr(profile, key, value)
        else:
            profile = UserProfile(user_id=user_id, **fields)
            self.db.add(profile)
        self.db.flush()
        return profile

    def get_all_users_with_integrations(self) -> List[User]:
        """Users owning at least one connected integration, by id."""
        return (
            self.db.query(User)
            .join(Integration, Integration.user_id == User.id)
            .filter(Integration.is_connected == True)  # noqa: E712
            .distinct()
            .order_by(User.id)
            .all()
        )

    # --- Integrations ---

    def get_user_integrations(self, user_id: int) -> List[Integration]:
        return (
            self.db.query(Integration)
            .filter(Integration.user_id == user_id)
            .order_by(Integration.id)
            .all()
        )

    def get_integration(self, integration_id: int) -> Optional[Integration]:
        return self.db.query(Integration).filter(Integration.id == integration_id).first()

    def get_integration_by_provider(self, user_id: int, provider: str) -> Optional[Integration]:
        return (
            self.db.query(Integration)
            .filter(Integration.user_id == user_id, Integration.provider == provider)
            .first()
        )

    def create_integration(self, user_id: int, provider: str, **fields) -> Integration:
        integration = Integration(user_id=user_id, provider=provider, **fields)
        self.db.add(integration)
        self.db.flush()
        return integration

    def update_integration(self, integration_id: int, **updates) -> Integration:
        integration = self.get_integration(integration_id)
        if not integration:
            raise IntegrationNotFound(integration_id)
        for key, value in updates.items():
            setattr(integration, key, value)
        integration.updated_at = datetime.utcnow()
        self.db.flush()
        return integration

    def delete_integration(self, integration_id: int) -> None:
        """Delete an integration together with the activities it produced."""
        self.db.query(WorkActivity).filter(
            WorkActivity.integration_id == integration_id
        ).delete(synchronize_session=False)
        self.db.query(Integration).filter(Integration.id == integration_id).delete(
            synchronize_session=False
        )
        self.db.flush()

    # --- Work activities ---

    def find_work_activity(
        self, user_id: int, activity_type: str, external_id: str
    ) -> Optional[WorkActivity]:
        return (
            self.db.query(WorkActivity)
            .filter(
                WorkActivity.user_id == user_id,
                WorkActivity.activity_type == activity_type,
                WorkActivity.external_id == external_id,
            )
            .first()
        )

    def create_work_activity(
        self,
        user_id: int,
        provider: str,
        activity_type: str,
        title: str,
        external_id: str,
        timestamp: datetime,
        integration_id: Optional[int] = None,
        description: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> WorkActivity:
        """Create an activity unless one already exists for the same
        (user_id, activity_type, external_id); the existing row is returned then.
        """
        existing = self.find_work_activity(user_id, activity_type, external_id)
        if existing:
            return existing

        activity = WorkActivity(
            user_id=user_id,
            integration_id=integration_id,
            provider=provider,
            activity_type=activity_type,
            title=title,
            description=description,
            external_id=external_id,
            extra=metadata,
            timestamp=timestamp,
        )
        self.db.add(activity)
        self.db.flush()
        return activity

    def get_user_work_activities(self, user_id: int, limit: int = 50) -> List[WorkActivity]:
        return (
            self.db.query(WorkActivity)
            .filter(WorkActivity.user_id == user_id)
            .order_by(WorkActivity.timestamp.desc(), WorkActivity.id.desc())
            .limit(limit)
            .all()
        )

    def get_work_activities_by_date_range(
        self, user_id: int, start: datetime, end: datetime
    ) -> List[WorkActivity]:
        """Activities with start <= timestamp <= end, newest first."""
        return (
            self.db.query(WorkActivity)
            .filter(
                WorkActivity.user_id == user_id,
                WorkActivity.timestamp >= start,
                WorkActivity.timestamp <= end,
            )
            .order_by(WorkActivity.timestamp.desc(), WorkActivity.id.desc())
            .all()
        )

    def clear_all_user_activities(self, user_id: int) -> int:
        deleted = (
            self.db.query(WorkActivity)
            .filter(WorkActivity.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return deleted

    # --- Daily summaries ---

    def create_daily_summary(
        self,
        user_id: int,
        date: str,
        summary: str,
        tasks_completed: int = 0,
        meetings_attended: int = 0,
        code_commits: int = 0,
        blockers: Optional[str] = None,
        metadata: Optional[dict] = None,
    ) -> DailySummary:
        daily_summary = DailySummary(
            user_id=user_id,
            date=date,
            summary=summary,
            tasks_completed=tasks_completed,
            meetings_attended=meetings_attended,
            code_commits=code_commits,
            blockers=blockers,
            extra=metadata,
        )
        self.db.add(daily_summary)
        self.db.flush()
        return daily_summary

    def get_daily_summary(self, user_id: int, date: str) -> Optional[DailySummary]:
        """Latest summary generated for the date."""
        return (
            self.db.query(DailySummary)
            .filter(DailySummary.user_id == user_id, DailySummary.date == date)
            .order_by(DailySummary.id.desc())
            .first()
        )

    def get_user_daily_summaries(self, user_id: int, limit: int = 30) -> List[DailySummary]:
        return (
            self.db.query(DailySummary)
            .filter(DailySummary.user_id == user_id)
            .order_by(DailySummary.date.desc(), DailySummary.id.desc())
            .limit(limit)
            .all()
        )
