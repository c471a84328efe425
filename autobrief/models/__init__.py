from autobrief.models.user import User, UserProfile
from autobrief.models.integration import Integration
from autobrief.models.work_activity import WorkActivity
from autobrief.models.daily_summary import DailySummary

__all__ = [
    "User",
    "UserProfile",
    "Integration",
    "WorkActivity",
    "DailySummary",
]
