from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from autobrief.database import Base

TITLE_MAX_LENGTH = 500


class WorkActivity(Base):
    """One normalized unit of tracked work (commit, PR, meeting, message, issue).

    Records are append-only: sync adapters create them, nothing updates them.
    """

    __tablename__ = "work_activities"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    integration_id = Column(
        Integer,
        ForeignKey("integrations.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    provider = Column(String(50), nullable=False)
    activity_type = Column(String(50), nullable=False)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=True)
    external_id = Column(String(255), nullable=False)
    # "metadata" is reserved on declarative classes
    extra = Column("metadata", JSON, nullable=True)
    timestamp = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="work_activities")
    integration = relationship("Integration", back_populates="work_activities")

    __table_args__ = (
        Index("ix_work_activities_user_timestamp", "user_id", "timestamp"),
        Index("ix_work_activities_dedup", "user_id", "activity_type", "external_id"),
    )

    def __repr__(self):
        return f"<WorkActivity {self.provider}/{self.activity_type}: {self.title}>"
