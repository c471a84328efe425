from datetime import datetime
from sqlalchemy import Boolean, Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from autobrief.database import Base


class Integration(Base):
    """A user's connected account on one third-party provider."""

    __tablename__ = "integrations"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider = Column(String(50), nullable=False)  # github, slack, google_calendar, jira, notion
    is_connected = Column(Boolean, nullable=False, default=False)
    access_token = Column(Text, nullable=True)
    refresh_token = Column(Text, nullable=True)
    token_expires_at = Column(DateTime, nullable=True)
    provider_user_id = Column(String(255), nullable=True)
    provider_username = Column(String(255), nullable=True)
    # "metadata" is reserved on declarative classes
    extra = Column("metadata", JSON, nullable=True)
    last_sync_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user = relationship("User", back_populates="integrations")
    work_activities = relationship(
        "WorkActivity", back_populates="integration", cascade="all, delete-orphan"
    )

    def __repr__(self):
        state = "connected" if self.is_connected else "disconnected"
        return f"<Integration {self.provider} user:{self.user_id} {state}>"
