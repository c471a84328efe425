"""
Daily Summary Model

Stores the generated brief for one user on one date. Regenerating a brief
adds a new row; the latest row for a date is the current one.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from autobrief.database import Base


class DailySummary(Base):
    __tablename__ = "daily_summaries"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    summary = Column(Text, nullable=False)
    tasks_completed = Column(Integer, nullable=False, default=0)
    meetings_attended = Column(Integer, nullable=False, default=0)
    code_commits = Column(Integer, nullable=False, default=0)
    blockers = Column(Text, nullable=True)
    extra = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="daily_summaries")

    def __repr__(self):
        return f"<DailySummary user:{self.user_id} {self.date}>"
