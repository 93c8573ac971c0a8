"""System models."""
import uuid
from sqlalchemy import Column, String, Integer, DateTime, Text, Uuid

from steamwatch.database import Base
from steamwatch.timeutils import utcnow


class JobRun(Base):
    """Track job runs."""

    __tablename__ = "job_runs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    job_name = Column(String(100), nullable=False, index=True)
    started_at = Column(DateTime(timezone=True), nullable=False)
    completed_at = Column(DateTime(timezone=True))
    status = Column(String(20), default="running")  # 'running', 'completed', 'failed'
    records_processed = Column(Integer, default=0)
    error_count = Column(Integer, default=0)
    error_message = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
