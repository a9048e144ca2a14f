"""Report model for storing generated reports."""

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import relationship

from backend.app.db.base import Base


class Report(Base):
    """Business report produced at the end of an ideation session."""

    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id = Column(
        String(36),
        ForeignKey("ideation_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    idea_id = Column(String, nullable=False)
    title = Column(String(200), nullable=False)

    # Quality and timing
    data_quality_score = Column(Float, nullable=False, default=0.0)  # 0-100
    generation_time_ms = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Full HTMLReport document (camelCase JSON)
    content = Column(JSON, nullable=False)
    html_content = Column(Text, nullable=False)

    # Relationships
    session = relationship("IdeationSession", back_populates="reports")
