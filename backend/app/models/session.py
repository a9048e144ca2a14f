"""Ideation session model."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING
from sqlalchemy import String, Float, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base

if TYPE_CHECKING:
    from backend.app.models.user import User
    from backend.app.models.agent_log import AgentLog
    from backend.app.models.report import Report


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(str, Enum):
    """Lifecycle states of an ideation session, in pipeline order."""
    INITIALIZING = "initializing"
    RESEARCHING = "researching"
    GENERATING = "generating"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    ERROR = "error"


class IdeationSession(Base):
    """
    One end-to-end run of the ideation pipeline for a user.

    Attributes:
        id: Unique session identifier (UUID)
        user_id: Owning user
        status: Lifecycle status (see SessionStatus)
        current_phase: Free-form label of the running phase
        progress: Percentage 0-100
        created_at: Creation timestamp
        updated_at: Last update timestamp
        completed_at: Completion timestamp (nullable)
        error_message: Failure reason when status is error (nullable)
    """

    __tablename__ = "ideation_sessions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SessionStatus.INITIALIZING.value,
        index=True,
    )
    current_phase: Mapped[str] = mapped_column(String(255), nullable=False, default="initialization")
    progress: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="sessions")
    logs: Mapped[list["AgentLog"]] = relationship(
        "AgentLog",
        back_populates="session",
        cascade="all, delete-orphan",
    )
    reports: Mapped[list["Report"]] = relationship(
        "Report",
        back_populates="session",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<IdeationSession(id={self.id}, status={self.status}, progress={self.progress})>"
