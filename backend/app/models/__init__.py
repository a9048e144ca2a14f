"""Database models."""

from backend.app.models.user import User
from backend.app.models.session import IdeationSession, SessionStatus
from backend.app.models.agent_log import AgentLog
from backend.app.models.report import Report

__all__ = ["User", "IdeationSession", "SessionStatus", "AgentLog", "Report"]
