"""Pydantic schemas for API request/response validation."""

from backend.app.schemas.user import (
    UserRecord,
    UserCreate,
    UserUpdate,
    SignInRequest,
    AuthResponse,
)
from backend.app.schemas.session import (
    IdeationSessionRecord,
    SessionCreate,
    SessionUpdate,
    SessionListResponse,
)
from backend.app.schemas.agent import (
    AgentMessage,
    AgentLogRecord,
    AgentLogListResponse,
    WebSearchQuery,
    WebSearchResult,
)
from backend.app.schemas.idea import (
    BusinessIdea,
    IdeaValidateRequest,
    IdeaValidationResult,
    IdeaAnalysis,
)
from backend.app.schemas.report import HTMLReport, ReportRequest, MonetaryValue
from backend.app.schemas.validation import FieldError, validate_payload

__all__ = [
    "UserRecord",
    "UserCreate",
    "UserUpdate",
    "SignInRequest",
    "AuthResponse",
    "IdeationSessionRecord",
    "SessionCreate",
    "SessionUpdate",
    "SessionListResponse",
    "AgentMessage",
    "AgentLogRecord",
    "AgentLogListResponse",
    "WebSearchQuery",
    "WebSearchResult",
    "BusinessIdea",
    "IdeaValidateRequest",
    "IdeaValidationResult",
    "IdeaAnalysis",
    "HTMLReport",
    "ReportRequest",
    "MonetaryValue",
    "FieldError",
    "validate_payload",
]
