"""Session-related schemas."""

from uuid import UUID
from pydantic import BaseModel, Field

from backend.app.models.session import SessionStatus
from backend.app.schemas.common import IsoDatetime


class IdeationSessionRecord(BaseModel):
    """Full ideation session record."""

    id: UUID = Field(..., description="Session ID")
    user_id: UUID = Field(..., description="Owning user ID")
    status: SessionStatus = Field(..., description="Lifecycle status")
    current_phase: str = Field(..., description="Label of the running phase")
    progress: float = Field(..., ge=0, le=100, strict=True, description="Progress percentage")
    created_at: IsoDatetime = Field(..., description="Creation timestamp")
    updated_at: IsoDatetime = Field(..., description="Last update timestamp")
    completed_at: IsoDatetime | None = Field(..., description="Completion timestamp")
    error_message: str | None = Field(..., description="Failure reason")

    model_config = {"from_attributes": True}


class SessionCreate(BaseModel):
    """Schema for creating a new session."""

    user_id: UUID = Field(..., description="Owning user ID")


class SessionUpdate(BaseModel):
    """Schema for updating a session. Absent fields are left unchanged."""

    status: SessionStatus | None = None
    current_phase: str | None = None
    progress: float | None = Field(default=None, ge=0, le=100, strict=True)
    completed_at: IsoDatetime | None = None
    error_message: str | None = None


class SessionListResponse(BaseModel):
    """Schema for session list."""

    sessions: list[IdeationSessionRecord] = Field(..., description="List of sessions")
