"""Agent message, agent log and web search schemas."""

from typing import Any, Literal
from uuid import UUID

from pydantic import AnyUrl, BaseModel, Field

from backend.app.schemas.common import IsoDatetime

AgentName = Literal["researcher", "ideator", "critic", "analyst", "writer"]

SearchType = Literal["search", "news", "images"]


class AgentMessage(BaseModel):
    """Message emitted by one of the pipeline agents."""

    agent: AgentName = Field(..., description="Emitting agent role")
    message: str = Field(..., min_length=1, description="Message text")
    timestamp: IsoDatetime = Field(..., description="Emission time")
    data: Any | None = Field(default=None, description="Optional payload")


class AgentLogRecord(BaseModel):
    """Persisted form of an AgentMessage."""

    id: UUID = Field(..., description="Log ID")
    session_id: UUID = Field(..., description="Owning session ID")
    agent_name: AgentName = Field(..., description="Emitting agent role")
    message: str = Field(..., min_length=1, description="Message text")
    data: Any | None = Field(..., description="Payload or null")
    created_at: IsoDatetime = Field(..., description="Persisted at")

    model_config = {"from_attributes": True}


class AgentLogListResponse(BaseModel):
    """Schema for agent log list."""

    logs: list[AgentLogRecord]
    total: int


class WebSearchQuery(BaseModel):
    """Search request issued by the researcher agent."""

    query: str = Field(..., min_length=1, description="Search string")
    gl: str | None = Field(default=None, description="Country hint")
    hl: str | None = Field(default=None, description="Language hint")
    num: int | None = Field(default=None, ge=1, le=100, strict=True, description="Result count")
    type: SearchType | None = Field(default=None, description="Search vertical")


class WebSearchResult(BaseModel):
    """One search hit."""

    title: str
    link: AnyUrl
    snippet: str
    date: str | None = None
