"""Event envelopes pushed to session subscribers.

Every envelope serializes as ``{"type", "data", "timestamp"}``. Each event
kind is its own model with a literal ``type`` tag, and ``EventStreamMessage``
is the discriminated union of all of them.
"""

from datetime import datetime, timezone
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from backend.app.schemas.agent import AgentMessage
from backend.app.schemas.common import CamelModel, Percentage

EventType = Literal[
    "agent_message",
    "phase_update",
    "progress_update",
    "idea_generated",
    "error",
    "complete",
]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PhaseUpdateData(BaseModel):
    phase: str
    description: str


class ProgressUpdateData(BaseModel):
    progress: Percentage
    message: str | None = None


class IdeaGeneratedData(CamelModel):
    idea_id: str
    title: str
    preview: str


class ErrorData(BaseModel):
    error: str


class CompleteData(CamelModel):
    session_id: str


class _Envelope(BaseModel):
    timestamp: datetime = Field(default_factory=_now)

    def to_json(self) -> str:
        """Wire form sent to subscribers."""
        return self.model_dump_json(by_alias=True)


class AgentMessageEvent(_Envelope):
    type: Literal["agent_message"] = "agent_message"
    data: AgentMessage


class PhaseUpdateEvent(_Envelope):
    type: Literal["phase_update"] = "phase_update"
    data: PhaseUpdateData


class ProgressUpdateEvent(_Envelope):
    type: Literal["progress_update"] = "progress_update"
    data: ProgressUpdateData


class IdeaGeneratedEvent(_Envelope):
    type: Literal["idea_generated"] = "idea_generated"
    data: IdeaGeneratedData


class ErrorEvent(_Envelope):
    type: Literal["error"] = "error"
    data: ErrorData


class CompleteEvent(_Envelope):
    type: Literal["complete"] = "complete"
    data: CompleteData


EventStreamMessage = Annotated[
    Union[
        AgentMessageEvent,
        PhaseUpdateEvent,
        ProgressUpdateEvent,
        IdeaGeneratedEvent,
        ErrorEvent,
        CompleteEvent,
    ],
    Field(discriminator="type"),
]

event_adapter: TypeAdapter[EventStreamMessage] = TypeAdapter(EventStreamMessage)
