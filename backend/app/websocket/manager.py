"""Per-session event stream for real-time pipeline updates."""

import asyncio
import logging
from typing import Any
from uuid import UUID

from backend.app.core.config import settings
from backend.app.schemas.agent import AgentMessage
from backend.app.schemas.events import (
    AgentMessageEvent,
    CompleteData,
    CompleteEvent,
    ErrorData,
    ErrorEvent,
    EventStreamMessage,
    IdeaGeneratedData,
    IdeaGeneratedEvent,
    PhaseUpdateData,
    PhaseUpdateEvent,
    ProgressUpdateData,
    ProgressUpdateEvent,
)

logger = logging.getLogger(__name__)

# Queued after the last event of a closed subscription
_END = None


class Subscription:
    """One subscriber's FIFO view of a session's events."""

    def __init__(self, session_id: str, max_size: int = 0):
        self.session_id = session_id
        self.max_size = max_size
        self.closed = False
        # Unbounded so the end marker always fits; max_size is enforced in deliver()
        self._queue: asyncio.Queue[EventStreamMessage | None] = asyncio.Queue()

    def deliver(self, message: EventStreamMessage) -> bool:
        """Queue a message. Returns False if closed or over capacity."""
        if self.closed:
            return False
        if self.max_size and self._queue.qsize() >= self.max_size:
            return False
        self._queue.put_nowait(message)
        return True

    def close(self) -> None:
        """End the subscription after everything already queued."""
        if self.closed:
            return
        self.closed = True
        self._queue.put_nowait(_END)

    def pending(self) -> int:
        return self._queue.qsize()

    async def get(self) -> EventStreamMessage | None:
        """Next event, or None once the subscription has ended."""
        message = await self._queue.get()
        if message is _END:
            # Keep returning None to late callers
            self._queue.put_nowait(_END)
        return message

    def __aiter__(self):
        return self

    async def __anext__(self) -> EventStreamMessage:
        message = await self.get()
        if message is None:
            raise StopAsyncIteration
        return message


class EventStreamService:
    """
    Delivers typed events to the subscribers of each session.

    Delivery is at-most-once to subscribers attached at send time (no
    backlog/replay), FIFO per subscriber. Sends for a session without
    subscribers, including after close_connection, are silently dropped.
    """

    def __init__(self, max_queue_size: int = 0):
        self.max_queue_size = max_queue_size
        # Maps session_id -> list of subscriptions
        self.subscriptions: dict[str, list[Subscription]] = {}

    def subscribe(self, session_id: str | UUID) -> Subscription:
        """Attach a new subscriber to a session."""
        session_key = str(session_id)
        subscription = Subscription(session_key, self.max_queue_size)
        self.subscriptions.setdefault(session_key, []).append(subscription)
        logger.info(f"[EVENTS] Subscriber attached to session {session_key}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Detach a subscriber; unknown subscriptions are ignored."""
        session_key = subscription.session_id
        subscribers = self.subscriptions.get(session_key)
        if subscribers and subscription in subscribers:
            subscribers.remove(subscription)
            # Clean up empty session rooms
            if not subscribers:
                del self.subscriptions[session_key]
        subscription.close()

    def subscriber_count(self, session_id: str | UUID) -> int:
        return len(self.subscriptions.get(str(session_id), []))

    async def send_message(self, session_id: str | UUID, message: EventStreamMessage) -> None:
        """Deliver an envelope to every current subscriber of the session."""
        session_key = str(session_id)
        subscribers = self.subscriptions.get(session_key)
        if not subscribers:
            return

        overflowed = [s for s in list(subscribers) if not s.deliver(message)]
        for subscription in overflowed:
            logger.warning(
                f"[EVENTS] Dropping slow subscriber of session {session_key} "
                f"({subscription.pending()} events pending)"
            )
            self.unsubscribe(subscription)

    async def send_agent_message(self, session_id: str | UUID, agent_message: AgentMessage) -> None:
        await self.send_message(session_id, AgentMessageEvent(data=agent_message))

    async def send_phase_update(self, session_id: str | UUID, phase: str, description: str) -> None:
        await self.send_message(
            session_id,
            PhaseUpdateEvent(data=PhaseUpdateData(phase=phase, description=description)),
        )

    async def send_progress_update(
        self,
        session_id: str | UUID,
        progress: float,
        message: str | None = None,
    ) -> None:
        await self.send_message(
            session_id,
            ProgressUpdateEvent(data=ProgressUpdateData(progress=progress, message=message)),
        )

    async def send_idea_generated(
        self,
        session_id: str | UUID,
        idea_id: str,
        title: str,
        preview: str,
    ) -> None:
        await self.send_message(
            session_id,
            IdeaGeneratedEvent(data=IdeaGeneratedData(idea_id=idea_id, title=title, preview=preview)),
        )

    async def send_error(self, session_id: str | UUID, error: str) -> None:
        await self.send_message(session_id, ErrorEvent(data=ErrorData(error=error)))

    async def send_complete(self, session_id: str | UUID) -> None:
        await self.send_message(session_id, CompleteEvent(data=CompleteData(session_id=str(session_id))))

    def close_connection(self, session_id: str | UUID) -> None:
        """End every subscription of the session once its queued events are consumed."""
        session_key = str(session_id)
        subscribers = self.subscriptions.pop(session_key, [])
        for subscription in subscribers:
            subscription.close()
        if subscribers:
            logger.info(f"[EVENTS] Closed {len(subscribers)} subscriber(s) of session {session_key}")

    def snapshot(self) -> dict[str, Any]:
        """Subscriber counts per session, for diagnostics."""
        return {key: len(subs) for key, subs in self.subscriptions.items()}


# Global event stream instance
notifier = EventStreamService(max_queue_size=settings.event_queue_max_size)
