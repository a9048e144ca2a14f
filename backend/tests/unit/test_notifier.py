"""Unit tests for the per-session event stream."""

import asyncio

import pytest

from backend.app.schemas.agent import AgentMessage
from backend.app.websocket.manager import EventStreamService


async def _drain(subscription, timeout: float = 1.0) -> list:
    """Collect events until the subscription ends."""
    events = []

    async def collect():
        async for event in subscription:
            events.append(event)

    await asyncio.wait_for(collect(), timeout)
    return events


class TestEventStreamService:
    """Test cases for EventStreamService."""

    @pytest.mark.asyncio
    async def test_events_arrive_in_order(self):
        """Test a subscriber sees phase, progress and completion in send order."""
        service = EventStreamService()
        subscription = service.subscribe("session-s")

        await service.send_phase_update("session-s", "generation", "アイデアを生成しています")
        await service.send_progress_update("session-s", 50, "半分完了")
        await service.send_complete("session-s")
        service.close_connection("session-s")

        events = await _drain(subscription)
        assert [e.type for e in events] == ["phase_update", "progress_update", "complete"]
        assert events[1].data.progress == 50
        assert events[2].data.session_id == "session-s"

    @pytest.mark.asyncio
    async def test_sessions_are_isolated(self):
        """Test a subscriber of one session never sees another session's events."""
        service = EventStreamService()
        subscriber_s = service.subscribe("session-s")
        subscriber_t = service.subscribe("session-t")

        await service.send_phase_update("session-s", "research", "調査中")
        await service.send_complete("session-s")
        await service.send_error("session-t", "LLM timeout")
        service.close_connection("session-s")
        service.close_connection("session-t")

        assert [e.type for e in await _drain(subscriber_s)] == ["phase_update", "complete"]
        events_t = await _drain(subscriber_t)
        assert [e.type for e in events_t] == ["error"]
        assert events_t[0].data.error == "LLM timeout"

    @pytest.mark.asyncio
    async def test_every_subscriber_receives(self):
        """Test all subscribers of a session get each event."""
        service = EventStreamService()
        first = service.subscribe("s")
        second = service.subscribe("s")

        await service.send_idea_generated("s", "idea-1", "スマートオフィス", "会議室の横断予約")
        service.close_connection("s")

        for subscription in (first, second):
            events = await _drain(subscription)
            assert len(events) == 1
            assert events[0].data.idea_id == "idea-1"

    @pytest.mark.asyncio
    async def test_late_subscriber_gets_no_backlog(self):
        """Test events sent before subscribing are not replayed."""
        service = EventStreamService()
        await service.send_progress_update("s", 10)

        subscription = service.subscribe("s")
        await service.send_progress_update("s", 20)
        service.close_connection("s")

        events = await _drain(subscription)
        assert [e.data.progress for e in events] == [20]

    @pytest.mark.asyncio
    async def test_send_without_subscribers_is_noop(self):
        """Test sending to an unknown session does nothing."""
        service = EventStreamService()
        await service.send_error("nobody", "ignored")
        assert service.subscriber_count("nobody") == 0

    @pytest.mark.asyncio
    async def test_send_after_close_is_silent(self):
        """Test sends after close_connection are dropped without error."""
        service = EventStreamService()
        subscription = service.subscribe("s")
        service.close_connection("s")

        await service.send_progress_update("s", 99)

        assert await _drain(subscription) == []
        assert service.subscriber_count("s") == 0

    @pytest.mark.asyncio
    async def test_agent_message_forwarded(self):
        """Test agent messages are wrapped in an agent_message envelope."""
        service = EventStreamService()
        subscription = service.subscribe("s")
        message = AgentMessage(agent="researcher", message="検索中", timestamp="2024-05-01T09:00:00Z")

        await service.send_agent_message("s", message)
        service.close_connection("s")

        events = await _drain(subscription)
        assert events[0].type == "agent_message"
        assert events[0].data.agent == "researcher"

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_delivery(self):
        """Test an unsubscribed subscriber ends and receives nothing further."""
        service = EventStreamService()
        staying = service.subscribe("s")
        leaving = service.subscribe("s")

        service.unsubscribe(leaving)
        await service.send_progress_update("s", 30)
        service.close_connection("s")

        assert await _drain(leaving) == []
        assert len(await _drain(staying)) == 1

    @pytest.mark.asyncio
    async def test_overflowing_subscriber_detached(self):
        """Test a full queue detaches its subscriber instead of blocking."""
        service = EventStreamService(max_queue_size=2)
        slow = service.subscribe("s")

        for progress in (10, 20, 30):
            await service.send_progress_update("s", progress)

        assert service.subscriber_count("s") == 0
        events = await _drain(slow)
        assert [e.data.progress for e in events] == [10, 20]

    @pytest.mark.asyncio
    async def test_consumer_waiting_before_send(self):
        """Test a consumer already waiting receives events as they are sent."""
        service = EventStreamService()
        subscription = service.subscribe("s")
        consumer = asyncio.create_task(_drain(subscription))

        await asyncio.sleep(0)
        await service.send_phase_update("s", "analysis", "分析中")
        await service.send_complete("s")
        service.close_connection("s")

        events = await consumer
        assert [e.type for e in events] == ["phase_update", "complete"]
