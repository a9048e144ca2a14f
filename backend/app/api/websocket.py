"""WebSocket endpoints for real-time communication."""

import json
import logging
from uuid import UUID

import anyio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from backend.app.websocket.manager import Subscription, notifier

router = APIRouter(tags=["websocket"])
logger = logging.getLogger(__name__)


async def _forward_events(websocket: WebSocket, subscription: Subscription, session_id: UUID) -> None:
    """Push queued envelopes to the socket; close it once the subscription ends."""
    try:
        async for event in subscription:
            await websocket.send_text(event.to_json())
        await websocket.close()
    except (WebSocketDisconnect, RuntimeError) as e:
        # Client went away while a send was in flight
        logger.warning(f"[EVENTS] Forwarding to session {session_id} stopped: {e!r}")


async def _receive_loop(websocket: WebSocket) -> None:
    """Answer heartbeats until the client disconnects."""
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text(json.dumps({"type": "pong"}))
    except WebSocketDisconnect:
        return


@router.websocket("/ws/{session_id}")
async def websocket_endpoint(websocket: WebSocket, session_id: UUID):
    """
    WebSocket endpoint for real-time session updates.

    Events sent to clients (``{"type", "data", "timestamp"}``):
    - agent_message: An agent reported progress
    - phase_update: Pipeline entered a new phase
    - progress_update: Progress percentage changed
    - idea_generated: A business idea was produced
    - error: The session failed
    - complete: The session finished

    The socket is closed by the server after the session is closed. Whichever
    side finishes first stops the other; both loops belong to one task group,
    so cancelling the endpoint cancels and awaits them too.
    """
    # Subscribe before accepting so no event sent after the handshake is missed
    subscription = notifier.subscribe(session_id)
    try:
        await websocket.accept()

        async with anyio.create_task_group() as tg:

            async def forward() -> None:
                await _forward_events(websocket, subscription, session_id)
                tg.cancel_scope.cancel()

            async def receive() -> None:
                await _receive_loop(websocket)
                tg.cancel_scope.cancel()

            tg.start_soon(forward)
            tg.start_soon(receive)
    finally:
        notifier.unsubscribe(subscription)
