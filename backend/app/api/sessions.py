"""Ideation session API endpoints."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import SessionNotFoundError, UserNotFoundError
from backend.app.db.base import get_db
from backend.app.models.agent_log import AgentLog
from backend.app.models.session import IdeationSession, SessionStatus
from backend.app.models.user import User
from backend.app.schemas.agent import AgentLogListResponse, AgentLogRecord, AgentMessage
from backend.app.schemas.session import (
    IdeationSessionRecord,
    SessionCreate,
    SessionListResponse,
    SessionUpdate,
)
from backend.app.services.session_lifecycle import ensure_progress, ensure_transition, is_terminal
from backend.app.websocket.manager import notifier

router = APIRouter(prefix="/sessions", tags=["sessions"])
logger = logging.getLogger(__name__)

PHASE_DESCRIPTIONS = {
    SessionStatus.INITIALIZING: "セッションを初期化しています",
    SessionStatus.RESEARCHING: "市場情報を調査しています",
    SessionStatus.GENERATING: "ビジネスアイデアを生成しています",
    SessionStatus.ANALYZING: "アイデアを評価・分析しています",
    SessionStatus.COMPLETED: "レポートの作成が完了しました",
    SessionStatus.ERROR: "処理中にエラーが発生しました",
}


async def _get_session_or_404(session_id: UUID, db: AsyncSession) -> IdeationSession:
    result = await db.execute(select(IdeationSession).where(IdeationSession.id == str(session_id)))
    session = result.scalar_one_or_none()
    if not session:
        raise SessionNotFoundError(str(session_id))
    return session


@router.post("/", response_model=IdeationSessionRecord, status_code=status.HTTP_201_CREATED)
async def create_session(
    session_data: SessionCreate,
    db: AsyncSession = Depends(get_db),
) -> IdeationSessionRecord:
    """Start a new ideation session for an existing user."""
    user = await db.get(User, str(session_data.user_id))
    if not user:
        raise UserNotFoundError(str(session_data.user_id))

    session = IdeationSession(
        user_id=user.id,
        status=SessionStatus.INITIALIZING.value,
        current_phase="initialization",
        progress=0.0,
    )
    db.add(session)
    await db.commit()
    await db.refresh(session)

    logger.info(f"[SESSION] Created session {session.id} for user {user.id}")
    return IdeationSessionRecord.model_validate(session)


@router.get("/", response_model=SessionListResponse)
async def list_sessions(
    user_id: UUID | None = None,
    db: AsyncSession = Depends(get_db),
) -> SessionListResponse:
    """List sessions newest first, optionally only those of one user."""
    query = select(IdeationSession)
    if user_id is not None:
        query = query.where(IdeationSession.user_id == str(user_id))
    query = query.order_by(IdeationSession.created_at.desc())

    result = await db.execute(query)
    sessions = result.scalars().all()
    return SessionListResponse(sessions=[IdeationSessionRecord.model_validate(s) for s in sessions])


@router.get("/{session_id}", response_model=IdeationSessionRecord)
async def get_session(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> IdeationSessionRecord:
    """Get a specific session by ID."""
    session = await _get_session_or_404(session_id, db)
    return IdeationSessionRecord.model_validate(session)


@router.patch("/{session_id}", response_model=IdeationSessionRecord)
async def update_session(
    session_id: UUID,
    session_update: SessionUpdate,
    db: AsyncSession = Depends(get_db),
) -> IdeationSessionRecord:
    """
    Apply a partial update and publish the resulting events.

    Events go out in order: phase_update (status or phase changed),
    progress_update (progress changed), then complete or error. A terminal
    update closes the session's event stream afterwards.
    """
    session = await _get_session_or_404(session_id, db)
    key = str(session_id)

    previous_status = SessionStatus(session.status)
    previous_phase = session.current_phase
    previous_progress = session.progress

    new_status = session_update.status if session_update.status is not None else previous_status
    ensure_transition(key, previous_status, new_status)
    if session_update.progress is not None:
        ensure_progress(key, previous_progress, session_update.progress, new_status)

    # Update fields if provided
    session.status = new_status.value
    if session_update.current_phase is not None:
        session.current_phase = session_update.current_phase
    if session_update.progress is not None:
        session.progress = session_update.progress
    if session_update.error_message is not None:
        session.error_message = session_update.error_message
    if session_update.completed_at is not None:
        session.completed_at = session_update.completed_at
    elif new_status == SessionStatus.COMPLETED and session.completed_at is None:
        session.completed_at = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(session)

    status_changed = new_status != previous_status
    if status_changed:
        logger.info(f"[SESSION] Session {key}: {previous_status.value} -> {new_status.value}")

    if status_changed or session.current_phase != previous_phase:
        await notifier.send_phase_update(key, session.current_phase, PHASE_DESCRIPTIONS[new_status])
    if session.progress != previous_progress:
        await notifier.send_progress_update(key, session.progress)
    if status_changed and new_status == SessionStatus.COMPLETED:
        await notifier.send_complete(key)
    elif status_changed and new_status == SessionStatus.ERROR:
        await notifier.send_error(key, session.error_message or "Session failed")

    if status_changed and is_terminal(new_status):
        notifier.close_connection(key)

    return IdeationSessionRecord.model_validate(session)


@router.delete("/{session_id}")
async def delete_session(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Delete a session together with its logs and reports."""
    session = await _get_session_or_404(session_id, db)

    await db.delete(session)
    await db.commit()
    notifier.close_connection(session_id)

    logger.info(f"[SESSION] Deleted session {session_id}")
    return {"message": "Session deleted successfully", "session_id": str(session_id)}


@router.post(
    "/{session_id}/messages",
    response_model=AgentLogRecord,
    status_code=status.HTTP_201_CREATED,
)
async def post_agent_message(
    session_id: UUID,
    agent_message: AgentMessage,
    db: AsyncSession = Depends(get_db),
) -> AgentLogRecord:
    """Persist an agent message and forward it to the session's subscribers."""
    session = await _get_session_or_404(session_id, db)

    log = AgentLog(
        session_id=session.id,
        agent_name=agent_message.agent,
        message=agent_message.message,
        data=agent_message.data,
    )
    db.add(log)
    await db.commit()
    await db.refresh(log)

    await notifier.send_agent_message(session.id, agent_message)
    return AgentLogRecord.model_validate(log)


@router.get("/{session_id}/messages", response_model=AgentLogListResponse)
async def list_agent_messages(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> AgentLogListResponse:
    """List a session's agent logs, oldest first."""
    await _get_session_or_404(session_id, db)

    result = await db.execute(
        select(AgentLog)
        .where(AgentLog.session_id == str(session_id))
        .order_by(AgentLog.created_at)
    )
    logs = [AgentLogRecord.model_validate(log) for log in result.scalars().all()]
    return AgentLogListResponse(logs=logs, total=len(logs))
