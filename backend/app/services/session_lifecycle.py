"""Status transition and progress policy for ideation sessions."""

from backend.app.core.config import settings
from backend.app.core.exceptions import InvalidStatusTransitionError, ProgressRegressionError
from backend.app.models.session import SessionStatus

# Pipeline order; error is an escape hatch outside this sequence
PIPELINE_ORDER: list[SessionStatus] = [
    SessionStatus.INITIALIZING,
    SessionStatus.RESEARCHING,
    SessionStatus.GENERATING,
    SessionStatus.ANALYZING,
    SessionStatus.COMPLETED,
]

TERMINAL_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.ERROR})


def is_terminal(status: SessionStatus | str) -> bool:
    """Whether no further transitions are allowed from this status."""
    return SessionStatus(status) in TERMINAL_STATUSES


def can_transition(current: SessionStatus | str, new: SessionStatus | str) -> bool:
    """
    Check a status change against the session lifecycle.

    Status moves forward through the pipeline (skipping phases is allowed,
    staying put is allowed), ``error`` is reachable from any non-terminal
    status, and ``completed``/``error`` are terminal.
    """
    current = SessionStatus(current)
    new = SessionStatus(new)

    if current in TERMINAL_STATUSES:
        return new == current
    if new == SessionStatus.ERROR:
        return True
    return PIPELINE_ORDER.index(new) >= PIPELINE_ORDER.index(current)


def ensure_transition(session_id: str, current: SessionStatus | str, new: SessionStatus | str) -> None:
    """Raise InvalidStatusTransitionError if the change is not allowed."""
    if not can_transition(current, new):
        raise InvalidStatusTransitionError(
            session_id,
            SessionStatus(current).value,
            SessionStatus(new).value,
        )


def ensure_progress(
    session_id: str,
    current_progress: float,
    new_progress: float,
    status: SessionStatus | str,
) -> None:
    """
    Raise ProgressRegressionError if progress would go down on a running session.

    Only applied when ``settings.enforce_progress_monotonic`` is enabled.
    """
    if not settings.enforce_progress_monotonic:
        return
    if is_terminal(status):
        return
    if new_progress < current_progress:
        raise ProgressRegressionError(session_id, current_progress, new_progress)
