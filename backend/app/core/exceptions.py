"""Custom exception classes for the ideation agent backend."""


class IdeationAgentException(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class SessionNotFoundError(IdeationAgentException):
    """Raised when an ideation session is not found."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session not found: {session_id}",
            details="The requested session does not exist"
        )
        self.session_id = session_id


class UserNotFoundError(IdeationAgentException):
    """Raised when a user is not found."""

    def __init__(self, user_id: str):
        super().__init__(
            message=f"User not found: {user_id}",
            details="The requested user does not exist"
        )
        self.user_id = user_id


class ReportNotFoundError(IdeationAgentException):
    """Raised when a report is not found."""

    def __init__(self, report_id: str):
        super().__init__(
            message=f"Report not found: {report_id}",
            details="The requested report does not exist"
        )
        self.report_id = report_id


class EmailAlreadyRegisteredError(IdeationAgentException):
    """Raised when signing up with an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            message=f"Email already registered: {email}",
            details="Sign in instead, or use another email address"
        )
        self.email = email


class InvalidCredentialsError(IdeationAgentException):
    """Raised when email/password do not match a stored account."""

    def __init__(self):
        super().__init__(
            message="Invalid email or password",
        )


class InvalidStatusTransitionError(IdeationAgentException):
    """Raised when a session update would move status backwards or out of a terminal state."""

    def __init__(self, session_id: str, current: str, requested: str):
        super().__init__(
            message=f"Session {session_id} cannot move from {current} to {requested}",
            details="Status only moves forward; completed and error are terminal"
        )
        self.session_id = session_id
        self.current = current
        self.requested = requested


class ProgressRegressionError(IdeationAgentException):
    """Raised when a session update would lower progress on a running session."""

    def __init__(self, session_id: str, current: float, requested: float):
        super().__init__(
            message=f"Session {session_id} progress cannot decrease from {current} to {requested}",
            details="Progress is non-decreasing while the session is running"
        )
        self.session_id = session_id
        self.current = current
        self.requested = requested


class ReportGenerationError(IdeationAgentException):
    """Raised when report assembly fails unexpectedly."""

    def __init__(self, operation: str, original_error: Exception | None = None):
        message = f"Report generation error during {operation}"
        if original_error:
            message += f": {str(original_error)}"
        super().__init__(
            message=message,
            details="The report could not be generated"
        )
        self.operation = operation
        self.original_error = original_error
