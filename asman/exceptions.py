"""Custom exception classes for the ASman Lesson Studio.

Provider and normalization errors are raised inside their components and
converted to tagged results before they reach the pipeline. The remaining
classes are mapped to structured HTTP responses by FastAPI exception handlers.
"""


class LessonGenerationError(Exception):
    """Raised when a single provider attempt fails.

    Args:
        message: Description of the failure.
        attempt: The attempt number on which the failure happened.
    """

    def __init__(self, message: str, attempt: int = 1) -> None:
        super().__init__(message)
        self.attempt: int = attempt


class LessonNormalizationError(Exception):
    """Raised when provider output cannot be turned into a canonical lesson.

    Args:
        message: Which step rejected the payload.
        validation_report: Structured report from the lesson validator, if any.
    """

    def __init__(self, message: str, validation_report: dict | None = None) -> None:
        super().__init__(message)
        self.validation_report: dict = validation_report or {}


class SessionNotFoundError(Exception):
    """Raised when a chat session id is unknown.

    Args:
        session_id: The id that was looked up.
    """

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session with id={session_id!r} not found")
        self.session_id: str = session_id


class InvalidTransitionError(Exception):
    """Raised when the wizard receives an event its current state does not accept.

    Args:
        state: Current wizard state value.
        event: Rejected event value.
    """

    def __init__(self, state: str, event: str) -> None:
        super().__init__(f"Event {event!r} is not allowed in state {state!r}")
        self.state: str = state
        self.event: str = event


class WizardPreconditionError(Exception):
    """Raised when a wizard step is attempted before its inputs are bound.

    Args:
        message: Human-readable description.
        missing: Names of the unbound parameters.
    """

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing: list[str] = missing or []


class LessonExportError(Exception):
    """Raised when a lesson cannot be rendered to DOCX.

    Args:
        message: Detail from the underlying renderer exception.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
