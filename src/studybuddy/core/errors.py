"""Error taxonomy of the progression engine.

Every engine operation raises one of these; the web layer maps them to
HTTP status codes. Storage failures (sqlite3.Error) are not wrapped.
"""

from __future__ import annotations


class ProgressionError(Exception):
    """Base class for engine errors."""

    pass


class SubmissionValidationError(ProgressionError):
    """Missing or malformed input, rejected before touching storage."""

    pass


class NotAuthorizedError(ProgressionError):
    """Principal may not act on this resource."""

    pass


class NotFoundError(ProgressionError):
    """No quiz, course or chapter for the given id."""

    pass


class ConflictError(ProgressionError):
    """Resource already exists (duplicate enrollment, course title)."""

    pass


class AttemptsExhaustedError(ProgressionError):
    """Student has used every allowed attempt for a quiz."""

    def __init__(self, quiz_id: int, max_attempts: int):
        self.quiz_id = quiz_id
        self.max_attempts = max_attempts
        super().__init__("You have reached the maximum number of attempts.")
