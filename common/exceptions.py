"""Exceptions raised by the quiz catalog.

Routes map these to HTTP status codes:

    QuizValidationError  -> 400
    DuplicateQuizError   -> 409
    CatalogBackendError  -> 500 (generic message, details only in logs)
"""


class CatalogError(Exception):
    """Base class for catalog errors."""


class QuizValidationError(CatalogError, ValueError):
    """Quiz payload failed validation."""


class DuplicateQuizError(CatalogError):
    """A quiz with the same id already exists (opt-in uniqueness check)."""

    def __init__(self, quiz_id: str) -> None:
        self.quiz_id = quiz_id
        super().__init__(f"Quiz '{quiz_id}' already exists")


class CatalogBackendError(CatalogError):
    """Storage backend (file or MongoDB) failed while serving a request."""
