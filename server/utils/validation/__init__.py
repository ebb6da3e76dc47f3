"""Validation helper package."""

from .schema import (
    validate_question,
    validate_quiz,
    validate_required_fields,
)

__all__ = [
    "validate_question",
    "validate_quiz",
    "validate_required_fields",
]
