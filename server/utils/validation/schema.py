"""Reusable request validation helpers."""

import logging
from typing import Any, Iterable, Mapping

from common.exceptions import QuizValidationError

logger = logging.getLogger(__name__)


def validate_required_fields(data: Mapping[str, object], required_fields: Iterable[str]):
    """Ensure all required_fields exist (truthy) in data."""

    missing = [field for field in required_fields if not data.get(field)]
    if missing:
        logger.warning("missing_required_fields fields=%s", ", ".join(missing))
        raise QuizValidationError(f"Missing required fields: {', '.join(missing)}")
    return data


def validate_question(question: Any, position: int) -> None:
    """Check one question record: prompt, choices and an in-range answer index."""

    if not isinstance(question, dict):
        raise QuizValidationError(f"Question {position} must be an object")
    if not isinstance(question.get("q"), str):
        raise QuizValidationError(f"Question {position}: 'q' must be a string")

    choices = question.get("choices")
    if not isinstance(choices, list) or not all(isinstance(c, str) for c in choices):
        raise QuizValidationError(f"Question {position}: 'choices' must be a list of strings")

    answer = question.get("answer")
    # bool is an int subclass but never a meaningful index
    if isinstance(answer, bool) or not isinstance(answer, int):
        raise QuizValidationError(f"Question {position}: 'answer' must be an integer")
    if not 0 <= answer < len(choices):
        logger.warning("answer_out_of_range question=%d answer=%s choices=%d",
                       position, answer, len(choices))
        raise QuizValidationError(
            f"Question {position}: 'answer' must index into 'choices' (0-{len(choices) - 1})"
        )

    hint = question.get("hint")
    if hint is not None and not isinstance(hint, str):
        raise QuizValidationError(f"Question {position}: 'hint' must be a string")


def validate_quiz(data: Any) -> Mapping[str, Any]:
    """Validate a quiz document before it is stored."""

    if not isinstance(data, dict):
        raise QuizValidationError("Quiz body must be a JSON object")
    validate_required_fields(data, ["id", "title"])
    if not isinstance(data["id"], str) or not isinstance(data["title"], str):
        raise QuizValidationError("'id' and 'title' must be strings")

    questions = data.get("questions", [])
    if not isinstance(questions, list):
        raise QuizValidationError("'questions' must be a list")
    for position, question in enumerate(questions):
        validate_question(question, position)
    return data
