"""Quiz repositories for the MongoDB and JSON-file backends."""

from common.repositories.file_quiz_repository import FileQuizRepository
from common.repositories.quiz_repository import QuizRepository

__all__ = ["FileQuizRepository", "QuizRepository"]
