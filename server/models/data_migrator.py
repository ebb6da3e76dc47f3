import json
import logging
from typing import Any, Dict, List

from pymongo.errors import PyMongoError

from common.repositories.quiz_repository import QuizRepository

logger = logging.getLogger(__name__)


class DataMigrator:
    """Seeds and syncs the bundled quiz catalog into MongoDB."""

    def __init__(self, quiz_repository: QuizRepository):
        self.quiz_repository = quiz_repository

    @staticmethod
    def load_seed_quizzes(json_file_path: str) -> List[Dict[str, Any]]:
        with open(json_file_path, "r", encoding="utf-8") as file:
            data = json.load(file)
        quizzes = data.get("quizzes") if isinstance(data, dict) else None
        if not isinstance(quizzes, list):
            raise ValueError("seed file must contain a 'quizzes' list")
        records = [quiz for quiz in quizzes if isinstance(quiz, dict)]
        if len(records) != len(quizzes):
            logger.warning(
                "seed_entries_not_objects path=%s skipped=%d",
                json_file_path, len(quizzes) - len(records),
            )
        return records

    def seed_if_empty(self, quizzes: List[Dict[str, Any]]) -> int:
        if self.quiz_repository.count() > 0:
            return 0
        inserted = self.quiz_repository.insert_many(quizzes)
        logger.info("quizzes_seeded count=%d", inserted)
        return inserted

    def sync(self, quizzes: List[Dict[str, Any]]) -> int:
        """Upsert every seed quiz by `id`. Safe to run on every start."""
        changed = 0
        for quiz in quizzes:
            if not isinstance(quiz, dict):
                logger.warning("seed_quiz_not_object value=%r skipped", quiz)
                continue
            if not quiz.get("id"):
                logger.warning("seed_quiz_without_id title=%s skipped", quiz.get("title"))
                continue
            if self.quiz_repository.upsert_by_id(quiz):
                changed += 1
        logger.info("quizzes_synced upserted_or_modified=%d", changed)
        return changed

    def seed_and_sync(self, json_file_path: str) -> bool:
        """Seed an empty collection, then upsert the seed file into it.

        A missing or invalid seed file and a failed sync are logged and
        reported as False; the collection keeps whatever it already holds.
        A failure while seeding an empty collection propagates, since the
        database is then unusable as the catalog.
        """
        try:
            quizzes = self.load_seed_quizzes(json_file_path)
        except FileNotFoundError:
            logger.error("Seed file not found: %s", json_file_path)
            return False
        except ValueError as e:
            logger.error("Invalid seed file %s: %s", json_file_path, e)
            return False

        self.seed_if_empty(quizzes)

        try:
            self.sync(quizzes)
        except PyMongoError as e:
            logger.warning("Quiz sync failed: %s", e)
            return False
        return True
