"""Repository providing read/write helpers for quiz documents in MongoDB."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from pymongo.errors import PyMongoError

from common.exceptions import CatalogBackendError, DuplicateQuizError

from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class QuizRepository(BaseRepository):
    """Access to the quiz collection."""

    def __init__(self, db_controller, collection_name: str = "quizzes") -> None:
        super().__init__(db_controller, collection_name)

    def list_quizzes(self) -> List[Dict[str, Any]]:
        try:
            return [self.serialize(doc) for doc in self.collection.find({})]
        except PyMongoError as exc:
            raise CatalogBackendError("quiz list failed") from exc

    def get_quiz(self, quiz_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.serialize(self.collection.find_one({"id": quiz_id}))
        except PyMongoError as exc:
            raise CatalogBackendError(f"quiz lookup failed id={quiz_id}") from exc

    def create_quiz(self, quiz: Dict[str, Any], unique_id: bool = False) -> Dict[str, Any]:
        """Insert a quiz and return it as stored, including the generated `_id`.

        With ``unique_id`` the insert is refused when the id is taken. The
        check and the insert are separate round trips, so two racing writers
        can still both succeed.
        """
        doc = dict(quiz)
        try:
            if unique_id and self.collection.find_one({"id": doc.get("id")}) is not None:
                raise DuplicateQuizError(doc.get("id"))
            result = self.collection.insert_one(doc)
        except PyMongoError as exc:
            raise CatalogBackendError(f"quiz insert failed id={doc.get('id')}") from exc
        doc["_id"] = result.inserted_id
        return self.serialize(doc)

    # Seed helpers used by the data migrator

    def count(self) -> int:
        return self.collection.count_documents({})

    def insert_many(self, quizzes: Iterable[Dict[str, Any]]) -> int:
        documents = [dict(quiz) for quiz in quizzes]
        if not documents:
            return 0
        self.collection.insert_many(documents)
        return len(documents)

    def upsert_by_id(self, quiz: Dict[str, Any]) -> bool:
        """Insert or overwrite the quiz whose `id` matches. Returns True if anything changed."""
        result = self.collection.update_one(
            {"id": quiz["id"]}, {"$set": dict(quiz)}, upsert=True
        )
        return bool(result.upserted_id is not None or result.modified_count)
