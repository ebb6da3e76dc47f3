"""Quiz catalog facade over the active storage backend."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


class StorageMode(str, enum.Enum):
    DATABASE = "database"
    FILE = "file"


class QuizBackend(Protocol):
    """Operations every catalog backend provides."""

    def list_quizzes(self) -> List[Dict[str, Any]]:
        ...

    def get_quiz(self, quiz_id: str) -> Optional[Dict[str, Any]]:
        ...

    def create_quiz(self, quiz: Dict[str, Any], unique_id: bool = False) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class CatalogStore:
    """The backend chosen at startup, fixed for the life of the process.

    Backend failures propagate as ``CatalogBackendError``; a missing quiz is
    ``None`` from :meth:`get`.
    """

    mode: StorageMode
    backend: QuizBackend
    enforce_unique_ids: bool = False

    @property
    def uses_database(self) -> bool:
        return self.mode is StorageMode.DATABASE

    def list(self) -> List[Dict[str, Any]]:
        return self.backend.list_quizzes()

    def get(self, quiz_id: str) -> Optional[Dict[str, Any]]:
        return self.backend.get_quiz(quiz_id)

    def create(self, quiz: Dict[str, Any]) -> Dict[str, Any]:
        created = self.backend.create_quiz(quiz, unique_id=self.enforce_unique_ids)
        logger.info("quiz_created id=%s mode=%s", created.get("id"), self.mode.value)
        return created
