"""JSON-file quiz repository used when no database is configured.

The backing file holds a single document::

    {"quizzes": [{"id": ..., "title": ..., "questions": [...]}, ...]}

Reads parse the file on every call so edits made on disk show up without a
restart. Writes rewrite the whole file through a temporary sibling and
``os.replace`` so a crash mid-write never truncates the catalog.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
import threading
from typing import Any, Dict, List, Optional

from common.exceptions import CatalogBackendError, DuplicateQuizError

logger = logging.getLogger(__name__)


def _default_file_mode() -> int:
    """Mode a plain open() would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


# Read once at import; os.umask can only be read by setting it
DEFAULT_FILE_MODE = _default_file_mode()


class FileQuizRepository:
    """Quiz storage backed by a local JSON file."""

    def __init__(self, path: str) -> None:
        self.path = os.path.abspath(path)
        # Serialises read-modify-write cycles; green under eventlet patching
        self._write_lock = threading.Lock()

    def _read_document(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as file:
                document = json.load(file)
        except FileNotFoundError:
            logger.info("quiz_file_missing path=%s treating_as_empty", self.path)
            return {"quizzes": []}
        if not isinstance(document, dict) or not isinstance(document.get("quizzes", []), list):
            raise ValueError(f"unexpected quiz file layout in {self.path}")
        document.setdefault("quizzes", [])
        return document

    def _target_mode(self) -> int:
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            return DEFAULT_FILE_MODE

    def _write_document(self, document: Dict[str, Any]) -> None:
        directory = os.path.dirname(self.path)
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=".quizzes-", suffix=".tmp", dir=directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file:
                json.dump(document, file, indent=2, ensure_ascii=False)
                file.write("\n")
                file.flush()
                os.fsync(file.fileno())
            # mkstemp creates 0600 files; keep the catalog's existing mode
            os.chmod(tmp_path, self._target_mode())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def load_document(self) -> Dict[str, Any]:
        """Return the whole parsed file."""
        try:
            return self._read_document()
        except (OSError, ValueError) as exc:
            raise CatalogBackendError(f"quiz file unreadable path={self.path}") from exc

    def list_quizzes(self) -> List[Dict[str, Any]]:
        return self.load_document()["quizzes"]

    def get_quiz(self, quiz_id: str) -> Optional[Dict[str, Any]]:
        return next(
            (quiz for quiz in self.list_quizzes() if quiz.get("id") == quiz_id),
            None,
        )

    def create_quiz(self, quiz: Dict[str, Any], unique_id: bool = False) -> Dict[str, Any]:
        """Append a quiz and atomically rewrite the file."""
        record = dict(quiz)
        with self._write_lock:
            try:
                document = self._read_document()
                if unique_id and any(
                    existing.get("id") == record.get("id")
                    for existing in document["quizzes"]
                ):
                    raise DuplicateQuizError(record.get("id"))
                document["quizzes"].append(record)
                self._write_document(document)
            except (OSError, ValueError) as exc:
                raise CatalogBackendError(
                    f"quiz file write failed path={self.path}"
                ) from exc
        logger.debug("quiz_file_written path=%s count=%d", self.path, len(document["quizzes"]))
        return record
