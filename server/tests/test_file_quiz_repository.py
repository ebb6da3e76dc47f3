"""Tests for the JSON-file quiz repository."""

import json
import os
import stat
from concurrent.futures import ThreadPoolExecutor

import pytest

from common.exceptions import CatalogBackendError, DuplicateQuizError
from common.repositories import file_quiz_repository
from common.repositories.file_quiz_repository import FileQuizRepository


def _quiz(quiz_id):
    return {
        "id": quiz_id,
        "title": f"Quiz {quiz_id}",
        "questions": [{"q": "2 + 2?", "choices": ["3", "4"], "answer": 1}],
    }


def _read(path):
    with open(path, "r", encoding="utf-8") as file:
        return json.load(file)


def test_concurrent_creates_never_corrupt_file(quiz_file):
    repository = FileQuizRepository(str(quiz_file))
    original_count = len(_read(quiz_file)["quizzes"])
    count = 25

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda i: repository.create_quiz(_quiz(f"q-{i}")), range(count)))

    stored = _read(quiz_file)["quizzes"]
    assert len(stored) == original_count + count
    assert {q["id"] for q in stored[original_count:]} == {f"q-{i}" for i in range(count)}


def test_failed_write_leaves_catalog_intact(quiz_file, monkeypatch):
    repository = FileQuizRepository(str(quiz_file))
    before = quiz_file.read_text(encoding="utf-8")

    def _boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(file_quiz_repository.os, "replace", _boom)

    with pytest.raises(CatalogBackendError):
        repository.create_quiz(_quiz("lost"))

    assert quiz_file.read_text(encoding="utf-8") == before
    assert os.listdir(quiz_file.parent) == [quiz_file.name]


def test_missing_file_is_empty_catalog_and_created_on_write(tmp_path):
    path = tmp_path / "nested" / "quizzes.json"
    repository = FileQuizRepository(str(path))

    assert repository.list_quizzes() == []
    assert repository.get_quiz("anything") is None

    repository.create_quiz(_quiz("first"))
    assert _read(path) == {"quizzes": [_quiz("first")]}


def test_preserves_other_top_level_keys(tmp_path):
    path = tmp_path / "quizzes.json"
    path.write_text(json.dumps({"version": 2, "quizzes": []}), encoding="utf-8")
    repository = FileQuizRepository(str(path))

    repository.create_quiz(_quiz("kept"))

    assert _read(path)["version"] == 2
    assert repository.load_document()["quizzes"] == [_quiz("kept")]


def test_get_returns_first_match(tmp_path):
    path = tmp_path / "quizzes.json"
    first, second = _quiz("dup"), dict(_quiz("dup"), title="Second")
    path.write_text(json.dumps({"quizzes": [first, second]}), encoding="utf-8")

    assert FileQuizRepository(str(path)).get_quiz("dup") == first


def test_unique_ids_enforced_when_requested(quiz_file):
    repository = FileQuizRepository(str(quiz_file))
    repository.create_quiz(_quiz("once"), unique_id=True)

    with pytest.raises(DuplicateQuizError):
        repository.create_quiz(_quiz("once"), unique_id=True)

    assert sum(1 for q in repository.list_quizzes() if q["id"] == "once") == 1


def test_wrong_layout_is_backend_error(tmp_path):
    path = tmp_path / "quizzes.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    with pytest.raises(CatalogBackendError):
        FileQuizRepository(str(path)).list_quizzes()


def test_write_keeps_existing_file_mode(quiz_file):
    os.chmod(quiz_file, 0o644)

    FileQuizRepository(str(quiz_file)).create_quiz(_quiz("shared"))

    assert stat.S_IMODE(os.stat(quiz_file).st_mode) == 0o644


def test_new_file_gets_umask_default_mode(tmp_path):
    path = tmp_path / "quizzes.json"

    FileQuizRepository(str(path)).create_quiz(_quiz("first"))

    assert stat.S_IMODE(os.stat(path).st_mode) == file_quiz_repository.DEFAULT_FILE_MODE
