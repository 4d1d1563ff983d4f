"""Tests for exam loading and id validation."""
from pathlib import Path

import pytest

from revision_hub import exam_service
from revision_hub.errors import (
    BadRequestError,
    DataCorruptError,
    DataUnavailableError,
    NotFoundError,
    UnauthorizedPathError,
)
from revision_hub.exam_service import get_exam, validate_exam_id

from conftest import MANIFEST, write_json


def _fail(*_args, **_kwargs):
    raise AssertionError("file access must not happen")


class TestValidateExamId:
    """Tests for validate_exam_id."""

    @pytest.mark.parametrize(
        "exam_id",
        ["", None, 42, "..", "a..b", "a/b", "a\\b", "../m1", "x" * 51],
    )
    def test_rejects_unsafe_ids(self, exam_id) -> None:
        with pytest.raises(BadRequestError):
            validate_exam_id(exam_id)

    def test_accepts_fifty_chars(self) -> None:
        assert validate_exam_id("x" * 50) == "x" * 50

    @pytest.mark.parametrize("exam_id", ["a/b", "..", "x" * 51, ""])
    def test_get_exam_rejects_before_file_access(self, exam_id, monkeypatch) -> None:
        """Bad ids never reach the catalog or the question files."""
        monkeypatch.setattr(exam_service, "load_manifest", _fail)
        monkeypatch.setattr(exam_service, "load_questions", _fail)
        with pytest.raises(BadRequestError):
            get_exam(exam_id)


class TestGetExam:
    """Tests for get_exam."""

    def test_known_ids_return_matching_exam(self, data_root: Path) -> None:
        for entry in MANIFEST:
            payload = get_exam(entry["id"], data_root)
            assert payload["exam"]["id"] == entry["id"]

    def test_default_file_is_id_json(self, data_root: Path) -> None:
        payload = get_exam("m1", data_root)
        assert [q["id"] for q in payload["questions"]] == [1, 2]
        assert payload["questions"][1]["page"] == 1

    def test_explicit_file_override(self, data_root: Path) -> None:
        payload = get_exam("p1", data_root)
        assert payload["questions"][0]["question"] == "F = ?"

    def test_unknown_id_is_not_found_without_question_io(self, data_root: Path, monkeypatch) -> None:
        monkeypatch.setattr(exam_service, "load_questions", _fail)
        with pytest.raises(NotFoundError):
            get_exam("nope", data_root)

    def test_missing_question_file_names_expected_path(self, data_root: Path) -> None:
        (data_root / "m1.json").unlink()
        with pytest.raises(NotFoundError) as excinfo:
            get_exam("m1", data_root)
        assert "m1.json" in excinfo.value.message

    def test_malformed_json_is_corrupt_not_missing(self, data_root: Path) -> None:
        (data_root / "m1.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(DataCorruptError):
            get_exam("m1", data_root)

    def test_non_utf8_bytes_are_corrupt(self, data_root: Path) -> None:
        (data_root / "m1.json").write_bytes(b"[\xff\xfe]")
        with pytest.raises(DataCorruptError):
            get_exam("m1", data_root)

    def test_question_file_that_is_a_directory_is_unavailable(self, data_root: Path) -> None:
        (data_root / "m1.json").unlink()
        (data_root / "m1.json").mkdir()
        with pytest.raises(DataUnavailableError):
            get_exam("m1", data_root)

    def test_invalid_question_record_is_corrupt(self, data_root: Path) -> None:
        write_json(
            data_root / "m1.json",
            [{"id": 1, "options": ["a"], "correct": [4], "question": "?"}],
        )
        with pytest.raises(DataCorruptError):
            get_exam("m1", data_root)

    def test_questions_object_wrapper_is_accepted(self, data_root: Path) -> None:
        write_json(
            data_root / "m1.json",
            {"questions": [{"id": 9, "options": ["a", "b"], "correct": [1]}]},
        )
        assert get_exam("m1", data_root)["questions"][0]["id"] == 9

    def test_file_escaping_root_is_unauthorized(self, data_root: Path) -> None:
        write_json(
            data_root / "manifest.json",
            [{"id": "evil", "file": "../../etc/passwd"}],
        )
        with pytest.raises(UnauthorizedPathError):
            get_exam("evil", data_root)
