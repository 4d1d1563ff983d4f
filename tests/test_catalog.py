"""Tests for the exam catalog."""
from pathlib import Path

import pytest

from revision_hub.catalog import find_exam, list_exams, load_manifest
from revision_hub.errors import DataCorruptError, DataUnavailableError

from conftest import MANIFEST, write_json


class TestListExams:
    """Tests for list_exams."""

    def test_returns_manifest_verbatim_in_order(self, data_root: Path) -> None:
        assert list_exams(data_root) == MANIFEST

    def test_uses_data_dir_env_by_default(self, data_env: Path) -> None:
        assert [e["id"] for e in list_exams()] == ["m1", "p1"]

    def test_missing_manifest_is_unavailable(self, tmp_path: Path) -> None:
        with pytest.raises(DataUnavailableError):
            list_exams(tmp_path)

    def test_invalid_json_is_corrupt(self, tmp_path: Path) -> None:
        (tmp_path / "manifest.json").write_text("[{", encoding="utf-8")
        with pytest.raises(DataCorruptError):
            list_exams(tmp_path)

    def test_non_utf8_manifest_is_corrupt(self, tmp_path: Path) -> None:
        (tmp_path / "manifest.json").write_bytes(b"[\xff]")
        with pytest.raises(DataCorruptError):
            list_exams(tmp_path)

    def test_non_array_is_corrupt(self, tmp_path: Path) -> None:
        write_json(tmp_path / "manifest.json", {"id": "m1"})
        with pytest.raises(DataCorruptError):
            list_exams(tmp_path)

    def test_duplicate_ids_are_corrupt(self, tmp_path: Path) -> None:
        write_json(tmp_path / "manifest.json", [{"id": "a"}, {"id": "a"}])
        with pytest.raises(DataCorruptError):
            list_exams(tmp_path)


class TestLoadManifest:
    """Tests for load_manifest / find_exam."""

    def test_typed_entries(self, data_root: Path) -> None:
        entries = load_manifest(data_root)
        assert entries[0].resources["chap1"] == "/docs/c1.pdf"
        assert entries[1].file == "physics/p1-questions.json"

    def test_find_exam(self, data_root: Path) -> None:
        entries = load_manifest(data_root)
        assert find_exam("p1", entries).title == "Physique 2023"
        assert find_exam("nope", entries) is None
