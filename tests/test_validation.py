"""Tests for data directory validation and its CLI."""
import sys
from pathlib import Path

from revision_hub.validation import validate_data_root

from conftest import ROOT_PATH, write_json

if (ROOT_PATH / "tools").as_posix() not in sys.path:
    sys.path.insert(0, (ROOT_PATH / "tools").as_posix())

import validate_data  # noqa: E402


class TestValidateDataRoot:
    """Tests for validate_data_root."""

    def test_clean_data_root(self, data_root: Path) -> None:
        report = validate_data_root(data_root)
        assert report.ok
        assert report.exams_checked == 2
        assert report.questions_checked == 3
        assert report.warnings == []

    def test_missing_manifest(self, tmp_path: Path) -> None:
        report = validate_data_root(tmp_path)
        assert not report.ok
        assert report.errors[0].startswith("manifest:")

    def test_missing_question_file_is_error(self, data_root: Path) -> None:
        (data_root / "m1.json").unlink()
        report = validate_data_root(data_root)
        assert len(report.errors) == 1
        assert report.errors[0].startswith("m1:")

    def test_non_utf8_question_file_is_reported(self, data_root: Path) -> None:
        (data_root / "m1.json").write_bytes(b"[\xff\xfe]")
        report = validate_data_root(data_root)
        assert report.errors and report.errors[0].startswith("m1:")
        assert report.exams_checked == 2

    def test_non_utf8_manifest_is_reported(self, data_root: Path) -> None:
        (data_root / "manifest.json").write_bytes(b"[\xff]")
        report = validate_data_root(data_root)
        assert not report.ok
        assert report.errors[0].startswith("manifest:")

    def test_question_file_that_is_a_directory_is_reported(self, data_root: Path) -> None:
        (data_root / "m1.json").unlink()
        (data_root / "m1.json").mkdir()
        report = validate_data_root(data_root)
        assert len(report.errors) == 1
        assert report.errors[0].startswith("m1:")

    def test_unknown_ref_is_warning(self, data_root: Path) -> None:
        write_json(
            data_root / "m1.json",
            [{"id": 1, "options": ["a"], "correct": [0], "ref": "missing"}],
        )
        report = validate_data_root(data_root)
        assert report.ok
        assert any("missing" in w for w in report.warnings)


class TestCli:
    """Tests for tools/validate_data.py."""

    def test_exit_zero_on_clean_data(self, data_root: Path, capsys) -> None:
        assert validate_data.main(["--data-dir", str(data_root)]) == 0
        assert "2 試験" in capsys.readouterr().out

    def test_exit_one_on_error(self, tmp_path: Path) -> None:
        assert validate_data.main(["--data-dir", str(tmp_path)]) == 1

    def test_exit_one_on_undecodable_file(self, data_root: Path, capsys) -> None:
        (data_root / "m1.json").write_bytes(b"[\xff\xfe]")
        assert validate_data.main(["--data-dir", str(data_root)]) == 1
        assert "[ERROR]" in capsys.readouterr().out

    def test_strict_fails_on_warning(self, data_root: Path) -> None:
        write_json(data_root / "m1.json", [])
        assert validate_data.main(["--data-dir", str(data_root)]) == 0
        assert validate_data.main(["--data-dir", str(data_root), "--strict"]) == 1
