"""Tests for data path resolution."""
from pathlib import Path

import pytest

from revision_hub.errors import UnauthorizedPathError
from revision_hub.paths import get_data_root, is_within_root, resolve_data_path


class TestResolveDataPath:
    """Tests for resolve_data_path."""

    def test_relative_name_resolves_under_root(self, tmp_path: Path) -> None:
        """Plain file names land inside the root."""
        resolved = resolve_data_path("manifest.json", tmp_path)
        assert resolved == (tmp_path / "manifest.json")

    def test_nested_path_with_inner_dotdot_is_allowed(self, tmp_path: Path) -> None:
        """'..' that stays inside the root is normalized, not rejected."""
        resolved = resolve_data_path("exams/../m1.json", tmp_path)
        assert resolved == (tmp_path / "m1.json")

    @pytest.mark.parametrize(
        "candidate",
        [
            "../../etc/passwd",
            "../secret.json",
            "exams/../../outside.json",
            "/etc/passwd",
        ],
    )
    def test_escaping_paths_are_rejected(self, tmp_path: Path, candidate: str) -> None:
        """Traversal sequences and absolute overrides raise UnauthorizedPathError."""
        root = tmp_path / "data"
        root.mkdir()
        with pytest.raises(UnauthorizedPathError):
            resolve_data_path(candidate, root)

    def test_sibling_directory_with_shared_prefix_is_rejected(self, tmp_path: Path) -> None:
        """'/x/data2' is not inside '/x/data'."""
        root = tmp_path / "data"
        sibling = tmp_path / "data2" / "m1.json"
        with pytest.raises(UnauthorizedPathError):
            resolve_data_path(sibling, root)

    def test_absolute_path_inside_root_is_allowed(self, tmp_path: Path) -> None:
        """Absolute paths are fine as long as they stay under the root."""
        target = tmp_path / "m1.json"
        assert resolve_data_path(target, tmp_path) == target

    def test_error_message_does_not_expose_detail_publicly(self, tmp_path: Path) -> None:
        """The public message is generic; the detail carries the path."""
        with pytest.raises(UnauthorizedPathError) as excinfo:
            resolve_data_path("../../etc/passwd", tmp_path)
        assert "passwd" not in excinfo.value.public_message
        assert "passwd" in excinfo.value.detail


class TestIsWithinRoot:
    """Tests for is_within_root."""

    def test_root_itself_is_within(self, tmp_path: Path) -> None:
        assert is_within_root(tmp_path, tmp_path)

    def test_parent_is_not_within(self, tmp_path: Path) -> None:
        assert not is_within_root(tmp_path.parent, tmp_path)


class TestGetDataRoot:
    """Tests for get_data_root."""

    def test_env_override(self, tmp_path: Path, monkeypatch) -> None:
        """DATA_DIR overrides the default data directory."""
        monkeypatch.setenv("DATA_DIR", str(tmp_path))
        assert get_data_root() == tmp_path

    def test_default_is_repository_data_dir(self, monkeypatch) -> None:
        """Without DATA_DIR the repository's data/ directory is used."""
        monkeypatch.delenv("DATA_DIR", raising=False)
        assert get_data_root().name == "data"
