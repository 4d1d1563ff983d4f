import json
import sys
from pathlib import Path

import pytest

# Add repository root to sys.path so we can import revision_hub
ROOT_PATH = Path(__file__).resolve().parent.parent
if ROOT_PATH.as_posix() not in sys.path:
    sys.path.insert(0, ROOT_PATH.as_posix())


MANIFEST = [
    {
        "id": "m1",
        "subject": "Math",
        "code": "MA1",
        "type": "Partiel",
        "year": 2024,
        "title": "Math 2024",
        "description": "Analyse",
        "resources": {"chap1": "/docs/c1.pdf", "chap2": "docs/c2.pdf"},
    },
    {
        "id": "p1",
        "subject": "Physique",
        "code": "PH1",
        "type": "Final",
        "year": 2023,
        "title": "Physique 2023",
        "description": "Mécanique",
        "file": "physics/p1-questions.json",
    },
]

M1_QUESTIONS = [
    {
        "id": 1,
        "category": "Analyse",
        "question": "Quelle est la dérivée de x² ?",
        "options": ["a", "b"],
        "correct": [0],
        "explanation": "2x",
        "ref": "chap1",
        "page": 3,
    },
    {
        "id": 2,
        "category": "Algèbre",
        "question": "Lesquelles sont vraies ?",
        "options": ["w", "x", "y", "z"],
        "correct": [1, 2],
        "explanation": "x et y",
    },
]

P1_QUESTIONS = [
    {
        "id": 1,
        "category": "Mécanique",
        "question": "F = ?",
        "options": ["ma", "mv"],
        "correct": [0],
        "explanation": "Newton",
    }
]


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


# Common test fixtures
@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Build a data directory with a manifest and two exams."""
    root = tmp_path / "data"
    write_json(root / "manifest.json", MANIFEST)
    write_json(root / "m1.json", M1_QUESTIONS)
    write_json(root / "physics" / "p1-questions.json", P1_QUESTIONS)
    return root


@pytest.fixture
def data_env(data_root: Path, monkeypatch):
    """Point DATA_DIR at the temporary data directory."""
    monkeypatch.setenv("DATA_DIR", str(data_root))
    return data_root
