"""
revision_hub パッケージ
======================

このパッケージは、試験対策クイズアプリ Revision Hub の内部ロジックを提供する。

主な役割:
- 設定管理（config）
- データルート内へのパス解決（paths）
- 試験カタログ / 試験データの読み込み（catalog, exam_service）
- ヘルスチェック（health）
- HTTP API（api）
- クイズの状態遷移（session）と PDF 参照の組み立て（pdf_ref）
- UI コンポーネント（ui）

app.py は Streamlit UI のみを担当し、内部ロジックはすべて本パッケージから呼ぶ。
ui は streamlit を読み込むため、ここでは import しない。
"""

from .config import AppConfig
from .errors import (
    BadRequestError,
    DataCorruptError,
    DataUnavailableError,
    NotFoundError,
    RevisionHubError,
    UnauthorizedPathError,
)
from .models import ExamManifestEntry, Question
from .paths import resolve_data_path
from .catalog import list_exams
from .exam_service import get_exam
from .session import QuizController, QuizState

__all__ = [
    "AppConfig",
    "BadRequestError",
    "DataCorruptError",
    "DataUnavailableError",
    "NotFoundError",
    "RevisionHubError",
    "UnauthorizedPathError",
    "ExamManifestEntry",
    "Question",
    "resolve_data_path",
    "list_exams",
    "get_exam",
    "QuizController",
    "QuizState",
]
