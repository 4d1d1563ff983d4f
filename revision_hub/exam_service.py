"""
exam_service.py
===========================

試験 ID を検証し、manifest のエントリと問題リストをまとめて返すモジュール。

手順:
1. ID を検証（空 / 文字列以外 / 50 文字超 / "..", "/", "\\" を含む → BadRequestError）
   ※ この時点ではファイルに一切触れない
2. manifest を読み込み、該当 ID が無ければ NotFoundError（問題ファイルは読まない）
3. 問題ファイルの場所を決定（エントリの "file"、無ければ "{id}.json"）
4. データルート内に解決して読み込む
   - ファイルが無い → NotFoundError（期待したパスを明示）
   - JSON / 問題レコードが不正 → DataCorruptError
5. {"exam": ..., "questions": [...]} を返す

読み取り専用で、リクエスト間で共有する可変状態は持たない。
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .catalog import find_exam, load_manifest
from .errors import BadRequestError, DataCorruptError, DataUnavailableError, NotFoundError
from .models import ExamManifestEntry, Question
from .paths import PathLike, get_data_root, resolve_data_path

logger = logging.getLogger(__name__)

MAX_EXAM_ID_LENGTH = 50
_FORBIDDEN_SEQUENCES = ("..", "/", "\\")


# ----------------------------------------------------------------------
#  ID 検証
# ----------------------------------------------------------------------
def validate_exam_id(exam_id: Any) -> str:
    """安全な試験 ID ならそのまま返す。それ以外は BadRequestError。"""
    if not isinstance(exam_id, str) or not exam_id:
        raise BadRequestError("試験 ID が指定されていません。")
    if len(exam_id) > MAX_EXAM_ID_LENGTH:
        raise BadRequestError(f"試験 ID は {MAX_EXAM_ID_LENGTH} 文字以内で指定してください。")
    if any(seq in exam_id for seq in _FORBIDDEN_SEQUENCES):
        raise BadRequestError("試験 ID に使用できない文字が含まれています。")
    return exam_id


# ----------------------------------------------------------------------
#  問題ファイル
# ----------------------------------------------------------------------
def question_file_for(entry: ExamManifestEntry) -> str:
    """エントリの file 指定、無ければ "{id}.json"（データルートからの相対）。"""
    return entry.file or f"{entry.id}.json"


def _parse_questions(data: Any, relative: str) -> List[Question]:
    # 配列そのもの、または {"questions": [...]} を受け付ける
    if isinstance(data, dict) and "questions" in data:
        data = data["questions"]
    if not isinstance(data, list):
        raise DataCorruptError(
            "問題ファイルは配列である必要があります。",
            detail=f"{relative}: {type(data).__name__}",
        )

    questions: List[Question] = []
    for item in data:
        try:
            questions.append(Question.from_dict(item))
        except ValueError as exc:
            raise DataCorruptError("問題データが不正です。", detail=f"{relative}: {exc}")
    return questions


def load_questions(entry: ExamManifestEntry, root: Optional[PathLike] = None) -> List[Question]:
    base = Path(root) if root is not None else get_data_root()
    relative = question_file_for(entry)
    path = resolve_data_path(relative, base)

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise NotFoundError(f"問題ファイルが見つかりません: {relative}")
    except UnicodeDecodeError as exc:
        raise DataCorruptError(
            "問題ファイルが UTF-8 ではありません。",
            detail=f"{relative}: {exc}",
        )
    except OSError as exc:
        # ディレクトリ・権限不足など
        raise DataUnavailableError(
            "問題ファイルを読めません。",
            detail=f"{relative}: {exc}",
        )

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DataCorruptError(
            "問題ファイルの JSON が不正です。",
            detail=f"{relative}: {exc}",
        )

    return _parse_questions(data, relative)


# ----------------------------------------------------------------------
#  公開 API
# ----------------------------------------------------------------------
def get_exam(exam_id: Any, root: Optional[PathLike] = None) -> Dict[str, Any]:
    """
    試験 1 件分のペイロードを返す。

    戻り値:
        {
          "exam": manifest のエントリ（dict）,
          "questions": 問題 dict のリスト,
        }
    """
    exam_id = validate_exam_id(exam_id)

    entry = find_exam(exam_id, load_manifest(root))
    if entry is None:
        raise NotFoundError("試験が見つかりません。", detail=f"id={exam_id}")

    questions = load_questions(entry, root)
    logger.debug("exam %s: %d questions", exam_id, len(questions))

    return {
        "exam": entry.to_dict(),
        "questions": [q.to_dict() for q in questions],
    }
