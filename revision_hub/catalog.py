"""
catalog.py
===========================

manifest.json（試験カタログ）を読み込むモジュール。

目的:
- パス解決は必ず paths.resolve_data_path を通す
- ファイルが無い → DataUnavailableError
- JSON が壊れている / 配列でない / id 重複 → DataCorruptError
- 部分的な結果は返さない（全件成功か、例外か）
- 読み取り専用。キャッシュは持たない（HTTP 側のキャッシュヒントに任せる）
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .errors import DataCorruptError, DataUnavailableError
from .models import ExamManifestEntry
from .paths import PathLike, get_data_root, resolve_data_path

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


# ----------------------------------------------------------------------
#  JSON 読み込み
# ----------------------------------------------------------------------
def _read_manifest_raw(root: Optional[PathLike] = None) -> Tuple[List[Dict[str, Any]], List[ExamManifestEntry]]:
    base = Path(root) if root is not None else get_data_root()
    path = resolve_data_path(MANIFEST_NAME, base)

    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise DataUnavailableError(detail=f"manifest が見つかりません: {path}")
    except UnicodeDecodeError as exc:
        raise DataCorruptError(
            "試験カタログが UTF-8 ではありません。",
            detail=f"{MANIFEST_NAME}: {exc}",
        )
    except OSError as exc:
        raise DataUnavailableError(detail=f"manifest を読めません: {exc}")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DataCorruptError(
            "試験カタログの JSON が不正です。",
            detail=f"{MANIFEST_NAME}: {exc}",
        )

    if not isinstance(data, list):
        raise DataCorruptError(
            "試験カタログは配列である必要があります。",
            detail=f"{MANIFEST_NAME}: {type(data).__name__}",
        )

    entries: List[ExamManifestEntry] = []
    seen = set()
    for item in data:
        try:
            entry = ExamManifestEntry.from_dict(item)
        except ValueError as exc:
            raise DataCorruptError("試験カタログのエントリが不正です。", detail=str(exc))
        if entry.id in seen:
            raise DataCorruptError(
                "試験カタログに重複した id があります。",
                detail=f"duplicate id: {entry.id}",
            )
        seen.add(entry.id)
        entries.append(entry)

    return data, entries


# ----------------------------------------------------------------------
#  公開ヘルパー
# ----------------------------------------------------------------------
def list_exams(root: Optional[PathLike] = None) -> List[Dict[str, Any]]:
    """manifest の内容を宣言順のまま返す。"""
    raw, entries = _read_manifest_raw(root)
    logger.debug("manifest: %d exams", len(entries))
    return raw


def load_manifest(root: Optional[PathLike] = None) -> List[ExamManifestEntry]:
    """manifest を ExamManifestEntry のリストとして返す。"""
    _raw, entries = _read_manifest_raw(root)
    return entries


def find_exam(exam_id: str, entries: List[ExamManifestEntry]) -> Optional[ExamManifestEntry]:
    """id 完全一致で 1 件取得"""
    for entry in entries:
        if entry.id == exam_id:
            return entry
    return None
