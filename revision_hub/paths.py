"""
paths.py
======================

論理ファイル名（"manifest.json" や manifest の "file"）を
データルート配下の絶対パスへ解決するモジュール。

正規化した絶対パスがデータルートの外に出る場合は
UnauthorizedPathError を送出する（"..", 絶対パス指定などのトラバーサル対策）。
manifest の読み込み・試験ごとの問題ファイル読み込みのたびに必ず通す。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

from .config import AppConfig
from .errors import UnauthorizedPathError

PathLike = Union[str, Path]


def get_data_root() -> Path:
    """設定済みのデータルート（DATA_DIR または data/）を返す。"""
    return AppConfig().data_dir


def _normalize(path: PathLike) -> str:
    return os.path.normpath(os.path.abspath(os.fspath(path)))


def is_within_root(candidate: PathLike, root: PathLike) -> bool:
    """candidate がルート自身、またはルート配下なら True。"""
    norm_root = _normalize(root)
    norm_candidate = _normalize(candidate)
    if norm_candidate == norm_root:
        return True
    # "/data2" を "/data" 配下と誤判定しないよう区切り文字まで含めて比較する
    prefix = norm_root if norm_root.endswith(os.sep) else norm_root + os.sep
    return norm_candidate.startswith(prefix)


def resolve_data_path(name: PathLike, root: Optional[PathLike] = None) -> Path:
    """
    データルート配下の絶対パスを返す。

    name が絶対パスの場合もそのまま検査する（ルート外なら拒否）。
    """
    base = Path(root) if root is not None else get_data_root()
    candidate = Path(name)
    if not candidate.is_absolute():
        candidate = base / candidate

    if not is_within_root(candidate, base):
        raise UnauthorizedPathError(
            "データルート外へのアクセスは許可されていません。",
            detail=f"{name!s} -> {_normalize(candidate)}",
        )
    return Path(_normalize(candidate))
