"""
pdf_ref.py
======================

解説表示時に開く PDF 資料の参照文字列を組み立てる。

- 試験に resources が無ければ参照なし（""）
- 問題の ref に対応する資料があればそれを使う
- 無ければ resources の先頭（manifest に書かれた順）へフォールバック
- パスは先頭 "/" 1 つに正規化し、"#page=N&view=FitH" を付ける
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

PDF_VIEW_HINT = "FitH"


def normalize_public_path(pathname: Optional[str]) -> str:
    if not pathname:
        return ""
    return "/" + pathname.lstrip("/")


def _get(obj: Any, key: str, default: Any = None) -> Any:
    # dict（API レスポンス）でも dataclass（models）でも受け付ける
    if isinstance(obj, Mapping):
        return obj.get(key, default)
    return getattr(obj, key, default)


def select_resource(question: Any, exam: Any) -> Optional[str]:
    """問題に対応する資料パス（正規化前）を返す。選べなければ None。"""
    if exam is None:
        return None
    resources: Dict[str, str] = _get(exam, "resources") or {}
    if not resources:
        return None

    ref = _get(question, "ref")
    if ref and resources.get(ref):
        return resources[ref]

    for path in resources.values():
        return path or None
    return None


def build_pdf_src(question: Any, exam: Any) -> str:
    if question is None:
        return ""
    resource = select_resource(question, exam)
    if not resource:
        return ""

    page = _get(question, "page") or 1
    return f"{normalize_public_path(resource)}#page={page}&view={PDF_VIEW_HINT}"


def pdf_file_label(pdf_src: str) -> str:
    """ビューアのヘッダーに出すファイル名（"/docs/c1.pdf#page=3" → "c1.pdf"）。"""
    if not pdf_src:
        return ""
    return pdf_src.split("#", 1)[0].rsplit("/", 1)[-1]
