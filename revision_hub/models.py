"""
models.py
======================

manifest のエントリ（ExamManifestEntry）と問題（Question）のデータモデル。

要件:
- JSON の dict から from_dict() で生成し、to_dict() で JSON へ戻せる
- 不正なレコードは ValueError（サービス側で DataCorruptError に変換する）
- manifest は「そのまま返す」ので、未知のキーも to_dict() で保持する
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


_ENTRY_KEYS = ("id", "subject", "code", "type", "year", "title", "description", "file", "resources")


@dataclass
class ExamManifestEntry:
    """manifest.json の 1 試験分。"""

    id: str
    subject: str = ""
    code: str = ""
    type: str = ""
    year: int = 0
    title: str = ""
    description: str = ""
    file: Optional[str] = None
    # 宣言順を保持する（フォールバック資料の選択に使う）
    resources: Dict[str, str] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExamManifestEntry":
        if not isinstance(data, dict):
            raise ValueError("manifest のエントリはオブジェクトである必要があります。")

        exam_id = data.get("id")
        if not isinstance(exam_id, str) or not exam_id:
            raise ValueError("manifest のエントリに id がありません。")

        try:
            year = int(data.get("year", 0))
        except (TypeError, ValueError):
            raise ValueError(f"year が整数ではありません: {exam_id}")

        file = data.get("file")
        if file is not None and not isinstance(file, str):
            raise ValueError(f"file は文字列である必要があります: {exam_id}")

        resources = data.get("resources") or {}
        if not isinstance(resources, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in resources.items()
        ):
            raise ValueError(f"resources は文字列の対応表である必要があります: {exam_id}")

        return cls(
            id=exam_id,
            subject=str(data.get("subject", "")),
            code=str(data.get("code", "")),
            type=str(data.get("type", "")),
            year=year,
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            file=file,
            resources=dict(resources),
            extra={k: v for k, v in data.items() if k not in _ENTRY_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "subject": self.subject,
            "code": self.code,
            "type": self.type,
            "year": self.year,
            "title": self.title,
            "description": self.description,
        }
        if self.file is not None:
            d["file"] = self.file
        if self.resources:
            d["resources"] = dict(self.resources)
        d.update(self.extra)
        return d


@dataclass
class Question:
    """
    1 問分のデータ。

    correct は選択肢 index の集合（1 つ以上、いずれも len(options) 未満）。
    correct が 2 つ以上なら複数選択問題として扱う。
    """

    id: int
    question: str
    options: List[str]
    correct: List[int]
    category: str = ""
    explanation: str = ""
    ref: Optional[str] = None
    page: int = 1

    @property
    def is_multi(self) -> bool:
        return len(self.correct) > 1

    @property
    def correct_set(self) -> frozenset:
        return frozenset(self.correct)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Question":
        if not isinstance(data, dict):
            raise ValueError("問題はオブジェクトである必要があります。")

        qid = data.get("id")
        if isinstance(qid, bool) or not isinstance(qid, int):
            raise ValueError(f"問題 id が整数ではありません: {qid!r}")

        options = data.get("options")
        if not isinstance(options, list) or not options or not all(
            isinstance(o, str) for o in options
        ):
            raise ValueError(f"options が不正です (id={qid})")

        correct = data.get("correct")
        if not isinstance(correct, list) or not correct:
            raise ValueError(f"correct が空です (id={qid})")
        for idx in correct:
            if isinstance(idx, bool) or not isinstance(idx, int) or not 0 <= idx < len(options):
                raise ValueError(f"correct の index が範囲外です (id={qid}): {idx!r}")

        page = data.get("page", 1)
        if page is None:
            page = 1
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValueError(f"page は 1 以上の整数である必要があります (id={qid})")

        ref = data.get("ref")
        if ref is not None and not isinstance(ref, str):
            raise ValueError(f"ref は文字列である必要があります (id={qid})")

        return cls(
            id=qid,
            question=str(data.get("question", "")),
            options=list(options),
            # 重複 index は 1 つにまとめる（順序は保持）
            correct=list(dict.fromkeys(correct)),
            category=str(data.get("category", "")),
            explanation=str(data.get("explanation", "")),
            ref=ref,
            page=page,
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "category": self.category,
            "question": self.question,
            "options": list(self.options),
            "correct": list(self.correct),
            "explanation": self.explanation,
            "page": self.page,
        }
        if self.ref is not None:
            d["ref"] = self.ref
        return d
