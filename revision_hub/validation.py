"""
validation.py
======================

データルート全体（manifest + 各試験の問題ファイル）を検査する。
tools/validate_data.py から呼ばれる。

検査内容:
- manifest.json が読めて、配列で、id が重複していない
- 各試験の問題ファイルがデータルート内に解決でき、読めて、問題が正しい形式
- 問題の ref が試験の resources に存在するか（警告のみ）
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .catalog import load_manifest
from .errors import RevisionHubError
from .exam_service import load_questions, validate_exam_id
from .paths import PathLike

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    exams_checked: int = 0
    questions_checked: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _describe(exc: RevisionHubError) -> str:
    return f"{exc.message} ({exc.detail})" if exc.detail else exc.message


def validate_data_root(root: Optional[PathLike] = None) -> ValidationReport:
    report = ValidationReport()

    try:
        entries = load_manifest(root)
    except RevisionHubError as exc:
        report.errors.append(f"manifest: {_describe(exc)}")
        return report

    for entry in entries:
        report.exams_checked += 1
        try:
            validate_exam_id(entry.id)
            questions = load_questions(entry, root)
        except RevisionHubError as exc:
            report.errors.append(f"{entry.id}: {_describe(exc)}")
            continue

        report.questions_checked += len(questions)
        if not questions:
            report.warnings.append(f"{entry.id}: 問題が 0 件です")

        seen_ids = set()
        for q in questions:
            if q.id in seen_ids:
                report.warnings.append(f"{entry.id}: 問題 id {q.id} が重複しています")
            seen_ids.add(q.id)
            if q.ref and q.ref not in entry.resources:
                report.warnings.append(
                    f"{entry.id}: 問題 {q.id} の ref '{q.ref}' が resources にありません"
                )

    logger.info(
        "validated %d exams / %d questions: %d errors, %d warnings",
        report.exams_checked,
        report.questions_checked,
        len(report.errors),
        len(report.warnings),
    )
    return report
