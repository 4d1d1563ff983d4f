"""
tools/validate_data.py
===========================

データディレクトリ（manifest.json + 問題ファイル）を検査するスクリプト。
CI やデータ追加時に手元で実行する。

使い方:
    python tools/validate_data.py
    python tools/validate_data.py --data-dir path/to/data --strict

終了コード:
    0: 問題なし
    1: エラーあり（--strict の場合は警告もエラー扱い）
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from revision_hub.config import AppConfig
from revision_hub.logging_utils import configure_logging
from revision_hub.validation import validate_data_root


# -------------------------------------------------------------
#  CLI エントリーポイント
# -------------------------------------------------------------
def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Revision Hub 用データディレクトリ検査スクリプト",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="検査するデータディレクトリ（デフォルト: DATA_DIR または data/）",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="警告もエラーとして扱う",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="詳細ログを表示する",
    )
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    data_dir = args.data_dir or AppConfig().data_dir
    report = validate_data_root(data_dir)

    for msg in report.errors:
        print(f"[ERROR] {msg}")
    for msg in report.warnings:
        print(f"[WARN]  {msg}")

    print(
        f"{report.exams_checked} 試験 / {report.questions_checked} 問を検査しました"
        f"（エラー {len(report.errors)} 件, 警告 {len(report.warnings)} 件）"
    )

    if not report.ok or (args.strict and report.warnings):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
