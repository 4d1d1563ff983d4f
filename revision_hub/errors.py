"""
errors.py
======================

データ読み込み API の例外体系。

- BadRequestError      : 不正・危険な試験 ID（クライアント側で修正可能）
- NotFoundError        : 未知の試験 ID / 問題ファイルが存在しない
- DataCorruptError     : manifest / 問題ファイルの JSON が壊れている
- DataUnavailableError : manifest 自体が読めない
- UnauthorizedPathError: データルート外へのアクセス（詳細は外部に出さない）

各例外は HTTP ステータスと、呼び出し側にそのまま返してよい message を持つ。
"""

from __future__ import annotations

from typing import Optional


class RevisionHubError(Exception):
    """全例外の基底クラス。"""

    status_code: int = 500
    default_message: str = "サーバー内部でエラーが発生しました。"

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None):
        self.message = message or self.default_message
        # detail は開発環境でのみレスポンスに含める
        self.detail = detail
        super().__init__(self.message)

    @property
    def public_message(self) -> str:
        return self.message


class BadRequestError(RevisionHubError):
    status_code = 400
    default_message = "試験 ID が不正です。"


class NotFoundError(RevisionHubError):
    status_code = 404
    default_message = "試験が見つかりません。"


class DataCorruptError(RevisionHubError):
    status_code = 500
    default_message = "試験データが壊れています。"


class DataUnavailableError(RevisionHubError):
    status_code = 500
    default_message = "試験カタログを読み込めません。"


class UnauthorizedPathError(RevisionHubError):
    status_code = 500
    default_message = "許可されていないデータパスです。"

    @property
    def public_message(self) -> str:
        # パス構造を漏らさないよう汎用メッセージに置き換える
        return RevisionHubError.default_message
