"""
client.py
======================

Streamlit UI から API を呼び出す HTTP クライアント（requests）。

- 2xx 以外・JSON でない応答は ApiClientError に変換する
- メッセージはサーバーの {"error": ...} をそのまま使う（UI のバナーに出す）
- 自動リトライはしない（再試行はユーザー操作に任せる）
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ExamApiClient:
    """
    /api/exams 系エンドポイントのクライアント。

    主な機能:
    - list_exams(): 試験カタログ
    - get_exam(): 試験 1 件（manifest エントリ + 問題）
    - health(): ヘルスチェック
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------
    def _get(self, path: str, *, ok_statuses: tuple = (200,)) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("request failed: %s (%s)", url, exc)
            raise ApiClientError(f"サーバーに接続できませんでした: {exc}")

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code not in ok_statuses:
            message = None
            if isinstance(data, dict):
                message = data.get("error")
            raise ApiClientError(
                message or f"サーバーエラー (HTTP {resp.status_code})",
                status_code=resp.status_code,
            )

        if data is None:
            raise ApiClientError("サーバーの応答が JSON ではありません。", status_code=resp.status_code)
        return data

    # ------------------------------------------------------------
    # 公開 API
    # ------------------------------------------------------------
    def list_exams(self) -> List[Dict[str, Any]]:
        data = self._get("/exams")
        if not isinstance(data, list):
            raise ApiClientError("試験カタログの形式が不正です。")
        return data

    def get_exam(self, exam_id: str) -> Dict[str, Any]:
        data = self._get(f"/exams/{quote(exam_id, safe='')}")
        if not isinstance(data, dict) or "exam" not in data:
            raise ApiClientError("試験データの形式が不正です。")
        return data

    def health(self) -> Dict[str, Any]:
        return self._get("/health", ok_statuses=(200, 503))
