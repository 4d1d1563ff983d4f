"""
api.py
======================

試験データを返す読み取り専用の HTTP API（Flask）。

エンドポイント:
- GET /api/exams        : manifest の配列（短い TTL のキャッシュヒント付き）
- GET /api/exams/<id>   : {"exam": ..., "questions": [...]}
- GET /api/health       : ヘルスチェック（unhealthy なら 503）

エラーはすべて {"error": "..."} の JSON で返す。
本番以外では "detail" に診断情報を含める。

起動:
    python -m revision_hub.api
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from flask import Flask, Response, current_app, jsonify
from werkzeug.exceptions import HTTPException

from .catalog import list_exams
from .config import AppConfig
from .errors import (
    DataCorruptError,
    DataUnavailableError,
    NotFoundError,
    RevisionHubError,
    UnauthorizedPathError,
)
from .exam_service import get_exam
from .health import check, is_healthy
from .logging_utils import configure_logging

logger = logging.getLogger(__name__)

CONFIG_KEY = "REVISION_HUB_CONFIG"


def _config() -> AppConfig:
    return current_app.config[CONFIG_KEY]


def _error_response(message: str, status: int, detail: Optional[str] = None) -> Response:
    body = {"error": message}
    if detail and not _config().production:
        body["detail"] = detail
    resp = jsonify(body)
    resp.status_code = status
    return resp


# ----------------------------------------------------------------------
#  アプリケーションファクトリ
# ----------------------------------------------------------------------
def create_app(config: Optional[AppConfig] = None) -> Flask:
    app = Flask(__name__)
    app.config[CONFIG_KEY] = config or AppConfig()
    app.json.sort_keys = False
    app.json.ensure_ascii = False

    @app.after_request
    def _secure_headers(resp: Response):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        return resp

    # ---------- ルーティング ----------

    @app.get("/api/exams")
    def exams_index():
        cfg = _config()
        resp = jsonify(list_exams(cfg.data_dir))
        ttl = cfg.manifest_cache_seconds
        resp.headers["Cache-Control"] = (
            f"public, s-maxage={ttl}, stale-while-revalidate={ttl * 5}"
        )
        return resp

    @app.get("/api/exams/<path:exam_id>")
    def exams_show(exam_id: str):
        # <path:...> で受けて "/" を含む ID も exam_service 側で 400 にする
        resp = jsonify(get_exam(exam_id, _config().data_dir))
        resp.headers["Cache-Control"] = "no-store"
        return resp

    @app.get("/api/health")
    def health():
        result = check(_config().data_dir)
        resp = jsonify(result)
        resp.status_code = 200 if is_healthy(result) else 503
        resp.headers["Cache-Control"] = "no-store"
        return resp

    # ---------- エラーハンドラ ----------

    @app.errorhandler(RevisionHubError)
    def _domain_error(exc: RevisionHubError):
        if isinstance(exc, UnauthorizedPathError):
            logger.warning("unauthorized data path: %s", exc.detail)
            return _error_response(exc.public_message, exc.status_code)
        if isinstance(exc, (DataCorruptError, DataUnavailableError)):
            logger.error("exam data error: %s (%s)", exc.message, exc.detail)
        elif isinstance(exc, NotFoundError):
            logger.info("not found: %s", exc.message)
        return _error_response(exc.public_message, exc.status_code, exc.detail)

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return _error_response(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.exception("unexpected error")
        return _error_response(RevisionHubError.default_message, 500, repr(exc))

    return app


# ----------------------------------------------------------------------
#  開発用サーバー
# ----------------------------------------------------------------------
def main() -> None:
    # 本番は gunicorn などの WSGI サーバーで create_app() を使う
    configure_logging(logging.INFO)
    debug = os.getenv("FLASK_DEBUG", "0").lower() in ("1", "true", "yes", "on")
    host = os.getenv("APP_HOST", "127.0.0.1")
    port = int(os.getenv("APP_PORT", "5000"))

    config = AppConfig()
    logger.info("data directory: %s", config.data_dir)
    app = create_app(config)
    app.run(debug=debug, host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
