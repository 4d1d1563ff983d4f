"""
health.py
======================

データルートと manifest.json が利用可能かを確認するヘルスチェック。

check() は例外を投げない。失敗はすべて戻り値の中に記録する:

{
  "status": "healthy" | "unhealthy",
  "timestamp": "2024-01-01T00:00:00Z",
  "checks": {"dataDirectory": bool, "manifestFile": bool},
  "error": "..."   # unhealthy の場合のみ
}
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .catalog import MANIFEST_NAME
from .paths import PathLike, get_data_root, resolve_data_path

logger = logging.getLogger(__name__)


def check(root: Optional[PathLike] = None) -> Dict[str, Any]:
    result: Dict[str, Any] = {
        "status": "healthy",
        "timestamp": _now_iso(),
        "checks": {
            "dataDirectory": False,
            "manifestFile": False,
        },
    }

    try:
        base = Path(root) if root is not None else get_data_root()
        if not base.is_dir():
            raise FileNotFoundError(f"data directory not found: {base}")
        result["checks"]["dataDirectory"] = True

        path = resolve_data_path(MANIFEST_NAME, base)
        json.loads(path.read_text(encoding="utf-8"))
        result["checks"]["manifestFile"] = True
    except Exception as exc:
        logger.warning("health check failed: %s", exc)
        result["status"] = "unhealthy"
        result["error"] = str(exc)

    return result


def is_healthy(result: Dict[str, Any]) -> bool:
    return result.get("status") == "healthy"


# ----------------------------------------------------------------------
# ユーティリティ
# ----------------------------------------------------------------------
def _now_iso() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
