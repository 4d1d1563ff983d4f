"""
config.py
=========

アプリ全体で利用する設定値を一元管理する。
データルート、API の URL、PDF 資料の配信元、キャッシュ設定など
すべてこのクラスを通じて取得する。

本ファイルは API サーバー (api.py)・Streamlit UI (app.py)・
tools/validate_data.py の共通設定でもある。
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# 基本パス定義
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = ROOT_DIR / "data"
CONFIG_TOML_PATH = ROOT_DIR / "config.toml"

# ローカル開発用の .env（存在しなければ何もしない）
load_dotenv(ROOT_DIR / ".env")


# ------------------------------------------------------------
# config.toml
# ------------------------------------------------------------

def load_app_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    ルート config.toml を読み込む。
    読み込みに失敗しても空 dict を返す。
    """
    path = Path(path) if path is not None else CONFIG_TOML_PATH
    if not path.exists():
        return {}
    try:
        return toml.load(path)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("config.toml を読み込めませんでした: %s", exc)
        return {}


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name)
    return value if isinstance(value, dict) else {}


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    アプリ設定クラス。

    - データルート（DATA_DIR で上書き可能）
    - API / PDF 資料のベース URL
    - 本番モード判定（エラー詳細を返すかどうか）
    """

    # ---------- ファイルパス ----------
    data_dir: Path = None  # type: ignore[assignment]

    # ---------- API ----------
    api_base_url: str = ""
    assets_base_url: str = ""
    request_timeout: float = 10.0
    manifest_cache_seconds: int = 60

    # ---------- 実行環境 ----------
    production: Optional[bool] = None  # None なら REVISION_HUB_ENV で判定

    # ---------- 表示 ----------
    app_name: str = "Revision Hub"
    theme: str = "light"

    # ============================================================
    # 初期化処理
    # ============================================================

    def __post_init__(self):
        if self.data_dir is None:
            self.data_dir = self._load_data_dir()
        self.data_dir = Path(self.data_dir)

        if not self.api_base_url:
            self.api_base_url = os.environ.get(
                "REVISION_HUB_API_URL", "http://127.0.0.1:5000/api"
            )
        if not self.assets_base_url:
            self.assets_base_url = os.environ.get("REVISION_HUB_ASSETS_URL", "")

        if self.production is None:
            self.production = os.environ.get("REVISION_HUB_ENV", "").lower() == "production"

    @classmethod
    def from_toml(cls, path: Optional[Path] = None) -> "AppConfig":
        """config.toml の [api] / [app] セクションを反映した設定を返す。"""
        cfg = load_app_config(path)
        api = _section(cfg, "api")
        app = _section(cfg, "app")

        kwargs: Dict[str, Any] = {}
        if isinstance(api.get("base_url"), str):
            kwargs["api_base_url"] = api["base_url"]
        if isinstance(api.get("assets_url"), str):
            kwargs["assets_base_url"] = api["assets_url"]
        try:
            if "timeout" in api:
                kwargs["request_timeout"] = float(api["timeout"])
        except (TypeError, ValueError):
            logger.warning("[api].timeout が数値ではありません: %r", api.get("timeout"))
        if isinstance(app.get("name"), str):
            kwargs["app_name"] = app["name"]
        if isinstance(app.get("theme"), str):
            kwargs["theme"] = app["theme"]
        return cls(**kwargs)

    # ============================================================
    # 内部関数
    # ============================================================

    @staticmethod
    def _load_data_dir() -> Path:
        """DATA_DIR があればそれを、無ければリポジトリ直下の data/ を使う。"""
        env = os.environ.get("DATA_DIR")
        if env:
            return Path(env)
        return DEFAULT_DATA_DIR
