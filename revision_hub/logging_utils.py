"""
logging_utils.py
======================

ログ出力の初期化。API サーバー・tools の起動時に 1 度だけ呼ぶ。
"""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_NAME = "revision_hub"


def configure_logging(level: int = logging.INFO, logger_name: Optional[str] = None) -> logging.Logger:
    """
    指定ロガー（None ならルート）にストリームハンドラを 1 つだけ追加する。
    何度呼んでもハンドラは増えない。
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return logger

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
