"""ロギング設定。

モジュールごとに名前付きロガーを取得する。
レベルは環境変数 COST_TREE_LOG_LEVEL で指定（既定 INFO）。
"""

import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = os.getenv("COST_TREE_LOG_LEVEL", "INFO").upper()


def get_logger(name: str) -> logging.Logger:
    """コンソール出力付きのロガーを返す。ハンドラは初回のみ追加する。"""
    logger = logging.getLogger(name)
    logger.setLevel(DEFAULT_LEVEL)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handler.setLevel(DEFAULT_LEVEL)
        logger.addHandler(handler)
        logger.propagate = False

    return logger
