"""
どこで: `common.logging`。
何を: ランナー起動時に 1 度だけ適用する最小ロギング構成。
なぜ: ライブラリ側は `logging.getLogger(__name__)` で出力するだけにし、
      ハンドラ/レベルの決定は環境変数（`HRM_LOG_LEVEL` / `HRM_DEBUG_FRAMES`）とアプリ側へ委ねるため。
"""

from __future__ import annotations

import logging

from .settings import get as _get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# HRM_DEBUG_FRAMES=1 のとき DEBUG へ下げるロガー
FRAME_LOGGERS = ("api.controller", "engine.core.frame_loop")


def _as_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def setup_default_logging(level: int | str | None = None) -> None:
    """ルートにハンドラが無ければ basicConfig を適用する。

    `level` 未指定時は設定の `LOG_LEVEL`。フレーム単位のデバッグ出力が有効なら
    `FRAME_LOGGERS` だけを DEBUG にする（既存ハンドラの有無に関係なく適用）。
    """
    settings = _get_settings()
    if settings.DEBUG_FRAMES:
        for name in FRAME_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)

    if logging.getLogger().handlers:
        return
    logging.basicConfig(
        level=_as_level(settings.LOG_LEVEL if level is None else level),
        format=LOG_FORMAT,
    )


__all__ = ["setup_default_logging", "LOG_FORMAT", "FRAME_LOGGERS"]
