"""
どこで: `api.runner`。
何を: Controller と追加の Tickable を登録順に呼ぶ tick 関数を作り、FrameLoop（既定 `pyglet.clock`）で駆動する。
なぜ: 呼び出し側がウィンドウ/イベントループを持つだけで、開始と停止を 1 行で扱えるようにするため。

使用例:
    from api import Controller, TileLayer, start_loop

    tiles = TileLayer()
    ctrl = Controller(adapters=[tiles])
    loop = start_loop(ctrl)
    ctrl.play()
    pyglet.app.run()   # 呼び出し側のイベントループ
    loop.stop()
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from common.logging import setup_default_logging
from engine.core.frame_loop import FrameLoop
from engine.core.tickable import Tickable

from .controller import Controller, resolve_fps

logger = logging.getLogger(__name__)


def start_loop(
    controller: Controller,
    *,
    fps: int | None = None,
    extra_tickables: Sequence[Tickable] = (),
    clock_mod: Any | None = None,
    init_only: bool = False,
) -> FrameLoop:
    """FrameLoop を構築して開始し、返す。`init_only=True` なら開始せずに返す。

    1 回の tick で Controller → `extra_tickables` の順に `tick(dt)` を呼ぶ
    （追加分は常に当該 tick のフレームを参照できる）。
    """
    setup_default_logging()
    rate = resolve_fps(fps)
    tickables: tuple[Tickable, ...] = (controller, *extra_tickables)

    def _tick_all(dt: float) -> None:
        for t in tickables:
            t.tick(dt)

    loop = FrameLoop(_tick_all, fps=rate, clock_mod=clock_mod)
    if init_only:
        return loop
    loop.start()
    logger.info(
        "frame loop running at %d fps (%d rows, %d tickables)",
        rate,
        controller.config.row_count,
        len(tickables),
    )
    return loop


__all__ = ["start_loop"]
