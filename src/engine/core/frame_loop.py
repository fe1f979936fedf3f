"""
どこで: `engine.core.frame_loop`。
何を: 一定間隔でコールバックを呼ぶ、明示的に開始/停止できる反復タスク `FrameLoop`。
なぜ: 自己再スケジュールの暗黙ループをやめ、停止を決定的かつ表示なしでテスト可能にするため。

注意:
- 既定のドライバは `pyglet.clock`（`schedule_interval` / `unschedule`）。遅延 import。
- テストでは同じ 2 関数を持つ任意のオブジェクトを `clock_mod` に渡せる。
- コールバックは非再入。実行中に再度呼ばれた場合は無視する。
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class FrameLoop:
    """`start()` / `stop()` を持つ反復タスク。"""

    def __init__(
        self,
        callback: Callable[[float], None],
        *,
        fps: int = 60,
        clock_mod: Any | None = None,
    ) -> None:
        if int(fps) <= 0:
            raise ValueError(f"fps must be > 0, got {fps}")
        self._callback = callback
        self._interval = 1.0 / float(fps)
        self._clock_mod = clock_mod
        self._running = False
        self._in_tick = False
        self._ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def ticks(self) -> int:
        """開始以降に完了した tick 数。"""
        return self._ticks

    def start(self) -> None:
        if self._running:
            return
        clock = self._resolve_clock()
        clock.schedule_interval(self._on_tick, self._interval)
        self._running = True
        logger.debug("frame loop started (interval=%.4fs)", self._interval)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._resolve_clock().unschedule(self._on_tick)
        logger.debug("frame loop stopped after %d ticks", self._ticks)

    def _on_tick(self, dt: float) -> None:
        # 停止後に既にキュー済みの呼び出しが来ても何もしない
        if not self._running or self._in_tick:
            return
        self._in_tick = True
        try:
            self._callback(dt)
            self._ticks += 1
        except Exception:
            logger.exception("frame loop callback failed; stopping")
            self.stop()
            raise
        finally:
            self._in_tick = False

    def _resolve_clock(self) -> Any:
        if self._clock_mod is None:
            import pyglet

            self._clock_mod = pyglet.clock
        return self._clock_mod


__all__ = ["FrameLoop"]
