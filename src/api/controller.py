"""
どこで: `api.controller`。
何を: Clock と FrameConfig を唯一所有し、制御操作と 1 tick 分の更新（Clock 更新 → compute_frame →
      アダプタへ配信）を行う `Controller`。
なぜ: 共有可変状態を 1 箇所に閉じ込め、エンジン側は毎 tick 一貫したスナップショットだけを読むようにするため。

スレッド/再入:
- `tick()` は非再入。実行中に再度呼ばれた場合は何もしない（デバッグログのみ）。
- 設定変更（`update_config`）は tick の合間にいつでも可能。次の tick から反映される。
- 手動一時停止中は、操作（step/reset 等）か設定変更があった次の tick だけフレームを配信する。
"""

from __future__ import annotations

import logging
import time
from dataclasses import fields
from typing import Any, Callable, Iterable

from common.settings import get as _get_settings
from engine.core.clock import Clock, ClockSnapshot, SyncMode, clamp_velocity
from engine.core.frame import FrameConfig, FrameResult, compute_frame
from engine.core.rows import build_rows
from engine.core.tickable import Tickable
from engine.render.types import RendererAdapter
from util.utils import config_section

logger = logging.getLogger(__name__)


def _wall_time_ms() -> float:
    return time.time() * 1000.0


def default_frame_config(**overrides: Any) -> FrameConfig:
    """既定の FrameConfig を解決する。

    優先順: `overrides` > 設定ファイル `lanes:` 節 > 環境変数（`common.settings`）> 型の既定値。
    設定ファイルの未知キーは無視する。
    """
    settings = _get_settings()
    values: dict[str, Any] = {
        "row_count": settings.DEFAULT_ROW_COUNT,
        "tail_type": settings.DEFAULT_TAIL_TYPE,
        "palette": settings.DEFAULT_PALETTE,
    }
    known = {f.name for f in fields(FrameConfig)}
    for key, val in config_section("lanes").items():
        if key in known:
            values[key] = val
        else:
            logger.debug("ignoring unknown lanes config key: %s", key)
    values.update(overrides)
    return FrameConfig(**values).validate()


def resolve_fps(requested_fps: int | None) -> int:
    """FPS を解決して 1 以上の int を返す。

    - 明示指定があればそれを優先（<=0 は 1 に丸める）。
    - それ以外は設定ファイル `loop.fps`、無ければ環境変数 `HRM_TARGET_FPS`。
    """
    if requested_fps is not None:
        return max(1, int(requested_fps))
    default = _get_settings().TARGET_FPS
    try:
        return max(1, int(config_section("loop").get("fps", default)))
    except (TypeError, ValueError):
        return max(1, int(default))


class Controller(Tickable):
    """制御面と tick ハンドラ。"""

    def __init__(
        self,
        config: FrameConfig | None = None,
        *,
        clock: Clock | None = None,
        adapters: Iterable[RendererAdapter] = (),
        wall_time_ms: Callable[[], float] = _wall_time_ms,
    ) -> None:
        self._config = (config or default_frame_config()).validate()
        self._clock = clock or Clock(velocity=_get_settings().DEFAULT_VELOCITY)
        self._adapters: list[RendererAdapter] = list(adapters)
        self._wall_time_ms = wall_time_ms
        self._last_frame: FrameResult | None = None
        self._dirty = True
        self._in_tick = False

    # ---- 参照 ---------------------------------------------------------
    @property
    def config(self) -> FrameConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def last_frame(self) -> FrameResult | None:
        return self._last_frame

    def add_adapter(self, adapter: RendererAdapter) -> None:
        self._adapters.append(adapter)
        self._dirty = True

    # ---- 制御面 -------------------------------------------------------
    def play(self) -> None:
        self._clock.play()
        self._dirty = True

    def pause(self) -> None:
        self._clock.pause()
        self._dirty = True

    def toggle_play_pause(self) -> None:
        self._clock.toggle_play_pause()
        self._dirty = True

    def step(self) -> None:
        self._clock.step()
        self._dirty = True

    def reset(self) -> None:
        self._clock.reset()
        self._dirty = True

    def set_velocity(self, velocity: float) -> None:
        self._clock.set_velocity(clamp_velocity(velocity))

    def set_sync_mode(self, mode: SyncMode | str) -> None:
        self._clock.set_sync_mode(mode)
        self._dirty = True

    def update_config(self, **changes: Any) -> FrameConfig:
        """設定を差し替える（検証に失敗した場合は `ValueError` で、現在の設定は変わらない）。"""
        new = self._config.with_changes(**changes).validate()
        self._config = new
        self._dirty = True
        logger.debug("config updated: %s", ", ".join(sorted(changes)))
        return new

    # ---- フレーム -----------------------------------------------------
    def frame(self, snapshot: ClockSnapshot | None = None) -> FrameResult:
        """Clock のスナップショットで 1 フレームを計算する（Clock は進めない）。"""
        snap = snapshot or self._clock.snapshot()
        config = self._config
        return compute_frame(snap.step_value, build_rows(config.row_count), config)

    def tick(self, dt: float) -> None:
        """Clock を `dt` 秒ぶん進め、フレームを計算してアダプタへ配信する。

        Clock が止まっていて（手動一時停止）前回の配信以降に操作も設定変更も無ければ、
        再計算も配信もしない。
        """
        if self._in_tick:
            logger.debug("tick re-entered; ignored")
            return
        self._in_tick = True
        try:
            self._clock.update(float(dt) * 1000.0, self._wall_time_ms())
            if not (self._clock.is_running or self._dirty):
                return
            snap = self._clock.snapshot()
            frame = self.frame(snap)
            self._last_frame = frame
            self._dirty = False
            for adapter in self._adapters:
                adapter.present(frame)
            if _get_settings().DEBUG_FRAMES:
                logger.debug(
                    "frame step=%.4f (%d, %s) markers=%d focus=%.2f",
                    snap.step_value,
                    snap.integer_step,
                    self._clock.state.value,
                    frame.marker_count,
                    frame.focus_displacement,
                )
        finally:
            self._in_tick = False


__all__ = ["Controller", "default_frame_config", "resolve_fps"]
