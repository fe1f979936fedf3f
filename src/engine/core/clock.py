"""
どこで: `engine.core.clock`。
何を: 全行が共有する連続ステップ値 N と同期モードを保持する `Clock` と、その状態機械。
なぜ: 唯一の時間軸を 1 箇所でのみ書き換え、再生/一時停止/同期モードの遷移を検証可能にするため。

状態:
- Manual-Paused / Manual-Playing: `step_value` は `velocity`[step/ms] で手動駆動。
- WallSync-Seconds / WallSync-Millis: `step_value` は壁時計（秒 / ミリ秒）に追従。

注意:
- 壁時計同期中に `toggle_play_pause()` すると MANUAL かつ一時停止になる（再生はしない）。
  速度の急変を避ける挙動であり、維持すること。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

VELOCITY_MIN = 0.001
VELOCITY_MAX = 0.05
DEFAULT_VELOCITY = 0.01


class SyncMode(str, Enum):
    """ステップ値の駆動源。値は外部設定（YAML/環境変数）での表記。"""

    MANUAL = "manual"
    WALL_SECONDS = "seconds"
    WALL_MILLIS = "ms"

    @classmethod
    def coerce(cls, value: "SyncMode | str") -> "SyncMode":
        """文字列表記も受理して `SyncMode` を返す。未知の値は `ValueError`。"""
        if isinstance(value, SyncMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"invalid sync mode: {value!r}; allowed={allowed}") from e


class ClockState(str, Enum):
    MANUAL_PAUSED = "manual-paused"
    MANUAL_PLAYING = "manual-playing"
    WALL_SECONDS = "wallsync-seconds"
    WALL_MILLIS = "wallsync-millis"


def clamp_velocity(value: float) -> float:
    """速度を [VELOCITY_MIN, VELOCITY_MAX] に丸める（呼び出し側の検証用）。

    数値化できない/非有限の値は既定値を返す。
    """
    try:
        v = float(value)
    except (TypeError, ValueError):
        return DEFAULT_VELOCITY
    if not math.isfinite(v):
        return DEFAULT_VELOCITY
    return max(VELOCITY_MIN, min(VELOCITY_MAX, v))


def sanitize_step(value: float) -> float:
    """非有限（NaN/inf）のステップ値を 0 に丸める。"""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) else 0.0


@dataclass(frozen=True)
class ClockSnapshot:
    """1 tick 分の読み取り専用スナップショット。"""

    step_value: float
    mode: SyncMode
    playing: bool
    velocity: float

    @property
    def integer_step(self) -> int:
        return int(math.floor(self.step_value))


@dataclass
class Clock:
    """共有ステップ値と同期モード。書き換えは制御メソッドと `update()` のみ。"""

    step_value: float = 0.0
    mode: SyncMode = SyncMode.MANUAL
    playing: bool = False
    velocity: float = DEFAULT_VELOCITY

    # ---- 状態 ---------------------------------------------------------
    @property
    def state(self) -> ClockState:
        if self.mode is SyncMode.WALL_SECONDS:
            return ClockState.WALL_SECONDS
        if self.mode is SyncMode.WALL_MILLIS:
            return ClockState.WALL_MILLIS
        return ClockState.MANUAL_PLAYING if self.playing else ClockState.MANUAL_PAUSED

    @property
    def is_running(self) -> bool:
        """ステップ値が時間とともに変化する状態か（壁時計同期 or 手動再生中）。"""
        return self.mode is not SyncMode.MANUAL or self.playing

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            step_value=self.step_value,
            mode=self.mode,
            playing=self.playing,
            velocity=self.velocity,
        )

    # ---- 制御 ---------------------------------------------------------
    def play(self) -> None:
        self._enter_manual(playing=True)

    def pause(self) -> None:
        self._enter_manual(playing=False)

    def toggle_play_pause(self) -> None:
        if self.mode is not SyncMode.MANUAL:
            # 同期モードから抜けるときは停止状態で MANUAL に入る
            self._enter_manual(playing=False)
            return
        self.playing = not self.playing
        logger.debug("clock %s", self.state.value)

    def step(self) -> None:
        self._enter_manual(playing=False)
        self.step_value = float(math.floor(sanitize_step(self.step_value)) + 1)

    def reset(self) -> None:
        self._enter_manual(playing=False)
        self.step_value = 0.0

    def set_sync_mode(self, mode: SyncMode | str) -> None:
        m = SyncMode.coerce(mode)
        self.mode = m
        if m is not SyncMode.MANUAL:
            self.playing = False
        logger.debug("sync mode -> %s (%s)", m.value, self.state.value)

    def set_velocity(self, velocity: float) -> None:
        """速度 [step/ms] を保存する。範囲の丸めは呼び出し側（`clamp_velocity`）の責務。"""
        self.velocity = float(velocity)

    # ---- tick ---------------------------------------------------------
    def update(self, elapsed_ms: float, wall_now_ms: float) -> float:
        """1 tick 分の更新規則を適用し、新しい `step_value` を返す。"""
        if self.mode is SyncMode.WALL_SECONDS:
            value = wall_now_ms / 1000.0
        elif self.mode is SyncMode.WALL_MILLIS:
            value = float(wall_now_ms)
        elif self.playing:
            value = self.step_value + elapsed_ms * self.velocity
        else:
            return self.step_value

        clean = sanitize_step(value)
        if clean != value:
            logger.warning("non-finite step value %r clamped to 0", value)
        self.step_value = clean
        return clean

    def _enter_manual(self, *, playing: bool) -> None:
        prev = self.state
        self.mode = SyncMode.MANUAL
        self.playing = playing
        if prev is not self.state:
            logger.debug("clock %s -> %s", prev.value, self.state.value)


__all__ = [
    "Clock",
    "ClockSnapshot",
    "ClockState",
    "SyncMode",
    "clamp_velocity",
    "sanitize_step",
    "VELOCITY_MIN",
    "VELOCITY_MAX",
    "DEFAULT_VELOCITY",
]
