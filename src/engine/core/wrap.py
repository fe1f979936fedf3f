"""
どこで: `engine.core.wrap`。
何を: 絶対変位をレンダラ局所座標へ写像する `WrapResolver`（トーラス折返し / フォーカス基準）。
なぜ: 2D（px）と 3D（ワールド単位）が同じ写像を共有し、見た目の乖離を防ぐため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass


def effective_wrap(wrap_enabled: bool, follow_enabled: bool) -> bool:
    """追従中は折返しを無効化する。"""
    return bool(wrap_enabled) and not bool(follow_enabled)


def quantized_wrap_width(viewport_extent: float, unit_size: float) -> float:
    """折返し幅をレーン単位の整数倍へ切り捨てる（継ぎ目の半端を避ける）。最低 1 単位。"""
    units = math.floor(viewport_extent / unit_size)
    return max(units, 1) * unit_size


@dataclass(frozen=True)
class WrapResolver:
    """変位 → 局所座標の写像。

    - 折返し: `displacement mod quantized_width`（常に `[0, quantized_width)`）。
    - 非折返し: `(displacement - focus) + viewport/2 - unit/2`。
    """

    unit_size: float
    viewport_extent: float
    wrap: bool
    focus_displacement: float = 0.0

    @classmethod
    def from_flags(
        cls,
        *,
        unit_size: float,
        viewport_extent: float,
        wrap_enabled: bool,
        follow_enabled: bool,
        focus_displacement: float,
    ) -> "WrapResolver":
        """設定フラグから構築する。追従しないときの基準は 0。"""
        return cls(
            unit_size=float(unit_size),
            viewport_extent=float(viewport_extent),
            wrap=effective_wrap(wrap_enabled, follow_enabled),
            focus_displacement=float(focus_displacement) if follow_enabled else 0.0,
        )

    @property
    def quantized_width(self) -> float:
        return quantized_wrap_width(self.viewport_extent, self.unit_size)

    def resolve(self, displacement: float) -> float:
        if self.wrap:
            width = self.quantized_width
            r = displacement % width
            # 負のごく小さい値で width ちょうどになる ULP 誤差を潰す
            if r >= width:
                r = 0.0
            return r + 0.0
        return (displacement - self.focus_displacement) + self.viewport_extent / 2.0 - self.unit_size / 2.0

    def lap_start(self, head_displacement: float) -> float:
        """先頭が属する周回の開始変位。折返し無効時は -inf（打ち切りなし）。

        周回数が有限に収まらない場合は先頭自身を返す（末尾はすべて打ち切られる）。
        """
        if not self.wrap:
            return -math.inf
        width = self.quantized_width
        laps = head_displacement / width
        if not math.isfinite(laps):
            return head_displacement
        return math.floor(laps) * width


__all__ = ["WrapResolver", "effective_wrap", "quantized_wrap_width"]
