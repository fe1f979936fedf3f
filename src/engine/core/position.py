"""
どこで: `engine.core.position`。
何を: ステップ値 N と行の移動量 v から、トリガ回数・イージング済みトリガ回数・先頭変位を求める。
なぜ: 2D/3D どちらのバックエンドも同じ式で行位置を得られるよう、純粋関数として切り出すため。

設計方針:
- 純粋・決定的。副作用なし。
- 次のトリガまでの距離が `TRANSITION_WIDTH` 未満の区間だけ smoothstep で補間する。
  補間は距離 0 で 1 に達し、同時にトリガ回数が 1 増えるため変位は連続（微分のみ折れる）。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

TRANSITION_WIDTH = 0.5


def smoothstep(t: float) -> float:
    """3 次イージング `t²(3−2t)`。[0,1] → [0,1]、両端で微分 0。"""
    return t * t * (3.0 - 2.0 * t)


def trigger_count(step: float, movement_value: int) -> int:
    """`floor(N / v)`（実数 floor。N=0 でも符号の揺れなし）。"""
    return int(math.floor(step / movement_value))


@dataclass(frozen=True)
class RowPosition:
    """1 行ぶんの位置評価結果。"""

    trigger_count: int
    animated_trigger_count: float
    head_displacement: float
    unit_step: float  # v * unit_size（1 トリガあたりの変位）

    def displacement_at(self, trigger_index: float) -> float:
        """任意のトリガ位置（末尾マーカー等）の絶対変位。"""
        return trigger_index * self.unit_step


def animated_trigger_count(step: float, movement_value: int) -> float:
    """トリガ直前の区間だけ smoothstep で補間したトリガ回数を返す。"""
    count = trigger_count(step, movement_value)
    next_trigger_at = (count + 1) * movement_value
    distance_to_next = next_trigger_at - step
    if distance_to_next < TRANSITION_WIDTH:
        t = 1.0 - distance_to_next / TRANSITION_WIDTH
        # ULP 誤差ガード
        t = 0.0 if t < 0.0 else 1.0 if t > 1.0 else t
        return count + smoothstep(t)
    return float(count)


def evaluate(step: float, movement_value: int, unit_size: float) -> RowPosition:
    """行 (v) をステップ値 N で評価する。"""
    count = trigger_count(step, movement_value)
    animated = animated_trigger_count(step, movement_value)
    unit_step = movement_value * unit_size
    return RowPosition(
        trigger_count=count,
        animated_trigger_count=animated,
        head_displacement=animated * unit_step,
        unit_step=unit_step,
    )


__all__ = [
    "TRANSITION_WIDTH",
    "RowPosition",
    "smoothstep",
    "trigger_count",
    "animated_trigger_count",
    "evaluate",
]
