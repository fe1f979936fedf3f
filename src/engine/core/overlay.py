"""
どこで: `engine.core.overlay`。
何を: HUD/背景向けの派生値（アクティブな法, 背景グリッドのずれ, ステップ表示の水平位置, 速度表示）。
なぜ: ウィジェット側に計算を持たせず、フレームと同じ入力から決定的に導くため。
"""

from __future__ import annotations

import math


def active_turn_index(step: float, row_count: int) -> int:
    """floor(N) を割り切る最大の行番号 i（row_count..1）。N=0 は -1、該当なしは 0。"""
    n = int(math.floor(step))
    if n == 0:
        return -1
    for i in range(int(row_count), 0, -1):
        if n % i == 0:
            return i
    return 0


def active_turn_label(index: int) -> str:
    if index == 0:
        return "Leader"
    if index > 0:
        return f"MOD {index + 1}"
    return "Idle"


def background_offset(
    focus: float, viewport_extent: float, unit_size: float, follow_enabled: bool
) -> float:
    """追従時の背景グリッドの平行移動量。常に [0, unit_size)。"""
    if not follow_enabled:
        return 0.0
    raw = viewport_extent / 2.0 - focus - unit_size / 2.0
    r = raw % unit_size
    return 0.0 if r >= unit_size else r


def leader_label_position(
    leader_displacement: float, viewport_extent: float, unit_size: float, follow_enabled: bool
) -> float:
    """ステップ値ラベル（floor(N)）の水平位置。"""
    if follow_enabled:
        return viewport_extent / 2.0
    return leader_displacement + unit_size / 2.0


def velocity_readout(velocity: float) -> str:
    return f"{velocity * 1000:.0f}x"


__all__ = [
    "active_turn_index",
    "active_turn_label",
    "background_offset",
    "leader_label_position",
    "velocity_readout",
]
