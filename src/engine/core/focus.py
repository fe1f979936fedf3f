"""
どこで: `engine.core.focus`。
何を: 先頭行（v=1）の位置からフォーカス変位を求め、3D カメラ/ライト/グリッドの姿勢を導く。
なぜ: 視点の再中心化と行 0 自身のマーカーを同一式で評価し、先頭とカメラのずれを防ぐため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .position import evaluate

LEADER_MOVEMENT_VALUE = 1

Vec3 = tuple[float, float, float]


def focus_displacement(step: float, unit_size: float) -> float:
    """先頭行の先頭変位（レンダラ自身の単位系で評価）。"""
    return evaluate(step, LEADER_MOVEMENT_VALUE, unit_size).head_displacement


@dataclass(frozen=True)
class SceneLayout3D:
    """3D シーンの配置定数（ワールド単位）。"""

    lane_width: float = 12.0
    lane_spacing: float = 4.0
    grid_snap: float = 40.0
    follow_back: float = 40.0
    follow_height: float = 25.0
    follow_depth: float = 25.0
    follow_look_ahead: float = 10.0
    fixed_eye: Vec3 = (-50.0, 60.0, 60.0)


@dataclass(frozen=True)
class CameraPose:
    eye: Vec3
    target: Vec3


class FocusTracker:
    """フォーカス変位とそれに従属する 3D 姿勢を算出する。"""

    def __init__(self, layout: SceneLayout3D | None = None):
        self.layout = layout or SceneLayout3D()

    def focus(self, step: float, unit_size: float | None = None) -> float:
        unit = self.layout.lane_width if unit_size is None else unit_size
        return focus_displacement(step, unit)

    def camera_pose(self, focus: float, row_count: int, follow: bool) -> CameraPose:
        """追従時は後方の固定オフセットから少し先を見る。非追従時は固定位置からフォーカスを狙う。"""
        lay = self.layout
        depth = -row_count * lay.lane_spacing * 0.5
        if follow:
            eye = (focus - lay.follow_back, lay.follow_height, lay.follow_depth)
            target = (focus + lay.follow_look_ahead, -row_count * lay.lane_spacing * 0.2, depth)
        else:
            eye = lay.fixed_eye
            target = (focus, 0.0, depth)
        return CameraPose(eye=eye, target=target)

    def light_x(self, focus: float) -> float:
        return focus

    def grid_x(self, focus: float) -> float:
        snap = self.layout.grid_snap
        return math.floor(focus / snap) * snap


__all__ = [
    "LEADER_MOVEMENT_VALUE",
    "CameraPose",
    "FocusTracker",
    "SceneLayout3D",
    "focus_displacement",
]
