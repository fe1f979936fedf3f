"""
どこで: `engine.render.instances`。
何を: フレームを 3D インスタンス描画用の配列（変換行列/色/不透明度）とカメラ姿勢へ変換する `SceneAdapter`。
なぜ: 3D 側でも 2D と同じ位置/折返し/末尾の式（`compute_frame`）をワールド単位で再評価し、
      GPU へはそのまま転送できる連続配列だけを渡すため。

座標系:
- x: レーン方向の絶対変位（ワールド単位 = `SceneLayout3D.lane_width`）。
- z: 行 i を `-i * lane_spacing` に配置。
- 再中心化はカメラ側で行う（マーカーは絶対変位のまま）。
- 行列は行優先（平行移動は第 4 列）。GL 系 API へは `matrices_gl()`（転置済み）を使う。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from engine.core.focus import CameraPose, FocusTracker, SceneLayout3D
from engine.core.frame import FrameConfig, FrameResult, compute_frame


def world_config(config: FrameConfig, layout: SceneLayout3D) -> FrameConfig:
    """3D 用の設定。単位をレーン幅に置換し、折返し/再中心化を切る（x = 絶対変位）。"""
    return config.with_changes(
        unit_size=layout.lane_width,
        viewport_extent=layout.lane_width,
        wrap_enabled=False,
        follow_enabled=False,
    )


def look_at(
    eye: tuple[float, float, float],
    target: tuple[float, float, float],
    up: tuple[float, float, float] = (0.0, 1.0, 0.0),
) -> np.ndarray:
    """右手系のビュー行列（行優先, float32）を返す。"""
    e = np.asarray(eye, dtype=np.float64)
    f = np.asarray(target, dtype=np.float64) - e
    f /= np.linalg.norm(f)
    s = np.cross(f, np.asarray(up, dtype=np.float64))
    s /= np.linalg.norm(s)
    u = np.cross(s, f)
    view = np.eye(4, dtype=np.float64)
    view[0, :3] = s
    view[1, :3] = u
    view[2, :3] = -f
    view[0, 3] = -np.dot(s, e)
    view[1, 3] = -np.dot(u, e)
    view[2, 3] = np.dot(f, e)
    return view.astype(np.float32)


@dataclass(frozen=True)
class InstanceBatch:
    matrices: np.ndarray  # (n, 4, 4) float32
    colors: np.ndarray  # (n, 3) float32
    opacity: np.ndarray  # (n,) float32
    is_head: np.ndarray  # (n,) bool

    @property
    def count(self) -> int:
        return int(self.matrices.shape[0])

    def matrices_gl(self) -> np.ndarray:
        """列優先（GL 流儀）の連続配列。"""
        return np.ascontiguousarray(self.matrices.transpose(0, 2, 1))


def build_instances(world_frame: FrameResult, layout: SceneLayout3D) -> InstanceBatch:
    """ワールド単位で評価済みのフレームからインスタンス配列を作る。各行は先頭が最初。"""
    n = world_frame.marker_count
    xs = np.empty(n, dtype=np.float32)
    zs = np.empty(n, dtype=np.float32)
    scales = np.empty(n, dtype=np.float32)
    colors = np.empty((n, 3), dtype=np.float32)
    opacity = np.empty(n, dtype=np.float32)
    heads = np.empty(n, dtype=bool)

    i = 0
    for rf in world_frame.rows:
        z = -rf.row.index * layout.lane_spacing
        rgb = rf.color[:3]
        for marker in rf.markers:
            xs[i] = marker.relative_position
            zs[i] = z
            scales[i] = marker.scale
            colors[i] = rgb
            opacity[i] = marker.opacity
            heads[i] = marker.is_head
            i += 1

    mats = np.zeros((n, 4, 4), dtype=np.float32)
    mats[:, 0, 0] = scales
    mats[:, 1, 1] = scales
    mats[:, 2, 2] = scales
    mats[:, 3, 3] = 1.0
    mats[:, 0, 3] = xs
    mats[:, 2, 3] = zs
    return InstanceBatch(matrices=mats, colors=colors, opacity=opacity, is_head=heads)


@dataclass(frozen=True)
class SceneState:
    batch: InstanceBatch
    camera: CameraPose
    view: np.ndarray  # (4, 4) float32
    focus: float
    light_x: float
    grid_x: float


class SceneAdapter:
    """`RendererAdapter` 実装。直近フレームの 3D シーン状態を保持する。"""

    def __init__(self, layout: SceneLayout3D | None = None):
        self._tracker = FocusTracker(layout)
        self._state: SceneState | None = None

    @property
    def layout(self) -> SceneLayout3D:
        return self._tracker.layout

    @property
    def state(self) -> SceneState | None:
        return self._state

    def present(self, frame: FrameResult) -> None:
        cfg = world_config(frame.config, self.layout)
        world = compute_frame(frame.step_value, [rf.row for rf in frame.rows], cfg)
        focus = world.focus_displacement
        pose = self._tracker.camera_pose(focus, frame.config.row_count, frame.config.follow_enabled)
        self._state = SceneState(
            batch=build_instances(world, self.layout),
            camera=pose,
            view=look_at(pose.eye, pose.target),
            focus=focus,
            light_x=self._tracker.light_x(focus),
            grid_x=self._tracker.grid_x(focus),
        )


__all__ = [
    "InstanceBatch",
    "SceneAdapter",
    "SceneState",
    "build_instances",
    "look_at",
    "world_config",
]
