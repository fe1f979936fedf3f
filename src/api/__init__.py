"""
どこで: `api` 入口（高レベル公開 API）。
何を: Controller・FrameConfig・compute_frame・アダプタ（2D タイル / 3D インスタンス）・ループ開始を再輸出。
なぜ: 利用者が単一名前空間から 設定 → 制御 → フレーム取得 → 描画データ化 まで完結できるようにするため。

Usage:
    from api import Controller, FrameConfig, TileLayer

    tiles = TileLayer()
    ctrl = Controller(FrameConfig(row_count=8, unit_size=32, viewport_extent=960), adapters=[tiles])
    ctrl.step()
    ctrl.tick(1 / 60)
    for tile in tiles.tiles:
        ...
"""

from engine.core.clock import Clock, SyncMode, clamp_velocity
from engine.core.frame import FrameConfig, FrameResult, RowFrame, compute_frame
from engine.core.marker import Marker
from engine.core.rows import Row, build_rows, lane_pitch
from engine.core.tail import TailType
from engine.render.instances import SceneAdapter
from engine.render.tiles import TileLayer

from .controller import Controller, default_frame_config, resolve_fps
from .runner import start_loop

__all__ = [
    # 制御
    "Controller",
    "Clock",
    "SyncMode",
    "clamp_velocity",
    "start_loop",
    # 設定/フレーム
    "FrameConfig",
    "FrameResult",
    "RowFrame",
    "Marker",
    "Row",
    "TailType",
    "build_rows",
    "compute_frame",
    "default_frame_config",
    "lane_pitch",
    "resolve_fps",
    # アダプタ
    "SceneAdapter",
    "TileLayer",
]

# バージョン情報
__version__ = "2026.10"
