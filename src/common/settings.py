"""
どこで: `common.settings`
何を: プロジェクトの環境変数（`HRM_*`）を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_choice, env_float, env_int

TAIL_TYPE_CHOICES = ("classic", "ghost", "echo", "stepped", "glitch")
PALETTE_CHOICES = ("harmonic", "neon", "forest", "gold", "monochrome")


@dataclass
class _Settings:
    # Clock
    DEFAULT_VELOCITY: float = 0.01

    # Lanes
    DEFAULT_ROW_COUNT: int = 15
    DEFAULT_TAIL_TYPE: str = "classic"
    DEFAULT_PALETTE: str = "harmonic"

    # Loop
    TARGET_FPS: int = 60

    # Misc
    LOG_LEVEL: str = "INFO"
    DEBUG_FRAMES: bool = False


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - 速度は [0.001, 0.05]、行数は [1, 100]、FPS は 1 以上へ丸める。
    - 列挙値（tail/palette）は未知の値なら既定値へフォールバック。
    """
    _settings.DEFAULT_VELOCITY = env_float(
        "HRM_DEFAULT_VELOCITY", 0.01, min_value=0.001, max_value=0.05
    )

    rows = env_int("HRM_DEFAULT_ROW_COUNT", 15, min_value=1) or 15
    _settings.DEFAULT_ROW_COUNT = min(rows, 100)
    _settings.DEFAULT_TAIL_TYPE = env_choice("HRM_DEFAULT_TAIL_TYPE", "classic", TAIL_TYPE_CHOICES)
    _settings.DEFAULT_PALETTE = env_choice("HRM_DEFAULT_PALETTE", "harmonic", PALETTE_CHOICES)

    _settings.TARGET_FPS = env_int("HRM_TARGET_FPS", 60, min_value=1) or 60

    _settings.LOG_LEVEL = env_choice(
        "HRM_LOG_LEVEL", "info", ("debug", "info", "warning", "error", "critical")
    ).upper()
    _settings.DEBUG_FRAMES = env_bool("HRM_DEBUG_FRAMES", False)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings", "TAIL_TYPE_CHOICES", "PALETTE_CHOICES"]
