"""
どこで: `engine.core.palette`。
何を: 行の移動量とパレット ID から決定的に行色（HSL → RGBA）を導く。
なぜ: 2D/3D のどちらでも同じ行が同じ色になるよう、色決定をアダプタから切り離すため。

規則:
- 色相の基準は `hue = (v * 137.5) % 360`（黄金角に近い刻み）。
- 先頭行は常に `hsl(250, 70%, 60%)`。
- 未知のパレット ID は harmonic として扱う。
"""

from __future__ import annotations

from util.color import RGBA, hsl_css, hsl_to_rgba

from .rows import Row

HSL = tuple[float, float, float]

HUE_STEP = 137.5
LEADER_HSL: HSL = (250.0, 70.0, 60.0)
DEFAULT_PALETTE = "harmonic"

# (id, 表示名)
PALETTES: tuple[tuple[str, str], ...] = (
    ("harmonic", "Harmonic"),
    ("neon", "Neon"),
    ("forest", "Forest"),
    ("gold", "Gold"),
    ("monochrome", "Mono"),
)


def palette_ids() -> tuple[str, ...]:
    return tuple(pid for pid, _ in PALETTES)


def row_hsl(row: Row, palette_id: str) -> HSL:
    if row.is_leader:
        return LEADER_HSL
    hue = (row.movement_value * HUE_STEP) % 360.0
    pid = (palette_id or DEFAULT_PALETTE).lower()
    if pid == "neon":
        return ((hue % 60.0) + 280.0, 90.0, 65.0)
    if pid == "forest":
        return ((hue % 80.0) + 120.0, 60.0, 55.0)
    if pid == "gold":
        return ((hue % 40.0) + 35.0, 85.0, 60.0)
    if pid == "monochrome":
        return (0.0, 0.0, 70.0 + (hue % 30.0))
    return (hue, 70.0, 60.0)


def row_color(row: Row, palette_id: str) -> RGBA:
    return hsl_to_rgba(*row_hsl(row, palette_id))


def row_css(row: Row, palette_id: str) -> str:
    return hsl_css(*row_hsl(row, palette_id))


__all__ = [
    "DEFAULT_PALETTE",
    "HUE_STEP",
    "LEADER_HSL",
    "PALETTES",
    "palette_ids",
    "row_color",
    "row_css",
    "row_hsl",
]
