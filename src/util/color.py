"""
どこで: `util.color`。
何を: 色指定の正規化/変換（HSL → RGBA 0–1, RGBA 0–255, CSS 表記）を一元化。
なぜ: 行色の算出と 2D/3D アダプタ双方で同一の変換規則を使うため。
"""

from __future__ import annotations

import colorsys

RGBA = tuple[float, float, float, float]


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def hsl_to_rgba(hue_deg: float, saturation_pct: float, lightness_pct: float) -> RGBA:
    """CSS 流儀の HSL（色相[度], 彩度[%], 明度[%]）を RGBA(0–1) へ変換する。

    色相は 360 で折り返す。彩度/明度は 0..100 にクランプする。
    """
    h = (float(hue_deg) % 360.0) / 360.0
    s = _clamp01(float(saturation_pct) / 100.0)
    lum = _clamp01(float(lightness_pct) / 100.0)
    # colorsys は HLS 順
    r, g, b = colorsys.hls_to_rgb(h, lum, s)
    return (_clamp01(r), _clamp01(g), _clamp01(b), 1.0)


def hsl_css(hue_deg: float, saturation_pct: float, lightness_pct: float) -> str:
    """`hsl(h, s%, l%)` 形式の文字列を返す（Web 系アダプタ/デバッグ表示用）。"""

    def _fmt(v: float) -> str:
        f = float(v)
        return str(int(f)) if f.is_integer() else f"{f:g}"

    return f"hsl({_fmt(hue_deg)}, {_fmt(saturation_pct)}%, {_fmt(lightness_pct)}%)"


def with_alpha(rgba: RGBA, alpha: float) -> RGBA:
    """RGB を保ったまま A を置き換える（0–1 にクランプ）。"""
    r, g, b, _ = rgba
    return (r, g, b, _clamp01(alpha))


def to_u8_rgba(rgba: RGBA) -> tuple[int, int, int, int]:
    """RGBA(0–1) を RGBA(0–255) へ変換する。"""
    r, g, b, a = (_clamp01(c) for c in rgba)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)), int(round(a * 255)))


__all__ = [
    "RGBA",
    "hsl_to_rgba",
    "hsl_css",
    "with_alpha",
    "to_u8_rgba",
]
