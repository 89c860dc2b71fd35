"""
utils/color.py — Color helpers for StatClash.

Used by renderer/cuboid.py to shade raised faces and by renderer/cards.py
to tint attribute bars from low (red) to high (green).
"""

from typing import Tuple

RGBColor = Tuple[int, int, int]


def clamp(value: int, lo: int = 0, hi: int = 255) -> int:
    return max(lo, min(hi, value))


def shade(color: RGBColor, amount: int) -> RGBColor:
    """Add `amount` to every channel. Negative amounts darken."""
    r, g, b = color
    return (clamp(r + amount), clamp(g + amount), clamp(b + amount))


def lighter(color: RGBColor, amount: int = 40) -> RGBColor:
    return shade(color, amount)


def darker(color: RGBColor, amount: int = 40) -> RGBColor:
    return shade(color, -amount)


def lerp_color(a: RGBColor, b: RGBColor, t: float) -> RGBColor:
    """Linearly interpolate between two colors, t clamped to [0.0, 1.0]."""
    t = max(0.0, min(1.0, t))
    return tuple(clamp(int(ca + (cb - ca) * t)) for ca, cb in zip(a, b))
