"""
renderer/cuboid.py — Raised-block drawing primitives for StatClash.

Buttons and the hovered creature card are drawn as shallow cuboids: a
front face plus a lighter top strip and a darker right strip offset by a
depth `d`. Everything else is a flat panel. Bars (attributes, cooldown)
are flat tracks with a filled portion.

Coordinate system:
    (x, y) is the top-left of the front face in native game coordinates.
"""

import pygame
from utils.color import lighter, darker, RGBColor

DEFAULT_DEPTH = 6


def draw_cuboid(
    surface: pygame.Surface,
    rect: pygame.Rect,
    color: RGBColor,
    d: int = DEFAULT_DEPTH,
    border_color: RGBColor | None = None,
) -> None:
    """Draw a raised block whose front face is `rect`."""
    x, y, w, h = rect
    top   = [(x, y), (x + w, y), (x + w + d, y - d), (x + d, y - d)]
    right = [(x + w, y), (x + w + d, y - d), (x + w + d, y + h - d), (x + w, y + h)]

    pygame.draw.polygon(surface, lighter(color), top)
    pygame.draw.polygon(surface, darker(color), right)
    pygame.draw.rect(surface, color, rect)
    if border_color is not None:
        pygame.draw.rect(surface, border_color, rect, 1)


def draw_panel(
    surface: pygame.Surface,
    rect: pygame.Rect,
    color: RGBColor,
    border_color: RGBColor | None = None,
    radius: int = 8,
) -> None:
    """Draw a flat rounded rectangle with an optional 2px border."""
    pygame.draw.rect(surface, color, rect, border_radius=radius)
    if border_color is not None:
        pygame.draw.rect(surface, border_color, rect, 2, border_radius=radius)


def draw_bar(
    surface: pygame.Surface,
    rect: pygame.Rect,
    fill: float,
    fill_color: RGBColor,
    track_color: RGBColor,
) -> None:
    """Draw a left-to-right progress bar. `fill` is clamped to [0.0, 1.0]."""
    fill = max(0.0, min(1.0, fill))
    pygame.draw.rect(surface, track_color, rect, border_radius=rect.height // 2)
    filled_w = int(rect.width * fill)
    if filled_w > 0:
        pygame.draw.rect(
            surface, fill_color,
            (rect.x, rect.y, filled_w, rect.height),
            border_radius=rect.height // 2,
        )
