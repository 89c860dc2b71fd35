"""
renderer/menu.py — Start screen for StatClash.

Title, a one-line rules reminder, the best streak so far and one button
per difficulty. Behind it, a slow field of drifting raised blocks so the
menu does not look frozen while the cache warms up.

The menu stores animation time in module-level variables so it persists
across render calls without needing an object. game.py calls draw_menu()
every frame.
"""

import math
import random
import pygame
from settings import SCREEN_W, SCREEN_H, COLOR, BUTTON_H, FONT_SIZE_XL, FONT_SIZE_MD, FONT_SIZE_SM
from renderer.cuboid import draw_cuboid
from renderer.ui import font, blit_centered, draw_button
from utils.color import darker

# ── Animation state ───────────────────────────────────────────────────────────
_time: float = 0.0
_blocks: list[tuple[int, int, int, float, float]] = []   # x, y, size, speed, phase
_BLOCK_COUNT = 12

_BUTTON_W = 200


def _init_blocks() -> None:
    global _blocks
    rng = random.Random(7)   # fixed layout, independent of gameplay randomness
    _blocks = [
        (
            rng.randint(0, SCREEN_W - 30),
            rng.randint(0, SCREEN_H),
            rng.randint(10, 26),
            rng.uniform(6.0, 18.0),
            rng.uniform(0.0, math.tau),
        )
        for _ in range(_BLOCK_COUNT)
    ]


def _draw_background(surface: pygame.Surface) -> None:
    surface.fill(COLOR["background"])
    base = darker(COLOR["card"], 10)
    for x, y0, size, speed, phase in _blocks:
        y = (y0 - _time * speed) % (SCREEN_H + 40) - 20
        sway = math.sin(_time * 0.5 + phase) * 10
        draw_cuboid(surface, pygame.Rect(int(x + sway), int(y), size, size), base, d=4)


def button_rects() -> dict[str, pygame.Rect]:
    """Difficulty value → button rect. Shared with game.py for hit tests."""
    cx = SCREEN_W // 2
    return {
        "standard":    pygame.Rect(cx - _BUTTON_W - 10, 300, _BUTTON_W, BUTTON_H),
        "challenging": pygame.Rect(cx + 10, 300, _BUTTON_W, BUTTON_H),
    }


def draw_menu(
    surface: pygame.Surface,
    best_streak: int,
    cached: int,
    hovered: str | None = None,
    dt: float = 1 / 60,
) -> dict[str, pygame.Rect]:
    """Draw the start screen.

    Args:
        surface:     Native game surface.
        best_streak: Persisted best streak to show.
        cached:      Number of creatures already prefetched.
        hovered:     Difficulty value of the button under the cursor.
        dt:          Seconds since last frame, drives the animation.

    Returns:
        Difficulty value → button rect.
    """
    global _time
    if not _blocks:
        _init_blocks()
    _time += dt

    _draw_background(surface)
    cx = SCREEN_W // 2

    title = font(FONT_SIZE_XL * 2, bold=True).render("StatClash", True, COLOR["accent"])
    blit_centered(surface, title, cx, 90)

    f_md = font(FONT_SIZE_MD)
    blit_centered(surface, f_md.render(
        "Two creatures enter. Which one has the higher total stats?", True, COLOR["text"]), cx, 180)
    blit_centered(surface, f_md.render(
        f"Best streak: {best_streak}", True, COLOR["chrome"]), cx, 220)

    rects = button_rects()
    draw_button(surface, rects["standard"], "STANDARD", hovered == "standard")
    draw_button(surface, rects["challenging"], "CHALLENGING", hovered == "challenging")

    f_sm = font(FONT_SIZE_SM)
    blit_centered(surface, f_sm.render(
        "Challenging picks opponents with similar totals.", True, COLOR["chrome"]), cx, 356)
    blit_centered(surface, f_sm.render(
        "Keys: 1 / 2 or arrows to choose, Esc for menu", True, COLOR["card_border"]), cx, 380)

    if cached:
        status = f_sm.render(f"{cached} creatures ready", True, COLOR["card_border"])
        surface.blit(status, (SCREEN_W - status.get_width() - 12, SCREEN_H - status.get_height() - 8))

    return rects
