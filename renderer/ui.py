"""
renderer/ui.py — Interface chrome rendering for StatClash.

Draws everything that is not a creature card:
    - Header bar (streak, best streak, difficulty)
    - Buttons
    - Cooldown bar under the cards
    - Pass/fail flash overlay
    - Achievement toast
    - Loading / stalled screen
    - Game over screen

All functions are stateless: they take explicit data arguments and draw
to the provided surface. Functions that draw buttons return their rects
so game.py can hit-test clicks.

Coordinate system: native 640x480 game space. Scaler handles the rest.
"""

import math
import pygame
from settings import (
    SCREEN_W, SCREEN_H,
    HEADER_H, BUTTON_H, COOLDOWN_BAR_H, CARD_TOP, CARD_H,
    COLOR,
    FONT_FAMILY, FONT_SIZE_XL, FONT_SIZE_LG, FONT_SIZE_MD, FONT_SIZE_SM,
)
from renderer.cuboid import draw_cuboid, draw_panel, draw_bar
from utils.color import RGBColor


# ── Font cache ────────────────────────────────────────────────────────────────
# SysFont falls back to the pygame default font if FONT_FAMILY is missing.
_fonts: dict[tuple[int, bool], pygame.font.Font] = {}


def font(size: int, bold: bool = False) -> pygame.font.Font:
    """Return a cached font at the given size."""
    key = (size, bold)
    if key not in _fonts:
        _fonts[key] = pygame.font.SysFont(FONT_FAMILY, size, bold=bold)
    return _fonts[key]


def blit_centered(surface: pygame.Surface, text: pygame.Surface, cx: int, y: int) -> None:
    surface.blit(text, (cx - text.get_width() // 2, y))


# ── Header ────────────────────────────────────────────────────────────────────

def draw_header(surface: pygame.Surface, streak: int, best_streak: int, difficulty: str) -> None:
    """Draw the top bar: title left, difficulty centre, streaks right."""
    pygame.draw.rect(surface, COLOR["card"], (0, 0, SCREEN_W, HEADER_H))
    pygame.draw.line(surface, COLOR["card_border"], (0, HEADER_H - 1), (SCREEN_W, HEADER_H - 1))

    title = font(FONT_SIZE_LG, bold=True).render("StatClash", True, COLOR["accent"])
    surface.blit(title, (16, (HEADER_H - title.get_height()) // 2))

    mode = font(FONT_SIZE_SM).render(difficulty.upper(), True, COLOR["chrome"])
    blit_centered(surface, mode, SCREEN_W // 2, (HEADER_H - mode.get_height()) // 2)

    f_md = font(FONT_SIZE_MD)
    best = f_md.render(f"Best {best_streak}", True, COLOR["chrome"])
    cur  = f_md.render(f"Streak {streak}", True, COLOR["text"])
    y = (HEADER_H - cur.get_height()) // 2
    surface.blit(best, (SCREEN_W - best.get_width() - 16, y))
    surface.blit(cur,  (SCREEN_W - best.get_width() - cur.get_width() - 32, y))


# ── Buttons ───────────────────────────────────────────────────────────────────

def draw_button(
    surface: pygame.Surface,
    rect: pygame.Rect,
    label: str,
    hovered: bool = False,
    enabled: bool = True,
) -> pygame.Rect:
    """Draw a button: raised when hovered, flat otherwise. Returns `rect`."""
    if not enabled:
        draw_panel(surface, rect, COLOR["background"], COLOR["card_border"], radius=4)
        text_color = COLOR["card_border"]
    elif hovered:
        draw_cuboid(surface, rect, COLOR["highlight"])
        text_color = COLOR["text_dark"]
    else:
        draw_panel(surface, rect, COLOR["card"], COLOR["highlight"], radius=4)
        text_color = COLOR["text"]

    text = font(FONT_SIZE_MD, bold=True).render(label, True, text_color)
    surface.blit(text, (rect.x + (rect.w - text.get_width()) // 2,
                        rect.y + (rect.h - text.get_height()) // 2))
    return rect


# ── Cooldown bar ──────────────────────────────────────────────────────────────

def draw_cooldown_bar(surface: pygame.Surface, fill: float, ticks_left: int) -> None:
    """Draw the 'next battle in N' bar below the cards."""
    y = CARD_TOP + CARD_H + 24
    label = font(FONT_SIZE_SM).render(f"Next battle in {ticks_left}...", True, COLOR["chrome"])
    blit_centered(surface, label, SCREEN_W // 2, y)
    bar = pygame.Rect(SCREEN_W // 4, y + label.get_height() + 6, SCREEN_W // 2, COOLDOWN_BAR_H)
    draw_bar(surface, bar, fill, COLOR["cooldown"], COLOR["card_border"])


# ── Pass / fail flash overlay ─────────────────────────────────────────────────

def draw_flash(surface: pygame.Surface, flash_color: RGBColor, alpha: float) -> None:
    """Tint the whole screen. alpha in [0.0, 1.0] fades the tint out."""
    if alpha <= 0.0:
        return
    overlay = pygame.Surface((SCREEN_W, SCREEN_H), pygame.SRCALPHA)
    overlay.fill((*flash_color, int(alpha * 110)))
    surface.blit(overlay, (0, 0))


# ── Achievement toast ─────────────────────────────────────────────────────────

def draw_toast(surface: pygame.Surface, title: str, body: str, alpha: float) -> None:
    """Draw a notification box in the bottom-right corner."""
    if alpha <= 0.0:
        return
    t = font(FONT_SIZE_MD, bold=True).render(title, True, COLOR["accent"])
    b = font(FONT_SIZE_SM).render(body, True, COLOR["text"])
    w = max(t.get_width(), b.get_width()) + 24
    h = t.get_height() + b.get_height() + 20

    toast = pygame.Surface((w, h), pygame.SRCALPHA)
    draw_panel(toast, pygame.Rect(0, 0, w, h), COLOR["card"], COLOR["accent"])
    toast.blit(t, (12, 8))
    toast.blit(b, (12, 12 + t.get_height()))
    toast.set_alpha(int(255 * min(1.0, alpha)))
    surface.blit(toast, (SCREEN_W - w - 16, SCREEN_H - h - 16))


# ── Loading screen ────────────────────────────────────────────────────────────

def draw_loading(
    surface: pygame.Surface,
    elapsed: float,
    stalled: bool,
    hovered: bool = False,
) -> pygame.Rect | None:
    """Draw the loading spinner, or the retry prompt when loading stalled.

    Returns:
        The RETRY button rect when stalled, otherwise None.
    """
    cx, cy = SCREEN_W // 2, SCREEN_H // 2

    if not stalled:
        for i in range(8):
            angle = elapsed * 4.0 + i * math.tau / 8
            pos = (cx + int(math.cos(angle) * 28), cy - 20 + int(math.sin(angle) * 28))
            shade = 80 + i * 20
            pygame.draw.circle(surface, (shade, shade, shade), pos, 5)
        text = font(FONT_SIZE_MD).render("Finding challengers...", True, COLOR["chrome"])
        blit_centered(surface, text, cx, cy + 30)
        return None

    title = font(FONT_SIZE_LG, bold=True).render("Couldn't reach the creature database", True, COLOR["fail"])
    hint  = font(FONT_SIZE_SM).render("Check your connection and try again.", True, COLOR["chrome"])
    blit_centered(surface, title, cx, cy - 60)
    blit_centered(surface, hint, cx, cy - 24)
    return draw_button(surface, pygame.Rect(cx - 80, cy + 10, 160, BUTTON_H), "RETRY", hovered)


# ── Game over screen ──────────────────────────────────────────────────────────

def draw_game_over(
    surface: pygame.Surface,
    final_streak: int,
    best_streak: int,
    difficulty: str,
    hovered: pygame.Rect | None = None,
) -> tuple[pygame.Rect, pygame.Rect]:
    """Draw the game over overlay.

    Args:
        hovered: Rect of the button under the cursor, if any.

    Returns:
        (play_again_rect, menu_rect) for hit detection.
    """
    overlay = pygame.Surface((SCREEN_W, SCREEN_H), pygame.SRCALPHA)
    overlay.fill((10, 12, 18, 210))
    surface.blit(overlay, (0, 0))

    cx = SCREEN_W // 2
    blit_centered(surface, font(FONT_SIZE_XL, bold=True).render("GAME OVER", True, COLOR["fail"]), cx, 110)

    f_md = font(FONT_SIZE_MD)
    lines = [
        (f"Final streak: {final_streak}", COLOR["text"]),
        (f"Best streak: {best_streak}", COLOR["accent"]),
        (f"Difficulty: {difficulty.title()}", COLOR["chrome"]),
    ]
    for i, (text, color) in enumerate(lines):
        blit_centered(surface, f_md.render(text, True, color), cx, 170 + i * 28)

    again = pygame.Rect(cx - 170, 290, 160, BUTTON_H)
    menu  = pygame.Rect(cx + 10, 290, 160, BUTTON_H)
    draw_button(surface, again, "PLAY AGAIN", hovered == again)
    draw_button(surface, menu, "MENU", hovered == menu)
    return again, menu
