"""
renderer/cards.py — Creature card rendering for StatClash.

A card shows one candidate: sprite, name, types, and one bar per
attribute. Totals stay hidden until the player has picked; after the pick
the total is revealed and the winning card gets a highlighted border.

card_rects() is the single source of the two card positions so game.py
hit-tests exactly what is drawn.
"""

from __future__ import annotations
import pygame

from core.creature import CreatureRecord, total_score
from renderer.cuboid import draw_cuboid, draw_panel, draw_bar
from renderer.ui import font, blit_centered
from settings import (
    SCREEN_W, CARD_W, CARD_H, CARD_GAP, CARD_TOP, SPRITE_SIZE,
    ATTRIBUTE_BAR_MAX, COLOR, FONT_SIZE_LG, FONT_SIZE_MD, FONT_SIZE_SM,
)
from utils.color import lerp_color

# Short labels for the PokeAPI stat names; unknown names are shown as-is.
_ATTRIBUTE_LABELS = {
    "hp": "HP",
    "attack": "ATK",
    "defense": "DEF",
    "special-attack": "SP.A",
    "special-defense": "SP.D",
    "speed": "SPD",
}


def card_rects() -> tuple[pygame.Rect, pygame.Rect]:
    """Return the (left, right) card rects, centred horizontally."""
    left_x = (SCREEN_W - 2 * CARD_W - CARD_GAP) // 2
    return (
        pygame.Rect(left_x, CARD_TOP, CARD_W, CARD_H),
        pygame.Rect(left_x + CARD_W + CARD_GAP, CARD_TOP, CARD_W, CARD_H),
    )


def draw_card(
    surface: pygame.Surface,
    rect: pygame.Rect,
    record: CreatureRecord,
    sprite: pygame.Surface | None,
    hovered: bool = False,
    revealed: bool = False,
    winner: bool = False,
) -> None:
    """Draw one creature card.

    Args:
        surface:  Native game surface.
        rect:     Card rect from card_rects().
        record:   Creature to show.
        sprite:   Loaded sprite, or None for the placeholder.
        hovered:  Draw raised to invite a click.
        revealed: Show the total score (after the pick).
        winner:   Highlight as the higher total (only with revealed).
    """
    border = COLOR["accent"] if revealed and winner else COLOR["card_border"]
    if hovered and not revealed:
        draw_cuboid(surface, rect, COLOR["card"], border_color=COLOR["highlight"])
    else:
        draw_panel(surface, rect, COLOR["card"], border)

    cx = rect.centerx
    sprite_rect = pygame.Rect(cx - SPRITE_SIZE // 2, rect.y + 12, SPRITE_SIZE, SPRITE_SIZE)
    pygame.draw.circle(surface, COLOR["background"], sprite_rect.center, SPRITE_SIZE // 2 + 4)
    if sprite is not None:
        surface.blit(sprite, sprite_rect.topleft)
    else:
        pygame.draw.circle(surface, COLOR["placeholder"], sprite_rect.center, SPRITE_SIZE // 4)

    y = sprite_rect.bottom + 8
    name = font(FONT_SIZE_LG, bold=True).render(record.display_name, True, COLOR["accent"])
    blit_centered(surface, name, cx, y)
    y += name.get_height() + 2

    if record.types:
        types = font(FONT_SIZE_SM).render(" / ".join(record.types).upper(), True, COLOR["chrome"])
        blit_centered(surface, types, cx, y)
        y += types.get_height() + 8

    _draw_attributes(surface, rect, y, record)

    if revealed:
        total = font(FONT_SIZE_MD, bold=True).render(
            f"Total {total_score(record)}", True, COLOR["accent"] if winner else COLOR["text"]
        )
        blit_centered(surface, total, cx, rect.bottom - total.get_height() - 10)


def _draw_attributes(surface: pygame.Surface, rect: pygame.Rect, y: int, record: CreatureRecord) -> None:
    f_sm = font(FONT_SIZE_SM)
    label_w = 40
    bar_x = rect.x + 16 + label_w
    bar_w = rect.w - 32 - label_w - 32
    for attr_name, value in record.attributes:
        label = f_sm.render(_ATTRIBUTE_LABELS.get(attr_name, attr_name[:4].upper()), True, COLOR["chrome"])
        surface.blit(label, (rect.x + 16, y))
        ratio = value / ATTRIBUTE_BAR_MAX
        draw_bar(
            surface,
            pygame.Rect(bar_x, y + 3, bar_w, 8),
            ratio,
            lerp_color(COLOR["bar_low"], COLOR["bar_high"], ratio),
            COLOR["background"],
        )
        number = f_sm.render(str(value), True, COLOR["text"])
        surface.blit(number, (bar_x + bar_w + 6, y))
        y += label.get_height() + 4
