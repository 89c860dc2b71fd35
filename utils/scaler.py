"""
utils/scaler.py — Window letterboxing for StatClash.

The game renders at a fixed native resolution (SCREEN_W × SCREEN_H) and
is scaled uniformly into whatever window it gets: desktop window, resized
window or the pygbag canvas. Mouse positions go the other way through
to_game() before any hit testing.

Usage:
    scaler = Scaler(window_w, window_h)
    scaler.blit(window_surface, game_surface)
    gx, gy = scaler.to_game(*event.pos)
"""

import pygame
from settings import SCREEN_W, SCREEN_H


class Scaler:
    """Fits the native game surface inside the window, preserving aspect.

    Attributes:
        dest_rect: Where the scaled game surface lands in the window.
        scale:     Window pixels per game pixel.
    """

    def __init__(self, window_w: int, window_h: int) -> None:
        self.update(window_w, window_h)

    def update(self, window_w: int, window_h: int) -> None:
        """Recompute the destination rect. Call on VIDEORESIZE."""
        native = pygame.Rect(0, 0, SCREEN_W, SCREEN_H)
        self.dest_rect = native.fit(pygame.Rect(0, 0, window_w, window_h))
        self.scale = self.dest_rect.width / SCREEN_W

    def blit(self, window_surface: pygame.Surface, game_surface: pygame.Surface) -> None:
        window_surface.fill((0, 0, 0))
        scaled = pygame.transform.smoothscale(game_surface, self.dest_rect.size)
        window_surface.blit(scaled, self.dest_rect.topleft)

    def to_game(self, window_x: int, window_y: int) -> tuple[int, int]:
        """Convert window pixels to native game coordinates.

        Points in the letterbox bars map outside the native screen.
        """
        return (
            int((window_x - self.dest_rect.x) / self.scale),
            int((window_y - self.dest_rect.y) / self.scale),
        )

    def in_bounds(self, window_x: int, window_y: int) -> bool:
        return self.dest_rect.collidepoint(window_x, window_y)
