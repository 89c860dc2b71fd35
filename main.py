"""
main.py — Entry point and game loop for StatClash.

Responsibilities:
    - Configure logging
    - Build the process-wide pieces once: creature cache, lookup client,
      score store, controller
    - Initialise pygame and create the window
    - Run the main loop: handle events → update → render → flip
    - Translate mouse positions to game coordinates before passing
      them to Game
    - Close network sessions and tasks on exit

The loop is an async function driven by asyncio.run(). Each frame ends
with asyncio.sleep(0), which is where creature fetches, the post-win
reload timer and sprite downloads get to run. pygbag replaces asyncio with
its own event loop that yields to the browser each frame.

Usage (local):
    python main.py

Usage (WASM export):
    pygbag main.py
"""

import asyncio
import logging
import pygame
from settings import SCREEN_W, SCREEN_H, FPS, TITLE, STORE_PATH, LOG_LEVEL, LOG_FORMAT
from utils.scaler import Scaler
from core.audio import Audio
from core.controller import GameController
from core.game import Game
from core.lookup import CachedLookup, CreatureCache, PokeApiLookup, prefetch
from core.storage import JsonFileStore
from renderer.sprites import SpriteCache

logger = logging.getLogger(__name__)

# Desktop window starts at 1.5x native; pygbag overrides with the canvas size.
_WINDOW_W = int(SCREEN_W * 1.5)
_WINDOW_H = int(SCREEN_H * 1.5)


async def main() -> None:
    """Build all subsystems and run the game loop until the window closes."""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    # ── Process-wide state ────────────────────────────────────────────────────
    cache  = CreatureCache()
    client = PokeApiLookup()
    lookup = CachedLookup(client, cache)
    store  = JsonFileStore(STORE_PATH)
    controller = GameController(lookup, store)
    logger.info("Best streak so far: %d", controller.state.best_streak)

    # ── pygame ────────────────────────────────────────────────────────────────
    pygame.init()
    window = pygame.display.set_mode((_WINDOW_W, _WINDOW_H), pygame.RESIZABLE)
    pygame.display.set_caption(TITLE)
    game_surface = pygame.Surface((SCREEN_W, SCREEN_H))
    scaler = Scaler(_WINDOW_W, _WINDOW_H)
    clock = pygame.time.Clock()

    game = Game(
        controller,
        cache,
        SpriteCache(client.fetch_image),
        prefetcher=lambda: prefetch(lookup),
    )
    audio = Audio()
    audio.init()
    game.set_audio(audio)
    game.start_menu()

    # ── Main loop ─────────────────────────────────────────────────────────────
    running = True
    try:
        while running:
            dt = min(clock.tick(FPS) / 1000.0, 0.05)   # clamp after tab switches

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False

                elif event.type == pygame.VIDEORESIZE:
                    scaler.update(event.w, event.h)

                elif event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEMOTION):
                    if scaler.in_bounds(*event.pos):
                        # Events are rebuilt rather than mutated in place
                        attrs = dict(event.dict, pos=scaler.to_game(*event.pos))
                        game.handle_event(pygame.event.Event(event.type, attrs))

                elif event.type == pygame.KEYDOWN:
                    game.handle_event(event)

            game.update(dt, scaler.to_game(*pygame.mouse.get_pos()))
            game.render(game_surface)
            scaler.blit(window, game_surface)
            pygame.display.flip()

            await asyncio.sleep(0)
    finally:
        game.close()
        await client.close()
        audio.quit()
        pygame.quit()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
