"""
core/game.py — pygame front-end for StatClash.

Game is a thin client of GameController. It never changes session data
itself: every frame it reads controller.state, decides which screen to
show, and turns clicks and key presses into controller operations.

Screens (derived from the controller mode):
    MENU      — IDLE     : difficulty buttons, cache prefetch running
    LOADING   — LOADING  : spinner, or a RETRY button once loading stalled
    BATTLE    — ACTIVE   : two cards, pick one, cooldown bar after a win
    GAMEOVER  — ENDED    : revealed cards under the game over overlay

Game also owns the presentation-only timers:
    - CooldownTicker, which calls controller.tick_cooldown() once a second
    - the pass/fail flash
    - achievement toasts

game.py does NOT call pygame.display.flip() or manage the window.
That is main.py's responsibility.
"""

from __future__ import annotations
import asyncio
import logging
from collections import deque
from enum import Enum, auto
from typing import Awaitable, Callable

import pygame

from core.achievements import get_achievement
from core.audio import Audio
from core.controller import GameController
from core.lookup import CreatureCache
from core.session import Difficulty, Mode, Selector, SessionState
from core.timer import CooldownTicker
from renderer import ui
from renderer.cards import card_rects, draw_card
from renderer.menu import draw_menu
from renderer.sprites import SpriteCache
from settings import COLOR, FLASH_DURATION, TOAST_DURATION

logger = logging.getLogger(__name__)


class Screen(Enum):
    MENU     = auto()
    LOADING  = auto()
    BATTLE   = auto()
    GAMEOVER = auto()


_SCREEN_FOR_MODE = {
    Mode.IDLE:    Screen.MENU,
    Mode.LOADING: Screen.LOADING,
    Mode.ACTIVE:  Screen.BATTLE,
    Mode.ENDED:   Screen.GAMEOVER,
}

_KEY_SELECTORS = {
    pygame.K_1:     Selector.A,
    pygame.K_LEFT:  Selector.A,
    pygame.K_2:     Selector.B,
    pygame.K_RIGHT: Selector.B,
}


class Game:
    """Maps controller state to screens and input to controller calls.

    Attributes:
        controller:  The session controller, sole owner of game state.
        cache:       Shared creature cache, read for the menu status line.
        sprites:     Sprite loader for card images.
        ticker:      Drives controller.tick_cooldown().
        _prefetcher: Zero-argument coroutine function that warms the cache.
        _audio:      Audio instance injected via set_audio(). None until set.
        _tasks:      Background tasks (prefetch, manual retry) kept alive.
        _flash:      (color, seconds left) of the pass/fail flash, or None.
        _toasts:     Pending (title, body) toasts; the head is on screen.
        _seen:       Achievement ids already announced.
        _hover:      Id of the button or card under the cursor.
        _buttons:    Rects drawn last frame, keyed by id, for hit testing.
    """

    def __init__(
        self,
        controller: GameController,
        cache: CreatureCache,
        sprites: SpriteCache,
        prefetcher: Callable[[], Awaitable[object]] | None = None,
    ) -> None:
        self.controller = controller
        self.cache      = cache
        self.sprites    = sprites
        self.ticker     = CooldownTicker(self._on_tick)
        self._prefetcher = prefetcher
        self._audio: Audio | None = None
        self._prefetch_task: asyncio.Task | None = None
        self._retry_task:    asyncio.Task | None = None
        self._flash: tuple[tuple[int, int, int], float] | None = None
        self._toasts: deque[tuple[str, str]] = deque()
        self._toast_left: float = 0.0
        self._seen: set[str] = set(controller.state.achievements)
        self._hover: str | None = None
        self._buttons: dict[str, pygame.Rect] = {}
        self._elapsed: float = 0.0
        self._dt: float = 0.0

    # ── Audio ─────────────────────────────────────────────────────────────────

    def set_audio(self, audio: Audio) -> None:
        """Inject the Audio instance after pygame.init()."""
        self._audio = audio

    def _play(self, name: str) -> None:
        """Play a sound if audio has been injected."""
        if self._audio:
            self._audio.play(name)

    # ── Derived state ─────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self.controller.state

    @property
    def screen(self) -> Screen:
        return _SCREEN_FOR_MODE[self.state.mode]

    # ── Actions ───────────────────────────────────────────────────────────────

    def start_menu(self) -> None:
        """Return to the menu and warm the cache in the background."""
        self.controller.reset_to_start()
        self.ticker.reset()
        self._flash = None
        if self._prefetcher and (self._prefetch_task is None or self._prefetch_task.done()):
            self._prefetch_task = asyncio.get_running_loop().create_task(self._prefetcher())

    def start_game(self, difficulty: Difficulty) -> None:
        if self._prefetch_task is not None and not self._prefetch_task.done():
            self._prefetch_task.cancel()
        self.ticker.reset()
        self._flash = None
        self.controller.start_session(difficulty)
        self._play("start")

    def retry(self) -> None:
        """Manual retry after round loading stalled."""
        if not self.state.stalled:
            return
        if self._retry_task is None or self._retry_task.done():
            logger.info("Retrying round load")
            self._retry_task = asyncio.get_running_loop().create_task(self.controller.load_round())

    def choose(self, selector: Selector) -> None:
        outcome = self.controller.submit_prediction(selector)
        if outcome is None:
            return
        self._play("choose")
        if self.state.mode is Mode.ENDED:
            self._flash = (COLOR["fail"], FLASH_DURATION)
            self._play("wrong")
        else:
            self._flash = (COLOR["pass"], FLASH_DURATION)
            self._play("correct")

    def _on_tick(self) -> None:
        if self.controller.tick_cooldown() > 0:
            self._play("tick")

    # ── Per-frame update ──────────────────────────────────────────────────────

    def update(self, dt: float, game_mouse_pos: tuple[int, int]) -> None:
        """Advance timers and hover state by one frame.

        Args:
            dt:             Seconds since last frame.
            game_mouse_pos: Mouse position in native game coordinates.
        """
        self._dt = dt
        self._elapsed += dt
        state = self.state

        self.ticker.update(dt, active=state.cooldown_ticks > 0)

        if self._flash is not None:
            color, left = self._flash
            left -= dt
            self._flash = (color, left) if left > 0 else None

        for achievement_id in state.achievements:
            if achievement_id not in self._seen:
                self._seen.add(achievement_id)
                achievement = get_achievement(achievement_id)
                self._toasts.append((achievement.name, achievement.description))
                self._play("achievement")

        if self._toasts:
            if self._toast_left <= 0.0:
                self._toast_left = TOAST_DURATION
            self._toast_left -= dt
            if self._toast_left <= 0.0:
                self._toasts.popleft()

        self._hover = next(
            (key for key, rect in self._buttons.items() if rect.collidepoint(game_mouse_pos)),
            None,
        )

    # ── Event handling ────────────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event) -> None:
        """Route one event. Mouse positions must already be in game coordinates."""
        if event.type == pygame.KEYDOWN:
            self._handle_key(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            hit = next(
                (key for key, rect in self._buttons.items() if rect.collidepoint(event.pos)),
                None,
            )
            if hit is not None:
                self._handle_click(hit)

    def _handle_key(self, key: int) -> None:
        screen = self.screen
        if key == pygame.K_ESCAPE and screen is not Screen.MENU:
            self.start_menu()
        elif screen is Screen.BATTLE and key in _KEY_SELECTORS:
            self.choose(_KEY_SELECTORS[key])
        elif screen is Screen.LOADING and key == pygame.K_r:
            self.retry()
        elif screen is Screen.GAMEOVER and key == pygame.K_RETURN:
            self.start_game(self.state.difficulty)

    def _handle_click(self, hit: str) -> None:
        screen = self.screen
        if screen is Screen.MENU and hit in ("standard", "challenging"):
            self.start_game(Difficulty(hit))
        elif screen is Screen.LOADING and hit == "retry":
            self.retry()
        elif screen is Screen.BATTLE and hit in ("card_a", "card_b"):
            self.choose(Selector.A if hit == "card_a" else Selector.B)
        elif screen is Screen.GAMEOVER and hit == "again":
            self.start_game(self.state.difficulty)
        elif screen is Screen.GAMEOVER and hit == "menu":
            self.start_menu()

    # ── Rendering ─────────────────────────────────────────────────────────────

    def render(self, surface: pygame.Surface) -> None:
        """Draw the current screen onto the native game surface."""
        surface.fill(COLOR["background"])
        screen = self.screen
        state = self.state

        if screen is Screen.MENU:
            self._buttons = draw_menu(surface, state.best_streak, len(self.cache),
                                      hovered=self._hover, dt=self._dt)
        else:
            last_buttons = self._buttons
            ui.draw_header(surface, state.streak, state.best_streak, state.difficulty.value)

            if screen is Screen.LOADING:
                retry = ui.draw_loading(surface, self._elapsed, state.stalled,
                                        hovered=self._hover == "retry")
                self._buttons = {"retry": retry} if retry else {}
            else:
                self._render_battle(surface, state)

            if screen is Screen.GAMEOVER:
                hovered = last_buttons.get(self._hover) if self._hover else None
                again, menu = ui.draw_game_over(
                    surface, state.final_streak, state.best_streak,
                    state.difficulty.value, hovered=hovered,
                )
                self._buttons = {"again": again, "menu": menu}

        if self._flash is not None:
            color, left = self._flash
            ui.draw_flash(surface, color, left / FLASH_DURATION)

        if self._toasts:
            title, body = self._toasts[0]
            ui.draw_toast(surface, title, body, min(1.0, self._toast_left * 2))

    def _render_battle(self, surface: pygame.Surface, state: SessionState) -> None:
        current = state.round
        revealed = current.prediction is not None
        winner = current.winner
        rect_a, rect_b = card_rects()

        for key, rect, selector in (("card_a", rect_a, Selector.A), ("card_b", rect_b, Selector.B)):
            record = current.candidate(selector)
            draw_card(
                surface, rect, record,
                self.sprites.get(record.image_ref),
                hovered=self._hover == key and state.accepts_prediction,
                revealed=revealed,
                winner=winner is selector,
            )

        self._buttons = {"card_a": rect_a, "card_b": rect_b} if state.accepts_prediction else {}

        if state.cooldown_ticks > 0:
            ui.draw_cooldown_bar(surface, self.ticker.fill(state.cooldown_ticks), state.cooldown_ticks)

    def close(self) -> None:
        for task in (self._prefetch_task, self._retry_task):
            if task is not None and not task.done():
                task.cancel()
        self.sprites.close()
        self.controller.close()
