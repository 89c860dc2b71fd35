"""
renderer/sprites.py — Creature sprite loading for StatClash.

Sprites are downloaded in background tasks the first time a card asks for
them and kept for the process lifetime. Until a sprite arrives (or if it
never does) the card draws a placeholder, so the game never waits on an
image.
"""

from __future__ import annotations
import asyncio
import io
import logging
from typing import Awaitable, Callable

import pygame

from core.errors import FetchError
from settings import SPRITE_SIZE

logger = logging.getLogger(__name__)


class SpriteCache:
    """URL → scaled pygame.Surface, filled asynchronously.

    Attributes:
        _fetch:    Coroutine function returning raw image bytes for a URL.
        _surfaces: Loaded sprites, or None for URLs that failed.
        _pending:  Download tasks still running.
    """

    def __init__(self, fetch: Callable[[str], Awaitable[bytes]]) -> None:
        self._fetch = fetch
        self._surfaces: dict[str, pygame.Surface | None] = {}
        self._pending:  dict[str, asyncio.Task] = {}

    def get(self, url: str | None) -> pygame.Surface | None:
        """Return the sprite for `url`, starting a download if needed."""
        if not url:
            return None
        if url in self._surfaces:
            return self._surfaces[url]
        if url not in self._pending:
            self._pending[url] = asyncio.get_running_loop().create_task(self._load(url))
        return None

    async def _load(self, url: str) -> None:
        try:
            data = await self._fetch(url)
            image = pygame.image.load(io.BytesIO(data))
            self._surfaces[url] = pygame.transform.scale(image, (SPRITE_SIZE, SPRITE_SIZE))
        except (FetchError, pygame.error) as exc:
            logger.debug("Sprite %s unavailable: %s", url, exc)
            self._surfaces[url] = None
        finally:
            self._pending.pop(url, None)

    def close(self) -> None:
        """Cancel sprite downloads still in flight."""
        for task in self._pending.values():
            task.cancel()
        self._pending.clear()
