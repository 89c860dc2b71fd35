"""
core/storage.py — Persisted key-value storage for StatClash.

The game persists exactly one value: the best streak, as an integer
encoded as a string under BEST_STREAK_KEY. Storage is injected into the
controller through the KeyValueStore protocol:

    MemoryStore   — dict-backed, for tests and throwaway runs
    JsonFileStore — flat JSON object on disk, the default for main.py

Persistence is best effort. A corrupt or unreadable file starts empty and
a failed write is logged; neither interrupts play.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from settings import BEST_STREAK_KEY

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal get/set string store."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-process store backed by a dict."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Store that mirrors its contents to a JSON file.

    The file is read once on construction and rewritten in full on every
    set(). Values are always strings.

    Attributes:
        path: Location of the JSON file. Parent dirs are created on write.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read store %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring store %s: expected a JSON object", self.path)
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._data, f)
        except OSError as e:
            logger.warning("Failed to write store %s: %s", self.path, e)


# ── Best streak helpers ───────────────────────────────────────────────────────

def load_best_streak(store: KeyValueStore, key: str = BEST_STREAK_KEY) -> int:
    """Read the persisted best streak.

    Returns:
        The stored value, or 0 if it is missing, non-numeric or negative.
    """
    raw = store.get(key)
    if raw is None:
        return 0
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer best streak %r", raw)
        return 0
    return max(0, value)


def save_best_streak(store: KeyValueStore, value: int, key: str = BEST_STREAK_KEY) -> None:
    """Persist the best streak as a decimal string."""
    store.set(key, str(value))
