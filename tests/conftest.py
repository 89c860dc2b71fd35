"""Pytest configuration and shared fakes."""

import asyncio
from collections import deque

import pytest

from core.creature import CreatureRecord
from core.storage import MemoryStore

STAT_NAMES = ("hp", "attack", "defense", "special-attack", "special-defense", "speed")


def make_creature(creature_id: int, total: int, name: str | None = None) -> CreatureRecord:
    """Build a record whose six attributes sum to `total`."""
    base = total // len(STAT_NAMES)
    values = [base] * (len(STAT_NAMES) - 1) + [total - base * (len(STAT_NAMES) - 1)]
    return CreatureRecord(
        id=creature_id,
        name=name or f"creature-{creature_id}",
        image_ref=f"https://sprites.example/{creature_id}.png",
        attributes=tuple(zip(STAT_NAMES, values)),
        types=("normal",),
    )


class ScriptedLookup:
    """Lookup that answers fetches in call order from a script.

    Each script item is either a total score (a record with the requested
    id and that total is returned) or an exception instance (raised).
    When the script runs out every fetch returns DEFAULT_TOTAL.

    Set `gate` to an asyncio.Event to hold every fetch until it is set.
    """

    DEFAULT_TOTAL = 300

    def __init__(self, script=()):
        self.script = deque(script)
        self.requested: list[int] = []
        self.gate: asyncio.Event | None = None

    def extend(self, items):
        self.script.extend(items)

    async def fetch_creature(self, creature_id: int) -> CreatureRecord:
        self.requested.append(creature_id)
        if self.gate is not None:
            await self.gate.wait()
        item = self.script.popleft() if self.script else self.DEFAULT_TOTAL
        if isinstance(item, BaseException):
            raise item
        return make_creature(creature_id, item)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def lookup():
    return ScriptedLookup()
