"""
core/achievements.py — Streak milestones for StatClash.

Achievements are read from settings.ACHIEVEMENTS at import time. The
controller asks newly_unlocked() after every correct prediction and the
game shows a toast for each result.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from settings import ACHIEVEMENTS


@dataclass(frozen=True)
class Achievement:
    id:          str
    name:        str
    description: str
    requirement: int   # streak needed to unlock


ACHIEVEMENT_TABLE: tuple[Achievement, ...] = tuple(
    Achievement(*row) for row in sorted(ACHIEVEMENTS, key=lambda row: row[3])
)

_BY_ID = {a.id: a for a in ACHIEVEMENT_TABLE}


def get_achievement(achievement_id: str) -> Achievement:
    """Look up an achievement by id. Raises KeyError if unknown."""
    return _BY_ID[achievement_id]


def newly_unlocked(streak: int, unlocked: Iterable[str]) -> list[Achievement]:
    """Return achievements reached by `streak` that are not yet unlocked.

    Args:
        streak:   The streak just reached.
        unlocked: Ids already unlocked.

    Returns:
        Achievements in requirement order. Empty if nothing new.
    """
    have = set(unlocked)
    return [
        a for a in ACHIEVEMENT_TABLE
        if a.requirement <= streak and a.id not in have
    ]
