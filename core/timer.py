"""
core/timer.py — Frame-driven cooldown ticker for StatClash.

The controller never schedules its own cooldown ticks. Something outside
has to call controller.tick_cooldown() once per TICK_SECONDS; in the game
that is this ticker, fed with the frame delta time from the main loop.

Ticker owns only its accumulator. It does not read session state beyond
asking whether a cooldown is running.

The ticks only drive the countdown shown on screen. The next round is
loaded by the controller on a wall-clock timer (COOLDOWN_SECONDS), not when
the ticks run out. main.py clamps dt to 0.05 s per frame, so below 20 fps
the ticks fall behind and the next round can arrive while the bar still
shows ticks left. When the round changes the cooldown reads 0 and
update() clears the accumulator.

Usage:
    ticker = CooldownTicker(controller.tick_cooldown)

    # each frame:
    ticker.update(dt, active=controller.state.cooldown_ticks > 0)
    ticker.fill(controller.state.cooldown_ticks)   # 0.0–1.0 for the bar
"""

from __future__ import annotations
from typing import Callable

from settings import COOLDOWN_TICKS, TICK_SECONDS


class CooldownTicker:
    """Calls a tick callback once per fixed time unit while active.

    Attributes:
        _on_tick:  Callback invoked once per elapsed tick.
        _interval: Seconds per tick.
        _elapsed:  Seconds accumulated towards the next tick.
    """

    def __init__(self, on_tick: Callable[[], object], interval: float = TICK_SECONDS) -> None:
        if interval <= 0:
            raise ValueError("tick interval must be positive")
        self._on_tick  = on_tick
        self._interval = interval
        self._elapsed: float = 0.0

    def update(self, dt: float, active: bool) -> int:
        """Advance by dt seconds and fire any ticks that came due.

        While inactive the accumulator is cleared, so every cooldown starts
        a full interval before its first tick.

        Args:
            dt:     Delta time in seconds since the last frame.
            active: True while a cooldown is running.

        Returns:
            Number of ticks fired this call.
        """
        if not active:
            self._elapsed = 0.0
            return 0
        self._elapsed += dt
        fired = 0
        while self._elapsed >= self._interval:
            self._elapsed -= self._interval
            self._on_tick()
            fired += 1
        return fired

    def reset(self) -> None:
        """Clear the accumulator so the next tick is a full interval away."""
        self._elapsed = 0.0

    def fill(self, ticks_left: int, total: int = COOLDOWN_TICKS) -> float:
        """Return the remaining cooldown as a fraction for the cooldown bar.

        Smooths between ticks using the accumulator.

        Returns:
            Float in [0.0, 1.0]. 1.0 = cooldown just started.
        """
        if total <= 0 or ticks_left <= 0:
            return 0.0
        remaining = ticks_left - self._elapsed / self._interval
        return max(0.0, min(1.0, remaining / total))
