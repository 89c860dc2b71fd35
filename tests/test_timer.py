"""Tests for the frame-driven cooldown ticker."""

from unittest.mock import MagicMock

import pytest

from core.timer import CooldownTicker


class TestCooldownTicker:

    def test_no_tick_before_interval(self):
        on_tick = MagicMock()
        ticker = CooldownTicker(on_tick, interval=1.0)

        assert ticker.update(0.5, active=True) == 0
        on_tick.assert_not_called()

    def test_ticks_once_per_interval(self):
        on_tick = MagicMock()
        ticker = CooldownTicker(on_tick, interval=1.0)

        ticker.update(0.6, active=True)
        assert ticker.update(0.6, active=True) == 1
        assert on_tick.call_count == 1

    def test_large_dt_fires_several_ticks(self):
        on_tick = MagicMock()
        ticker = CooldownTicker(on_tick, interval=1.0)
        assert ticker.update(2.5, active=True) == 2
        assert on_tick.call_count == 2

    def test_inactive_clears_accumulator(self):
        on_tick = MagicMock()
        ticker = CooldownTicker(on_tick, interval=1.0)

        ticker.update(0.9, active=True)
        ticker.update(0.05, active=False)
        ticker.update(0.2, active=True)

        on_tick.assert_not_called()

    def test_drives_controller_style_countdown(self):
        ticks = [3]

        def tick():
            ticks[0] = max(0, ticks[0] - 1)

        ticker = CooldownTicker(tick, interval=1.0)
        for _ in range(100):
            ticker.update(0.05, active=ticks[0] > 0)

        assert ticks[0] == 0

    def test_fill(self):
        ticker = CooldownTicker(MagicMock(), interval=1.0)
        assert ticker.fill(3, total=3) == pytest.approx(1.0)
        ticker.update(0.5, active=True)
        assert ticker.fill(3, total=3) == pytest.approx(2.5 / 3)
        assert ticker.fill(0, total=3) == 0.0

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            CooldownTicker(MagicMock(), interval=0)
