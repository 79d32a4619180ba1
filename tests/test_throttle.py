from __future__ import annotations

import math

from beep.throttle import ThrottleGate
from beep.types import ThrottleResult

from fakes import FakeClock


def test_first_fire_is_allowed():
    gate = ThrottleGate(clock=FakeClock())
    assert gate.try_fire(2000) == ThrottleResult(allowed=True, remaining_ms=0)


def test_second_fire_inside_window_reports_remaining():
    clock = FakeClock()
    gate = ThrottleGate(clock=clock)

    assert gate.try_fire(2000).allowed is True
    clock.advance(10)
    result = gate.try_fire(2000)

    assert result.allowed is False
    assert result.remaining_ms == 1990


def test_denied_attempt_does_not_move_window():
    clock = FakeClock()
    gate = ThrottleGate(clock=clock)
    gate.try_fire(1000)

    clock.advance(600)
    assert gate.try_fire(1000).allowed is False
    clock.advance(400)
    assert gate.try_fire(1000).allowed is True


def test_exactly_one_allowed_inside_window():
    clock = FakeClock()
    gate = ThrottleGate(clock=clock)
    results = []
    for _ in range(5):
        results.append(gate.try_fire(500).allowed)
        clock.advance(50)
    assert results.count(True) == 1


def test_zero_window_always_allows():
    gate = ThrottleGate(clock=FakeClock())
    assert gate.try_fire(0).allowed is True
    assert gate.try_fire(0).allowed is True


def test_negative_and_invalid_windows_clamp_to_zero():
    gate = ThrottleGate(clock=FakeClock())
    gate.try_fire(0)
    assert gate.try_fire(-500).allowed is True
    assert gate.try_fire("2000").allowed is True
    assert gate.try_fire(math.nan).allowed is True
    assert gate.try_fire(None).allowed is True


def test_fractional_remainder_rounds_up():
    clock = FakeClock()
    gate = ThrottleGate(clock=clock)
    gate.try_fire(100)
    clock.advance(99.5)
    assert gate.try_fire(100) == ThrottleResult(allowed=False, remaining_ms=1)


def test_reset():
    clock = FakeClock()
    gate = ThrottleGate(clock=clock)
    gate.try_fire(5000)
    assert gate.last_fired_at_ms == clock.now
    gate.reset()
    assert gate.last_fired_at_ms is None
    assert gate.try_fire(5000).allowed is True


def test_default_clock_is_usable():
    gate = ThrottleGate()
    assert gate.try_fire(60_000).allowed is True
    assert gate.try_fire(60_000).allowed is False


def test_huge_integer_window_does_not_overflow():
    clock = FakeClock()
    gate = ThrottleGate(clock=clock)

    assert gate.try_fire(10**400).allowed is True
    denied = gate.try_fire(10**400)
    assert denied.allowed is False
    assert denied.remaining_ms > 0
