from __future__ import annotations

import math
import sys
import time
from typing import Callable, Optional

from .config import is_finite_number
from .types import ThrottleResult


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ThrottleGate:
    """
    One cooldown window shared by every event key and every session.

    A burst of different events inside the window only lets the first through.
    """

    def __init__(self, *, clock: Callable[[], float] = _monotonic_ms) -> None:
        self._clock = clock
        self._last_fired_at_ms: Optional[float] = None

    @property
    def last_fired_at_ms(self) -> Optional[float]:
        return self._last_fired_at_ms

    def reset(self) -> None:
        self._last_fired_at_ms = None

    def try_fire(self, throttle_ms: object) -> ThrottleResult:
        window_ms = 0.0
        if is_finite_number(throttle_ms):
            window_ms = float(min(max(0, throttle_ms), sys.float_info.max))  # type: ignore[type-var]
        now = self._clock()

        if self._last_fired_at_ms is not None:
            remaining = window_ms - (now - self._last_fired_at_ms)
            if remaining > 0:
                return ThrottleResult(allowed=False, remaining_ms=math.ceil(remaining))

        self._last_fired_at_ms = now
        return ThrottleResult(allowed=True, remaining_ms=0)
