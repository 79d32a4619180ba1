from __future__ import annotations

from typing import List, Tuple

from beep.types import PlaybackOutcome


class FakeClock:
    """Manually advanced clock; returns milliseconds or seconds, whatever the test feeds it."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, delta: float) -> None:
        self.now += delta


class RecordingPlayer:
    def __init__(self, exit_code: int = 0, stderr: str = "") -> None:
        self.calls: List[Tuple[str, int]] = []
        self.exit_code = exit_code
        self.stderr = stderr

    async def play(self, sound_file: str, repeat: int) -> PlaybackOutcome:
        self.calls.append((sound_file, repeat))
        return PlaybackOutcome(exit_code=self.exit_code, stderr=self.stderr)


class RecordingNotifier:
    def __init__(self) -> None:
        self.notices: List[Tuple[str, str]] = []

    async def show(self, message: str, variant: str = "info") -> None:
        self.notices.append((message, variant))


class FailingNotifier:
    async def show(self, message: str, variant: str = "info") -> None:
        raise RuntimeError("toast surface gone")
