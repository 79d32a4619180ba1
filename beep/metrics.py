from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class BeepMetrics:
    fired_total: int = 0
    throttled_total: int = 0
    filtered_total: int = 0
    disabled_total: int = 0
    playback_failed_total: int = 0
    ignored_total: int = 0

    by_event: Dict[str, int] = field(default_factory=dict)
    by_result: Dict[str, int] = field(default_factory=dict)

    def inc_event(self, event_key: str) -> None:
        self.by_event[event_key] = self.by_event.get(event_key, 0) + 1

    def inc_result(self, result: str) -> None:
        self.by_result[result] = self.by_result.get(result, 0) + 1

    def summary(self) -> Dict[str, object]:
        return {
            "fired_total": self.fired_total,
            "throttled_total": self.throttled_total,
            "filtered_total": self.filtered_total,
            "disabled_total": self.disabled_total,
            "playback_failed_total": self.playback_failed_total,
            "ignored_total": self.ignored_total,
            "by_event": dict(self.by_event),
            "by_result": dict(self.by_result),
        }
