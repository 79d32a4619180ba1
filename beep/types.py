from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Union


class EventKey(str, Enum):
    SESSION_IDLE = "sessionIdle"
    PERMISSION_ASKED = "permissionAsked"
    QUESTION_ASKED = "questionAsked"


EVENT_KEYS = (EventKey.SESSION_IDLE, EventKey.PERMISSION_ASKED, EventKey.QUESTION_ASKED)


class SessionStatus(str, Enum):
    BUSY = "busy"
    RETRY = "retry"
    IDLE = "idle"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: object) -> "SessionStatus":
        if isinstance(value, SessionStatus):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return cls.UNKNOWN
        return cls.UNKNOWN


# statuses whose transition into idle counts as "the session finished work"
WORKING_STATUSES = frozenset({SessionStatus.BUSY, SessionStatus.RETRY})


Number = Union[int, float]


@dataclass(frozen=True)
class EventConfig:
    """Per-event settings; absent fields fall back to the top-level config."""
    enabled: bool = True
    sound_file: Optional[str] = None
    repeat: Optional[Number] = None
    sources: Optional[FrozenSet[str]] = None


@dataclass(frozen=True)
class EventSettings:
    """Concrete settings used for one firing."""
    enabled: bool
    sound_file: str
    repeat: int
    sources: Optional[FrozenSet[str]] = None


@dataclass(frozen=True)
class BeepDetails:
    source: Optional[str] = None
    session_id: Optional[str] = None
    prev: Optional[str] = None
    permission: Optional[str] = None

    def format(self) -> str:
        parts = [
            f"{label}={value}"
            for label, value in (
                ("source", self.source),
                ("sessionId", self.session_id),
                ("prev", self.prev),
                ("permission", self.permission),
            )
            if value is not None
        ]
        return f" ({', '.join(parts)})" if parts else ""


@dataclass(frozen=True)
class ThrottleResult:
    allowed: bool
    remaining_ms: int = 0


@dataclass(frozen=True)
class PlaybackOutcome:
    exit_code: int
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class BeepResult(str, Enum):
    FIRED = "fired"
    DISABLED = "disabled"
    EVENT_DISABLED = "event_disabled"
    FILTERED = "filtered"
    THROTTLED = "throttled"
    PLAYBACK_FAILED = "playback_failed"


@dataclass(frozen=True)
class BeepDecision:
    result: BeepResult
    event_key: EventKey
    details: BeepDetails
    settings: Optional[EventSettings] = None
    remaining_ms: int = 0
    playback: Optional[PlaybackOutcome] = None

    @property
    def fired(self) -> bool:
        # a failed playback still consumed the throttle slot
        return self.result in (BeepResult.FIRED, BeepResult.PLAYBACK_FAILED)
