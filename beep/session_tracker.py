# beep/session_tracker.py
# =========================
# Per-session status cache used for idle edge detection
# =========================

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from .types import SessionStatus


@dataclass
class _Entry:
    status: SessionStatus
    touched_at: float


class SessionStatusTracker:
    """
    Last observed status per session id.

    Bounded store:
    - at most `max_sessions` entries; least recently touched is evicted first
    - entries untouched for `idle_ttl_seconds` expire (lazily, or via sweep())

    An evicted or expired session reads back as UNKNOWN, which never counts
    as a busy/retry -> idle edge.
    """

    def __init__(
        self,
        *,
        max_sessions: int = 1024,
        idle_ttl_seconds: Optional[float] = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_sessions <= 0:
            raise ValueError("max_sessions must be > 0")
        self._max_sessions = max_sessions
        self._ttl = idle_ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self.evicted_total = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        return isinstance(session_id, str) and self._live(session_id) is not None

    def record_status(self, session_id: str, status: SessionStatus) -> SessionStatus:
        """Store `status` and return what was stored before (UNKNOWN if nothing)."""
        previous = self.last_status(session_id)
        self._store(session_id, SessionStatus.parse(status))
        return previous

    def last_status(self, session_id: str) -> SessionStatus:
        entry = self._live(session_id)
        return entry.status if entry is not None else SessionStatus.UNKNOWN

    def set_idle(self, session_id: str) -> None:
        self._store(session_id, SessionStatus.IDLE)

    def forget(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def sweep(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        if self._ttl is None:
            return 0
        now = self._clock()
        expired = [sid for sid, entry in self._entries.items() if now - entry.touched_at >= self._ttl]
        for sid in expired:
            del self._entries[sid]
        self.evicted_total += len(expired)
        return len(expired)

    def _live(self, session_id: str) -> Optional[_Entry]:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if self._ttl is not None and self._clock() - entry.touched_at >= self._ttl:
            del self._entries[session_id]
            self.evicted_total += 1
            return None
        return entry

    def _store(self, session_id: str, status: SessionStatus) -> None:
        self._entries[session_id] = _Entry(status=status, touched_at=self._clock())
        self._entries.move_to_end(session_id)
        while len(self._entries) > self._max_sessions:
            self._entries.popitem(last=False)
            self.evicted_total += 1
