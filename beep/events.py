# beep/events.py
# =========================
# Host event records -> typed events
# =========================

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .types import SessionStatus


SESSION_STATUS = "session.status"
SESSION_IDLE = "session.idle"
PERMISSION_ASKED = "permission.asked"
QUESTION_ASKED = "question.asked"

PERMISSION_ASK_HOOK = "permission.ask"
TOOL_EXECUTE_BEFORE_HOOK = "tool.execute.before"

QUESTION_TOOL = "question"
PERMISSION_PENDING = "ask"


@dataclass(frozen=True)
class StatusChanged:
    session_id: str
    status: SessionStatus


@dataclass(frozen=True)
class SessionIdled:
    session_id: str


@dataclass(frozen=True)
class PermissionAsked:
    session_id: Optional[str] = None


@dataclass(frozen=True)
class QuestionAsked:
    session_id: Optional[str] = None


HostEvent = Union[StatusChanged, SessionIdled, PermissionAsked, QuestionAsked]


@dataclass(frozen=True)
class PermissionDecision:
    session_id: Optional[str]
    permission_type: Optional[str]
    status: Optional[str]

    @property
    def pending(self) -> bool:
        return self.status == PERMISSION_PENDING


@dataclass(frozen=True)
class ToolInvocation:
    tool: Optional[str]
    session_id: Optional[str]

    @property
    def is_question(self) -> bool:
        return self.tool == QUESTION_TOOL


def _as_mapping(value: object) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_text(value: object) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def decode_event(raw: object) -> Optional[HostEvent]:
    """
    Decode one `event` hook record.

    Returns None for records that are not actionable: unknown types, or
    status/idle records without a session id (or status type).
    """
    record = _as_mapping(raw)
    event_type = record.get("type")
    props = _as_mapping(record.get("properties"))
    session_id = _as_text(props.get("sessionID"))

    if event_type == SESSION_STATUS:
        status_type = _as_text(_as_mapping(props.get("status")).get("type"))
        if not status_type or not session_id:
            return None
        return StatusChanged(session_id=session_id, status=SessionStatus.parse(status_type))

    if event_type == SESSION_IDLE:
        if not session_id:
            return None
        return SessionIdled(session_id=session_id)

    if event_type == PERMISSION_ASKED:
        return PermissionAsked(session_id=session_id)

    if event_type == QUESTION_ASKED:
        return QuestionAsked(session_id=session_id)

    return None


def decode_permission_decision(input: object, output: object) -> PermissionDecision:
    data = _as_mapping(input)
    return PermissionDecision(
        session_id=_as_text(data.get("sessionID")),
        permission_type=_as_text(data.get("type")),
        status=_as_text(_as_mapping(output).get("status")),
    )


def decode_tool_invocation(input: object) -> ToolInvocation:
    data = _as_mapping(input)
    return ToolInvocation(
        tool=_as_text(data.get("tool")),
        session_id=_as_text(data.get("sessionID")),
    )
