from __future__ import annotations

from beep.events import (
    PermissionAsked,
    QuestionAsked,
    SessionIdled,
    StatusChanged,
    decode_event,
    decode_permission_decision,
    decode_tool_invocation,
)
from beep.types import SessionStatus


def test_decode_status():
    event = decode_event(
        {"type": "session.status", "properties": {"sessionID": "s1", "status": {"type": "busy"}}}
    )
    assert event == StatusChanged(session_id="s1", status=SessionStatus.BUSY)


def test_decode_status_requires_session_and_type():
    assert decode_event({"type": "session.status", "properties": {"status": {"type": "busy"}}}) is None
    assert decode_event({"type": "session.status", "properties": {"sessionID": "s1", "status": {}}}) is None
    assert decode_event({"type": "session.status", "properties": {"sessionID": "s1", "status": "busy"}}) is None


def test_decode_idle():
    assert decode_event({"type": "session.idle", "properties": {"sessionID": "s1"}}) == SessionIdled("s1")
    assert decode_event({"type": "session.idle", "properties": {"sessionID": ""}}) is None


def test_decode_prompts_tolerate_missing_session():
    assert decode_event({"type": "permission.asked"}) == PermissionAsked(session_id=None)
    assert decode_event({"type": "question.asked", "properties": {"sessionID": "s9"}}) == QuestionAsked("s9")


def test_decode_garbage():
    assert decode_event(None) is None
    assert decode_event("session.idle") is None
    assert decode_event({"type": "file.edited", "properties": {"sessionID": "s1"}}) is None


def test_permission_decision():
    decision = decode_permission_decision({"sessionID": "s1", "type": "bash"}, {"status": "ask"})
    assert decision.pending is True
    assert decision.permission_type == "bash"
    assert decode_permission_decision({}, {"status": "deny"}).pending is False
    assert decode_permission_decision(None, None).pending is False


def test_tool_invocation():
    assert decode_tool_invocation({"tool": "question", "sessionID": "s1"}).is_question is True
    assert decode_tool_invocation({"tool": "read"}).is_question is False
    assert decode_tool_invocation("question").is_question is False
