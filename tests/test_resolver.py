from __future__ import annotations

import math

import pytest

from beep.config import DEFAULT_SOUND_FILE, BeepConfig, build_config, default_config
from beep.resolver import normalize_repeat, resolve_event_settings
from beep.types import EventConfig, EventKey


@pytest.mark.parametrize(
    "value, expected",
    [
        (1, 1),
        (3, 3),
        (2.9, 2),
        (0, 1),
        (-4, 1),
        (0.5, 1),
        (math.inf, 7),
        (-math.inf, 7),
        (math.nan, 7),
        (None, 7),
        ("3", 7),
        (True, 7),
    ],
)
def test_normalize_repeat(value, expected):
    assert normalize_repeat(value, 7) == expected


def test_normalize_repeat_floors_bad_fallback():
    assert normalize_repeat(None, 0) == 1
    assert normalize_repeat(None, -2) == 1


def test_resolve_defaults():
    settings = resolve_event_settings(default_config(), EventKey.SESSION_IDLE)
    assert settings.enabled is True
    assert settings.sound_file == DEFAULT_SOUND_FILE
    assert settings.repeat == 1
    assert settings.sources is None


def test_event_values_win_over_top_level():
    cfg = build_config(
        {
            "soundFile": "top.wav",
            "repeat": 2,
            "events": {"permissionAsked": {"soundFile": "perm.wav", "repeat": 5}},
        }
    )
    perm = resolve_event_settings(cfg, EventKey.PERMISSION_ASKED)
    idle = resolve_event_settings(cfg, EventKey.SESSION_IDLE)

    assert (perm.sound_file, perm.repeat) == ("perm.wav", 5)
    assert (idle.sound_file, idle.repeat) == ("top.wav", 2)


def test_invalid_event_repeat_falls_back_to_top_level():
    cfg = build_config({"repeat": 3, "events": {"questionAsked": {"repeat": math.nan}}})
    assert resolve_event_settings(cfg, EventKey.QUESTION_ASKED).repeat == 3


def test_floor_applies_to_resolved_value():
    cfg = build_config({"repeat": 4, "events": {"sessionIdle": {"repeat": 0}}})
    # event repeat of 0 is finite, so it wins and is floored to 1
    assert resolve_event_settings(cfg, EventKey.SESSION_IDLE).repeat == 1


def test_invalid_top_level_repeat_falls_back_to_builtin():
    cfg = BeepConfig(repeat=math.inf)
    assert resolve_event_settings(cfg, EventKey.SESSION_IDLE).repeat == 1


def test_non_string_sound_falls_back_to_builtin():
    cfg = BeepConfig(sound_file=None)  # type: ignore[arg-type]
    assert resolve_event_settings(cfg, EventKey.SESSION_IDLE).sound_file == DEFAULT_SOUND_FILE


def test_enabled_defaults_true_unless_false():
    cfg = build_config({"events": {"questionAsked": False}})
    assert resolve_event_settings(cfg, EventKey.QUESTION_ASKED).enabled is False
    assert resolve_event_settings(cfg, EventKey.PERMISSION_ASKED).enabled is True


def test_missing_event_entry_uses_defaults():
    cfg = BeepConfig(events={})
    settings = resolve_event_settings(cfg, EventKey.PERMISSION_ASKED)
    assert settings.enabled is True


def test_sources_pass_through():
    cfg = BeepConfig(events={EventKey.SESSION_IDLE: EventConfig(sources=frozenset({"a"}))})
    assert resolve_event_settings(cfg, EventKey.SESSION_IDLE).sources == frozenset({"a"})


def test_huge_integer_repeat_is_kept_not_overflowed():
    cfg = build_config({"repeat": 10**400, "events": {"questionAsked": {"repeat": 10**400}}})

    assert resolve_event_settings(cfg, EventKey.SESSION_IDLE).repeat == 10**400
    assert resolve_event_settings(cfg, EventKey.QUESTION_ASKED).repeat == 10**400
