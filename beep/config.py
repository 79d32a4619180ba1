from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

from .types import EVENT_KEYS, EventConfig, EventKey, Number


DEFAULT_SOUND_FILE = "C:\\Windows\\Media\\Windows Notify.wav"
DEFAULT_REPEAT = 1
DEFAULT_THROTTLE_MS = 2000

DEFAULT_EVENT_ENABLED: Dict[EventKey, bool] = {
    EventKey.SESSION_IDLE: True,
    EventKey.PERMISSION_ASKED: True,
    EventKey.QUESTION_ASKED: True,
}


def _default_events() -> Dict[EventKey, EventConfig]:
    return {key: EventConfig(enabled=DEFAULT_EVENT_ENABLED[key]) for key in EVENT_KEYS}


@dataclass(frozen=True)
class BeepConfig:
    enabled: bool = True
    sound_file: str = DEFAULT_SOUND_FILE
    repeat: Number = DEFAULT_REPEAT
    throttle_ms: Number = DEFAULT_THROTTLE_MS
    debug_toast: bool = False
    events: Mapping[EventKey, EventConfig] = field(default_factory=_default_events)

    def event(self, key: EventKey) -> EventConfig:
        cfg = self.events.get(key)
        if cfg is None:
            return EventConfig(enabled=DEFAULT_EVENT_ENABLED[key])
        return cfg

    def to_dict(self) -> Dict[str, Any]:
        """Wire-shaped (camelCase) view, used by the CLI to print the effective config."""
        events: Dict[str, Any] = {}
        for key in EVENT_KEYS:
            cfg = self.event(key)
            entry: Dict[str, Any] = {"enabled": cfg.enabled}
            if cfg.sound_file is not None:
                entry["soundFile"] = cfg.sound_file
            if cfg.repeat is not None:
                entry["repeat"] = cfg.repeat
            if cfg.sources is not None:
                entry["sources"] = sorted(cfg.sources)
            events[key.value] = entry
        return {
            "enabled": self.enabled,
            "soundFile": self.sound_file,
            "repeat": self.repeat,
            "throttleMs": self.throttle_ms,
            "debugToast": self.debug_toast,
            "events": events,
        }


def default_config() -> BeepConfig:
    return BeepConfig()


# ============================================================
# Field readers: a value counts only when it has the expected type
# ============================================================

def _is_number(value: object) -> bool:
    # bool is an int subclass but never a valid number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_bool(value: object) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _as_str(value: object) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_number(value: object) -> Optional[Number]:
    return value if _is_number(value) else None


def _as_sources(value: object) -> Optional[FrozenSet[str]]:
    if isinstance(value, (list, tuple)):
        return frozenset(item for item in value if isinstance(item, str))
    if isinstance(value, (set, frozenset)):
        return frozenset(item for item in value if isinstance(item, str))
    return None


def is_finite_number(value: object) -> bool:
    # ints never overflow here; math.isfinite would convert them to float first
    if isinstance(value, int) and not isinstance(value, bool):
        return True
    return _is_number(value) and math.isfinite(value)  # type: ignore[arg-type]


# ============================================================
# Event override tagged union
# ============================================================

@dataclass(frozen=True)
class EventToggle:
    """`events.<key>: true|false` - touches only `enabled`."""
    enabled: bool


@dataclass(frozen=True)
class EventPatch:
    """`events.<key>: {...}` - every field is independently optional."""
    enabled: Optional[bool] = None
    sound_file: Optional[str] = None
    repeat: Optional[Number] = None
    sources: Optional[FrozenSet[str]] = None


EventOverride = Union[EventToggle, EventPatch, None]


def parse_event_override(value: object) -> EventOverride:
    if isinstance(value, EventConfig):
        return EventPatch(
            enabled=value.enabled,
            sound_file=value.sound_file,
            repeat=value.repeat,
            sources=value.sources,
        )
    if isinstance(value, bool):
        return EventToggle(enabled=value)
    if isinstance(value, Mapping):
        return EventPatch(
            enabled=_as_bool(value.get("enabled")),
            sound_file=_as_str(value.get("soundFile")),
            repeat=_as_number(value.get("repeat")),
            sources=_as_sources(value.get("sources")),
        )
    return None


def _pick(value, fallback):
    return fallback if value is None else value


def apply_event_override(base: EventConfig, override: EventOverride) -> EventConfig:
    if override is None:
        return base
    if isinstance(override, EventToggle):
        return replace(base, enabled=override.enabled)
    return EventConfig(
        enabled=_pick(override.enabled, base.enabled),
        sound_file=_pick(override.sound_file, base.sound_file),
        repeat=_pick(override.repeat, base.repeat),
        sources=_pick(override.sources, base.sources),
    )


def coerce_event_config(value: object, fallback_enabled: bool) -> EventConfig:
    """Turn a stored or raw event entry into an EventConfig with a concrete `enabled`."""
    return apply_event_override(EventConfig(enabled=fallback_enabled), parse_event_override(value))


def merge_event_config(base_value: object, override_value: object, fallback_enabled: bool) -> EventConfig:
    base = coerce_event_config(base_value, fallback_enabled)
    return apply_event_override(base, parse_event_override(override_value))


# ============================================================
# Merge / normalize
# ============================================================

def merge_config(base: BeepConfig, override: object) -> BeepConfig:
    """
    Layer one raw config blob over `base`.

    Top-level scalars are replaced only by correctly typed values. Event entries
    are merged field by field, and only for keys present in `override["events"]`.
    """
    if not isinstance(override, Mapping):
        return base

    enabled = _pick(_as_bool(override.get("enabled")), base.enabled)
    sound_file = _pick(_as_str(override.get("soundFile")), base.sound_file)
    repeat = _pick(_as_number(override.get("repeat")), base.repeat)
    throttle_ms = _pick(_as_number(override.get("throttleMs")), base.throttle_ms)
    debug_toast = _pick(_as_bool(override.get("debugToast")), base.debug_toast)

    events: Dict[EventKey, Any] = dict(base.events)
    raw_events = override.get("events")
    if isinstance(raw_events, Mapping):
        for key in EVENT_KEYS:
            if key.value in raw_events:
                events[key] = merge_event_config(
                    events.get(key),
                    raw_events[key.value],
                    DEFAULT_EVENT_ENABLED[key],
                )

    return BeepConfig(
        enabled=enabled,
        sound_file=sound_file,
        repeat=repeat,
        throttle_ms=throttle_ms,
        debug_toast=debug_toast,
        events=events,
    )


def normalize_config(config: BeepConfig) -> BeepConfig:
    events = {
        key: coerce_event_config((config.events or {}).get(key), DEFAULT_EVENT_ENABLED[key])
        for key in EVENT_KEYS
    }
    return replace(config, events=events)


def build_config(*overrides: object) -> BeepConfig:
    """Defaults, then each override in order (global before project), then normalize."""
    config = default_config()
    for override in overrides:
        if override is not None:
            config = merge_config(config, override)
    return normalize_config(config)
