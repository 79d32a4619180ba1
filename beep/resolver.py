from __future__ import annotations

import math

from .config import DEFAULT_REPEAT, DEFAULT_SOUND_FILE, BeepConfig, is_finite_number
from .types import EventKey, EventSettings


def normalize_repeat(value: object, fallback: int) -> int:
    """max(1, floor(value)) for finite numbers; anything else falls back."""
    number = math.floor(value) if is_finite_number(value) else fallback  # type: ignore[arg-type]
    return max(1, int(number))


def resolve_event_settings(config: BeepConfig, event_key: EventKey) -> EventSettings:
    event_cfg = config.event(event_key)

    fallback_sound = config.sound_file if isinstance(config.sound_file, str) else DEFAULT_SOUND_FILE
    sound_file = event_cfg.sound_file if isinstance(event_cfg.sound_file, str) else fallback_sound

    repeat = normalize_repeat(event_cfg.repeat, normalize_repeat(config.repeat, DEFAULT_REPEAT))

    return EventSettings(
        enabled=event_cfg.enabled is not False,
        sound_file=sound_file,
        repeat=repeat,
        sources=event_cfg.sources,
    )
