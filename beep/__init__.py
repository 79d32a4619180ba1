"""beep: sound notifications for agent host lifecycle events."""
from .config import BeepConfig, build_config, default_config, merge_config, normalize_config
from .config_loader import LoadedConfig, read_config
from .dispatcher import BeepDispatcher, create_plugin
from .metrics import BeepMetrics
from .resolver import normalize_repeat, resolve_event_settings
from .session_tracker import SessionStatusTracker
from .throttle import ThrottleGate
from .types import (
    BeepDecision,
    BeepDetails,
    BeepResult,
    EventConfig,
    EventKey,
    EventSettings,
    SessionStatus,
    ThrottleResult,
)

__all__ = [
    "BeepConfig",
    "build_config",
    "default_config",
    "merge_config",
    "normalize_config",
    "LoadedConfig",
    "read_config",
    "BeepDispatcher",
    "create_plugin",
    "BeepMetrics",
    "normalize_repeat",
    "resolve_event_settings",
    "SessionStatusTracker",
    "ThrottleGate",
    "BeepDecision",
    "BeepDetails",
    "BeepResult",
    "EventConfig",
    "EventKey",
    "EventSettings",
    "SessionStatus",
    "ThrottleResult",
]
