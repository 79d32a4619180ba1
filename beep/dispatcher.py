# beep/dispatcher.py
# =========================
# Host hooks -> event key -> gate -> sound
# =========================

from __future__ import annotations

import ntpath
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from loguru import logger

from .config import BeepConfig, default_config
from .config_loader import read_config
from . import events as host_events
from .events import (
    PermissionAsked,
    QuestionAsked,
    SessionIdled,
    StatusChanged,
    decode_event,
    decode_permission_decision,
    decode_tool_invocation,
)
from .metrics import BeepMetrics
from .notifier import DebugToast, HostToastNotifier, Notifier
from .player import PowerShellSoundPlayer, SoundPlayer
from .resolver import resolve_event_settings
from .session_tracker import SessionStatusTracker
from .throttle import ThrottleGate
from .types import (
    BeepDecision,
    BeepDetails,
    BeepResult,
    EventKey,
    SessionStatus,
    WORKING_STATUSES,
)


PERMISSION_HOOK_SOURCE = "permission.ask"
QUESTION_TOOL_SOURCE = "question tool"


def sound_label(sound_file: str) -> str:
    # ntpath splits on both separators, so Windows and POSIX paths label alike
    return ntpath.basename(sound_file)


class BeepDispatcher:
    """
    Receives host events and hook calls and decides whether to beep.

    Flow per notification attempt:
      enabled? -> event enabled? -> source allowed? -> throttle -> toast + play

    Owns the session status tracker and the throttle gate; nothing else
    writes to them.
    """

    def __init__(
        self,
        config: Optional[BeepConfig] = None,
        *,
        player: Optional[SoundPlayer] = None,
        notifier: Optional[Notifier] = None,
        tracker: Optional[SessionStatusTracker] = None,
        throttle: Optional[ThrottleGate] = None,
        metrics: Optional[BeepMetrics] = None,
    ) -> None:
        self.config = config or default_config()
        self.player: SoundPlayer = player or PowerShellSoundPlayer()
        self.toast = DebugToast(notifier, enabled=self.config.debug_toast)
        self.tracker = tracker or SessionStatusTracker()
        self.throttle = throttle or ThrottleGate()
        self.metrics = metrics or BeepMetrics()

    # -------------------------
    # Decision core
    # -------------------------

    async def handle_beep(self, event_key: EventKey, details: BeepDetails) -> BeepDecision:
        self.metrics.inc_event(event_key.value)

        if not self.config.enabled:
            return self._decide(BeepResult.DISABLED, event_key, details)

        settings = resolve_event_settings(self.config, event_key)
        if not settings.enabled:
            return self._decide(BeepResult.EVENT_DISABLED, event_key, details, settings=settings)

        if settings.sources is not None and details.source not in settings.sources:
            return self._decide(BeepResult.FILTERED, event_key, details, settings=settings)

        gate = self.throttle.try_fire(self.config.throttle_ms)
        if not gate.allowed:
            await self.toast.show(
                f"beep throttled ({gate.remaining_ms}ms): {event_key.value}{details.format()}",
                "warning",
            )
            return self._decide(
                BeepResult.THROTTLED, event_key, details, settings=settings, remaining_ms=gate.remaining_ms
            )

        await self.toast.show(
            f"beep: {event_key.value} ({sound_label(settings.sound_file)}, x{settings.repeat}){details.format()}",
            "info",
        )
        playback = await self.player.play(settings.sound_file, settings.repeat)
        if not playback.ok:
            logger.bind(exit_code=playback.exit_code, stderr=playback.stderr).warning(
                f"beep playback failed (exit={playback.exit_code}): {playback.stderr.strip()}"
            )
            await self.toast.show(f"beep failed (exit={playback.exit_code})", "error")
            return self._decide(
                BeepResult.PLAYBACK_FAILED, event_key, details, settings=settings, playback=playback
            )

        return self._decide(BeepResult.FIRED, event_key, details, settings=settings, playback=playback)

    def _decide(self, result: BeepResult, event_key: EventKey, details: BeepDetails, **kwargs: Any) -> BeepDecision:
        self.metrics.inc_result(result.value)
        if result == BeepResult.FIRED:
            self.metrics.fired_total += 1
        elif result == BeepResult.THROTTLED:
            self.metrics.throttled_total += 1
        elif result == BeepResult.FILTERED:
            self.metrics.filtered_total += 1
        elif result in (BeepResult.DISABLED, BeepResult.EVENT_DISABLED):
            self.metrics.disabled_total += 1
        elif result == BeepResult.PLAYBACK_FAILED:
            self.metrics.playback_failed_total += 1

        logger.debug(f"beep {result.value}: {event_key.value}{details.format()}")
        return BeepDecision(result=result, event_key=event_key, details=details, **kwargs)

    # -------------------------
    # Host surface
    # -------------------------

    async def on_event(self, event: Mapping[str, Any]) -> Optional[BeepDecision]:
        decoded = decode_event(event)

        if isinstance(decoded, StatusChanged):
            previous = self.tracker.record_status(decoded.session_id, decoded.status)
            if decoded.status == SessionStatus.IDLE and previous in WORKING_STATUSES:
                return await self.handle_beep(
                    EventKey.SESSION_IDLE,
                    BeepDetails(source=host_events.SESSION_STATUS, session_id=decoded.session_id, prev=previous.value),
                )
            return None

        if isinstance(decoded, SessionIdled):
            previous = self.tracker.last_status(decoded.session_id)
            self.tracker.set_idle(decoded.session_id)
            if previous in WORKING_STATUSES:
                return await self.handle_beep(
                    EventKey.SESSION_IDLE,
                    BeepDetails(source=host_events.SESSION_IDLE, session_id=decoded.session_id, prev=previous.value),
                )
            return None

        if isinstance(decoded, PermissionAsked):
            return await self.handle_beep(
                EventKey.PERMISSION_ASKED,
                BeepDetails(source=host_events.PERMISSION_ASKED, session_id=decoded.session_id),
            )

        if isinstance(decoded, QuestionAsked):
            return await self.handle_beep(
                EventKey.QUESTION_ASKED,
                BeepDetails(source=host_events.QUESTION_ASKED, session_id=decoded.session_id),
            )

        self.metrics.ignored_total += 1
        return None

    async def on_permission_ask(self, input: Mapping[str, Any], output: Optional[Mapping[str, Any]] = None) -> Optional[BeepDecision]:
        request = decode_permission_decision(input, output)
        if not request.pending:
            return None
        return await self.handle_beep(
            EventKey.PERMISSION_ASKED,
            BeepDetails(
                source=PERMISSION_HOOK_SOURCE,
                session_id=request.session_id,
                permission=request.permission_type,
            ),
        )

    async def on_tool_execute_before(self, input: Mapping[str, Any], output: Any = None) -> Optional[BeepDecision]:
        invocation = decode_tool_invocation(input)
        if not invocation.is_question:
            return None
        return await self.handle_beep(
            EventKey.QUESTION_ASKED,
            BeepDetails(source=QUESTION_TOOL_SOURCE, session_id=invocation.session_id),
        )

    def hooks(self) -> Dict[str, Callable[..., Awaitable[Any]]]:
        """Hook table in the shape the host registers plugins with."""
        return {
            "event": self._event_hook,
            host_events.PERMISSION_ASK_HOOK: self.on_permission_ask,
            host_events.TOOL_EXECUTE_BEFORE_HOOK: self.on_tool_execute_before,
        }

    async def _event_hook(self, payload: Mapping[str, Any]) -> Optional[BeepDecision]:
        # the host wraps the record as {"event": {...}}
        event = payload.get("event") if isinstance(payload, Mapping) and "event" in payload else payload
        return await self.on_event(event)


def create_plugin(
    directory: Optional[str] = None,
    *,
    show_toast: Optional[Callable[[Dict[str, Any]], Any]] = None,
    player: Optional[SoundPlayer] = None,
    notifier: Optional[Notifier] = None,
    env: Optional[Mapping[str, str]] = None,
) -> BeepDispatcher:
    """Load layered config for `directory` and wire a dispatcher to the host."""
    loaded = read_config(directory, env=env)
    if notifier is None and show_toast is not None:
        notifier = HostToastNotifier(show_toast, directory=directory)
    logger.info(
        f"beep ready (enabled={loaded.config.enabled}, throttleMs={loaded.config.throttle_ms}, "
        f"global={loaded.paths.global_path}, project={loaded.paths.project_path})"
    )
    return BeepDispatcher(loaded.config, player=player, notifier=notifier)
