from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, Literal, Optional, Protocol

from loguru import logger


Variant = Literal["info", "success", "warning", "error"]

TOAST_TITLE = "beep"
TOAST_DURATION_MS = 3000


class Notifier(Protocol):
    async def show(self, message: str, variant: Variant = "info") -> None:
        """Show one diagnostic notice."""
        ...


class HostToastNotifier:
    """Adapter over the host UI's toast call (sync or async callable)."""

    def __init__(self, show_toast: Callable[[Dict[str, Any]], Any], *, directory: Optional[str] = None) -> None:
        self._show_toast = show_toast
        self.directory = directory

    def payload(self, message: str, variant: Variant) -> Dict[str, Any]:
        return {
            "query": {"directory": self.directory},
            "body": {
                "title": TOAST_TITLE,
                "message": message,
                "variant": variant,
                "duration": TOAST_DURATION_MS,
            },
        }

    async def show(self, message: str, variant: Variant = "info") -> None:
        result = self._show_toast(self.payload(message, variant))
        if inspect.isawaitable(result):
            await result


class LogNotifier:
    """Writes notices to the log; used when the host has no toast surface."""

    _LEVELS = {"info": "INFO", "success": "SUCCESS", "warning": "WARNING", "error": "ERROR"}

    async def show(self, message: str, variant: Variant = "info") -> None:
        logger.log(self._LEVELS.get(variant, "INFO"), f"[{TOAST_TITLE}] {message}")


class DebugToast:
    """
    Best-effort diagnostic notices.

    Only forwards when `enabled` (config.debugToast); a failing notifier is
    logged and swallowed so it never affects dispatch.
    """

    def __init__(self, notifier: Optional[Notifier], *, enabled: bool) -> None:
        self._notifier = notifier
        self.enabled = enabled

    async def show(self, message: str, variant: Variant = "info") -> None:
        if not self.enabled or self._notifier is None:
            return
        try:
            await self._notifier.show(message, variant)
        except Exception as e:
            logger.warning(f"beep debug toast failed: {e}")
