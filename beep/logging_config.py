from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Optional

from loguru import logger


_configured = False

_LOGURU_LEVELS = frozenset({"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"})

_BASE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class _InterceptHandler(logging.Handler):
    """Re-emit stdlib records (config loading) through loguru, keeping their origin."""

    def emit(self, record: logging.LogRecord) -> None:
        level: Any = record.levelname
        if level not in _LOGURU_LEVELS:
            level = record.levelno

        def _origin(message_record: Dict[str, Any]) -> None:
            # report the stdlib call site, not this handler
            message_record.update(name=record.name, function=record.funcName, line=record.lineno)

        logger.patch(_origin).opt(exception=record.exc_info).log(level, record.getMessage())


def _format_with_details(record: Dict[str, Any]) -> str:
    # values bound with logger.bind(...) (exit code, stderr) are appended as key=value
    if record["extra"]:
        return _BASE_FORMAT + " <dim>{extra}</dim>\n{exception}"
    return _BASE_FORMAT + "\n{exception}"


def setup_logging(
    *,
    level: str = "INFO",
    force: bool = False,
    fmt: Optional[str] = None,
) -> None:
    """
    Install one loguru stderr sink for the process and route stdlib logging into it.

    Parameters:
    - level: minimum level.
    - force: reconfigure even if already configured.
    - fmt: optional fixed format; bound details are only shown with the default one.
    """
    global _configured

    if _configured and not force:
        return

    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        colorize=True,
        format=fmt or _format_with_details,
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    _configured = True
