"""
app/shutdown.py

Process-wide shutdown flag. main.py raises it on SIGINT/SIGTERM or the
FastAPI shutdown event; background evaluation tasks check it between
companies and fail their run instead of leaving it `running` forever.

Kept outside main.py so the evaluation runner can import it without a cycle.
"""

import threading
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)

_shutdown_event = threading.Event()
_reason: Optional[str] = None


def set_shutdown(reason: str = "application shutdown") -> None:
    """Raise the flag; the first reason wins."""
    global _reason
    if not _shutdown_event.is_set():
        _reason = reason
        logger.warning("shutdown_requested", reason=reason)
    _shutdown_event.set()


def reset_shutdown() -> None:
    """Clear the flag when the app (re)starts in the same process."""
    global _reason
    _reason = None
    _shutdown_event.clear()


def is_shutting_down() -> bool:
    return _shutdown_event.is_set()


def shutdown_reason() -> Optional[str]:
    return _reason
