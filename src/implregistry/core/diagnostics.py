"""Diagnostic abstractions shared by the registry, the loader and the CLI."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message and name == "fragment_loaded":
            self._logger.info(message)
            return
        if message:
            self._logger.debug(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "register":
        module = data.get("module")
        count = data.get("records", 0)
        suffix = " (replaced)" if data.get("replaced") else ""
        return f"Registered {count} implementor(s) for '{module}'{suffix}"

    if name == "attach":
        modules = data.get("modules", 0)
        if data.get("replaced"):
            return f"Replaced registry consumer ({modules} module(s) buffered)"
        return f"Attached registry consumer ({modules} module(s) buffered)"

    if name == "deliver":
        modules = data.get("modules", 0)
        reason = data.get("reason") or "register"
        return f"Delivered {modules} module(s) to consumer ({reason})"

    if name == "fragment_loaded":
        path = data.get("path") or "<unknown>"
        modules = data.get("modules", 0)
        return f"Loaded fragment {path} ({modules} module(s))"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
