"""Diagnostic emitter bridging the registry with CLI rendering utilities."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from implregistry.core.diagnostics import DiagnosticEmitter, format_event_message

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


# Minimum verbosity at which an event is echoed to the console.
_EVENT_VERBOSITY = {
    "fragment_loaded": 1,
    "register": 2,
    "attach": 2,
    "deliver": 2,
}


class CliEmitter(DiagnosticEmitter):
    """Emit diagnostics using the rich-enabled CLI helpers."""

    def __init__(self, state: CLIState | None = None, *, debug_enabled: bool | None = None) -> None:
        self._state = state or get_cli_state()
        if debug_enabled is None:
            debug_enabled = self._state.show_tracebacks
        self.debug_enabled = bool(debug_enabled)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        data = dict(payload)
        if self._state.verbosity < _EVENT_VERBOSITY.get(name, 1):
            return
        message = format_event_message(name, data)
        if message:
            render_message("info", message)


__all__ = ["CliEmitter"]
