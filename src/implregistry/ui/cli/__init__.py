"""Public CLI exports for implregistry."""

from __future__ import annotations

from .app import app, main
from .commands import list_traits, merge_trait, show_trait
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "list_traits",
    "main",
    "merge_trait",
    "show_trait",
]
