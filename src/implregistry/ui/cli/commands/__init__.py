"""CLI command implementations exposed via `implregistry.ui.cli`."""

from __future__ import annotations

from .traits import list_traits, merge_trait, show_trait


__all__ = ["list_traits", "merge_trait", "show_trait"]
