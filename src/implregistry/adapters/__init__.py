"""Adapters between generated fragment files and the registry."""

from __future__ import annotations

from .fragments import (
    Fragment,
    merge_fragments,
    parse_fragment,
    read_fragment,
    render_fragment,
    trait_path_for,
)
from .loader import FragmentLoader, FragmentPayload, PendingSlot


__all__ = [
    "Fragment",
    "FragmentLoader",
    "FragmentPayload",
    "PendingSlot",
    "merge_fragments",
    "parse_fragment",
    "read_fragment",
    "render_fragment",
    "trait_path_for",
]
