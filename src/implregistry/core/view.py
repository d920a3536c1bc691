"""Reference consumer turning registry snapshots into implementor listings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from implregistry.core.config import ViewConfig
from implregistry.core.records import (
    ModuleIdentifier,
    record_is_synthetic,
    record_text,
    record_types,
)
from implregistry.core.registry import Snapshot


@dataclass(frozen=True, slots=True)
class ImplementorEntry:
    """One visible line of the implementors listing."""

    module: ModuleIdentifier
    text: str
    types: tuple[str, ...]
    synthetic: bool = False


@dataclass(slots=True)
class ImplementorListing:
    """Implementors split the way a trait page shows them."""

    implementors: list[ImplementorEntry] = field(default_factory=list)
    synthetic: list[ImplementorEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.implementors) + len(self.synthetic)

    def by_module(self) -> dict[ModuleIdentifier, list[ImplementorEntry]]:
        """Group every visible entry by the crate that contributed it."""
        grouped: dict[ModuleIdentifier, list[ImplementorEntry]] = {}
        for entry in (*self.implementors, *self.synthetic):
            grouped.setdefault(entry.module, []).append(entry)
        return grouped


class ImplementorsView:
    """Consumer attached to a registry; keeps the latest delivered state."""

    def __init__(self, config: ViewConfig | None = None) -> None:
        self.config = config or ViewConfig()
        self.deliveries = 0
        self._state: Snapshot = {}

    def __call__(self, state: Mapping[ModuleIdentifier, Any]) -> None:
        self._state = {module: tuple(records) for module, records in state.items()}
        self.deliveries += 1

    @property
    def state(self) -> Snapshot:
        return dict(self._state)

    def entries(self) -> ImplementorListing:
        """Return the visible implementors in module order."""
        local = set(self.config.local_types)
        listing = ImplementorListing()
        for module, records in self._state.items():
            for record in records:
                types = record_types(record)
                if local and local.intersection(types):
                    continue
                synthetic = record_is_synthetic(record)
                entry = ImplementorEntry(
                    module=module,
                    text=record_text(record),
                    types=types,
                    synthetic=synthetic,
                )
                if not synthetic:
                    listing.implementors.append(entry)
                elif self.config.include_synthetic:
                    listing.synthetic.append(entry)
        return listing


__all__ = ["ImplementorEntry", "ImplementorListing", "ImplementorsView"]
