"""Discover fragment scripts on disk and feed them to a registry."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path
from threading import RLock
from typing import Any

from implregistry.adapters.fragments import Fragment, read_fragment, trait_path_for
from implregistry.core.config import LoaderConfig
from implregistry.core.diagnostics import DiagnosticEmitter, NullEmitter
from implregistry.core.exceptions import FragmentFormatError
from implregistry.core.records import ModuleIdentifier
from implregistry.core.registry import ImplementorRegistry


logger = logging.getLogger(__name__)

FragmentPayload = Fragment | Mapping[ModuleIdentifier, Sequence[Any]]


@dataclass(slots=True)
class PendingSlot:
    """Parking place for fragments published before a registry is bound.

    Once bound, parked fragments are drained into the registry in arrival
    order and later publications are registered immediately.
    """

    _pending: list[FragmentPayload] = field(default_factory=list)
    _registry: ImplementorRegistry | None = None
    _lock: RLock = field(default_factory=RLock)

    def publish(self, fragment: FragmentPayload) -> None:
        with self._lock:
            if self._registry is None:
                self._pending.append(fragment)
                return
            _register(self._registry, fragment)

    def bind(self, registry: ImplementorRegistry) -> None:
        """Bind ``registry``, replacing any previous one, and drain the slot."""
        with self._lock:
            self._registry = registry
            pending, self._pending = self._pending, []
            for fragment in pending:
                _register(registry, fragment)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    @property
    def registry(self) -> ImplementorRegistry | None:
        with self._lock:
            return self._registry


def _register(registry: ImplementorRegistry, fragment: FragmentPayload) -> None:
    if isinstance(fragment, Fragment):
        fragment.register_into(registry)
    else:
        registry.register_fragment(fragment)


class FragmentLoader:
    """Load the generated implementors tree described by a ``LoaderConfig``."""

    def __init__(
        self,
        config: LoaderConfig,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config
        self.emitter = emitter or NullEmitter()

    @property
    def root(self) -> Path:
        return self.config.root

    def files(self) -> dict[str, list[Path]]:
        """Return fragment files grouped by trait path."""
        root = self.root
        if not root.is_dir():
            raise FragmentFormatError(f"Implementors directory not found: {root}")

        grouped: dict[str, list[Path]] = {}
        for path in sorted(root.glob(self.config.pattern)):
            if not path.is_file():
                continue
            try:
                trait_path = trait_path_for(path.relative_to(root))
            except FragmentFormatError as exc:
                if not self.config.skip_invalid:
                    raise
                self.emitter.warning(f"Skipping {path}: {exc}")
                continue
            grouped.setdefault(trait_path, []).append(path)
        return grouped

    def discover(self) -> list[str]:
        """Return the sorted trait paths available under the root."""
        return sorted(self.files())

    def fragments(self, trait_path: str) -> list[Fragment]:
        """Parse every fragment file contributing to ``trait_path``."""
        paths = self.files().get(trait_path, [])
        loaded: list[Fragment] = []
        for path in paths:
            try:
                fragment = read_fragment(path, root=self.root, encoding=self.config.encoding)
            except FragmentFormatError as exc:
                if not self.config.skip_invalid:
                    raise
                self.emitter.warning(f"Skipping invalid fragment {path}", exc)
                continue
            self.emitter.event(
                "fragment_loaded", {"path": str(path), "modules": len(fragment)}
            )
            loaded.append(fragment)
        logger.debug("Loaded %d fragment(s) for %s", len(loaded), trait_path)
        return loaded

    def load_trait(self, trait_path: str, target: ImplementorRegistry | PendingSlot) -> int:
        """Feed the fragments of ``trait_path`` to a registry or pending slot.

        Returns the number of fragments delivered.
        """
        loaded = self.fragments(trait_path)
        for fragment in loaded:
            if isinstance(target, PendingSlot):
                target.publish(fragment)
            else:
                fragment.register_into(target)
        return len(loaded)


__all__ = ["FragmentLoader", "FragmentPayload", "PendingSlot"]
