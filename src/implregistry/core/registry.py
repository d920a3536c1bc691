"""Merge-and-notify registry reconciling implementor fragments.

Each crate contributes its implementors independently and in any order. The
registry keeps the most recent sequence per crate and hands the consumer (the
page renderer) a snapshot of the whole mapping every time it changes. A
consumer attaching after registrations have happened receives a single
catch-up delivery with everything buffered so far.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from threading import RLock
from typing import Any

from implregistry.core.diagnostics import DiagnosticEmitter, NullEmitter
from implregistry.core.records import ModuleIdentifier


Snapshot = dict[ModuleIdentifier, tuple[Any, ...]]
Delivery = Callable[[Snapshot], None]


@dataclass(frozen=True, slots=True)
class Unattached:
    """Consumer slot state before any consumer attached."""


@dataclass(frozen=True, slots=True)
class Attached:
    """Consumer slot state holding the delivery function."""

    delivery: Delivery


ConsumerHandle = Unattached | Attached


@dataclass(slots=True)
class ImplementorRegistry:
    """Thread-safe registry of implementor sequences keyed by crate name."""

    emitter: DiagnosticEmitter = field(default_factory=NullEmitter)
    _modules: dict[ModuleIdentifier, tuple[Any, ...]] = field(default_factory=dict)
    _consumer: ConsumerHandle = field(default_factory=Unattached)
    _lock: RLock = field(default_factory=RLock)

    def register(self, identifier: ModuleIdentifier, records: Iterable[Any]) -> None:
        """Store ``records`` for ``identifier``, replacing any previous sequence."""
        stored = tuple(records)
        with self._lock:
            replaced = identifier in self._modules
            self._modules[identifier] = stored
            self.emitter.event(
                "register",
                {"module": identifier, "records": len(stored), "replaced": replaced},
            )
            if isinstance(self._consumer, Attached):
                self._deliver_locked(self._consumer.delivery, reason="register")

    def register_fragment(self, fragment: Mapping[ModuleIdentifier, Sequence[Any]]) -> None:
        """Register every crate of a generated fragment, in mapping order."""
        with self._lock:
            for identifier, records in fragment.items():
                self.register(identifier, records)

    def attach_consumer(self, delivery: Delivery) -> None:
        """Attach the consumer, replacing any previous one.

        When modules are already buffered the new consumer receives one
        catch-up delivery before this call returns.
        """
        with self._lock:
            replaced = isinstance(self._consumer, Attached)
            self._consumer = Attached(delivery)
            self.emitter.event(
                "attach", {"modules": len(self._modules), "replaced": replaced}
            )
            if self._modules:
                self._deliver_locked(delivery, reason="catch-up")

    @property
    def consumer(self) -> ConsumerHandle:
        """Return the current consumer slot state."""
        with self._lock:
            return self._consumer

    @property
    def is_attached(self) -> bool:
        with self._lock:
            return isinstance(self._consumer, Attached)

    def snapshot(self) -> Snapshot:
        """Return a copy of the merged state."""
        with self._lock:
            return dict(self._modules)

    def get(self, identifier: ModuleIdentifier) -> tuple[Any, ...] | None:
        """Return the records stored for ``identifier``, if any."""
        with self._lock:
            return self._modules.get(identifier)

    def modules(self) -> list[ModuleIdentifier]:
        """Return module identifiers in first-registration order."""
        with self._lock:
            return list(self._modules)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._modules

    def __len__(self) -> int:  # pragma: no cover - trivial
        with self._lock:
            return len(self._modules)

    def __iter__(self) -> Iterator[ModuleIdentifier]:  # pragma: no cover - simple proxy
        yield from self.modules()

    def _deliver_locked(self, delivery: Delivery, *, reason: str) -> None:
        state = dict(self._modules)
        self.emitter.event("deliver", {"modules": len(state), "reason": reason})
        delivery(state)


_REGISTRY: ImplementorRegistry | None = None
_LOCK: RLock = RLock()


def get_registry() -> ImplementorRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _REGISTRY
    with _LOCK:
        if _REGISTRY is None:
            _REGISTRY = ImplementorRegistry()
        return _REGISTRY


def set_registry(registry: ImplementorRegistry) -> ImplementorRegistry:
    """Replace the process-wide registry and return it."""
    global _REGISTRY
    with _LOCK:
        _REGISTRY = registry
        return _REGISTRY


@contextmanager
def registry_scope(
    registry: ImplementorRegistry | None = None,
) -> Iterator[ImplementorRegistry]:
    """Temporarily install a registry as the process-wide instance."""
    global _REGISTRY
    with _LOCK:
        previous = _REGISTRY
    current = set_registry(registry if registry is not None else ImplementorRegistry())
    try:
        yield current
    finally:
        with _LOCK:
            _REGISTRY = previous


__all__ = [
    "Attached",
    "ConsumerHandle",
    "Delivery",
    "ImplementorRegistry",
    "Snapshot",
    "Unattached",
    "get_registry",
    "registry_scope",
    "set_registry",
]
