"""Implementor records exchanged between fragment producers and consumers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from implregistry.core.exceptions import FragmentFormatError


ModuleIdentifier = str


@dataclass(frozen=True, slots=True)
class ImplementorRecord:
    """One ``impl Trait for Type`` relationship as emitted by the generator.

    ``text`` holds the rendered markup for the impl header, ``types`` lists the
    fully qualified names of the implementing types, and ``synthetic`` flags
    auto-trait implementations derived by the compiler.
    """

    text: str
    synthetic: bool = False
    types: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> ImplementorRecord:
        """Build a record from a decoded JSON object."""
        if not isinstance(payload, Mapping):
            raise FragmentFormatError("Implementor entries must be JSON objects.")

        text = payload.get("text")
        if not isinstance(text, str):
            raise FragmentFormatError("Implementor entries require a 'text' string.")

        synthetic = payload.get("synthetic", False)
        if not isinstance(synthetic, bool):
            raise FragmentFormatError("Implementor 'synthetic' flag must be a boolean.")

        types = payload.get("types", [])
        if not isinstance(types, list) or not all(isinstance(item, str) for item in types):
            raise FragmentFormatError("Implementor 'types' must be a list of strings.")

        return cls(text=text, synthetic=synthetic, types=tuple(types))

    def to_mapping(self) -> dict[str, Any]:
        """Return the JSON-compatible representation used in fragment files."""
        return {"text": self.text, "synthetic": self.synthetic, "types": list(self.types)}


def record_types(record: Any) -> tuple[str, ...]:
    """Return the type names attached to a record or a raw mapping."""
    if isinstance(record, ImplementorRecord):
        return record.types
    if isinstance(record, Mapping):
        types = record.get("types", ())
        if not isinstance(types, (list, tuple)):
            return ()
        return tuple(str(item) for item in types)
    return ()


def record_text(record: Any) -> str:
    """Return the display markup of a record or a raw mapping."""
    if isinstance(record, ImplementorRecord):
        return record.text
    if isinstance(record, Mapping):
        return str(record.get("text", ""))
    return str(record)


def record_is_synthetic(record: Any) -> bool:
    """Return whether the record describes a synthetic (auto-trait) impl."""
    if isinstance(record, ImplementorRecord):
        return record.synthetic
    if isinstance(record, Mapping):
        return bool(record.get("synthetic", False))
    return False


__all__ = [
    "ImplementorRecord",
    "ModuleIdentifier",
    "record_is_synthetic",
    "record_text",
    "record_types",
]
