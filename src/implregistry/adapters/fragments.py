"""Reader and writer for generated ``implementors/**/trait.*.js`` scripts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
import json
from pathlib import Path, PurePath
import re
from typing import Any

from implregistry.core.exceptions import FragmentFormatError
from implregistry.core.records import ImplementorRecord, ModuleIdentifier
from implregistry.core.registry import ImplementorRegistry


_TABLE_RE = re.compile(r"\bvar\s+implementors\s*=\s*\{\s*\}\s*;")
_ASSIGN_RE = re.compile(r'\bimplementors\s*\[\s*("(?:[^"\\]|\\.)*")\s*\]\s*=\s*')
_TRAIT_FILE_RE = re.compile(r"^trait\.(?P<name>[^.]+)\.js$")

_PROLOGUE = "(function() {var implementors = {};\n"
_EPILOGUE = (
    "if (window.register_implementors) {window.register_implementors(implementors);} "
    "else {window.pending_implementors = implementors;}})()"
)


@dataclass(slots=True)
class Fragment:
    """Implementors contributed by one generated script, keyed by crate."""

    modules: dict[ModuleIdentifier, list[ImplementorRecord]] = field(default_factory=dict)
    trait_path: str | None = None
    source: Path | None = None

    def __len__(self) -> int:
        return len(self.modules)

    def record_count(self) -> int:
        return sum(len(records) for records in self.modules.values())

    def register_into(self, registry: ImplementorRegistry) -> None:
        """Hand every crate of this fragment to ``registry``."""
        registry.register_fragment(self.modules)


def trait_path_for(path: PurePath) -> str:
    """Return the trait path encoded by a fragment location.

    ``core/default/trait.Default.js`` maps to ``core::default::Default``.
    """
    match = _TRAIT_FILE_RE.match(path.name)
    if match is None:
        raise FragmentFormatError(f"Not an implementors fragment file name: {path.name}")
    parts = [part for part in path.parent.parts if part not in ("", ".")]
    return "::".join([*parts, match.group("name")])


def parse_fragment(
    text: str,
    *,
    trait_path: str | None = None,
    source: Path | None = None,
) -> Fragment:
    """Extract the implementors table from a generated script."""
    if _TABLE_RE.search(text) is None:
        label = f" in {source}" if source is not None else ""
        raise FragmentFormatError(f"No implementors table found{label}.")

    decoder = json.JSONDecoder()
    modules: dict[ModuleIdentifier, list[ImplementorRecord]] = {}
    for match in _ASSIGN_RE.finditer(text):
        identifier = json.loads(match.group(1))
        try:
            payload, _ = decoder.raw_decode(text, match.end())
        except json.JSONDecodeError as exc:
            raise FragmentFormatError(
                f"Implementors for '{identifier}' are not valid JSON: {exc.msg}"
            ) from exc
        if not isinstance(payload, list):
            raise FragmentFormatError(f"Implementors for '{identifier}' must be a JSON array.")
        modules[identifier] = [ImplementorRecord.from_mapping(entry) for entry in payload]

    return Fragment(modules=modules, trait_path=trait_path, source=source)


def read_fragment(path: Path, *, root: Path | None = None, encoding: str = "utf-8") -> Fragment:
    """Read and parse a fragment script from disk."""
    try:
        text = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FragmentFormatError(f"Failed to read fragment {path}: {exc}") from exc
    trait_path = trait_path_for(path.relative_to(root)) if root is not None else None
    return parse_fragment(text, trait_path=trait_path, source=path)


def _serialise_records(records: Sequence[Any]) -> list[Any]:
    return [
        record.to_mapping() if isinstance(record, ImplementorRecord) else record
        for record in records
    ]


def render_fragment(
    fragment: Fragment | Mapping[ModuleIdentifier, Sequence[Any]],
) -> str:
    """Return the script text the generator writes for ``fragment``."""
    modules = fragment.modules if isinstance(fragment, Fragment) else fragment
    lines: list[str] = [_PROLOGUE]
    for identifier, records in modules.items():
        payload = json.dumps(
            _serialise_records(records), separators=(",", ":"), ensure_ascii=False
        )
        lines.append(f"implementors[{json.dumps(identifier)}] = {payload};\n")
    lines.append(_EPILOGUE)
    return "".join(lines)


def merge_fragments(fragments: Iterable[Fragment]) -> Fragment:
    """Combine fragments with last-write-wins per crate."""
    merged = Fragment()
    for fragment in fragments:
        if merged.trait_path is None:
            merged.trait_path = fragment.trait_path
        for identifier, records in fragment.modules.items():
            merged.modules[identifier] = list(records)
    return merged


__all__ = [
    "Fragment",
    "merge_fragments",
    "parse_fragment",
    "read_fragment",
    "render_fragment",
    "trait_path_for",
]
