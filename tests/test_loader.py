from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from implregistry.adapters.fragments import Fragment, render_fragment
from implregistry.adapters.loader import FragmentLoader, PendingSlot
from implregistry.core.config import LoaderConfig
from implregistry.core.diagnostics import NullEmitter
from implregistry.core.exceptions import FragmentFormatError
from implregistry.core.records import ImplementorRecord
from implregistry.core.registry import ImplementorRegistry


class RecordingEmitter(NullEmitter):
    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


def _write(root: Path, relative: str, modules: dict[str, list[ImplementorRecord]]) -> Path:
    target = root / relative
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_fragment(modules), encoding="utf-8")
    return target


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    _write(
        tmp_path,
        "core/default/trait.Default.js",
        {"app": [ImplementorRecord(text="impl Default for App", types=("app::App",))]},
    )
    _write(
        tmp_path,
        "core/clone/trait.Clone.js",
        {
            "app": [ImplementorRecord(text="impl Clone for App", types=("app::App",))],
            "lib": [ImplementorRecord(text="impl Clone for Lib", types=("lib::Lib",))],
        },
    )
    return tmp_path


def test_discover_lists_trait_paths(tree: Path) -> None:
    loader = FragmentLoader(LoaderConfig(root=tree))
    assert loader.discover() == ["core::clone::Clone", "core::default::Default"]


def test_load_trait_registers_into_registry(tree: Path) -> None:
    emitter = RecordingEmitter()
    loader = FragmentLoader(LoaderConfig(root=tree), emitter=emitter)
    registry = ImplementorRegistry()

    assert loader.load_trait("core::clone::Clone", registry) == 1
    assert registry.modules() == ["app", "lib"]
    assert emitter.events[0][0] == "fragment_loaded"
    assert emitter.events[0][1]["modules"] == 2


def test_load_unknown_trait_delivers_nothing(tree: Path) -> None:
    loader = FragmentLoader(LoaderConfig(root=tree))
    registry = ImplementorRegistry()
    assert loader.load_trait("core::fmt::Debug", registry) == 0
    assert len(registry) == 0


def test_missing_root_raises(tmp_path: Path) -> None:
    loader = FragmentLoader(LoaderConfig(root=tmp_path / "nope"))
    with pytest.raises(FragmentFormatError, match="not found"):
        loader.discover()


def test_invalid_fragment_raises_by_default(tree: Path) -> None:
    (tree / "core" / "default" / "trait.Default.js").write_text("garbage", encoding="utf-8")
    loader = FragmentLoader(LoaderConfig(root=tree))
    with pytest.raises(FragmentFormatError):
        loader.fragments("core::default::Default")


def test_invalid_fragment_is_skipped_when_configured(tree: Path) -> None:
    (tree / "core" / "default" / "trait.Default.js").write_text("garbage", encoding="utf-8")
    emitter = RecordingEmitter()
    loader = FragmentLoader(LoaderConfig(root=tree, skip_invalid=True), emitter=emitter)

    assert loader.fragments("core::default::Default") == []
    assert emitter.warnings and "trait.Default.js" in emitter.warnings[0]


def test_non_trait_files_matching_pattern(tree: Path) -> None:
    (tree / "core" / "notes.js").write_text("", encoding="utf-8")
    strict = FragmentLoader(LoaderConfig(root=tree, pattern="**/*.js"))
    with pytest.raises(FragmentFormatError):
        strict.files()

    lenient = FragmentLoader(
        LoaderConfig(root=tree, pattern="**/*.js", skip_invalid=True), emitter=RecordingEmitter()
    )
    assert sorted(lenient.files()) == ["core::clone::Clone", "core::default::Default"]


def test_pending_slot_parks_until_bound() -> None:
    slot = PendingSlot()
    slot.publish(Fragment(modules={"a": [ImplementorRecord(text="a")]}))
    slot.publish({"b": [ImplementorRecord(text="b")]})
    assert slot.pending == 2
    assert slot.registry is None

    registry = ImplementorRegistry()
    slot.bind(registry)

    assert slot.pending == 0
    assert registry.modules() == ["a", "b"]

    slot.publish({"c": []})
    assert registry.get("c") == ()


def test_pending_slot_drains_in_arrival_order_with_last_write_wins() -> None:
    slot = PendingSlot()
    slot.publish({"a": [ImplementorRecord(text="first")]})
    slot.publish({"a": [ImplementorRecord(text="second")]})

    registry = ImplementorRegistry()
    slot.bind(registry)

    assert [record.text for record in registry.get("a") or ()] == ["second"]


def test_pending_slot_rebind_replaces_registry() -> None:
    slot = PendingSlot()
    first = ImplementorRegistry()
    second = ImplementorRegistry()

    slot.bind(first)
    slot.bind(second)
    slot.publish({"a": []})

    assert "a" not in first
    assert "a" in second


def test_load_trait_into_pending_slot(tree: Path) -> None:
    loader = FragmentLoader(LoaderConfig(root=tree))
    slot = PendingSlot()
    assert loader.load_trait("core::default::Default", slot) == 1
    assert slot.pending == 1
