"""CLI commands inspecting generated implementors trees."""

from __future__ import annotations

from pathlib import Path

from bs4 import BeautifulSoup
import typer

from implregistry.adapters.fragments import render_fragment
from implregistry.adapters.loader import FragmentLoader, PendingSlot
from implregistry.core.config import LoaderConfig, RegistryConfig, ViewConfig, load_config
from implregistry.core.exceptions import ConfigError, ImplRegistryError
from implregistry.core.registry import ImplementorRegistry
from implregistry.core.view import ImplementorListing, ImplementorsView

from .._options import (
    ConfigOption,
    LocalTypeOption,
    NoSyntheticOption,
    RootOption,
    SkipInvalidOption,
    TraitArgument,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state


def _plain_text(markup: str) -> str:
    return BeautifulSoup(markup, "html.parser").get_text()


def _resolve_config(
    root: Path | None,
    config_path: Path | None,
    *,
    skip_invalid: bool = False,
    local_types: list[str] | None = None,
    no_synthetic: bool = False,
) -> RegistryConfig:
    config = load_config(config_path) if config_path is not None else RegistryConfig()
    if config.loader is None:
        if root is None:
            raise ConfigError("--root is required unless the configuration sets [loader].root.")
        loader = LoaderConfig(root=root)
    else:
        loader = config.loader
    update: dict[str, object] = {"skip_invalid": loader.skip_invalid or skip_invalid}
    if root is not None:
        update["root"] = root
    loader = loader.model_copy(update=update)
    view = config.view
    if local_types or no_synthetic:
        view = ViewConfig(
            include_synthetic=view.include_synthetic and not no_synthetic,
            local_types=[*view.local_types, *(local_types or [])],
        )
    return RegistryConfig(loader=loader, view=view)


def _load_registry(
    config: RegistryConfig, trait: str, emitter: CliEmitter
) -> ImplementorRegistry:
    assert config.loader is not None
    loader = FragmentLoader(config.loader, emitter=emitter)
    slot = PendingSlot()
    if loader.load_trait(trait, slot) == 0:
        raise ImplRegistryError(f"No implementors found for trait '{trait}'.")
    registry = ImplementorRegistry(emitter=emitter)
    slot.bind(registry)
    return registry


def list_traits(
    root: RootOption = None,
    config_path: ConfigOption = None,
    skip_invalid: SkipInvalidOption = False,
) -> None:
    """List the traits with implementors fragments under the root directory."""
    from rich import box
    from rich.table import Table

    state = get_cli_state()
    try:
        config = _resolve_config(root, config_path, skip_invalid=skip_invalid)
        assert config.loader is not None
        files = FragmentLoader(config.loader, emitter=CliEmitter(state)).files()
    except ImplRegistryError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    table = Table(title="Traits", box=box.SQUARE, header_style="bold cyan")
    table.add_column("Trait", style="magenta")
    table.add_column("Fragments", justify="right")
    if not files:
        table.add_row("-", "0")
    for trait in sorted(files):
        table.add_row(trait, str(len(files[trait])))
    state.console.print(table)


def _print_listing(listing: ImplementorListing, trait: str) -> None:
    console = get_cli_state().console
    console.print(f"[bold]Implementors of {trait}[/bold]")
    for module, entries in listing.by_module().items():
        console.print(f"[cyan]{module}[/cyan]")
        for entry in entries:
            marker = " (auto)" if entry.synthetic else ""
            console.print(f"  {_plain_text(entry.text)}{marker}", markup=False, highlight=False)
    if not len(listing):
        console.print("  -")


def show_trait(
    trait: TraitArgument,
    root: RootOption = None,
    config_path: ConfigOption = None,
    skip_invalid: SkipInvalidOption = False,
    local_types: LocalTypeOption = None,
    no_synthetic: NoSyntheticOption = False,
) -> None:
    """Show the merged implementors of TRAIT."""
    state = get_cli_state()
    try:
        config = _resolve_config(
            root,
            config_path,
            skip_invalid=skip_invalid,
            local_types=local_types,
            no_synthetic=no_synthetic,
        )
        registry = _load_registry(config, trait, CliEmitter(state))
    except ImplRegistryError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    view = ImplementorsView(config.view)
    registry.attach_consumer(view)
    _print_listing(view.entries(), trait)


def merge_trait(
    trait: TraitArgument,
    root: RootOption = None,
    config_path: ConfigOption = None,
    skip_invalid: SkipInvalidOption = False,
) -> None:
    """Print one fragment script merging every crate contributing to TRAIT."""
    state = get_cli_state()
    try:
        config = _resolve_config(root, config_path, skip_invalid=skip_invalid)
        registry = _load_registry(config, trait, CliEmitter(state))
    except ImplRegistryError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    typer.echo(render_fragment(registry.snapshot()))


__all__ = ["list_traits", "merge_trait", "show_trait"]
