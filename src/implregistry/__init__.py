"""Primary public API for implregistry."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from implregistry.adapters import (
    Fragment,
    FragmentLoader,
    PendingSlot,
    merge_fragments,
    parse_fragment,
    read_fragment,
    render_fragment,
    trait_path_for,
)
from implregistry.core import (
    Attached,
    ConfigError,
    FragmentFormatError,
    ImplRegistryError,
    ImplementorRecord,
    ImplementorRegistry,
    ImplementorsView,
    LoaderConfig,
    LoggingEmitter,
    NullEmitter,
    RegistryConfig,
    Unattached,
    ViewConfig,
    get_registry,
    load_config,
    registry_scope,
    set_registry,
)


try:
    __version__ = _pkg_version("implregistry")
except PackageNotFoundError:
    __version__ = "0.0.0"


__all__ = [
    "Attached",
    "ConfigError",
    "Fragment",
    "FragmentFormatError",
    "FragmentLoader",
    "ImplRegistryError",
    "ImplementorRecord",
    "ImplementorRegistry",
    "ImplementorsView",
    "LoaderConfig",
    "LoggingEmitter",
    "NullEmitter",
    "PendingSlot",
    "RegistryConfig",
    "Unattached",
    "ViewConfig",
    "__version__",
    "get_registry",
    "load_config",
    "merge_fragments",
    "parse_fragment",
    "read_fragment",
    "registry_scope",
    "render_fragment",
    "set_registry",
    "trait_path_for",
]
