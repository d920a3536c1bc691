"""Core registry, records, configuration and diagnostics."""

from __future__ import annotations

from .config import LoaderConfig, RegistryConfig, ViewConfig, build_config, load_config
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    ConfigError,
    FragmentFormatError,
    ImplRegistryError,
    exception_hint,
    exception_messages,
)
from .records import ImplementorRecord, ModuleIdentifier
from .registry import (
    Attached,
    ConsumerHandle,
    Delivery,
    ImplementorRegistry,
    Snapshot,
    Unattached,
    get_registry,
    registry_scope,
    set_registry,
)
from .view import ImplementorEntry, ImplementorListing, ImplementorsView


__all__ = [
    "Attached",
    "ConfigError",
    "ConsumerHandle",
    "Delivery",
    "DiagnosticEmitter",
    "FragmentFormatError",
    "ImplRegistryError",
    "ImplementorEntry",
    "ImplementorListing",
    "ImplementorRecord",
    "ImplementorRegistry",
    "ImplementorsView",
    "LoaderConfig",
    "LoggingEmitter",
    "ModuleIdentifier",
    "NullEmitter",
    "RegistryConfig",
    "Snapshot",
    "Unattached",
    "ViewConfig",
    "build_config",
    "exception_hint",
    "exception_messages",
    "get_registry",
    "load_config",
    "registry_scope",
    "set_registry",
]
