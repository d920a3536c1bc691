"""Exception hierarchy for fragment loading and registry configuration."""

from __future__ import annotations


class ImplRegistryError(RuntimeError):
    """Base exception for implementor registry failures."""


class FragmentFormatError(ImplRegistryError):
    """Raised when an implementors fragment does not have the expected shape."""


class ConfigError(ImplRegistryError):
    """Raised when a registry configuration cannot be loaded or validated."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigError",
    "FragmentFormatError",
    "ImplRegistryError",
    "exception_hint",
    "exception_messages",
]
