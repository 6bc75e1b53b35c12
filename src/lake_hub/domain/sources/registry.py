"""Source adapter registry.

Sources register themselves when ``lake_hub.domain.sources`` is imported.
The registry only holds static plugin definitions; nothing in it changes
after import.
"""

from __future__ import annotations

from typing import Dict, List

from .base import SourceAdapter

_SOURCE_REGISTRY: Dict[str, SourceAdapter] = {}


def register_source(source: SourceAdapter) -> SourceAdapter:
    """Register a source adapter under its plugin name."""
    if source.name in _SOURCE_REGISTRY:
        raise ValueError(
            f"Source '{source.name}' is already registered. "
            "Use a different name or unregister first."
        )
    _SOURCE_REGISTRY[source.name] = source
    return source


def unregister_source(name: str) -> None:
    """Remove a source adapter; unknown names are ignored."""
    _SOURCE_REGISTRY.pop(name, None)


def get_source(name: str) -> SourceAdapter:
    """Retrieve a source adapter by plugin name."""
    if name not in _SOURCE_REGISTRY:
        available = sorted(_SOURCE_REGISTRY.keys())
        raise KeyError(f"Source '{name}' not found in registry. Available: {available}")
    return _SOURCE_REGISTRY[name]


def list_sources() -> List[str]:
    """List all registered plugin names."""
    return sorted(_SOURCE_REGISTRY.keys())


__all__ = ["register_source", "unregister_source", "get_source", "list_sources"]
