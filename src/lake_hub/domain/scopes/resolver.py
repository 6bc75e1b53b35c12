"""
Scope and scope-config resolution.

The resolver talks to storage through the ``ScopeStore`` protocol; concrete
stores live in ``lake_hub.io.repositories``. Nothing is cached: scope configs
may change between runs, so every compile sees fresh rows.
"""

from __future__ import annotations

from typing import Tuple

from typing_extensions import Protocol, runtime_checkable

from lake_hub.utils.logging import get_logger

from .models import ScopeConfig, ScopeDescriptor

logger = get_logger(__name__)

EMPTY_SCOPE_CONFIG = ScopeConfig()


@runtime_checkable
class ScopeStore(Protocol):
    """Storage collaborator holding one plugin's scopes and scope configs."""

    def get_scope(self, connection_id: int, scope_id: str) -> ScopeDescriptor:
        """Return the scope or raise ScopeNotFoundError / StorageError."""

    def get_scope_config(self, config_id: int) -> ScopeConfig:
        """Return the config or raise ScopeConfigNotFoundError / StorageError."""

    def get_scope_and_config(
        self, connection_id: int, scope_id: str
    ) -> Tuple[ScopeDescriptor, ScopeConfig]:
        """Return the scope together with its (possibly default) config."""


def scope_and_config(
    store: ScopeStore, connection_id: int, scope_id: str
) -> Tuple[ScopeDescriptor, ScopeConfig]:
    """
    Look a scope up, then the scope config it references.

    A scope without a config id resolves to the empty default config without
    touching storage a second time.
    """
    scope = store.get_scope(connection_id, scope_id)
    if not scope.scope_config_id:
        return scope, EMPTY_SCOPE_CONFIG
    return scope, store.get_scope_config(scope.scope_config_id)


class ScopeResolver:
    """
    Resolve blueprint scopes against a ScopeStore.

    Args:
        store: Storage collaborator for one plugin
    """

    def __init__(self, store: ScopeStore):
        self.store = store

    def resolve(
        self, connection_id: int, scope_id: str
    ) -> Tuple[ScopeDescriptor, ScopeConfig]:
        """
        Fetch a scope and its scope config.

        Raises:
            ScopeNotFoundError: If no scope matches the composite key
            ScopeConfigNotFoundError: If the referenced config is missing
            StorageError: On storage I/O failure
        """
        scope, config = self.store.get_scope_and_config(connection_id, scope_id)
        logger.debug(
            "scope.resolved",
            connection_id=connection_id,
            scope_id=scope_id,
            scope_config_id=config.id,
            entities=list(config.entities),
        )
        return scope, config


__all__ = ["EMPTY_SCOPE_CONFIG", "ScopeStore", "ScopeResolver", "scope_and_config"]
