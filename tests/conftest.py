"""
Shared test fixtures for LakeHub.

Provides an in-memory ScopeStore test double and a SQLite connection with the
scope tables created, so domain tests never need a real database.
"""

from __future__ import annotations

import os
from typing import Dict, List, Optional, Tuple

import pytest
from sqlalchemy import create_engine

# Ensure Settings() can initialize without bespoke .env files.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from lake_hub.domain.exceptions import ScopeConfigNotFoundError, ScopeNotFoundError
from lake_hub.domain.scopes.models import ScopeConfig, ScopeDescriptor
from lake_hub.domain.scopes.resolver import scope_and_config
from lake_hub.io.repositories import ensure_schema


class InMemoryScopeStore:
    """ScopeStore double backed by dictionaries.

    ``errors`` maps a scope id to the exception instance raised when that
    scope is looked up, so tests can assert the very same error propagates.
    """

    def __init__(self, plugin: str = "jira"):
        self.plugin = plugin
        self.scopes: Dict[Tuple[int, str], ScopeDescriptor] = {}
        self.configs: Dict[int, ScopeConfig] = {}
        self.errors: Dict[str, Exception] = {}
        self.calls: List[Tuple] = []

    def add_config(self, config_id: int, entities, name: str = "") -> ScopeConfig:
        config = ScopeConfig(id=config_id, name=name or f"config-{config_id}", entities=tuple(entities))
        self.configs[config_id] = config
        return config

    def add_scope(
        self,
        connection_id: int,
        scope_id: str,
        name: str = "",
        scope_config_id: Optional[int] = None,
        **attributes,
    ) -> ScopeDescriptor:
        scope = ScopeDescriptor(
            connection_id=connection_id,
            scope_id=str(scope_id),
            name=name,
            scope_config_id=scope_config_id,
            attributes=attributes,
        )
        self.scopes[(connection_id, str(scope_id))] = scope
        return scope

    def get_scope(self, connection_id: int, scope_id: str) -> ScopeDescriptor:
        self.calls.append(("get_scope", connection_id, scope_id))
        if scope_id in self.errors:
            raise self.errors[scope_id]
        try:
            return self.scopes[(connection_id, scope_id)]
        except KeyError:
            raise ScopeNotFoundError(connection_id, scope_id, plugin=self.plugin)

    def get_scope_config(self, config_id: int) -> ScopeConfig:
        self.calls.append(("get_scope_config", config_id))
        try:
            return self.configs[config_id]
        except KeyError:
            raise ScopeConfigNotFoundError(config_id, plugin=self.plugin)

    def get_scope_and_config(
        self, connection_id: int, scope_id: str
    ) -> Tuple[ScopeDescriptor, ScopeConfig]:
        return scope_and_config(self, connection_id, scope_id)


@pytest.fixture
def scope_store() -> InMemoryScopeStore:
    """Empty in-memory scope store."""
    return InMemoryScopeStore()


@pytest.fixture
def store_factory():
    """Factory creating in-memory stores for a given plugin name."""

    def _make(plugin: str = "jira") -> InMemoryScopeStore:
        return InMemoryScopeStore(plugin)

    return _make


@pytest.fixture
def sqlite_conn():
    """SQLite in-memory connection with the scope tables created."""
    engine = create_engine("sqlite://")
    with engine.begin() as conn:
        ensure_schema(conn)
        yield conn
    engine.dispose()
