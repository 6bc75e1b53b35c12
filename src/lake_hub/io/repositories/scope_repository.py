"""
Scope Repository for tool-layer scopes and scope configs.

Implements the ``ScopeStore`` collaborator of the domain layer over a
SQLAlchemy connection. One repository instance serves one plugin; rows of
every plugin share the two tables below and are told apart by ``plugin``.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

import sqlalchemy as sa
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from lake_hub.domain.exceptions import (
    ScopeConfigNotFoundError,
    ScopeNotFoundError,
    StorageError,
)
from lake_hub.domain.scopes.models import ScopeConfig, ScopeDescriptor
from lake_hub.domain.scopes.resolver import scope_and_config

logger = logging.getLogger(__name__)

SCOPES_TABLE = "tool_scopes"
SCOPE_CONFIGS_TABLE = "tool_scope_configs"

_DDL = (
    f"""
    CREATE TABLE IF NOT EXISTS {SCOPE_CONFIGS_TABLE} (
        id INTEGER PRIMARY KEY,
        plugin VARCHAR(100) NOT NULL,
        name VARCHAR(255) NOT NULL DEFAULT '',
        entities TEXT NOT NULL DEFAULT '[]'
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {SCOPES_TABLE} (
        plugin VARCHAR(100) NOT NULL,
        connection_id BIGINT NOT NULL,
        scope_id VARCHAR(255) NOT NULL,
        name VARCHAR(255) NOT NULL DEFAULT '',
        scope_config_id INTEGER,
        attributes TEXT NOT NULL DEFAULT '{{}}',
        PRIMARY KEY (plugin, connection_id, scope_id)
    )
    """,
)


def _json_default(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def ensure_schema(conn: Connection) -> None:
    """Create the scope tables when they do not exist yet."""
    try:
        for statement in _DDL:
            conn.execute(sa.text(statement))
    except SQLAlchemyError as e:
        raise StorageError(f"Failed to create scope tables: {e}") from e


class SqlScopeRepository:
    """
    Repository for one plugin's scopes and scope configs.

    Usage:
        with engine.begin() as conn:
            repo = SqlScopeRepository(conn, "jira")
            scope, config = repo.get_scope_and_config(1, "10")
    """

    def __init__(self, conn: Connection, plugin: str):
        """
        Initialize the repository with a database connection.

        Args:
            conn: SQLAlchemy connection object
            plugin: Plugin whose rows this repository reads and writes
        """
        self.conn = conn
        self.plugin = plugin

    def _execute(self, statement: str, params: Dict[str, Any], operation: str) -> Any:
        try:
            return self.conn.execute(sa.text(statement), params)
        except SQLAlchemyError as e:
            logger.error(
                "scope_repository.query_failed",
                extra={"plugin": self.plugin, "operation": operation, "error": str(e)},
            )
            raise StorageError(
                f"Storage failure during {operation}: {e}", plugin=self.plugin
            ) from e

    def _decode(self, raw: Optional[str], default: str, expected: type, **context: Any) -> Any:
        try:
            value = json.loads(raw or default)
        except ValueError as e:
            raise StorageError(f"Corrupt scope row: {e}", plugin=self.plugin, **context) from e
        if not isinstance(value, expected):
            raise StorageError(
                f"Corrupt scope row: expected JSON {expected.__name__}",
                plugin=self.plugin,
                **context,
            )
        return value

    def get_scope(self, connection_id: int, scope_id: str) -> ScopeDescriptor:
        """
        Get a scope by its (connection_id, scope_id) composite key.

        Raises:
            ScopeNotFoundError: If no row matches
            StorageError: On database failure or a corrupt stored row
        """
        result = self._execute(
            f"""
            SELECT connection_id, scope_id, name, scope_config_id, attributes
            FROM {SCOPES_TABLE}
            WHERE plugin = :plugin AND connection_id = :connection_id
              AND scope_id = :scope_id
            """,
            {"plugin": self.plugin, "connection_id": connection_id, "scope_id": str(scope_id)},
            "get_scope",
        )
        row = result.fetchone()
        if row is None:
            raise ScopeNotFoundError(connection_id, str(scope_id), plugin=self.plugin)

        return ScopeDescriptor(
            connection_id=int(row[0]),
            scope_id=row[1],
            name=row[2] or "",
            scope_config_id=row[3],
            attributes=self._decode(
                row[4], "{}", dict, connection_id=connection_id, scope_id=str(scope_id)
            ),
        )

    def get_scope_config(self, config_id: int) -> ScopeConfig:
        """
        Get a scope config by id.

        Raises:
            ScopeConfigNotFoundError: If no row matches
            StorageError: On database failure or a corrupt stored row
        """
        result = self._execute(
            f"""
            SELECT id, name, entities
            FROM {SCOPE_CONFIGS_TABLE}
            WHERE plugin = :plugin AND id = :id
            """,
            {"plugin": self.plugin, "id": config_id},
            "get_scope_config",
        )
        row = result.fetchone()
        if row is None:
            raise ScopeConfigNotFoundError(config_id, plugin=self.plugin)

        return ScopeConfig(
            id=int(row[0]),
            name=row[1] or "",
            entities=tuple(self._decode(row[2], "[]", list, config_id=config_id)),
        )

    def get_scope_and_config(
        self, connection_id: int, scope_id: str
    ) -> Tuple[ScopeDescriptor, ScopeConfig]:
        """Get a scope and its scope config (empty default when unset)."""
        return scope_and_config(self, connection_id, scope_id)

    def list_scopes(self, connection_id: int) -> List[ScopeDescriptor]:
        """List the scopes of a connection ordered by scope id."""
        result = self._execute(
            f"""
            SELECT scope_id FROM {SCOPES_TABLE}
            WHERE plugin = :plugin AND connection_id = :connection_id
            ORDER BY scope_id
            """,
            {"plugin": self.plugin, "connection_id": connection_id},
            "list_scopes",
        )
        return [self.get_scope(connection_id, row[0]) for row in result.fetchall()]

    def save_scope_config(
        self, config_id: int, name: str, entities: Iterable[str]
    ) -> ScopeConfig:
        """Insert a scope config row."""
        entity_list = list(entities)
        self._execute(
            f"""
            INSERT INTO {SCOPE_CONFIGS_TABLE} (id, plugin, name, entities)
            VALUES (:id, :plugin, :name, :entities)
            """,
            {
                "id": config_id,
                "plugin": self.plugin,
                "name": name,
                "entities": json.dumps(entity_list),
            },
            "save_scope_config",
        )
        return ScopeConfig(id=config_id, name=name, entities=tuple(entity_list))

    def save_scope(
        self,
        connection_id: int,
        scope_id: str,
        name: str = "",
        scope_config_id: Optional[int] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ) -> ScopeDescriptor:
        """Insert a scope row."""
        attrs = dict(attributes or {})
        self._execute(
            f"""
            INSERT INTO {SCOPES_TABLE}
                (plugin, connection_id, scope_id, name, scope_config_id, attributes)
            VALUES
                (:plugin, :connection_id, :scope_id, :name, :scope_config_id, :attributes)
            """,
            {
                "plugin": self.plugin,
                "connection_id": connection_id,
                "scope_id": str(scope_id),
                "name": name,
                "scope_config_id": scope_config_id,
                "attributes": json.dumps(attrs, default=_json_default),
            },
            "save_scope",
        )
        return ScopeDescriptor(
            connection_id=connection_id,
            scope_id=str(scope_id),
            name=name,
            scope_config_id=scope_config_id,
            attributes=attrs,
        )


__all__ = [
    "SCOPES_TABLE",
    "SCOPE_CONFIGS_TABLE",
    "SqlScopeRepository",
    "ensure_schema",
]
