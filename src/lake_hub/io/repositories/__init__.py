"""Database repositories."""

from .scope_repository import (
    SCOPE_CONFIGS_TABLE,
    SCOPES_TABLE,
    SqlScopeRepository,
    ensure_schema,
)

__all__ = ["SCOPES_TABLE", "SCOPE_CONFIGS_TABLE", "SqlScopeRepository", "ensure_schema"]
