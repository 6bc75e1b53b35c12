"""
Scope models shared by the resolver, the plan compiler and the scope mapper.

Blueprint scopes and scope configs are read-only inputs; domain scopes are
recomputed on every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

TABLE_BOARDS = "boards"
TABLE_CICD_SCOPES = "cicd_scopes"


@dataclass(frozen=True)
class BlueprintScope:
    """One collectible unit named by a blueprint."""

    connection_id: int
    scope_id: str


@dataclass(frozen=True)
class ScopeConfig:
    """
    Named set of enabled domain-type tags, shared by many scopes.

    Attributes:
        id: Storage id, 0 for the empty default config
        name: Display name
        entities: Enabled domain-type tags (e.g. "TICKET", "CICD")
    """

    id: int = 0
    name: str = ""
    entities: Tuple[str, ...] = ()

    def enables(self, domain_type: str) -> bool:
        """Return True if ``domain_type`` is one of the enabled entities."""
        return domain_type in self.entities


@dataclass
class ScopeDescriptor:
    """
    Tool-layer scope row (a Jira board, a CircleCI project, ...).

    Attributes:
        connection_id: Connection the scope belongs to
        scope_id: Native scope identifier, as stored
        name: Display name
        scope_config_id: Referenced scope config, None/0 when unset
        attributes: Source-specific fields (slug, url, type, description, ...)
    """

    connection_id: int
    scope_id: str
    name: str = ""
    scope_config_id: Optional[int] = None
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DomainScope:
    """
    Canonical domain-layer scope (a board or a CI/CD scope).

    Attributes:
        id: Cross-source identifier from DomainIdGenerator
        table: Canonical table this row belongs to
        name: Display name copied verbatim from the tool-layer scope
        description: Optional description
        url: Optional link to the scope in the source tool
        type: Source-specific scope type (e.g. "project", "scrum")
        created_date: Creation timestamp when the source exposes one
    """

    id: str
    table: str
    name: str = ""
    description: str = ""
    url: str = ""
    type: str = ""
    created_date: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return JSON-serialisable representation."""
        return {
            "id": self.id,
            "table": self.table,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "type": self.type,
            "created_date": (
                self.created_date.isoformat() if self.created_date else None
            ),
        }


__all__ = [
    "TABLE_BOARDS",
    "TABLE_CICD_SCOPES",
    "BlueprintScope",
    "ScopeConfig",
    "ScopeDescriptor",
    "DomainScope",
]
