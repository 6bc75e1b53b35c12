"""
Base class for per-source plan/scope behaviour.

Each external tool (Jira, Trello, CircleCI, Zentao, ...) differs in three
places only: which task options its collectors need, which domain category
its scopes map to, and how a tool-layer scope becomes a domain scope. The
plan compiler and the scope mapper stay source-agnostic by going through
this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from lake_hub.domain.didgen import DomainIdGenerator
from lake_hub.domain.exceptions import ContractViolationError
from lake_hub.domain.pipelines.types import SubtaskMeta
from lake_hub.domain.scopes.models import DomainScope, ScopeConfig, ScopeDescriptor


def int_scope_id(scope: ScopeDescriptor) -> int:
    """Return the scope id of a numerically keyed source as an int."""
    try:
        return int(scope.scope_id)
    except (TypeError, ValueError):
        raise ContractViolationError(
            "scope id must be numeric",
            connection_id=scope.connection_id,
            scope_id=scope.scope_id,
        )


def format_time_after(time_after: Optional[datetime]) -> str:
    return time_after.isoformat() if time_after else ""


_DATETIME_ADAPTER = TypeAdapter(datetime)


def _created_date(scope: ScopeDescriptor) -> Optional[datetime]:
    value = scope.attributes.get("created_date")
    if value is None or value == "":
        return None
    try:
        return _DATETIME_ADAPTER.validate_python(value)
    except ValidationError:
        raise ContractViolationError(
            "scope created_date is not a valid timestamp",
            connection_id=scope.connection_id,
            scope_id=scope.scope_id,
            created_date=value,
        )


class SourceAdapter(ABC):
    """
    Plan/scope capability set of one source.

    Subclasses set the class attributes and implement ``build_options``.

    Attributes:
        name: Plugin name used in pipeline tasks
        entity_type: Tool-layer scope type, part of the domain id source tag
        category: Domain type a scope must enable to produce a domain scope
        table: Canonical table the domain scope belongs to
        subtask_metas: Ordered subtask registry
    """

    name: str = ""
    entity_type: str = ""
    category: str = ""
    table: str = ""
    subtask_metas: Tuple[SubtaskMeta, ...] = ()

    def __init__(self) -> None:
        self.id_generator = DomainIdGenerator(self.name, self.entity_type)

    @abstractmethod
    def build_options(
        self,
        scope: ScopeDescriptor,
        config: ScopeConfig,
        time_after: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Return source-specific task options (``connectionId`` is added by the caller)."""

    def maps_to_category(self, config: ScopeConfig) -> bool:
        """Return True if the config enables this source's domain category."""
        return config.enables(self.category)

    def native_key(self, scope: ScopeDescriptor) -> Tuple[Any, ...]:
        """Native primary key components of a scope (after connection id)."""
        return (scope.scope_id,)

    def scope_type(self, scope: ScopeDescriptor) -> str:
        return str(scope.attributes.get("type") or "")

    def build_domain_scope(self, scope: ScopeDescriptor) -> DomainScope:
        """Convert a tool-layer scope into its canonical domain scope."""
        attributes = scope.attributes
        return DomainScope(
            id=self.id_generator.generate(scope.connection_id, *self.native_key(scope)),
            table=self.table,
            name=scope.name,
            description=str(attributes.get("description") or ""),
            url=str(attributes.get("url") or ""),
            type=self.scope_type(scope),
            created_date=_created_date(scope),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = ["SourceAdapter", "int_scope_id", "format_time_after"]
