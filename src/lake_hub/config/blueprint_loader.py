"""
Blueprint configuration loading.

A blueprint is a YAML document naming, per connection, the scopes to collect:

    name: delivery-metrics
    sync_policy:
      time_after: 2024-01-01T00:00:00Z
    connections:
      - plugin: jira
        connection_id: 1
        scopes: ["10", "12"]
      - plugin: circleci
        connection_id: 3
        scopes:
          - scope_id: 4f1c0a

Scope entries may be bare ids or mappings with a ``scope_id`` key. Ids are
kept as strings.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class BlueprintValidationError(Exception):
    """Raised when a blueprint file cannot be read or fails validation."""

    pass


class SyncPolicy(BaseModel):
    """Collection window shared by every connection of a blueprint."""

    time_after: Optional[datetime] = Field(
        None, description="Only collect records updated after this instant"
    )


class ScopeEntry(BaseModel):
    """One scope under a connection."""

    scope_id: str = Field(..., description="Native scope identifier")

    @field_validator("scope_id", mode="before")
    @classmethod
    def coerce_scope_id(cls, v: Any) -> str:
        """Accept integer ids and strip surrounding whitespace."""
        if isinstance(v, bool) or v is None:
            raise ValueError("scope_id cannot be empty")
        value = str(v).strip()
        if not value:
            raise ValueError("scope_id cannot be empty")
        return value


class ConnectionEntry(BaseModel):
    """Scopes to collect through one connection of one plugin."""

    plugin: str = Field(..., description="Source plugin name")
    connection_id: int = Field(..., gt=0, description="Connection id")
    scopes: List[ScopeEntry] = Field(..., description="Scopes in collection order")

    @field_validator("plugin")
    @classmethod
    def validate_plugin(cls, v: str) -> str:
        """Plugin names are lowercase identifiers."""
        value = v.strip().lower()
        if not re.match(r"^[a-z][a-z0-9_]*$", value):
            raise ValueError(
                "Plugin name must start with a letter and contain only "
                "lowercase letters, digits and underscores"
            )
        return value

    @field_validator("scopes", mode="before")
    @classmethod
    def coerce_scopes(cls, v: Any) -> Any:
        """Allow bare scope ids alongside ``{scope_id: ...}`` mappings."""
        if not isinstance(v, list):
            return v
        return [item if isinstance(item, dict) else {"scope_id": item} for item in v]

    @field_validator("scopes")
    @classmethod
    def validate_scopes(cls, v: List[ScopeEntry]) -> List[ScopeEntry]:
        """Require at least one scope and reject duplicates."""
        if not v:
            raise ValueError("connection must declare at least one scope")
        ids = [entry.scope_id for entry in v]
        if len(ids) != len(set(ids)):
            duplicates = sorted({sid for sid in ids if ids.count(sid) > 1})
            raise ValueError(f"Duplicate scope ids found: {duplicates}")
        return v

    def scope_ids(self) -> List[str]:
        return [entry.scope_id for entry in self.scopes]


class BlueprintConfig(BaseModel):
    """Complete blueprint document."""

    name: str = Field(..., description="Blueprint name")
    sync_policy: SyncPolicy = Field(default_factory=SyncPolicy)
    connections: List[ConnectionEntry] = Field(
        ..., min_length=1, description="Connections in plan order"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Blueprint name cannot be empty")
        return v.strip()


def parse_blueprint(data: Any) -> BlueprintConfig:
    """
    Validate an already-parsed blueprint mapping.

    Raises:
        BlueprintValidationError: If the mapping does not match the schema
    """
    if not isinstance(data, dict):
        raise BlueprintValidationError("Blueprint must be a mapping")
    try:
        return BlueprintConfig.model_validate(data)
    except ValidationError as e:
        raise BlueprintValidationError(f"Blueprint validation failed: {e}")


def load_blueprint(path: Union[str, Path]) -> BlueprintConfig:
    """
    Load and validate a blueprint YAML file.

    Args:
        path: Path to the blueprint file

    Returns:
        Validated BlueprintConfig

    Raises:
        BlueprintValidationError: If the file is missing, unreadable or invalid
    """
    config_file = Path(path)

    if not config_file.exists():
        raise BlueprintValidationError(f"Blueprint file not found: {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise BlueprintValidationError(f"Invalid YAML in blueprint file: {e}")
    except OSError as e:
        raise BlueprintValidationError(f"Failed to read blueprint file: {e}")

    blueprint = parse_blueprint(data)
    logger.info(
        "blueprint.loaded",
        extra={
            "blueprint": blueprint.name,
            "connection_count": len(blueprint.connections),
            "path": str(config_file),
        },
    )
    return blueprint


__all__ = [
    "BlueprintValidationError",
    "SyncPolicy",
    "ScopeEntry",
    "ConnectionEntry",
    "BlueprintConfig",
    "parse_blueprint",
    "load_blueprint",
]
