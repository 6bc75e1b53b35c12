"""Scope resolution and domain scope mapping."""

from .mapper import DomainScopeMapper
from .models import (
    TABLE_BOARDS,
    TABLE_CICD_SCOPES,
    BlueprintScope,
    DomainScope,
    ScopeConfig,
    ScopeDescriptor,
)
from .resolver import EMPTY_SCOPE_CONFIG, ScopeResolver, ScopeStore, scope_and_config

__all__ = [
    "DomainScopeMapper",
    "ScopeResolver",
    "ScopeStore",
    "scope_and_config",
    "EMPTY_SCOPE_CONFIG",
    "BlueprintScope",
    "DomainScope",
    "ScopeConfig",
    "ScopeDescriptor",
    "TABLE_BOARDS",
    "TABLE_CICD_SCOPES",
]
