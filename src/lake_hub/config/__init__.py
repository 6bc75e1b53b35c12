"""Configuration management for LakeHub.

Usage:
    >>> from lake_hub.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.DATABASE_URL)
"""

from lake_hub.config.blueprint_loader import (
    BlueprintConfig,
    BlueprintValidationError,
    ConnectionEntry,
    SyncPolicy,
    load_blueprint,
    parse_blueprint,
)
from lake_hub.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "BlueprintConfig",
    "BlueprintValidationError",
    "ConnectionEntry",
    "SyncPolicy",
    "load_blueprint",
    "parse_blueprint",
]
