"""
Exception hierarchy for plan compilation, scope mapping and record flattening.

Every error carries a context mapping (connection id, scope id, plan index,
plugin, ...) that is rendered after the message, so a failure surfaced from
deep inside a compile still tells the caller which scope broke it.
"""

from typing import Any, Dict, Optional


class LakeHubError(Exception):
    """
    Base exception for all LakeHub errors.

    Args:
        message: Error description
        **context: Contextual fields rendered after the message
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.context: Dict[str, Any] = {
            key: value for key, value in context.items() if value is not None
        }
        super().__init__(message)

    def with_context(self, **context: Any) -> "LakeHubError":
        """Attach additional context fields and return self for re-raising."""
        for key, value in context.items():
            if value is not None:
                self.context.setdefault(key, value)
        return self

    def __str__(self) -> str:
        if not self.context:
            return self.message
        context_parts = [f"{key}={value!r}" for key, value in self.context.items()]
        return f"{self.message} ({', '.join(context_parts)})"


class NotFoundError(LakeHubError):
    """Raised when a requested row does not exist in storage."""

    pass


class ScopeNotFoundError(NotFoundError):
    """
    Raised when no scope matches a (connection_id, scope_id) composite key.

    Args:
        connection_id: Connection the scope was looked up under
        scope_id: Native scope identifier
    """

    def __init__(self, connection_id: int, scope_id: str, plugin: Optional[str] = None):
        self.connection_id = connection_id
        self.scope_id = scope_id
        super().__init__(
            "Scope not found",
            plugin=plugin,
            connection_id=connection_id,
            scope_id=scope_id,
        )


class ScopeConfigNotFoundError(NotFoundError):
    """Raised when a scope references a scope config that does not exist."""

    def __init__(self, config_id: int, plugin: Optional[str] = None):
        self.config_id = config_id
        super().__init__("Scope config not found", plugin=plugin, config_id=config_id)


class StorageError(LakeHubError):
    """Raised when the storage collaborator fails with an I/O error."""

    pass


class CycleDetectedError(LakeHubError):
    """
    Raised when a hierarchical record references itself transitively.

    Args:
        key: Native key of the node that was re-entered
    """

    def __init__(self, key: Any):
        self.key = key
        super().__init__("Cycle detected in record hierarchy", key=key)


class ContractViolationError(LakeHubError):
    """Raised when a caller passes malformed input (empty keys, bad ids, ...)."""

    pass


__all__ = [
    "LakeHubError",
    "NotFoundError",
    "ScopeNotFoundError",
    "ScopeConfigNotFoundError",
    "StorageError",
    "CycleDetectedError",
    "ContractViolationError",
]
