"""Domain identifier generation.

Domain-layer rows coming from different sources share one table (every board
from Jira, Trello and Zentao lands in ``boards``), so their ids must be
globally unique. An id is the source tag (plugin and tool-layer entity type),
the connection id and the native key joined with ``:``:

    >>> DomainIdGenerator("zentao", "ZentaoProject").generate(1, 1)
    'zentao:ZentaoProject:1:1'

Key components are percent-escaped for ``%`` and ``:`` so that distinct
inputs can never produce the same string.
"""

from __future__ import annotations

from typing import Any, Tuple

from .exceptions import ContractViolationError

DELIMITER = ":"


def _escape(component: str) -> str:
    return component.replace("%", "%25").replace(DELIMITER, "%3A")


def _unescape(component: str) -> str:
    return component.replace("%3A", DELIMITER).replace("%25", "%")


def _validate_tag_part(value: str, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ContractViolationError(f"{label} must be a non-empty string", value=value)
    if DELIMITER in value:
        raise ContractViolationError(
            f"{label} must not contain '{DELIMITER}'", value=value
        )
    return value


class DomainIdGenerator:
    """
    Deterministic id generator bound to one tool-layer entity type.

    Args:
        plugin: Source plugin name (e.g. "jira")
        entity_type: Tool-layer entity type name (e.g. "JiraBoard")
    """

    def __init__(self, plugin: str, entity_type: str):
        self.plugin = _validate_tag_part(plugin, "plugin")
        self.entity_type = _validate_tag_part(entity_type, "entity_type")
        self.prefix = f"{self.plugin}{DELIMITER}{self.entity_type}"

    def generate(self, connection_id: int, *keys: Any) -> str:
        """
        Build the domain id for a native record.

        Args:
            connection_id: Connection the record was collected through
            *keys: Native primary key components, in declaration order

        Returns:
            Domain id string, identical for identical inputs

        Raises:
            ContractViolationError: On a non-integer connection id, no keys,
                or an empty/None key component
        """
        if (
            isinstance(connection_id, bool)
            or not isinstance(connection_id, int)
            or connection_id < 0
        ):
            raise ContractViolationError(
                "connection_id must be a non-negative integer",
                prefix=self.prefix,
                connection_id=connection_id,
            )
        if not keys:
            raise ContractViolationError(
                "at least one native key component is required", prefix=self.prefix
            )

        parts = [self.prefix, str(connection_id)]
        for position, key in enumerate(keys):
            if key is None or isinstance(key, bool) or str(key) == "":
                raise ContractViolationError(
                    "native key components must not be empty",
                    prefix=self.prefix,
                    position=position,
                )
            parts.append(_escape(str(key)))
        return DELIMITER.join(parts)

    def parse(self, domain_id: str) -> Tuple[int, Tuple[str, ...]]:
        """Return ``(connection_id, keys)`` for an id produced by this generator.

        Key components come back as strings.
        """
        head = f"{self.prefix}{DELIMITER}"
        if not isinstance(domain_id, str) or not domain_id.startswith(head):
            raise ContractViolationError(
                "domain id does not belong to this generator",
                prefix=self.prefix,
                domain_id=domain_id,
            )
        segments = domain_id[len(head):].split(DELIMITER)
        connection = segments[0]
        if len(segments) < 2 or not (connection.isascii() and connection.isdigit()):
            raise ContractViolationError(
                "malformed domain id", prefix=self.prefix, domain_id=domain_id
            )
        return int(connection), tuple(_unescape(part) for part in segments[1:])

    def __repr__(self) -> str:
        return f"DomainIdGenerator({self.plugin!r}, {self.entity_type!r})"


__all__ = ["DELIMITER", "DomainIdGenerator"]
