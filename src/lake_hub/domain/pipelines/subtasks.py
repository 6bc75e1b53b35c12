"""Subtask selection gated by enabled domain types."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from lake_hub.domain.exceptions import ContractViolationError

from .types import SubtaskMeta


def select_subtasks(
    subtask_metas: Sequence[SubtaskMeta], enabled_types: Iterable[str]
) -> List[str]:
    """
    Filter a plugin's subtask registry by the enabled domain types.

    A subtask is kept when its ``required_domain_type`` is enabled or when it
    declares none. Registry order is preserved.

    Args:
        subtask_metas: Ordered subtask registry of one plugin
        enabled_types: Domain-type tags enabled by the scope config

    Returns:
        Ordered subtask names

    Raises:
        ContractViolationError: If the registry declares a name twice

    Example:
        >>> metas = [
        ...     SubtaskMeta("collectIssues", "TICKET"),
        ...     SubtaskMeta("collectJobs", "CICD"),
        ...     SubtaskMeta("collectAccounts"),
        ... ]
        >>> select_subtasks(metas, {"TICKET"})
        ['collectIssues', 'collectAccounts']
    """
    enabled = set(enabled_types)
    selected: List[str] = []
    seen = set()
    for meta in subtask_metas:
        if meta.name in seen:
            raise ContractViolationError(
                "Duplicate subtask in registry", subtask=meta.name
            )
        seen.add(meta.name)
        if meta.required_domain_type is None or meta.required_domain_type in enabled:
            selected.append(meta.name)
    return selected


__all__ = ["select_subtasks"]
