"""
Hierarchical record flattening.

Some source APIs (Zentao tasks, for one) return records as nested trees where
every node carries its own ``children``. Persistence wants one row per
record, so trees are linearized here: depth-first, each logical node once,
and reference cycles reported instead of looped on.

The traversal keeps an explicit stack of frames and a status map keyed by the
node's native key, so deep trees do not grow the Python call stack and a
cycle is a plain status check:

    UNVISITED -> VISITING (on the current path) -> VISITED (subtree done)

Nodes are returned as-is: their ``children`` lists are left untouched so the
parent/child links can be rebuilt downstream independently of row order.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Mapping, Sequence, Tuple, TypeVar

from lake_hub.domain.exceptions import CycleDetectedError
from lake_hub.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_EXHAUSTED = object()


class VisitState(Enum):
    """Traversal status of a node."""

    UNVISITED = "unvisited"
    VISITING = "visiting"
    VISITED = "visited"


def record_key(record: Any) -> Any:
    """Native key of a record object or mapping (its ``id``)."""
    if isinstance(record, Mapping):
        return record["id"]
    return record.id


def record_children(record: Any) -> Sequence[Any]:
    """Children of a record object or mapping; missing or None means none."""
    if isinstance(record, Mapping):
        children = record.get("children")
    else:
        children = getattr(record, "children", None)
    return children or ()


def flatten_records(
    root: T,
    key: Callable[[Any], Any] = record_key,
    children: Callable[[Any], Sequence[Any]] = record_children,
) -> List[T]:
    """
    Linearize a record tree rooted at ``root``.

    Args:
        root: Root record
        key: Returns the native key identifying a logical node
        children: Returns the ordered children of a node

    Returns:
        Every reachable node exactly once, in pre-order. Callers should treat
        the order as unspecified and compare by membership.

    Raises:
        CycleDetectedError: If a node is reachable from itself; the error
            carries the key of the re-entered node
    """
    status: Dict[Any, VisitState] = {}
    flattened: List[T] = []

    root_key = key(root)
    status[root_key] = VisitState.VISITING
    flattened.append(root)
    stack: List[Tuple[Any, Iterator[Any]]] = [(root_key, iter(children(root)))]

    while stack:
        node_key, pending = stack[-1]
        child = next(pending, _EXHAUSTED)
        if child is _EXHAUSTED:
            status[node_key] = VisitState.VISITED
            stack.pop()
            continue

        child_key = key(child)
        state = status.get(child_key, VisitState.UNVISITED)
        if state is VisitState.VISITING:
            logger.warning(
                "records.cycle_detected", key=child_key, parent_key=node_key
            )
            raise CycleDetectedError(child_key)
        if state is VisitState.VISITED:
            continue

        status[child_key] = VisitState.VISITING
        flattened.append(child)
        stack.append((child_key, iter(children(child))))

    logger.debug("records.flattened", root_key=root_key, count=len(flattened))
    return flattened


__all__ = ["VisitState", "record_key", "record_children", "flatten_records"]
