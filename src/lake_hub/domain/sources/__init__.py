"""Per-source plan/scope adapters.

Importing this package registers every bundled source.
"""

from . import circleci, jira, trello, zentao  # noqa: F401
from .base import SourceAdapter
from .registry import get_source, list_sources, register_source, unregister_source

__all__ = [
    "SourceAdapter",
    "register_source",
    "unregister_source",
    "get_source",
    "list_sources",
]
