"""Tool-layer record helpers."""

from .flattener import VisitState, flatten_records, record_children, record_key

__all__ = ["VisitState", "flatten_records", "record_children", "record_key"]
