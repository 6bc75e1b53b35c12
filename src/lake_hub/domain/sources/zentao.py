"""Zentao projects and nested Zentao task payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from lake_hub.domain.pipelines.types import DOMAIN_TYPE_TICKET, SubtaskMeta
from lake_hub.domain.records.flattener import flatten_records
from lake_hub.domain.scopes.models import TABLE_BOARDS, ScopeConfig, ScopeDescriptor

from .base import SourceAdapter, format_time_after, int_scope_id
from .registry import register_source

SUBTASK_METAS = (
    SubtaskMeta("collectAccount", None, "collect Zentao accounts"),
    SubtaskMeta("extractAccount", None, "extract Zentao accounts"),
    SubtaskMeta("convertAccount", None, "convert Zentao accounts"),
    SubtaskMeta("collectDepartment", None, "collect Zentao departments"),
    SubtaskMeta("extractDepartment", None, "extract Zentao departments"),
    SubtaskMeta("convertProject", DOMAIN_TYPE_TICKET, "convert Zentao project"),
    SubtaskMeta("collectExecution", DOMAIN_TYPE_TICKET, "collect executions"),
    SubtaskMeta("extractExecution", DOMAIN_TYPE_TICKET, "extract executions"),
    SubtaskMeta("convertExecution", DOMAIN_TYPE_TICKET, "convert executions"),
    SubtaskMeta("collectStory", DOMAIN_TYPE_TICKET, "collect stories"),
    SubtaskMeta("extractStory", DOMAIN_TYPE_TICKET, "extract stories"),
    SubtaskMeta("convertStory", DOMAIN_TYPE_TICKET, "convert stories"),
    SubtaskMeta("collectBug", DOMAIN_TYPE_TICKET, "collect bugs"),
    SubtaskMeta("extractBug", DOMAIN_TYPE_TICKET, "extract bugs"),
    SubtaskMeta("convertBug", DOMAIN_TYPE_TICKET, "convert bugs"),
    SubtaskMeta("collectTask", DOMAIN_TYPE_TICKET, "collect tasks"),
    SubtaskMeta("extractTask", DOMAIN_TYPE_TICKET, "extract tasks"),
    SubtaskMeta("convertTask", DOMAIN_TYPE_TICKET, "convert tasks"),
)


class ZentaoSource(SourceAdapter):
    """Zentao projects map to ticket boards of type ``project``."""

    name = "zentao"
    entity_type = "ZentaoProject"
    category = DOMAIN_TYPE_TICKET
    table = TABLE_BOARDS
    subtask_metas = SUBTASK_METAS

    def build_options(
        self,
        scope: ScopeDescriptor,
        config: ScopeConfig,
        time_after: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        return {
            "projectId": int_scope_id(scope),
            "timeAfter": format_time_after(time_after),
        }

    def native_key(self, scope: ScopeDescriptor) -> Tuple[Any, ...]:
        return (int_scope_id(scope),)

    def scope_type(self, scope: ScopeDescriptor) -> str:
        return str(scope.attributes.get("type") or "project")


zentao_source = register_source(ZentaoSource())


class ZentaoTask(BaseModel):
    """Zentao task as returned by the task API; parents embed their children."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int = Field(..., description="Task id")
    name: str = Field("", description="Task name")
    parent: int = Field(0, description="Parent task id, 0 for top-level tasks")
    status: Optional[str] = Field(None, description="Task status")
    children: Optional[List["ZentaoTask"]] = Field(
        None, description="Nested child tasks"
    )


ZentaoTask.model_rebuild()


def extract_task_rows(payload: Mapping[str, Any]) -> List[ZentaoTask]:
    """
    Validate a nested task payload and flatten it into one task per row.

    Raises:
        pydantic.ValidationError: If the payload is not a task
        CycleDetectedError: If the task tree references itself
    """
    task = ZentaoTask.model_validate(payload)
    return flatten_records(task)


__all__ = ["ZentaoSource", "ZentaoTask", "extract_task_rows", "zentao_source"]
