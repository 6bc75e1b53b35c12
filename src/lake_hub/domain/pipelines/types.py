"""
Core data types for compiled pipeline plans.

A plan is an ordered list of stages, one per blueprint scope. The external
executor runs stages sequentially and the tasks inside a stage concurrently;
each task holds one plugin's work for one scope.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence

# Canonical domain-type tags shared by every source
DOMAIN_TYPE_CODE = "CODE"
DOMAIN_TYPE_TICKET = "TICKET"
DOMAIN_TYPE_CODE_REVIEW = "CODEREVIEW"
DOMAIN_TYPE_CROSS = "CROSS"
DOMAIN_TYPE_CICD = "CICD"
DOMAIN_TYPE_CODE_QUALITY = "CODEQUALITY"

DOMAIN_TYPES = (
    DOMAIN_TYPE_CODE,
    DOMAIN_TYPE_TICKET,
    DOMAIN_TYPE_CODE_REVIEW,
    DOMAIN_TYPE_CROSS,
    DOMAIN_TYPE_CICD,
    DOMAIN_TYPE_CODE_QUALITY,
)


@dataclass(frozen=True)
class SubtaskMeta:
    """
    Registry entry describing one collection/conversion subtask.

    Attributes:
        name: Subtask name as understood by the plugin runtime
        required_domain_type: Domain type that must be enabled for the subtask
            to run; ``None`` means the subtask always runs
        description: Human-readable summary
    """

    name: str
    required_domain_type: Optional[str] = None
    description: str = ""


@dataclass
class PipelineTask:
    """
    One plugin's work for one scope.

    Attributes:
        plugin: Plugin name
        subtasks: Ordered subtask names, no duplicates
        options: Plugin options (connectionId, scope identifier, ...)
    """

    plugin: str
    subtasks: List[str] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Return JSON-serialisable representation."""
        return {
            "plugin": self.plugin,
            "subtasks": list(self.subtasks),
            "options": copy.deepcopy(self.options),
        }


PipelineStage = List[PipelineTask]


@dataclass
class PipelinePlan:
    """
    Ordered sequence of stages.

    Supports ``len()``, indexing and iteration so it can be handled like the
    list of stages it wraps.
    """

    stages: List[PipelineStage] = field(default_factory=list)

    @classmethod
    def empty(cls, size: int) -> "PipelinePlan":
        """Create a plan with ``size`` empty stages."""
        return cls(stages=[[] for _ in range(size)])

    def __len__(self) -> int:
        return len(self.stages)

    def __getitem__(self, index: int) -> PipelineStage:
        return self.stages[index]

    def __iter__(self) -> Iterator[PipelineStage]:
        return iter(self.stages)

    def copy(self) -> "PipelinePlan":
        """Copy the stage lists; tasks are shared, the lists are not."""
        return PipelinePlan(stages=[list(stage) for stage in self.stages])

    def plugins(self) -> List[str]:
        """Distinct plugin names in first-seen order."""
        seen: List[str] = []
        for stage in self.stages:
            for task in stage:
                if task.plugin not in seen:
                    seen.append(task.plugin)
        return seen

    def to_list(self) -> List[List[Dict[str, Any]]]:
        """Return JSON-serialisable representation (useful for logging/tests)."""
        return [[task.to_dict() for task in stage] for stage in self.stages]


def parallelize_plans(*plans: PipelinePlan) -> PipelinePlan:
    """
    Merge plans stage by stage.

    Stage ``i`` of the result holds the tasks of stage ``i`` of every plan, in
    argument order; plans shorter than the longest contribute nothing past
    their end.
    """
    size = max((len(plan) for plan in plans), default=0)
    merged = PipelinePlan.empty(size)
    for plan in plans:
        for index, stage in enumerate(plan):
            merged.stages[index].extend(stage)
    return merged


def sequentialize_plans(*plans: Sequence[PipelineStage]) -> PipelinePlan:
    """Concatenate the stages of every plan, in argument order."""
    merged = PipelinePlan()
    for plan in plans:
        merged.stages.extend(list(stage) for stage in plan)
    return merged


__all__ = [
    "DOMAIN_TYPE_CODE",
    "DOMAIN_TYPE_TICKET",
    "DOMAIN_TYPE_CODE_REVIEW",
    "DOMAIN_TYPE_CROSS",
    "DOMAIN_TYPE_CICD",
    "DOMAIN_TYPE_CODE_QUALITY",
    "DOMAIN_TYPES",
    "SubtaskMeta",
    "PipelineTask",
    "PipelineStage",
    "PipelinePlan",
    "parallelize_plans",
    "sequentialize_plans",
]
