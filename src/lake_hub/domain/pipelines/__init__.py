"""
Pipeline plan compilation for LakeHub.

Available Components:
    - PlanCompiler: builds one stage per blueprint scope
    - select_subtasks: gates a plugin's subtask registry by enabled domain types
    - PipelinePlan/PipelineTask/SubtaskMeta: plan data handed to the executor
    - parallelize_plans/sequentialize_plans: combine per-plugin plans
"""

from .builder import PlanCompiler
from .subtasks import select_subtasks
from .types import (
    DOMAIN_TYPE_CICD,
    DOMAIN_TYPE_CODE,
    DOMAIN_TYPE_CODE_QUALITY,
    DOMAIN_TYPE_CODE_REVIEW,
    DOMAIN_TYPE_CROSS,
    DOMAIN_TYPE_TICKET,
    DOMAIN_TYPES,
    PipelinePlan,
    PipelineStage,
    PipelineTask,
    SubtaskMeta,
    parallelize_plans,
    sequentialize_plans,
)

__all__ = [
    "PlanCompiler",
    "select_subtasks",
    "PipelinePlan",
    "PipelineStage",
    "PipelineTask",
    "SubtaskMeta",
    "parallelize_plans",
    "sequentialize_plans",
    "DOMAIN_TYPES",
    "DOMAIN_TYPE_CODE",
    "DOMAIN_TYPE_TICKET",
    "DOMAIN_TYPE_CODE_REVIEW",
    "DOMAIN_TYPE_CROSS",
    "DOMAIN_TYPE_CICD",
    "DOMAIN_TYPE_CODE_QUALITY",
]
