"""
Pipeline plan compilation.

Builds one stage per blueprint scope. Each stage receives one task for the
plugin being compiled; compiling several plugins against the same plan makes
their tasks share the stage at each index.

Compilation is all-or-nothing: the first failing scope aborts the whole
compile and its error propagates, annotated with the scope's position. No
partial plan is ever returned and an input plan is never modified.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

from lake_hub.domain.exceptions import ContractViolationError, LakeHubError
from lake_hub.domain.scopes.models import BlueprintScope
from lake_hub.domain.scopes.resolver import ScopeResolver
from lake_hub.utils.logging import get_logger

from .subtasks import select_subtasks
from .types import PipelinePlan, PipelineTask, SubtaskMeta

if TYPE_CHECKING:
    from lake_hub.domain.sources.base import SourceAdapter

logger = get_logger(__name__)


class PlanCompiler:
    """
    Source-agnostic plan compiler.

    Args:
        resolver: Resolver over the compiled plugin's scope store
    """

    def __init__(self, resolver: ScopeResolver):
        self.resolver = resolver

    def compile(
        self,
        source: "SourceAdapter",
        subtask_metas: Optional[Sequence[SubtaskMeta]],
        bp_scopes: Sequence[BlueprintScope],
        connection_id: int,
        plan: Optional[PipelinePlan] = None,
        time_after: Optional[datetime] = None,
    ) -> PipelinePlan:
        """
        Compile a plan for ``bp_scopes``.

        Args:
            source: Source adapter of the plugin being compiled
            subtask_metas: Subtask registry; defaults to ``source.subtask_metas``
            bp_scopes: Blueprint scopes, in stage order
            connection_id: Connection every scope is collected through
            plan: Plan to accumulate into; must have one stage per scope
            time_after: Collection window start for sources that honour it

        Returns:
            New plan with ``len(bp_scopes)`` stages

        Raises:
            ContractViolationError: If ``plan`` has the wrong number of stages
            LakeHubError: The first resolver/adapter failure, with
                ``index``, ``scope_id``, ``connection_id`` and ``plugin`` context
        """
        metas = source.subtask_metas if subtask_metas is None else subtask_metas
        if plan is None:
            compiled = PipelinePlan.empty(len(bp_scopes))
        elif len(plan) != len(bp_scopes):
            raise ContractViolationError(
                "plan must have one stage per blueprint scope",
                plugin=source.name,
                stages=len(plan),
                scopes=len(bp_scopes),
            )
        else:
            compiled = plan.copy()

        log = logger.bind(plugin=source.name, connection_id=connection_id)
        log.info("plan.compile_started", scopes=len(bp_scopes))

        for index, bp_scope in enumerate(bp_scopes):
            try:
                task = self._build_task(source, metas, bp_scope, connection_id, time_after)
            except LakeHubError as exc:
                exc.with_context(
                    plugin=source.name,
                    connection_id=connection_id,
                    scope_id=bp_scope.scope_id,
                    index=index,
                )
                log.error(
                    "plan.compile_failed",
                    index=index,
                    scope_id=bp_scope.scope_id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                raise
            compiled.stages[index].append(task)

        log.info("plan.compile_completed", stages=len(compiled))
        return compiled

    def _build_task(
        self,
        source: "SourceAdapter",
        subtask_metas: Sequence[SubtaskMeta],
        bp_scope: BlueprintScope,
        connection_id: int,
        time_after: Optional[datetime],
    ) -> PipelineTask:
        scope, config = self.resolver.resolve(connection_id, bp_scope.scope_id)

        options: Dict[str, Any] = {"connectionId": connection_id}
        for key, value in source.build_options(scope, config, time_after).items():
            options.setdefault(key, value)

        return PipelineTask(
            plugin=source.name,
            subtasks=select_subtasks(subtask_metas, config.entities),
            options=options,
        )


__all__ = ["PlanCompiler"]
