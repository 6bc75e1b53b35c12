"""
Blueprint compilation service.

Entry points that wire the resolver, plan compiler and scope mapper together
for one connection, and that combine several connections of a blueprint into
one plan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from lake_hub.config.blueprint_loader import BlueprintConfig
from lake_hub.domain.pipelines.builder import PlanCompiler
from lake_hub.domain.pipelines.types import PipelinePlan, parallelize_plans
from lake_hub.domain.scopes.mapper import DomainScopeMapper
from lake_hub.domain.scopes.models import BlueprintScope, DomainScope
from lake_hub.domain.scopes.resolver import ScopeResolver, ScopeStore
from lake_hub.domain.sources import SourceAdapter, get_source
from lake_hub.utils.logging import bind_context

StoreFactory = Callable[[str], ScopeStore]


@dataclass
class BlueprintPlan:
    """
    Compiled blueprint.

    Attributes:
        name: Blueprint name
        plan: Stage-merged plan of every connection
        scopes: Domain scopes of every connection, in connection order
    """

    name: str
    plan: PipelinePlan = field(default_factory=PipelinePlan)
    scopes: List[DomainScope] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        """Return JSON-serialisable representation."""
        return {
            "name": self.name,
            "plan": self.plan.to_list(),
            "scopes": [scope.to_dict() for scope in self.scopes],
        }


def make_data_source_pipeline_plan(
    source: SourceAdapter,
    bp_scopes: Sequence[BlueprintScope],
    connection_id: int,
    store: ScopeStore,
    time_after: Optional[datetime] = None,
) -> Tuple[PipelinePlan, List[DomainScope]]:
    """
    Compile the plan and domain scopes of one connection.

    Raises:
        LakeHubError: The first failure of either step; nothing is returned
    """
    resolver = ScopeResolver(store)
    plan = PlanCompiler(resolver).compile(
        source,
        source.subtask_metas,
        bp_scopes,
        connection_id,
        time_after=time_after,
    )
    scopes = DomainScopeMapper(resolver).map_scopes(source, bp_scopes, connection_id)
    return plan, scopes


def compile_blueprint(
    blueprint: BlueprintConfig, store_factory: StoreFactory
) -> BlueprintPlan:
    """
    Compile every connection of a blueprint.

    Per-connection plans are merged stage by stage, so stage ``i`` runs the
    ``i``-th scope of every connection together.

    Args:
        blueprint: Validated blueprint
        store_factory: Returns the scope store of a plugin name

    Raises:
        KeyError: If a connection names an unregistered plugin
        LakeHubError: The first compile/mapping failure
    """
    log = bind_context(blueprint=blueprint.name)
    time_after = blueprint.sync_policy.time_after
    plans: List[PipelinePlan] = []
    scopes: List[DomainScope] = []

    for entry in blueprint.connections:
        source = get_source(entry.plugin)
        bp_scopes = [
            BlueprintScope(connection_id=entry.connection_id, scope_id=scope_id)
            for scope_id in entry.scope_ids()
        ]
        plan, domain_scopes = make_data_source_pipeline_plan(
            source,
            bp_scopes,
            entry.connection_id,
            store_factory(source.name),
            time_after=time_after,
        )
        plans.append(plan)
        scopes.extend(domain_scopes)
        log.debug(
            "blueprint.connection_compiled",
            plugin=source.name,
            connection_id=entry.connection_id,
            stages=len(plan),
            domain_scopes=len(domain_scopes),
        )

    merged = parallelize_plans(*plans)
    log.info(
        "blueprint.compiled",
        connections=len(blueprint.connections),
        stages=len(merged),
        domain_scopes=len(scopes),
    )
    return BlueprintPlan(name=blueprint.name, plan=merged, scopes=scopes)


__all__ = ["BlueprintPlan", "make_data_source_pipeline_plan", "compile_blueprint"]
