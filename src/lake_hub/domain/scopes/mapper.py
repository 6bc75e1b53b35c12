"""
Domain scope mapping.

Turns blueprint scopes into canonical domain scopes for the scopes whose
config enables the source's category. Disabled scopes are skipped, so the
result can be shorter than the input. Failures abort the whole mapping, as
in plan compilation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Sequence

from lake_hub.domain.exceptions import LakeHubError
from lake_hub.utils.logging import get_logger

from .models import BlueprintScope, DomainScope
from .resolver import ScopeResolver

if TYPE_CHECKING:
    from lake_hub.domain.sources.base import SourceAdapter

logger = get_logger(__name__)


class DomainScopeMapper:
    """
    Source-agnostic domain scope mapper.

    Args:
        resolver: Resolver over the mapped plugin's scope store
    """

    def __init__(self, resolver: ScopeResolver):
        self.resolver = resolver

    def map_scopes(
        self,
        source: "SourceAdapter",
        bp_scopes: Sequence[BlueprintScope],
        connection_id: int,
    ) -> List[DomainScope]:
        """
        Build domain scopes for ``bp_scopes``.

        Two blueprint scopes resolving to the same domain id produce one
        domain scope; the first one wins.

        Raises:
            LakeHubError: The first resolver/adapter failure, with ``index``,
                ``scope_id``, ``connection_id`` and ``plugin`` context
        """
        log = logger.bind(plugin=source.name, connection_id=connection_id)
        mapped: Dict[str, DomainScope] = {}

        for index, bp_scope in enumerate(bp_scopes):
            try:
                scope, config = self.resolver.resolve(connection_id, bp_scope.scope_id)
                if not source.maps_to_category(config):
                    log.debug(
                        "scopes.skipped_disabled",
                        index=index,
                        scope_id=bp_scope.scope_id,
                        category=source.category,
                    )
                    continue
                domain_scope = source.build_domain_scope(scope)
            except LakeHubError as exc:
                exc.with_context(
                    plugin=source.name,
                    connection_id=connection_id,
                    scope_id=bp_scope.scope_id,
                    index=index,
                )
                log.error(
                    "scopes.mapping_failed",
                    index=index,
                    scope_id=bp_scope.scope_id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                raise

            if domain_scope.id in mapped:
                log.debug(
                    "scopes.duplicate_skipped",
                    index=index,
                    scope_id=bp_scope.scope_id,
                    domain_id=domain_scope.id,
                )
                continue
            mapped[domain_scope.id] = domain_scope

        log.info("scopes.mapped", scopes=len(bp_scopes), domain_scopes=len(mapped))
        return list(mapped.values())


__all__ = ["DomainScopeMapper"]
