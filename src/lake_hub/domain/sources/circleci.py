"""CircleCI projects."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from lake_hub.domain.exceptions import ContractViolationError
from lake_hub.domain.pipelines.types import DOMAIN_TYPE_CICD, SubtaskMeta
from lake_hub.domain.scopes.models import (
    TABLE_CICD_SCOPES,
    ScopeConfig,
    ScopeDescriptor,
)

from .base import SourceAdapter
from .registry import register_source

SUBTASK_METAS = (
    SubtaskMeta("collectProjects", DOMAIN_TYPE_CICD, "collect CircleCI projects"),
    SubtaskMeta("extractProjects", DOMAIN_TYPE_CICD, "extract CircleCI projects"),
    SubtaskMeta("collectPipelines", DOMAIN_TYPE_CICD, "collect CircleCI pipelines"),
    SubtaskMeta("extractPipelines", DOMAIN_TYPE_CICD, "extract CircleCI pipelines"),
    SubtaskMeta("collectWorkflows", DOMAIN_TYPE_CICD, "collect CircleCI workflows"),
    SubtaskMeta("extractWorkflows", DOMAIN_TYPE_CICD, "extract CircleCI workflows"),
    SubtaskMeta("collectJobs", DOMAIN_TYPE_CICD, "collect CircleCI jobs"),
    SubtaskMeta("extractJobs", DOMAIN_TYPE_CICD, "extract CircleCI jobs"),
    SubtaskMeta("convertProjects", DOMAIN_TYPE_CICD, "convert CircleCI projects"),
    SubtaskMeta("convertWorkflows", DOMAIN_TYPE_CICD, "convert workflows"),
    SubtaskMeta("convertJobs", DOMAIN_TYPE_CICD, "convert CircleCI jobs"),
)


class CircleciSource(SourceAdapter):
    """
    CircleCI projects map to CI/CD scopes.

    Collectors address a project by its slug (``gh/org/repo``) while the
    domain id uses the stored project id.
    """

    name = "circleci"
    entity_type = "CircleciProject"
    category = DOMAIN_TYPE_CICD
    table = TABLE_CICD_SCOPES
    subtask_metas = SUBTASK_METAS

    def build_options(
        self,
        scope: ScopeDescriptor,
        config: ScopeConfig,
        time_after: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        slug = scope.attributes.get("slug")
        if not slug:
            raise ContractViolationError(
                "CircleCI project has no slug",
                connection_id=scope.connection_id,
                scope_id=scope.scope_id,
            )
        return {"projectSlug": slug}


circleci_source = register_source(CircleciSource())
