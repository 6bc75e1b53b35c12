"""Jira boards."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from lake_hub.domain.pipelines.types import (
    DOMAIN_TYPE_CROSS,
    DOMAIN_TYPE_TICKET,
    SubtaskMeta,
)
from lake_hub.domain.scopes.models import TABLE_BOARDS, ScopeConfig, ScopeDescriptor

from .base import SourceAdapter, format_time_after, int_scope_id
from .registry import register_source

SUBTASK_METAS = (
    SubtaskMeta("collectStatus", DOMAIN_TYPE_TICKET, "collect Jira status"),
    SubtaskMeta("extractStatus", DOMAIN_TYPE_TICKET, "extract Jira status"),
    SubtaskMeta("collectProjects", DOMAIN_TYPE_TICKET, "collect Jira projects"),
    SubtaskMeta("extractProjects", DOMAIN_TYPE_TICKET, "extract Jira projects"),
    SubtaskMeta("collectIssueTypes", DOMAIN_TYPE_TICKET, "collect issue types"),
    SubtaskMeta("extractIssueType", DOMAIN_TYPE_TICKET, "extract issue types"),
    SubtaskMeta("collectIssues", DOMAIN_TYPE_TICKET, "collect Jira issues"),
    SubtaskMeta("extractIssues", DOMAIN_TYPE_TICKET, "extract Jira issues"),
    SubtaskMeta("collectIssueChangelogs", DOMAIN_TYPE_TICKET, "collect changelogs"),
    SubtaskMeta("extractIssueChangelogs", DOMAIN_TYPE_TICKET, "extract changelogs"),
    SubtaskMeta("collectAccounts", None, "collect Jira accounts"),
    SubtaskMeta("extractAccounts", None, "extract Jira accounts"),
    SubtaskMeta("collectWorklogs", DOMAIN_TYPE_TICKET, "collect worklogs"),
    SubtaskMeta("extractWorklogs", DOMAIN_TYPE_TICKET, "extract worklogs"),
    SubtaskMeta("collectRemotelinks", DOMAIN_TYPE_CROSS, "collect remote links"),
    SubtaskMeta("extractRemotelinks", DOMAIN_TYPE_CROSS, "extract remote links"),
    SubtaskMeta("convertBoard", DOMAIN_TYPE_TICKET, "convert Jira board"),
    SubtaskMeta("convertIssues", DOMAIN_TYPE_TICKET, "convert Jira issues"),
    SubtaskMeta("convertWorklogs", DOMAIN_TYPE_TICKET, "convert worklogs"),
    SubtaskMeta("convertIssueChangelogs", DOMAIN_TYPE_TICKET, "convert changelogs"),
    SubtaskMeta("convertIssueCommits", DOMAIN_TYPE_CROSS, "convert issue commits"),
    SubtaskMeta("convertAccounts", None, "convert Jira accounts"),
)


class JiraSource(SourceAdapter):
    """Jira boards map to ticket boards, keyed by numeric board id."""

    name = "jira"
    entity_type = "JiraBoard"
    category = DOMAIN_TYPE_TICKET
    table = TABLE_BOARDS
    subtask_metas = SUBTASK_METAS

    def build_options(
        self,
        scope: ScopeDescriptor,
        config: ScopeConfig,
        time_after: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        options: Dict[str, Any] = {"boardId": int_scope_id(scope)}
        if config.id:
            options["scopeConfigId"] = config.id
        if time_after:
            options["timeAfter"] = format_time_after(time_after)
        return options

    def native_key(self, scope: ScopeDescriptor) -> Tuple[Any, ...]:
        return (int_scope_id(scope),)

    def scope_type(self, scope: ScopeDescriptor) -> str:
        return str(scope.attributes.get("type") or "jira")


jira_source = register_source(JiraSource())
