"""Trello boards."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from lake_hub.domain.pipelines.types import DOMAIN_TYPE_TICKET, SubtaskMeta
from lake_hub.domain.scopes.models import TABLE_BOARDS, ScopeConfig, ScopeDescriptor

from .base import SourceAdapter
from .registry import register_source

SUBTASK_METAS = (
    SubtaskMeta("CollectList", DOMAIN_TYPE_TICKET, "collect Trello lists"),
    SubtaskMeta("ExtractList", DOMAIN_TYPE_TICKET, "extract Trello lists"),
    SubtaskMeta("CollectCard", DOMAIN_TYPE_TICKET, "collect Trello cards"),
    SubtaskMeta("ExtractCard", DOMAIN_TYPE_TICKET, "extract Trello cards"),
    SubtaskMeta("CollectCheckItem", DOMAIN_TYPE_TICKET, "collect check items"),
    SubtaskMeta("ExtractCheckItem", DOMAIN_TYPE_TICKET, "extract check items"),
    SubtaskMeta("CollectLabel", DOMAIN_TYPE_TICKET, "collect Trello labels"),
    SubtaskMeta("ExtractLabel", DOMAIN_TYPE_TICKET, "extract Trello labels"),
    SubtaskMeta("CollectMember", None, "collect board members"),
    SubtaskMeta("ExtractMember", None, "extract board members"),
)


class TrelloSource(SourceAdapter):
    """Trello boards map to ticket boards, keyed by their string board id."""

    name = "trello"
    entity_type = "TrelloBoard"
    category = DOMAIN_TYPE_TICKET
    table = TABLE_BOARDS
    subtask_metas = SUBTASK_METAS

    def build_options(
        self,
        scope: ScopeDescriptor,
        config: ScopeConfig,
        time_after: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        return {"scopeId": scope.scope_id}


trello_source = register_source(TrelloSource())
