"""Tests for the source adapter registry and per-source behaviour."""

from datetime import datetime, timezone

import pytest

from lake_hub.domain.exceptions import ContractViolationError
from lake_hub.domain.pipelines import DOMAIN_TYPES
from lake_hub.domain.scopes import ScopeConfig, ScopeDescriptor
from lake_hub.domain.sources import (
    SourceAdapter,
    get_source,
    list_sources,
    register_source,
    unregister_source,
)


class _DummySource(SourceAdapter):
    name = "dummy"
    entity_type = "DummyScope"
    category = "TICKET"
    table = "boards"

    def build_options(self, scope, config, time_after=None):
        return {"scopeId": scope.scope_id}


class TestRegistry:
    def test_bundled_sources_are_registered(self):
        assert list_sources() == ["circleci", "jira", "trello", "zentao"]

    def test_unknown_source_lists_available(self):
        with pytest.raises(KeyError, match="Available"):
            get_source("gitlab")

    def test_duplicate_registration_is_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            register_source(get_source("jira"))

    def test_register_and_unregister(self):
        source = register_source(_DummySource())
        try:
            assert get_source("dummy") is source
        finally:
            unregister_source("dummy")

        assert "dummy" not in list_sources()

    @pytest.mark.parametrize("name", ["circleci", "jira", "trello", "zentao"])
    def test_subtask_registries_are_well_formed(self, name):
        source = get_source(name)
        names = [meta.name for meta in source.subtask_metas]

        assert len(names) == len(set(names))
        assert source.category in DOMAIN_TYPES
        for meta in source.subtask_metas:
            assert meta.required_domain_type in DOMAIN_TYPES or meta.required_domain_type is None


class TestJiraSource:
    def test_options_with_config_and_time_after(self):
        scope = ScopeDescriptor(1, "42", "Board")
        options = get_source("jira").build_options(
            scope,
            ScopeConfig(id=3, entities=("TICKET",)),
            datetime(2024, 3, 1, tzinfo=timezone.utc),
        )

        assert options == {
            "boardId": 42,
            "scopeConfigId": 3,
            "timeAfter": "2024-03-01T00:00:00+00:00",
        }

    def test_options_without_config_or_time_after(self):
        options = get_source("jira").build_options(ScopeDescriptor(1, "42"), ScopeConfig())

        assert options == {"boardId": 42}

    def test_non_numeric_board_id_is_contract_violation(self):
        with pytest.raises(ContractViolationError, match="numeric"):
            get_source("jira").build_options(ScopeDescriptor(1, "abc"), ScopeConfig())

    def test_domain_scope_defaults_type(self):
        domain_scope = get_source("jira").build_domain_scope(ScopeDescriptor(4, "42", "Board"))

        assert domain_scope.id == "jira:JiraBoard:4:42"
        assert domain_scope.type == "jira"


class TestTrelloSource:
    def test_domain_scope_keeps_string_id(self):
        domain_scope = get_source("trello").build_domain_scope(
            ScopeDescriptor(1, "5f1a:b", "Roadmap", attributes={"description": "Q3"})
        )

        assert domain_scope.id == "trello:TrelloBoard:1:5f1a%3Ab"
        assert domain_scope.description == "Q3"
        assert domain_scope.type == ""


class TestCircleciSource:
    def test_missing_slug_is_contract_violation(self):
        with pytest.raises(ContractViolationError, match="slug") as exc_info:
            get_source("circleci").build_options(ScopeDescriptor(2, "p-1"), ScopeConfig())

        assert exc_info.value.context["scope_id"] == "p-1"

    def test_maps_only_when_cicd_enabled(self):
        source = get_source("circleci")

        assert source.maps_to_category(ScopeConfig(id=1, entities=("CICD",)))
        assert not source.maps_to_category(ScopeConfig(id=1, entities=("TICKET",)))


class TestZentaoSource:
    def test_time_after_is_always_present(self):
        options = get_source("zentao").build_options(ScopeDescriptor(1, "7"), ScopeConfig())

        assert options == {"projectId": 7, "timeAfter": ""}

    def test_domain_scope(self):
        domain_scope = get_source("zentao").build_domain_scope(
            ScopeDescriptor(1, "1", "test/testRepo")
        )

        assert domain_scope.id == "zentao:ZentaoProject:1:1"
        assert domain_scope.type == "project"
        assert domain_scope.created_date is None
