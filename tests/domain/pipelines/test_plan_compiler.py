"""
Tests for plan compilation.

Covers plan shape, per-scope option building, gating, accumulation of
several plugins into one plan and the all-or-nothing failure policy.
"""

from datetime import datetime, timezone

import pytest

from lake_hub.domain.exceptions import (
    ContractViolationError,
    ScopeNotFoundError,
    StorageError,
)
from lake_hub.domain.pipelines import PipelinePlan, PlanCompiler, SubtaskMeta
from lake_hub.domain.scopes import BlueprintScope, ScopeResolver
from lake_hub.domain.sources import get_source


def _bp_scopes(connection_id, *scope_ids):
    return [BlueprintScope(connection_id, scope_id) for scope_id in scope_ids]


@pytest.fixture
def jira_store(scope_store):
    scope_store.add_config(1, ["TICKET"])
    scope_store.add_config(2, ["TICKET", "CROSS"])
    scope_store.add_scope(1, "10", "Board 10", scope_config_id=1)
    scope_store.add_scope(1, "11", "Board 11", scope_config_id=2)
    scope_store.add_scope(1, "12", "Board 12")
    return scope_store


@pytest.fixture
def compiler(jira_store):
    return PlanCompiler(ScopeResolver(jira_store))


class TestPlanShape:
    """One stage per scope, one task per plugin."""

    def test_one_stage_per_scope(self, compiler):
        plan = compiler.compile(get_source("jira"), None, _bp_scopes(1, "10", "11", "12"), 1)

        assert len(plan) == 3
        assert all(len(stage) == 1 for stage in plan)

    def test_options_include_connection_id(self, compiler):
        plan = compiler.compile(get_source("jira"), None, _bp_scopes(1, "10", "11", "12"), 1)

        for stage in plan:
            assert stage[0].options["connectionId"] == 1
            assert stage[0].plugin == "jira"

    def test_stage_order_follows_blueprint_order(self, compiler):
        plan = compiler.compile(get_source("jira"), None, _bp_scopes(1, "12", "10"), 1)

        assert [stage[0].options["boardId"] for stage in plan] == [12, 10]

    def test_empty_scope_list_yields_empty_plan(self, compiler):
        plan = compiler.compile(get_source("jira"), None, [], 1)

        assert len(plan) == 0

    def test_options_are_not_shared_between_tasks(self, compiler):
        plan = compiler.compile(get_source("jira"), None, _bp_scopes(1, "10", "11"), 1)

        plan[0][0].options["extra"] = True

        assert "extra" not in plan[1][0].options
        assert plan[0][0].options is not plan[1][0].options


class TestGating:
    """Subtasks follow each scope's own config."""

    def test_subtasks_follow_scope_config(self, compiler):
        metas = [SubtaskMeta("A", "TICKET"), SubtaskMeta("B", "CICD"), SubtaskMeta("C")]

        plan = compiler.compile(get_source("jira"), metas, _bp_scopes(1, "10"), 1)

        assert plan[0][0].subtasks == ["A", "C"]

    def test_scope_without_config_still_gets_ungated_subtasks(self, compiler, jira_store):
        metas = [SubtaskMeta("A", "TICKET"), SubtaskMeta("C")]

        plan = compiler.compile(get_source("jira"), metas, _bp_scopes(1, "12"), 1)

        assert plan[0][0].subtasks == ["C"]
        # No config id, so no config lookup
        assert not any(call[0] == "get_scope_config" for call in jira_store.calls)

    def test_default_registry_is_the_source_registry(self, compiler):
        plan = compiler.compile(get_source("jira"), None, _bp_scopes(1, "10", "11"), 1)

        assert "collectIssues" in plan[0][0].subtasks
        assert "collectRemotelinks" not in plan[0][0].subtasks
        assert "collectRemotelinks" in plan[1][0].subtasks


class TestSourceOptions:
    """Source-specific option building."""

    def test_trello_options(self, store_factory):
        store = store_factory("trello")
        store.add_scope(5, "5f1a", "Roadmap")
        compiler = PlanCompiler(ScopeResolver(store))

        plan = compiler.compile(get_source("trello"), None, _bp_scopes(5, "5f1a"), 5)

        assert plan[0][0].options == {"connectionId": 5, "scopeId": "5f1a"}

    def test_circleci_options_use_project_slug(self, store_factory):
        store = store_factory("circleci")
        store.add_scope(2, "p-1", "repo", slug="gh/org/repo")
        compiler = PlanCompiler(ScopeResolver(store))

        plan = compiler.compile(get_source("circleci"), None, _bp_scopes(2, "p-1"), 2)

        assert plan[0][0].options == {"connectionId": 2, "projectSlug": "gh/org/repo"}

    def test_zentao_options_carry_time_after(self, store_factory):
        store = store_factory("zentao")
        store.add_scope(1, "1", "test/testRepo", type="project")
        compiler = PlanCompiler(ScopeResolver(store))
        time_after = datetime(2024, 1, 1, tzinfo=timezone.utc)

        without = compiler.compile(get_source("zentao"), [], _bp_scopes(1, "1"), 1)
        with_window = compiler.compile(
            get_source("zentao"), [], _bp_scopes(1, "1"), 1, time_after=time_after
        )

        assert without[0][0].options == {"connectionId": 1, "projectId": 1, "timeAfter": ""}
        assert with_window[0][0].options["timeAfter"] == "2024-01-01T00:00:00+00:00"
        assert without[0][0].subtasks == []


class TestAccumulation:
    """Several plugins contribute to the same stages."""

    def test_second_plugin_appends_to_existing_stages(self, jira_store, store_factory):
        trello_store = store_factory("trello")
        trello_store.add_scope(1, "10", "Board")
        trello_store.add_scope(1, "11", "Board")

        jira_plan = PlanCompiler(ScopeResolver(jira_store)).compile(
            get_source("jira"), None, _bp_scopes(1, "10", "11"), 1
        )
        merged = PlanCompiler(ScopeResolver(trello_store)).compile(
            get_source("trello"), None, _bp_scopes(1, "10", "11"), 1, plan=jira_plan
        )

        assert [[task.plugin for task in stage] for stage in merged] == [
            ["jira", "trello"],
            ["jira", "trello"],
        ]
        # Input plan is left untouched
        assert [len(stage) for stage in jira_plan] == [1, 1]

    def test_plan_length_mismatch_is_rejected(self, compiler):
        with pytest.raises(ContractViolationError, match="one stage per blueprint scope"):
            compiler.compile(
                get_source("jira"), None, _bp_scopes(1, "10"), 1, plan=PipelinePlan.empty(2)
            )


class TestAllOrNothing:
    """The first failing scope aborts the whole compile."""

    def test_storage_failure_propagates_original_error(self, compiler, jira_store):
        boom = StorageError("connection reset")
        jira_store.errors["12"] = boom

        with pytest.raises(StorageError) as exc_info:
            compiler.compile(get_source("jira"), None, _bp_scopes(1, "10", "11", "12"), 1)

        assert exc_info.value is boom
        assert exc_info.value.context["index"] == 2
        assert exc_info.value.context["scope_id"] == "12"
        assert exc_info.value.context["connection_id"] == 1

    def test_missing_scope_aborts_with_context(self, compiler):
        with pytest.raises(ScopeNotFoundError) as exc_info:
            compiler.compile(get_source("jira"), None, _bp_scopes(1, "10", "99", "11"), 1)

        message = str(exc_info.value)
        assert "index=1" in message
        assert "scope_id='99'" in message

    def test_failure_does_not_touch_accumulated_plan(self, compiler, jira_store):
        base = compiler.compile(get_source("jira"), None, _bp_scopes(1, "10", "11", "12"), 1)
        jira_store.errors["11"] = StorageError("timeout")

        with pytest.raises(StorageError):
            compiler.compile(
                get_source("jira"), None, _bp_scopes(1, "10", "11", "12"), 1, plan=base
            )

        assert [len(stage) for stage in base] == [1, 1, 1]
