"""Tests for the structlog configuration.

Covers logger creation, JSON output, sanitization of sensitive fields and
context binding.
"""

import json
import logging

import pytest

from lake_hub.utils.logging import (
    REDACTED_VALUE,
    bind_context,
    get_logger,
    sanitize_for_logging,
)


def test_get_logger_returns_bound_logger() -> None:
    logger = get_logger("lake_hub.tests")

    assert hasattr(logger, "bind")
    assert hasattr(logger, "info")


def test_json_output_structure(caplog: pytest.LogCaptureFixture) -> None:
    """Records carry event, level, logger name and ISO timestamp."""
    caplog.set_level(logging.INFO)

    get_logger("lake_hub.tests.json").info("plan.compile_started", scopes=3)

    log_data = json.loads(caplog.records[-1].message)
    assert log_data["event"] == "plan.compile_started"
    assert log_data["level"] == "info"
    assert log_data["logger"] == "lake_hub.tests.json"
    assert log_data["scopes"] == 3
    assert "T" in log_data["timestamp"]


@pytest.mark.parametrize(
    "key",
    ["password", "access_token", "api_key", "client_secret", "DATABASE_URL", "Token"],
)
def test_sensitive_keys_are_redacted(key: str) -> None:
    sanitized = sanitize_for_logging({key: "value", "plugin": "jira"})

    assert sanitized[key] == REDACTED_VALUE
    assert sanitized["plugin"] == "jira"


def test_nested_dicts_are_sanitized() -> None:
    sanitized = sanitize_for_logging({"connection": {"token": "abc", "id": 1}})

    assert sanitized["connection"] == {"token": REDACTED_VALUE, "id": 1}


def test_sanitization_applies_to_emitted_records(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    get_logger("lake_hub.tests.redact").info(
        "cli.plan_started", DATABASE_URL="postgresql://lake:secret@db/lake"
    )

    log_data = json.loads(caplog.records[-1].message)
    assert log_data["DATABASE_URL"] == REDACTED_VALUE


def test_bound_context_persists(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    logger = bind_context(blueprint="delivery", plugin="jira")
    logger.info("first_event", index=0)
    logger.info("second_event", index=1)

    records = [json.loads(record.message) for record in caplog.records[-2:]]
    assert [record["index"] for record in records] == [0, 1]
    for record in records:
        assert record["blueprint"] == "delivery"
        assert record["plugin"] == "jira"
