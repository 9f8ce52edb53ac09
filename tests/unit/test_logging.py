from __future__ import annotations

import json

import structlog

from jwt_client.logging import configure_logging, get_logger


def test_json_logging_binds_context_and_filters_level(capsys):
    configure_logging(level="INFO", fmt="json")
    try:
        get_logger("datastore", service_slug="testServiceSlug").info("stored data for %s", "testUserId")
        get_logger("datastore").debug("not shown")
    finally:
        structlog.reset_defaults()

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["event"] == "stored data for testUserId"
    assert record["service_slug"] == "testServiceSlug"
    assert record["level"] == "info"
