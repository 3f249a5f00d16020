"""
Tests for structured logging setup.
"""

import json

import pytest
import structlog

from statsuite.core.logging import configure_logging, get_logger
from statsuite.execution import ComputeRegistry, ExecutionConfig


@pytest.fixture(autouse=True)
def restore_structlog():
    yield
    structlog.reset_defaults()


class TestConfigureLogging:

    def test_json_events(self, capsys):
        configure_logging(log_level="INFO", log_format="json", show_timestamps=False)
        get_logger("test").info("unit_created", module="regression.linear")
        event = json.loads(capsys.readouterr().err.strip())
        assert event == {"event": "unit_created", "module": "regression.linear", "level": "info"}

    def test_level_filtering(self, capsys):
        configure_logging(log_level="WARNING", log_format="json")
        log = get_logger("test")
        log.info("hidden")
        log.warning("shown")
        lines = capsys.readouterr().err.strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "shown"

    def test_console_format(self, capsys):
        configure_logging(log_format="console", color=False)
        get_logger("test").info("batch_started", tasks=2)
        err = capsys.readouterr().err
        assert "batch_started" in err
        assert "tasks=2" in err


class TestRegistryEvents:

    def test_invoke_lifecycle_is_logged(self, capsys):
        configure_logging(log_level="DEBUG", log_format="json", show_timestamps=False)
        with ComputeRegistry(ExecutionConfig(cache_hit_delay=0.0)) as registry:
            params = {"variables": [{"name": "x", "data": [1, 2]}]}
            registry.invoke("descriptive.frequencies", "frequencies", params)
            registry.invoke("descriptive.frequencies", "frequencies", params)
        events = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        names = [e["event"] for e in events]
        assert names[0] == "unit_created"
        assert "cache_hit" in names
        finished = [e for e in events if e["event"] == "invoke_finished"]
        assert [e["cached"] for e in finished] == [False, True]
        assert names[-1] == "unit_terminated"
