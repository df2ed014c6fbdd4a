"""Unit tests for observability logging."""

from __future__ import annotations

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from cellex_inbox.observability.logging import JsonLoggerFactory, get_logger


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        log = get_logger("cellex_inbox.test", owner="u_1")
        with capture_logs() as logs:
            log.info("inbox.capture.materialized", entry_id="ac_1")
        assert logs == [
            {"owner": "u_1", "entry_id": "ac_1", "event": "inbox.capture.materialized", "log_level": "info"}
        ]


class TestJsonLoggerFactory:
    def test_configure_installs_json_handler(self, restore_logging, capsys) -> None:
        JsonLoggerFactory.configure(logging.DEBUG)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

        structlog.get_logger("cellex_inbox.test").warning("inbox.storage.corrupt", key="admin.inbox")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "inbox.storage.corrupt"
        assert payload["key"] == "admin.inbox"
        assert payload["level"] == "warning"
        assert payload["logger"] == "cellex_inbox.test"

    def test_console_renderer(self, restore_logging) -> None:
        JsonLoggerFactory.configure(json=False)
        formatter = logging.getLogger().handlers[0].formatter
        assert isinstance(formatter.processors[-1], structlog.dev.ConsoleRenderer)
