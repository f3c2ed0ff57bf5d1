"""Unit tests for contextual logging."""

import json
import logging

from poolmetrics.core.config import get_settings
from poolmetrics.core.logging import (
    LOGGER_NAME,
    ConsoleFormatter,
    JsonFormatter,
    configure_logging,
    logger,
)


def _record(message="hello", **context):
    record = logging.LogRecord(LOGGER_NAME, logging.INFO, __file__, 1, message, None, None)
    record.context = context
    return record


class TestContextualLogger:
    def test_with_context_chains(self):
        child = logger.with_context(pool_name="primary").with_context(operation="close")
        assert child.extra == {"pool_name": "primary", "operation": "close"}
        assert logger.extra == {}

    def test_context_travels_on_record(self, caplog):
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            logger.with_context(pool_name="primary").info("ready")

        record = caplog.records[-1]
        assert record.getMessage() == "ready"
        assert record.context == {"pool_name": "primary"}


class TestFormatters:
    def test_console_appends_context(self):
        line = ConsoleFormatter().format(_record(pool_name="primary", operation="close"))
        assert line.endswith("hello [operation=close pool_name=primary]")

    def test_console_without_context(self):
        line = ConsoleFormatter().format(_record())
        assert line.endswith("hello")

    def test_json_flattens_context(self):
        payload = json.loads(JsonFormatter().format(_record(pool_name="primary")))
        assert payload["message"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["pool_name"] == "primary"


class TestConfigureLogging:
    def test_installs_single_handler(self):
        base = logging.getLogger(LOGGER_NAME)
        before = list(base.handlers)
        try:
            configure_logging(get_settings(log_format="json", log_level="debug"))
            configure_logging(get_settings(log_format="json", log_level="debug"))

            ours = [h for h in base.handlers if getattr(h, "_poolmetrics", False)]
            assert len(ours) == 1
            assert isinstance(ours[0].formatter, JsonFormatter)
            assert base.level == logging.DEBUG
        finally:
            for handler in list(base.handlers):
                if handler not in before:
                    base.removeHandler(handler)
            base.setLevel(logging.NOTSET)
