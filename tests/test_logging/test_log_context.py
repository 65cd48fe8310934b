"""
Tests for logging context and configuration.
"""

import io
import json
import logging

from evalengine.logging import (
    configure_logging,
    get_log_context,
    get_logger,
    with_log_context,
)


class TestLogContext:
    def test_empty_by_default(self):
        assert get_log_context() == {}

    def test_nested_contexts_layer(self):
        with with_log_context(suite="product"):
            with with_log_context(handle="describe", attempt=2):
                assert get_log_context() == {"suite": "product", "handle": "describe", "attempt": 2}
            assert get_log_context() == {"suite": "product"}
        assert get_log_context() == {}

    def test_reset_after_exception(self):
        try:
            with with_log_context(suite="product"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_log_context() == {}


class TestConfigureLogging:
    def test_json_records_carry_context(self):
        stream = io.StringIO()
        configure_logging(level="info", format="json", output=stream)
        logger = get_logger("evalengine.tests")

        with with_log_context(suite="product", handle="describe"):
            logger.info("Suite finished", duration_ms=12.5, passed=3)

        record = json.loads(stream.getvalue().strip())
        assert record["message"] == "Suite finished"
        assert record["level"] == "INFO"
        assert record["suite"] == "product"
        assert record["handle"] == "describe"
        assert record["duration_ms"] == 12.5

    def test_level_filters_records(self):
        stream = io.StringIO()
        configure_logging(level="WARNING", output=stream, use_colors=False)
        logger = get_logger("evalengine.tests")

        logger.info("hidden")
        logger.warning("shown", suite="product")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    def test_does_not_propagate(self):
        configure_logging(output=io.StringIO())
        assert logging.getLogger("evalengine").propagate is False
