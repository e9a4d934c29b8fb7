# ============================================================================
# FILE: tests/unit/test_logging.py
# ============================================================================
"""
Unit tests for logging utilities
"""

import json
import logging

import pytest

from referral_summarizer.utils.logging import JsonFormatter, LogAdapter, log_performance


def test_json_formatter_includes_request_context():
    record = logging.LogRecord("referral_summarizer.core.pipeline", logging.INFO, __file__, 10,
                               "classified -> extracting", None, None)
    record.request_id = "abc123"
    record.stage = "extracting"

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "classified -> extracting"
    assert data["level"] == "INFO"
    assert data["request_id"] == "abc123"
    assert data["stage"] == "extracting"
    assert data["timestamp"].endswith("+00:00")


def test_log_adapter_merges_extra(caplog):
    logger = logging.getLogger("test.adapter")
    adapter = LogAdapter(logger, {"request_id": "r1"})

    with caplog.at_level(logging.INFO, logger="test.adapter"):
        adapter.info("hello", extra={"stage": "received"})

    assert caplog.records[0].request_id == "r1"
    assert caplog.records[0].stage == "received"


def test_log_performance_sync(caplog):
    logger = logging.getLogger("test.perf")

    @log_performance(logger, "parse")
    def parse(x):
        return x * 2

    with caplog.at_level(logging.INFO, logger="test.perf"):
        assert parse(2) == 4

    assert "parse completed in" in caplog.text


@pytest.mark.asyncio
async def test_log_performance_async(caplog):
    logger = logging.getLogger("test.perf.async")

    @log_performance(logger, "fetch")
    async def fetch():
        raise ValueError("bad")

    with caplog.at_level(logging.INFO, logger="test.perf.async"):
        with pytest.raises(ValueError):
            await fetch()

    assert "fetch failed after" in caplog.text
