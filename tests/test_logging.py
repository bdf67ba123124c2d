"""Tests for the structured log formatter."""

import logging
import sys

from brief_engine.core.logging import StructuredFormatter, get_logger, log_with_context


def _record(msg="Brief update proposed", exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "brief_engine.chains.propose_brief_update", logging.INFO, __file__, 10, msg, (), exc_info
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_base_fields(self):
        line = StructuredFormatter().format(_record())

        assert "level=INFO" in line
        assert "message=Brief update proposed" in line
        assert "taskName" not in line

    def test_extra_fields_are_emitted(self):
        line = StructuredFormatter().format(_record(updated_fields=12, has_next_question=True))

        assert "updated_fields=12" in line
        assert "has_next_question=True" in line

    def test_session_context(self):
        line = StructuredFormatter().format(
            _record(session_id="abc123", extra_data={"rounds": 2})
        )

        assert "session_id=abc123" in line
        assert "rounds=2" in line
        assert "extra_data" not in line

    def test_exception_is_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            line = StructuredFormatter().format(_record(exc_info=sys.exc_info()))

        assert "exc_info=" in line
        assert "RuntimeError" in line


def test_log_with_context_routes_session_id(caplog):
    logger = get_logger("brief_engine.tests.logging")

    with caplog.at_level(logging.INFO, logger="brief_engine.tests.logging"):
        log_with_context(logger, logging.INFO, "Round merged", session_id="s1", rounds=3)

    record = caplog.records[-1]
    assert record.session_id == "s1"
    assert record.extra_data == {"rounds": 3}
