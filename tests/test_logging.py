"""
Tests for the logging formatters.
"""

import json
import logging

from docs_link_checker.models import Check
from docs_link_checker.utils.logging import ConsoleFormatter, StructuredFormatter, log_check


def make_record(**extra):
    record = logging.LogRecord("docs_link_checker.test", logging.WARNING, __file__, 1, "hello %s", ("world",), None)
    record.__dict__.update(extra)
    return record


def test_structured_formatter_includes_extras():
    data = json.loads(StructuredFormatter().format(make_record(url="https://example.com")))

    assert data["level"] == "WARNING"
    assert data["message"] == "hello world"
    assert data["logger"] == "docs_link_checker.test"
    assert data["url"] == "https://example.com"
    assert data["timestamp"].endswith("+00:00")


def test_console_formatter():
    line = ConsoleFormatter().format(make_record(url="https://example.com"))

    assert "| WARNING  | hello world" in line
    assert line.endswith("[url=https://example.com]")


def test_log_check(caplog):
    logger = logging.getLogger("docs_link_checker.test")
    check = Check(file="a.txt", line=4, url="https://example.com/x").fail("got status code 404")

    with caplog.at_level(logging.WARNING, logger="docs_link_checker.test"):
        log_check(logger, check)

    record = caplog.records[-1]
    assert record.file == "a.txt"
    assert record.line_number == 4
    assert record.check_message == "got status code 404"
    assert "a.txt:4 https://example.com/x" in record.getMessage()
