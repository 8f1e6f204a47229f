"""Tests for the JSONL logging sink."""

import json
import logging
import sys

import pytest
from mention_context.logging_setup import JsonlHandler
from mention_context.logging_setup import init_json_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def read_lines(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_writes_one_json_object_per_record(tmp_path, restore_root_logger):
    """Each record becomes one JSON line with its extras."""
    log_path = tmp_path / "logs" / "run.jsonl"
    init_json_logging(str(log_path), "debug")

    logging.getLogger("mention_context.test").info("Resolved 3 mentions", extra={"event": "resolve", "files": 2})

    [record] = read_lines(log_path)
    assert record["level"] == "INFO"
    assert record["logger"] == "mention_context.test"
    assert record["message"] == "Resolved 3 mentions"
    assert record["event"] == "resolve"
    assert record["files"] == 2


def test_level_filters_records(tmp_path, restore_root_logger):
    """Records below the configured level are not written."""
    log_path = tmp_path / "run.jsonl"
    init_json_logging(str(log_path), "warning")

    logger = logging.getLogger("mention_context.test")
    logger.info("hidden")
    logger.warning("shown")

    assert [r["message"] for r in read_lines(log_path)] == ["shown"]


def test_reinit_replaces_previous_handler(tmp_path, restore_root_logger):
    """Re-initializing swaps the old sink for the new one."""
    first = init_json_logging(str(tmp_path / "a.jsonl"))
    second = init_json_logging(str(tmp_path / "b.jsonl"))

    handlers = [h for h in logging.getLogger().handlers if isinstance(h, JsonlHandler)]
    assert handlers == [second]
    assert first not in handlers


def test_exception_text_is_recorded(tmp_path):
    """Records logged with exc_info carry the formatted traceback."""
    handler = JsonlHandler(tmp_path / "x.jsonl")
    try:
        raise LookupError("symbol index missing")
    except LookupError:
        record = logging.getLogger("m").makeRecord("m", logging.ERROR, __file__, 1, "lookup failed", None, sys.exc_info())

    data = handler.format_record(record)

    assert data["message"] == "lookup failed"
    assert "LookupError: symbol index missing" in data["exception"]
    assert "exc_info" not in data
