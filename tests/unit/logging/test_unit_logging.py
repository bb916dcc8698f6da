# tests/unit/logging/test_unit_logging.py - v1
"""Tests for logging/context.py, logging/logger.py and logging/handlers.py."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from xaiprecompute.logging.context import (
    clear_context,
    get_context,
    query_context,
    set_batch_context,
    set_job_context,
)
from xaiprecompute.logging.handlers import create_rotating_handler, parse_size
from xaiprecompute.logging.logger import (
    ROOT_LOGGER,
    JsonFormatter,
    TextFormatter,
    get_logger,
    setup_logging,
)


def _record(msg: str = "hello %s", args=("world",)) -> logging.LogRecord:
    return logging.LogRecord("xaiprecompute.test", logging.INFO, __file__, 1, msg, args, None)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.job_id is None
        assert ctx.batch_index is None
        assert ctx.query_key is None

    def test_job_context_resets_batch(self):
        set_job_context("job_1")
        set_batch_context(2)
        set_job_context("job_2")
        ctx = get_context()
        assert ctx.job_id == "job_2"
        assert ctx.batch_index is None

    def test_query_context_scoped(self):
        with query_context("abc123"):
            assert get_context().query_key == "abc123"
        assert get_context().query_key is None

    def test_as_dict_filters_none(self):
        set_job_context("job_1")
        set_batch_context(0)
        assert get_context().as_dict() == {"job_id": "job_1", "batch_index": 0}


class TestFormatters:
    def teardown_method(self):
        clear_context()

    def test_json_formatter(self):
        set_job_context("job_9")
        data = json.loads(JsonFormatter().format(_record()))
        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["context"] == {"job_id": "job_9"}

    def test_text_formatter(self):
        set_job_context("job_9")
        set_batch_context(1)
        line = TextFormatter().format(_record())
        assert "[job_9]" in line
        assert "(batch 1)" in line
        assert line.endswith("- hello world")

    def test_text_formatter_query_key(self):
        with query_context("3fa9c2"):
            line = TextFormatter().format(_record())
        assert "<3fa9c2> - hello world" in line
        assert "[job" not in line


class TestSetup:
    def teardown_method(self):
        logging.getLogger(ROOT_LOGGER).handlers.clear()

    def test_json_console(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_reinit_replaces_handlers(self, tmp_path):
        setup_logging(log_file=str(tmp_path / "logs" / "run.log"))
        setup_logging(log_file=str(tmp_path / "logs" / "run.log"))
        handlers = logging.getLogger(ROOT_LOGGER).handlers
        assert len(handlers) == 2
        assert isinstance(handlers[1], RotatingFileHandler)
        for h in handlers:
            h.close()

    def test_get_logger_namespace(self):
        assert get_logger("jobs").name == "xaiprecompute.jobs"


class TestHandlers:
    @pytest.mark.parametrize("text,size", [("10MB", 10 * 1024**2), ("512kb", 512 * 1024), ("1 GB", 1024**3)])
    def test_parse_size(self, text, size):
        assert parse_size(text) == size

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            parse_size("ten megabytes")

    def test_rotating_handler(self, tmp_path):
        handler = create_rotating_handler(tmp_path / "a" / "x.log", rotation="1KB", retention=2)
        assert handler.maxBytes == 1024
        assert handler.backupCount == 2
        handler.close()
