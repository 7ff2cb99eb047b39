# tests/unit/logging/test_unit_logging.py - v2
"""Tests for logging/: context tags, formatters, setup and file rotation."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from topicforge.config.settings import Settings
from topicforge.logging.context import (
    clear_context,
    get_context,
    set_topic_context,
    topic_context,
)
from topicforge.logging.handlers import create_rotating_handler, parse_size
from topicforge.logging.logger import (
    NOISY_LOGGERS,
    JsonFormatter,
    TextFormatter,
    configure_from_settings,
    setup_logging,
)


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("topicforge.test", logging.INFO, __file__, 1, msg, None, None)


def _reset_root() -> None:
    root = logging.getLogger("topicforge")
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()


@pytest.fixture(autouse=True)
def _clean():
    clear_context()
    yield
    clear_context()
    _reset_root()


class TestContext:
    def test_set_and_clear(self):
        set_topic_context("Entropy", "resolve")
        assert get_context() == ("Entropy", "resolve")
        clear_context()
        assert get_context().as_dict() == {}

    def test_as_dict_skips_unset(self):
        set_topic_context("Entropy")
        assert get_context().as_dict() == {"topic": "Entropy"}

    def test_scoped_context_restores(self):
        set_topic_context("Outer", "resolve")
        with topic_context("Inner", "backfill-slug") as ctx:
            assert ctx.topic == "Inner"
            assert get_context().operation == "backfill-slug"
        assert get_context() == ("Outer", "resolve")


class TestFormatters:
    def test_json_carries_tags(self):
        set_topic_context("Entropy", "expand:wiki")
        entry = json.loads(JsonFormatter().format(_record()))
        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "topicforge.test"
        assert entry["topic"] == "Entropy"
        assert entry["operation"] == "expand:wiki"

    def test_json_without_tags(self):
        entry = json.loads(JsonFormatter().format(_record()))
        assert "topic" not in entry
        assert "operation" not in entry

    def test_json_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "topicforge.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        entry = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]

    def test_text_includes_tags(self):
        set_topic_context("Entropy", "detail")
        line = TextFormatter().format(_record("cache hit"))
        assert "[Entropy]" in line
        assert "(detail)" in line
        assert "[INFO    ]" in line
        assert line.endswith("- cache hit")

    def test_text_without_tags(self):
        line = TextFormatter().format(_record("plain"))
        assert "(" not in line
        assert line.endswith("topicforge.test - plain")


class TestSetup:
    def test_setup_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "topicforge.log"
        root = setup_logging(level="DEBUG", log_format="json", log_file=str(log_file))
        assert root.name == "topicforge"
        assert root.level == logging.DEBUG
        assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)

        logging.getLogger("topicforge.test").info("written")
        for handler in root.handlers:
            handler.flush()
        assert "written" in log_file.read_text(encoding="utf-8")

    def test_setup_is_idempotent(self):
        setup_logging()
        root = setup_logging()
        assert len(root.handlers) == 1

    def test_quiets_third_party(self):
        setup_logging()
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_configure_from_settings(self):
        settings = Settings(_env_file=None, log_level="WARNING", log_format="json")
        root = configure_from_settings(settings)
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_verbose_forces_debug(self):
        settings = Settings(_env_file=None, log_level="ERROR")
        root = configure_from_settings(settings, verbose=True)
        assert root.level == logging.DEBUG


class TestHandlers:
    @pytest.mark.parametrize("value,expected", [
        ("10MB", 10 * 1024**2),
        ("512kb", 512 * 1024),
        ("1GB", 1024**3),
        ("2048", 2048),
    ])
    def test_parse_size(self, value, expected):
        assert parse_size(value) == expected

    def test_parse_size_invalid(self):
        with pytest.raises(ValueError):
            parse_size("ten megabytes")

    def test_rotating_handler(self, tmp_path):
        handler = create_rotating_handler(tmp_path / "a" / "b.log", rotation="1KB", retention=2)
        assert handler.maxBytes == 1024
        assert handler.backupCount == 2
        handler.close()
