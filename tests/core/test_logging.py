"""Tests for torrent_index.core.logging: structlog setup and threshold mapping."""

from __future__ import annotations

import io
import json
import logging

import pytest
from structlog.testing import capture_logs

from torrent_index.core.config.settings import Settings, Threshold
from torrent_index.core.logging import (
    LEVEL_OFF,
    LogContext,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    threshold_to_level,
)


class TestThresholdToLevel:
    @pytest.mark.parametrize(
        ("threshold", "level"),
        [
            (Threshold.OFF, LEVEL_OFF),
            (Threshold.ERROR, logging.ERROR),
            (Threshold.WARN, logging.WARNING),
            (Threshold.INFO, logging.INFO),
            (Threshold.DEBUG, logging.DEBUG),
            (Threshold.TRACE, logging.DEBUG),
        ],
    )
    def test_mapping(self, threshold, level):
        assert threshold_to_level(threshold) == level

    def test_plain_strings(self):
        assert threshold_to_level("warn") == logging.WARNING

    def test_unknown(self):
        with pytest.raises(ValueError):
            threshold_to_level("verbose")


class TestConfigureLogging:
    def test_json_output(self):
        stream = io.StringIO()
        configure_logging(level="INFO", json_format=True, stream=stream)
        get_logger("torrent_index.test").info("config_loaded", source="inline")

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "config_loaded"
        assert record["source"] == "inline"
        assert record["service"] == "torrust-index"
        assert record["level"] == "info"

    def test_level_filters(self):
        stream = io.StringIO()
        configure_logging(level="WARNING", json_format=True, stream=stream)
        get_logger("torrent_index.test").info("hidden")
        assert stream.getvalue() == ""

    def test_off_silences_everything(self):
        stream = io.StringIO()
        configure_logging(level=LEVEL_OFF, json_format=True, stream=stream)
        get_logger("torrent_index.test").critical("hidden")
        assert stream.getvalue() == ""

    def test_from_settings(self):
        settings = Settings.model_validate({"logging": {"threshold": "debug"}})
        assert configure_logging_from_settings(settings, json_format=True) == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG


class TestLogContext:
    def test_context_is_bound_and_removed(self):
        stream = io.StringIO()
        configure_logging(level="INFO", json_format=True, stream=stream)
        logger = get_logger("torrent_index.test")

        with LogContext(reload_id="abc"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = (json.loads(line) for line in stream.getvalue().strip().splitlines())
        assert inside["reload_id"] == "abc"
        assert "reload_id" not in outside

    def test_nested_contexts_restore_outer_values(self):
        stream = io.StringIO()
        configure_logging(level="INFO", json_format=True, stream=stream)
        logger = get_logger("torrent_index.test")

        with LogContext(operation="outer"):
            with LogContext(operation="inner"):
                logger.info("a")
            logger.info("b")

        a, b = (json.loads(line) for line in stream.getvalue().strip().splitlines())
        assert a["operation"] == "inner"
        assert b["operation"] == "outer"


class TestCaptureLogs:
    def test_events_are_captured(self):
        with capture_logs() as logs:
            get_logger(__name__).warning("config_reload_failed", reason="x")
        assert logs == [{"event": "config_reload_failed", "reason": "x", "log_level": "warning"}]
