"""Unit tests for logging configuration."""

import logging

from factories import make_settings

from userguard.core.logging import (
    CorrelationIdFilter,
    correlation_id_var,
    get_logging_config,
)


def make_record() -> logging.LogRecord:
    return logging.LogRecord("userguard.test", logging.INFO, __file__, 1, "hello", None, None)


class TestLoggingConfig:
    def test_console_only_by_default(self):
        config = get_logging_config(make_settings())
        assert set(config["handlers"]) == {"console"}
        assert config["handlers"]["console"]["formatter"] == "detailed"

    def test_json_format(self):
        config = get_logging_config(make_settings(log_format="json"))
        assert config["handlers"]["console"]["formatter"] == "json"
        assert config["formatters"]["json"]["()"] == "pythonjsonlogger.jsonlogger.JsonFormatter"

    def test_file_handlers(self, tmp_path):
        log_file = tmp_path / "userguard.log"
        config = get_logging_config(
            make_settings(log_file_enabled=True, log_file_path=str(log_file))
        )
        assert config["handlers"]["file"]["filename"] == str(log_file)
        assert config["handlers"]["error_file"]["filename"] == str(tmp_path / "error.log")
        assert "error_file" in config["loggers"]["userguard"]["handlers"]


class TestCorrelationIdFilter:
    def test_default_correlation_id(self):
        record = make_record()
        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "no-correlation-id"

    def test_correlation_id_from_context(self):
        token = correlation_id_var.set("req-42")
        try:
            record = make_record()
            CorrelationIdFilter().filter(record)
        finally:
            correlation_id_var.reset(token)
        assert record.correlation_id == "req-42"
