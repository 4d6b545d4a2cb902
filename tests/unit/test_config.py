"""
Unit tests for configuration and logging setup.
"""

import logging

import pytest

from httpexchange.config import ExchangeConfig, setup_logging
from httpexchange.http.request import RequestParser


@pytest.fixture
def package_logger():
    """The package logger, with its level restored afterwards."""
    logger = logging.getLogger("httpexchange")
    level = logger.level
    yield logger
    logger.setLevel(level)


class TestExchangeConfig:

    def test_defaults(self):
        config = ExchangeConfig()

        assert config.http_version == "HTTP/1.1"
        assert config.max_request_size == 10 * 1024 * 1024
        assert config.sniff_length == 32
        assert config.log_level == "INFO"
        config.validate()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HTTP_VERSION", "HTTP/1.0")
        monkeypatch.setenv("HTTP_MAX_REQUEST_SIZE", "2048")
        monkeypatch.setenv("HTTP_SNIFF_LENGTH", "64")
        monkeypatch.setenv("HTTP_LOG_LEVEL", "debug")

        config = ExchangeConfig.from_env()

        assert config.http_version == "HTTP/1.0"
        assert config.max_request_size == 2048
        assert config.sniff_length == 64
        assert config.log_level == "debug"
        config.validate()

    def test_from_env_defaults(self, monkeypatch):
        for name in ("HTTP_VERSION", "HTTP_MAX_REQUEST_SIZE",
                     "HTTP_SNIFF_LENGTH", "HTTP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert ExchangeConfig.from_env() == ExchangeConfig()

    @pytest.mark.parametrize("overrides", [
        {"http_version": "HTTP/2"},
        {"max_request_size": 0},
        {"sniff_length": -1},
        {"log_level": "LOUD"},
    ])
    def test_validate_rejects(self, overrides):
        with pytest.raises(ValueError):
            ExchangeConfig(**overrides).validate()

    def test_parser_uses_limit(self):
        parser = RequestParser.from_config(ExchangeConfig(max_request_size=16))
        assert parser.max_request_size == 16


class TestSetupLogging:

    def test_sets_package_level(self, package_logger):
        setup_logging(ExchangeConfig(log_level="DEBUG"))
        assert package_logger.level == logging.DEBUG

        setup_logging(ExchangeConfig(log_level="warning"))
        assert package_logger.level == logging.WARNING

    def test_debug_shows_dropped_writes(self, package_logger, caplog):
        from httpexchange.core.responder import BufferResponder
        from httpexchange.http.response import HTTPResponse

        setup_logging(ExchangeConfig(log_level="DEBUG"))

        with caplog.at_level(logging.DEBUG, logger="httpexchange"):
            HTTPResponse.from_status(503).write(BufferResponder(connected=False))

        assert "Dropping 503 response" in caplog.text
