"""
=============================================================================
EXCHANGE CONFIGURATION
=============================================================================

Settings shared by the request parser, the response serializer and the
logging setup.

    ┌──────────────────┬──────────────┬───────────────────────────────────┐
    │ Field            │ Default      │ Used by                           │
    ├──────────────────┼──────────────┼───────────────────────────────────┤
    │ http_version     │ "HTTP/1.1"   │ status line written by responders │
    │ max_request_size │ 10 MB        │ RequestParser size check (413)    │
    │ sniff_length     │ 32           │ HTTPResponse.from_data/from_file  │
    │ log_level        │ "INFO"       │ setup_logging()                   │
    └──────────────────┴──────────────┴───────────────────────────────────┘

Usage:

    config = ExchangeConfig.from_env()
    config.validate()
    setup_logging(config)

    parser = RequestParser.from_config(config)
    response = HTTPResponse.from_data(body, config=config)
    responder = SocketResponder(sock, address, version=config.http_version)

=============================================================================
"""

import logging
import os
from dataclasses import dataclass


SUPPORTED_VERSIONS = ("HTTP/1.0", "HTTP/1.1")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ExchangeConfig:
    """Configuration for request parsing and response serialization."""

    http_version: str = "HTTP/1.1"
    """Protocol version written on every status line."""

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """
    Largest raw request accepted by RequestParser.
    Bigger requests are rejected with 413 Payload Too Large.
    """

    sniff_length: int = 32
    """Leading bytes examined when deciding text/plain vs binary."""

    log_level: str = "INFO"
    """Level for the httpexchange logger (DEBUG shows dropped writes)."""

    @classmethod
    def from_env(cls) -> "ExchangeConfig":
        """
        Create configuration from environment variables.

        HTTP_VERSION           Status line version (default: HTTP/1.1)
        HTTP_MAX_REQUEST_SIZE  Request size limit in bytes (default: 10 MB)
        HTTP_SNIFF_LENGTH      MIME sniffing window (default: 32)
        HTTP_LOG_LEVEL         Logging level (default: INFO)
        """
        return cls(
            http_version=os.getenv("HTTP_VERSION", "HTTP/1.1"),
            max_request_size=int(os.getenv("HTTP_MAX_REQUEST_SIZE", str(10 * 1024 * 1024))),
            sniff_length=int(os.getenv("HTTP_SNIFF_LENGTH", "32")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """Raise ValueError on the first invalid setting."""
        if self.http_version not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported http_version: {self.http_version}. "
                f"Must be one of {', '.join(SUPPORTED_VERSIONS)}."
            )

        if self.max_request_size <= 0:
            raise ValueError("max_request_size must be > 0")

        if self.sniff_length <= 0:
            raise ValueError("sniff_length must be > 0")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")


def setup_logging(config: ExchangeConfig) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("httpexchange").setLevel(level)
