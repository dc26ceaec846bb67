"""
Centralized structured logging for yubiverify.

Sets up structlog with:
- Settings-driven configuration (level and renderer from LoggingSettings)
- JSON formatting for production, pretty console for development
- Redaction of OTP material and credentials before rendering

Unlike an application, the library never configures logging on import;
entry points call setup_logging() once at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

from config import LoggingSettings

# Fields whose values must never reach a log sink
REDACTED_FIELDS = {
    "otp",
    "nonce",
    "client_id",
    "api_key",
    "secret",
    "Authorization",
}

_SAFE_FIELDS = {"level", "event", "timestamp", "logger"}


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("yubico_race_won", server="api.yubico.com")
    """
    return structlog.get_logger(name)


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact OTPs, nonces and credentials from logs."""
    for key in list(event_dict.keys()):
        if key in _SAFE_FIELDS:
            continue
        if key in REDACTED_FIELDS or key.lower() in REDACTED_FIELDS:
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog(log_format: str = "console") -> None:
    """
    Configure structlog processors.

    Production: JSON formatting for easy parsing
    Development: Pretty console formatting with colors
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str = "INFO") -> None:
    """Route stdlib logging to stderr so it never interleaves with CLI output."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Reduce noise from the transport
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Initialize logging for an entry point.

    Should be called once, early, by whatever process embeds the library.
    """
    settings = settings or LoggingSettings()
    log_format = settings.log_format or "console"

    configure_stdlib_logging(settings.log_level)
    configure_structlog(log_format)

    get_logger(__name__).debug(
        "logging_initialized",
        log_level=settings.log_level,
        log_format=log_format,
    )


__all__ = [
    "REDACTED_FIELDS",
    "configure_stdlib_logging",
    "configure_structlog",
    "get_logger",
    "redact_sensitive_fields",
    "setup_logging",
]
