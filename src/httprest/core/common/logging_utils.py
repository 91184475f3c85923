"""
Logging utilities for httprest.

This module provides utilities for logging, including:
- Redaction of sensitive header values and payload fields
- Structured logger access and configuration

The library itself logs through ``logging.getLogger(__name__)`` and never
configures handlers. :func:`configure_logging` and :func:`get_logger` are
for applications: ``configure_logging`` installs a root handler at the
given level, so the library's records become visible, and sets up the
structlog renderer used by loggers from ``get_logger``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

import structlog

# Default set of fields to redact
DEFAULT_REDACTED_FIELDS = {
    "api_key",
    "access_token",
    "refresh_token",
    "password",
    "secret",
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "credentials",
}

BEARER_TOKEN_PATTERN = re.compile(r"Bearer\s+([a-zA-Z0-9._~+/-]+=*)")


class LogFormat(str, Enum):
    """Log format options."""

    JSON = "json"
    CONSOLE = "console"
    PLAIN = "plain"


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger.

    Args:
        name: Optional logger name

    Returns:
        A structured logger
    """
    return structlog.get_logger(name)  # type: ignore


def configure_logging(
    level: int | str = logging.INFO, log_format: LogFormat = LogFormat.CONSOLE
) -> None:
    """Configure structlog on top of the standard library logging module.

    Args:
        level: The minimum log level
        log_format: How records are rendered
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logging.basicConfig(level=level, format="%(message)s")

    renderer: Any
    if log_format == LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer()
    elif log_format == LogFormat.CONSOLE:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.KeyValueRenderer(key_order=["event"])

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def redact(value: str, mask: str = "***") -> str:
    """Redact a sensitive value.

    Args:
        value: The value to redact
        mask: The mask to use

    Returns:
        The redacted value
    """
    if not value:
        return value

    # Keep first and last characters
    if len(value) > 6:
        return f"{value[0:2]}{mask}{value[-2:]}"
    else:
        return mask


def redact_dict(
    data: Mapping[str, Any],
    redacted_fields: set[str] | None = None,
    mask: str = "***",
) -> dict[str, Any]:
    """Redact sensitive fields in a dictionary.

    Args:
        data: The dictionary to redact
        redacted_fields: The fields to redact (compared case-insensitively)
        mask: The mask to use

    Returns:
        The redacted dictionary
    """
    if redacted_fields is None:
        redacted_fields = DEFAULT_REDACTED_FIELDS

    result: dict[str, Any] = {}

    for key, value in data.items():
        if key.lower() in redacted_fields:
            if isinstance(value, str):
                result[key] = redact(value, mask)
            else:
                result[key] = mask
        elif isinstance(value, Mapping):
            result[key] = redact_dict(value, redacted_fields, mask)
        elif isinstance(value, list):
            result[key] = [
                (
                    redact_dict(item, redacted_fields, mask)
                    if isinstance(item, Mapping)
                    else item
                )
                for item in value
            ]
        else:
            result[key] = value

    return result


def redact_headers(
    headers: Mapping[str, str] | Iterable[tuple[str, str]], mask: str = "***"
) -> dict[str, str]:
    """Return a loggable copy of HTTP headers with credentials masked.

    Repeated headers are joined with ``", "`` the same way they travel on
    the wire.
    """
    items = headers.items() if isinstance(headers, Mapping) else headers
    merged: dict[str, str] = {}
    for key, value in items:
        merged[key] = f"{merged[key]}, {value}" if key in merged else value
    return redact_dict(merged, mask=mask)


def redact_text(text: str, mask: str = "***") -> str:
    """Redact bearer tokens in free text.

    Args:
        text: The text to redact
        mask: The mask to use

    Returns:
        The redacted text
    """
    if not text:
        return text
    return BEARER_TOKEN_PATTERN.sub(f"Bearer {mask}", text)
